import os
from dataclasses import dataclass

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class AnalyzerConfig:
    # functions with receivers are skipped unless set
    include_methods: bool = False


def load_config(include_methods: bool | None = None) -> AnalyzerConfig:
    """Build the run configuration; explicit arguments win over the environment."""
    if include_methods is None:
        include_methods = os.getenv("STICKYFIELDS_INCLUDE_METHODS", "").strip().lower() in _TRUTHY
    return AnalyzerConfig(include_methods=include_methods)
