"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Language, Parser, Query
from tree_sitter_language_pack import get_language, get_parser

from stickyfields.config import AnalyzerConfig
from tests.helpers import BuildPackage, GoPackage

_TESTS_ROOT = Path(__file__).parent
_REPO_ROOT = _TESTS_ROOT.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_TESTS_ROOT)
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Go snippets as in-memory packages
# ---------------------------------------------------------------------------


@pytest.fixture
def go_package() -> BuildPackage:
    """Build a package from a single snippet and optional extra ``{path: code}`` files."""

    def _build(code: str | None = None, files: dict[str, str] | None = None) -> GoPackage:
        sources: dict[str, str] = {}
        if code is not None:
            sources["pkg/convert.go"] = code
        sources.update(files or {})
        return GoPackage(sources)

    return _build


@pytest.fixture
def default_config() -> AnalyzerConfig:
    return AnalyzerConfig()


@pytest.fixture
def testdata_dir() -> Path:
    """Root of the Go fixture tree (GOPATH-style ``src`` layout)."""
    return _TESTS_ROOT / "testdata" / "src"


@pytest.fixture
def queries_dir() -> Path:
    """Return the path to the queries directory."""
    return _REPO_ROOT / "src" / "stickyfields" / "queries"


@pytest.fixture
def go_parser() -> Parser:
    """Return a tree-sitter parser for Go."""
    return get_parser("go")


@pytest.fixture
def go_language() -> Language:
    """Return the tree-sitter Go language."""
    return get_language("go")


@pytest.fixture
def go_declarations_query(queries_dir: Path, go_language: Language) -> Query:
    """Load the Go declarations query."""
    query_text = (queries_dir / "go_declarations.scm").read_text()
    return Query(go_language, query_text)
