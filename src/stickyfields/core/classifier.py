from collections.abc import Callable, Sequence

from stickyfields.config import AnalyzerConfig
from stickyfields.core.candidates import Candidate, ContainerKind, extract_candidate
from stickyfields.core.gotypes import Var
from stickyfields.core.syntax import FunctionDecl
from stickyfields.core.typeinfo import TypeInfo

PairRule = Callable[[Candidate, Candidate], bool]

_COLLECTIONS = (ContainerKind.SLICE, ContainerKind.MAP)
_SINGLES = (ContainerKind.NONE, ContainerKind.POINTER)


def containers_compatible(source: Candidate, target: Candidate) -> bool:
    """Slices and maps convert to the same container; structs and pointers to structs or pointers."""
    if source.container_kind in _COLLECTIONS:
        return target.container_kind is source.container_kind
    return target.container_kind in _SINGLES


def names_related(source: Candidate, target: Candidate) -> bool:
    """Either lower-cased type name contains the other (``Order`` and ``OrderDTO``)."""
    lower_source = source.name.lower()
    lower_target = target.name.lower()
    return lower_source in lower_target or lower_target in lower_source


DEFAULT_PAIR_RULES: tuple[PairRule, ...] = (containers_compatible, names_related)


def candidates_of(variables: Sequence[Var]) -> list[Candidate]:
    return [c for c in (extract_candidate(v.type) for v in variables) if c is not None]


def is_possible_converter(
    func: FunctionDecl,
    info: TypeInfo,
    config: AnalyzerConfig,
    rules: Sequence[PairRule] = DEFAULT_PAIR_RULES,
) -> bool:
    """Cheap signature-level check deciding whether ``func`` is worth validating.

    The function must take at least one record candidate and return at least
    one, and some (input, output) pair must satisfy every rule in ``rules``.
    """
    if func.has_receiver and not config.include_methods:
        return False

    signature = info.signature(func)
    if signature is None:
        return False

    # nothing was converted
    if not signature.params or not signature.results:
        return False

    in_candidates = candidates_of(signature.params)
    if not in_candidates:
        return False
    out_candidates = candidates_of(signature.results)
    if not out_candidates:
        return False

    return any(
        all(rule(source, target) for rule in rules) for source in in_candidates for target in out_candidates
    )
