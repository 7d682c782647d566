from dataclasses import dataclass
from enum import Enum

from stickyfields.core.gotypes import ArrayType, GoType, MapType, NamedType, PointerType, SliceType, StructType


class ContainerKind(str, Enum):
    NONE = "none"  # plain struct
    POINTER = "pointer"  # pointer to struct
    SLICE = "slice"  # slice or array
    MAP = "map"  # map (using its value type)


@dataclass(frozen=True)
class Candidate:
    """A parameter or result type that is, or directly wraps, a named struct."""

    name: str
    container_kind: ContainerKind
    struct: StructType

    @property
    def shape(self) -> tuple[str, ...]:
        return self.struct.exported_field_names()


def extract_candidate(go_type: GoType) -> Candidate | None:
    """Return the candidate behind ``go_type``, or None if it is not a record.

    At most one container (slice, array or map value) and at most one pointer
    are unwrapped; ``[][]T`` and ``**T`` are never candidates.
    """
    if isinstance(go_type, (SliceType, ArrayType)):
        container_kind = ContainerKind.SLICE
        go_type = go_type.elem
    elif isinstance(go_type, MapType):
        container_kind = ContainerKind.MAP
        go_type = go_type.value
    else:
        container_kind = ContainerKind.NONE

    if isinstance(go_type, PointerType):
        if container_kind is ContainerKind.NONE:
            container_kind = ContainerKind.POINTER
        go_type = go_type.elem

    if not isinstance(go_type, NamedType) or not isinstance(go_type.underlying, StructType):
        return None
    return Candidate(name=go_type.name, container_kind=container_kind, struct=go_type.underlying)
