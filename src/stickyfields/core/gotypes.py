"""Resolved Go type values handed from the type resolver to the analysis engine."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StructField:
    name: str
    embedded: bool = False

    @property
    def exported(self) -> bool:
        return is_exported(self.name)


@dataclass(frozen=True)
class BasicType:
    name: str


@dataclass(frozen=True)
class OpaqueType:
    """Interfaces, functions, channels and anything else the engine never unwraps."""

    kind: str


@dataclass(frozen=True)
class StructType:
    fields: tuple[StructField, ...] = ()

    def exported_field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.exported)


@dataclass(frozen=True)
class PointerType:
    elem: GoType


@dataclass(frozen=True)
class SliceType:
    elem: GoType


@dataclass(frozen=True)
class ArrayType:
    elem: GoType
    length: str = ""


@dataclass(frozen=True)
class MapType:
    key: GoType
    value: GoType


@dataclass(frozen=True)
class NamedType:
    name: str
    package: str
    # None when the declaration could not be found in the analyzed file set
    underlying: GoType | None = field(default=None, compare=False, repr=False)


GoType = BasicType | OpaqueType | StructType | PointerType | SliceType | ArrayType | MapType | NamedType


@dataclass(frozen=True)
class Var:
    name: str
    type: GoType


@dataclass(frozen=True)
class Signature:
    params: tuple[Var, ...] = ()
    results: tuple[Var, ...] = ()
    receiver: Var | None = None


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()
