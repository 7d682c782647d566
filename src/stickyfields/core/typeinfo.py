"""Resolve Go type expressions against the declarations of the analyzed file set.

This is a small stand-in for ``go/types``: it knows which
top-level types each package directory declares, follows imports to other
analyzed directories, and turns a parameter or result type expression into a
``GoType`` value. Anything it cannot see (standard library, modules outside
the analyzed paths, type parameters) becomes an unresolved ``NamedType`` and is
never treated as a record.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from tree_sitter import Node

from stickyfields.core.gotypes import (
    ArrayType,
    BasicType,
    GoType,
    MapType,
    NamedType,
    OpaqueType,
    PointerType,
    Signature,
    SliceType,
    StructField,
    StructType,
    Var,
)
from stickyfields.core.syntax import FunctionDecl, ImportSpec, SourceFile

logger = logging.getLogger(__name__)

_PREDECLARED = frozenset(
    {
        "any",
        "bool",
        "byte",
        "comparable",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)


class TypeResolutionError(Exception):
    """A type expression or signature could not be resolved."""


@dataclass
class _Package:
    directory: Path
    name: str
    decls: dict[str, tuple[SourceFile, Node]] = field(default_factory=dict)


class TypeInfo:
    def __init__(self, files: Iterable[SourceFile]) -> None:
        self._files: dict[Path, SourceFile] = {}
        self._packages: dict[Path, _Package] = {}
        self._named: dict[tuple[Path, str], GoType] = {}
        self._resolving: set[tuple[Path, str]] = set()
        self._import_dirs: dict[str, Path | None] = {}

        for source_file in files:
            self._files[source_file.path] = source_file
            package = self._packages.setdefault(
                source_file.directory, _Package(directory=source_file.directory, name=source_file.package)
            )
            for spec in source_file.type_specs:
                name_node = spec.child_by_field_name("name")
                if name_node is None:
                    continue
                package.decls.setdefault(source_file.text(name_node), (source_file, spec))

        logger.debug(
            "Indexed %d type declarations in %d packages",
            sum(len(p.decls) for p in self._packages.values()),
            len(self._packages),
        )

    def signature(self, func: FunctionDecl) -> Signature | None:
        """Return the resolved signature of ``func``, or None when it cannot be resolved."""
        source_file = self._files.get(func.path)
        if source_file is None:
            return None
        try:
            return self._signature(func, source_file)
        except TypeResolutionError as exc:
            logger.debug("Cannot resolve signature of %s: %s", func.name, exc)
            return None

    def resolve(self, node: Node, source_file: SourceFile) -> GoType:
        kind = node.type
        if kind == "parenthesized_type":
            return self.resolve(_only_child(node), source_file)
        if kind == "pointer_type":
            return PointerType(self.resolve(_only_child(node), source_file))
        if kind == "slice_type":
            return SliceType(self.resolve(_field(node, "element"), source_file))
        if kind in ("array_type", "implicit_length_array_type"):
            length = node.child_by_field_name("length")
            return ArrayType(
                self.resolve(_field(node, "element"), source_file),
                length=source_file.text(length) if length is not None else "...",
            )
        if kind == "map_type":
            return MapType(
                self.resolve(_field(node, "key"), source_file),
                self.resolve(_field(node, "value"), source_file),
            )
        if kind == "struct_type":
            return self._struct(node, source_file)
        if kind == "type_identifier":
            return self._lookup_local(source_file.text(node), source_file)
        if kind == "qualified_type":
            qualifier = source_file.text(_field(node, "package"))
            return self._lookup_qualified(qualifier, source_file.text(_field(node, "name")), source_file)
        if kind == "generic_type":
            return self.resolve(_field(node, "type"), source_file)
        if kind == "ERROR" or node.is_missing:
            raise TypeResolutionError(f"malformed type expression at {node.start_point}")
        return OpaqueType(kind)

    def _signature(self, func: FunctionDecl, source_file: SourceFile) -> Signature:
        params_node = func.parameters
        if params_node is None or params_node.type != "parameter_list" or params_node.has_error:
            raise TypeResolutionError(f"function {func.name!r} has no usable parameter list")

        results: tuple[Var, ...] = ()
        result_node = func.result
        if result_node is not None:
            if result_node.has_error:
                raise TypeResolutionError(f"function {func.name!r} has a malformed result list")
            if result_node.type == "parameter_list":
                results = self._vars(result_node, source_file)
            else:
                results = (Var(name="", type=self.resolve(result_node, source_file)),)

        receiver = None
        if func.receiver is not None:
            receivers = self._vars(func.receiver, source_file)
            receiver = receivers[0] if receivers else None

        return Signature(params=self._vars(params_node, source_file), results=results, receiver=receiver)

    def _vars(self, list_node: Node, source_file: SourceFile) -> tuple[Var, ...]:
        variables: list[Var] = []
        for decl in list_node.named_children:
            if decl.type not in ("parameter_declaration", "variadic_parameter_declaration"):
                continue
            go_type = self.resolve(_field(decl, "type"), source_file)
            if decl.type == "variadic_parameter_declaration":
                go_type = SliceType(go_type)
            names = decl.children_by_field_name("name")
            if names:
                variables.extend(Var(name=source_file.text(n), type=go_type) for n in names)
            else:
                variables.append(Var(name="", type=go_type))
        return tuple(variables)

    def _struct(self, node: Node, source_file: SourceFile) -> StructType:
        fields: list[StructField] = []
        for field_list in node.named_children:
            if field_list.type != "field_declaration_list":
                continue
            for decl in field_list.named_children:
                if decl.type != "field_declaration":
                    continue
                names = decl.children_by_field_name("name")
                if names:
                    fields.extend(StructField(name=source_file.text(n)) for n in names)
                    continue
                embedded = _embedded_name(decl.child_by_field_name("type"), source_file)
                if embedded:
                    fields.append(StructField(name=embedded, embedded=True))
        return StructType(fields=tuple(fields))

    def _lookup_local(self, name: str, source_file: SourceFile) -> GoType:
        package = self._packages.get(source_file.directory)
        if package is not None and name in package.decls:
            return self._named_type(package, name)
        if name in _PREDECLARED:
            return BasicType(name)
        for spec in source_file.imports:
            if spec.name != ".":
                continue
            imported = self._import_package(spec)
            if imported is not None and name in imported.decls:
                return self._named_type(imported, name)
        return NamedType(name=name, package=source_file.package)

    def _lookup_qualified(self, qualifier: str, name: str, source_file: SourceFile) -> GoType:
        for spec in source_file.imports:
            if spec.local_name != qualifier:
                continue
            imported = self._import_package(spec)
            if imported is not None and name in imported.decls:
                return self._named_type(imported, name)
            break
        return NamedType(name=name, package=qualifier)

    def _import_package(self, spec: ImportSpec) -> _Package | None:
        if spec.path not in self._import_dirs:
            self._import_dirs[spec.path] = self._find_import_directory(spec.path)
        directory = self._import_dirs[spec.path]
        return self._packages.get(directory) if directory is not None else None

    def _find_import_directory(self, import_path: str) -> Path | None:
        directories = sorted(self._packages)
        for directory in directories:
            posix = directory.as_posix()
            if posix == import_path or posix.endswith("/" + import_path):
                return directory
        # fall back to a unique package-name match (GOPATH-less fixtures, renamed roots)
        last_segment = import_path.rsplit("/", 1)[-1]
        matches = [d for d in directories if self._packages[d].name == last_segment]
        if len(matches) == 1:
            return matches[0]
        logger.debug("Import %s is outside the analyzed file set", import_path)
        return None

    def _named_type(self, package: _Package, name: str) -> GoType:
        key = (package.directory, name)
        if key in self._named:
            return self._named[key]
        if key in self._resolving:
            return NamedType(name=name, package=package.name)

        source_file, spec = package.decls[name]
        self._resolving.add(key)
        try:
            resolved = self.resolve(_field(spec, "type"), source_file)
        finally:
            self._resolving.discard(key)

        if spec.type == "type_alias":
            self._named[key] = resolved
            return resolved

        underlying = resolved.underlying if isinstance(resolved, NamedType) else resolved
        named = NamedType(name=name, package=package.name, underlying=underlying)
        self._named[key] = named
        return named


def _field(node: Node, name: str) -> Node:
    child = node.child_by_field_name(name)
    if child is None:
        raise TypeResolutionError(f"{node.type} at {node.start_point} has no {name!r}")
    return child


def _only_child(node: Node) -> Node:
    children = [c for c in node.named_children if c.type != "comment"]
    if not children:
        raise TypeResolutionError(f"{node.type} at {node.start_point} is empty")
    return children[0]


def _embedded_name(node: Node | None, source_file: SourceFile) -> str:
    if node is None:
        return ""
    if node.type == "type_identifier":
        return source_file.text(node)
    if node.type == "qualified_type":
        name = node.child_by_field_name("name")
        return source_file.text(name) if name is not None else ""
    if node.type in ("generic_type", "pointer_type"):
        inner = node.child_by_field_name("type") or (node.named_children[0] if node.named_children else None)
        return _embedded_name(inner, source_file)
    return ""
