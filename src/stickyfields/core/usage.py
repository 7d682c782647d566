"""Syntactic usage collectors over a function body.

Each collector is a single pre-order walk that records identifier tokens; no
value flow or reachability is considered, so a field touched on a branch that
never runs still counts.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from tree_sitter import Node

from stickyfields.core.syntax import FunctionDecl, iter_nodes, node_text


@dataclass(frozen=True)
class UsageLookup:
    names: frozenset[str] = frozenset()

    @classmethod
    def of(cls, names: Iterable[str]) -> "UsageLookup":
        return cls(frozenset(names))

    def look_up(self, name: str) -> bool:
        return name in self.names

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def __len__(self) -> int:
        return len(self.names)


def _selected_fields(node: Node, var_name: str, source: bytes) -> Iterator[str]:
    """Yield ``ident`` when ``node`` is the selector ``var_name.ident``."""
    if node.type != "selector_expression":
        return
    operand = node.child_by_field_name("operand")
    field = node.child_by_field_name("field")
    if operand is None or field is None:
        return
    if operand.type == "identifier" and node_text(operand, source) == var_name:
        yield node_text(field, source)


def collect_used_fields(body: Node | None, var_name: str, source: bytes) -> UsageLookup:
    if body is None or not var_name:
        return UsageLookup()
    return UsageLookup.of(name for node in iter_nodes(body) for name in _selected_fields(node, var_name, source))


def collect_used_methods(body: Node | None, var_name: str, source: bytes) -> UsageLookup:
    if body is None or not var_name:
        return UsageLookup()
    used: set[str] = set()
    for node in iter_nodes(body):
        if node.type != "call_expression":
            continue
        function = node.child_by_field_name("function")
        if function is not None:
            used.update(_selected_fields(function, var_name, source))
    return UsageLookup.of(used)


def _assigned_fields(body: Node, var_name: str, source: bytes) -> Iterator[str]:
    for node in iter_nodes(body):
        if node.type != "assignment_statement":
            continue
        left = node.child_by_field_name("left")
        if left is None:
            continue
        targets = left.named_children if left.type == "expression_list" else [left]
        for target in targets:
            yield from _selected_fields(target, var_name, source)


def _composite_type_name(type_node: Node, source: bytes) -> str:
    if type_node.type == "type_identifier":
        return node_text(type_node, source)
    if type_node.type == "qualified_type":
        name = type_node.child_by_field_name("name")
        return node_text(name, source) if name is not None else ""
    if type_node.type == "generic_type":
        inner = type_node.child_by_field_name("type")
        return _composite_type_name(inner, source) if inner is not None else ""
    return ""


def _keyed_element_name(element: Node, source: bytes) -> str:
    key = element.child_by_field_name("key")
    if key is None:
        if not element.named_children:
            return ""
        key = element.named_children[0]
    if key.type == "literal_element" and key.named_children:
        key = key.named_children[0]
    if key.type in ("identifier", "field_identifier"):
        return node_text(key, source)
    return ""


def _constructed_fields(body: Node, type_name: str, source: bytes) -> Iterator[str]:
    # &T{...} wraps the same composite_literal node as T{...}
    for node in iter_nodes(body):
        if node.type != "composite_literal":
            continue
        type_node = node.child_by_field_name("type")
        literal = node.child_by_field_name("body")
        if type_node is None or literal is None or _composite_type_name(type_node, source) != type_name:
            continue
        for element in literal.named_children:
            # positional elements carry no field name
            if element.type == "keyed_element":
                name = _keyed_element_name(element, source)
                if name:
                    yield name


def collect_output_fields(func: FunctionDecl, var_name: str, type_name: str) -> UsageLookup:
    """Fields considered written for the converter's output.

    A named result is tracked through ``var.Field = ...`` assignments; an
    anonymous result through keyed ``T{Field: ...}`` literals of its type.
    """
    body = func.body
    if body is None:
        return UsageLookup()
    if var_name:
        return UsageLookup.of(_assigned_fields(body, var_name, func.source))
    return UsageLookup.of(_constructed_fields(body, type_name, func.source))
