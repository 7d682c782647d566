from collections.abc import Iterator
from dataclasses import dataclass, field
from functools import cache
from pathlib import Path

from tree_sitter import Node, Query, QueryCursor, Tree
from tree_sitter_language_pack import SupportedLanguage, get_language, get_parser

from stickyfields.models import Position

_LANGUAGE: SupportedLanguage = "go"


@cache
def _load_query(query_type: str) -> Query:
    queries_dir = Path(__file__).parent.parent / "queries"
    query_path = queries_dir / f"{_LANGUAGE}_{query_type}.scm"
    if not query_path.exists():
        raise FileNotFoundError(f"Query file not found: {query_path}")
    query_text = query_path.read_text(encoding="utf-8")
    return Query(get_language(_LANGUAGE), query_text)


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8")


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield ``root`` and all of its descendants in pre-order."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def node_position(node: Node) -> Position:
    row, column = node.start_point
    return Position(row=row + 1, column=column + 1)


@dataclass(frozen=True)
class ImportSpec:
    path: str
    name: str | None = None

    @property
    def local_name(self) -> str:
        """Identifier the importing file uses to qualify names from this package."""
        if self.name:
            return self.name
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True, eq=False)
class FunctionDecl:
    """Syntactic view of a top-level ``func`` declaration."""

    node: Node
    source: bytes = field(repr=False)
    path: Path = Path()

    @property
    def name_node(self) -> Node | None:
        return self.node.child_by_field_name("name")

    @property
    def name(self) -> str:
        name_node = self.name_node
        return node_text(name_node, self.source) if name_node is not None else ""

    @property
    def position(self) -> Position:
        return node_position(self.name_node or self.node)

    @property
    def has_receiver(self) -> bool:
        return self.node.child_by_field_name("receiver") is not None

    @property
    def receiver(self) -> Node | None:
        return self.node.child_by_field_name("receiver")

    @property
    def parameters(self) -> Node | None:
        return self.node.child_by_field_name("parameters")

    @property
    def result(self) -> Node | None:
        return self.node.child_by_field_name("result")

    @property
    def body(self) -> Node | None:
        return self.node.child_by_field_name("body")

    def text(self, node: Node) -> str:
        return node_text(node, self.source)


@dataclass(frozen=True, eq=False)
class SourceFile:
    path: Path
    source: bytes = field(repr=False)
    tree: Tree = field(repr=False)
    package: str
    imports: tuple[ImportSpec, ...] = ()
    type_specs: tuple[Node, ...] = field(default=(), repr=False)
    functions: tuple[FunctionDecl, ...] = field(default=(), repr=False)

    @property
    def directory(self) -> Path:
        return self.path.parent

    def text(self, node: Node) -> str:
        return node_text(node, self.source)


def _is_top_level(node: Node) -> bool:
    # type_spec -> type_declaration -> source_file
    declaration = node.parent
    return declaration is not None and declaration.parent is not None and declaration.parent.type == "source_file"


def parse_source(source_bytes: bytes, path: str | Path) -> SourceFile:
    parser = get_parser(_LANGUAGE)
    tree = parser.parse(source_bytes)

    captures = QueryCursor(_load_query("declarations")).captures(tree.root_node)

    def captured(name: str) -> list[Node]:
        return sorted(captures.get(name, []), key=lambda n: n.start_byte)

    package = ""
    for clause in captured("package"):
        if clause.named_children:
            package = node_text(clause.named_children[0], source_bytes)
            break

    imports: list[ImportSpec] = []
    for spec in captured("import"):
        path_node = spec.child_by_field_name("path")
        if path_node is None:
            continue
        name_node = spec.child_by_field_name("name")
        imports.append(
            ImportSpec(
                path=node_text(path_node, source_bytes).strip("\"`"),
                name=node_text(name_node, source_bytes) if name_node is not None else None,
            )
        )

    type_specs = [n for n in captured("type.spec") + captured("type.alias") if _is_top_level(n)]
    type_specs.sort(key=lambda n: n.start_byte)

    functions = tuple(FunctionDecl(node=n, source=source_bytes, path=Path(path)) for n in captured("func"))

    return SourceFile(
        path=Path(path),
        source=source_bytes,
        tree=tree,
        package=package,
        imports=tuple(imports),
        type_specs=tuple(type_specs),
        functions=functions,
    )


def parse_file(path: str | Path) -> SourceFile:
    file_path = Path(path)
    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None
    return parse_source(source_bytes, file_path)
