"""
Format-preserving syntax trees for TypeScript/JSX sources.

Parsing uses the tree-sitter TypeScript grammar for `.ts` files and the TSX
grammar for everything else. Trees are never reformatted:
mutations are recorded as text insertions at byte offsets and applied on
`generate_code`, so untouched regions print back exactly as they were read.
"""
from typing import Iterator

import tree_sitter_typescript as ts_typescript
from tree_sitter import Language, Node, Parser

from widgetsmith.support.exceptions import SourceParseError

TS_LANGUAGE = Language(ts_typescript.language_typescript())
TSX_LANGUAGE = Language(ts_typescript.language_tsx())

JSX_ELEMENT_TYPES = ("jsx_element", "jsx_self_closing_element")


class SourceTree:
    """A parsed source file plus the insertions pending against it."""

    def __init__(self, source: bytes, tree, file_path: str = "<string>"):
        self.source = source
        self.tree = tree
        self.file_path = file_path
        self._insertions: list[tuple[int, int, bytes]] = []

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    @property
    def modified(self) -> bool:
        return bool(self._insertions)

    def text(self, node: Node) -> str:
        """Source text covered by a node."""
        return self.source[node.start_byte:node.end_byte].decode("utf-8")

    def insert(self, offset: int, text: str) -> None:
        """Schedule `text` to be inserted at byte `offset` of the original source."""
        self._insertions.append((offset, len(self._insertions), text.encode("utf-8")))

    def insertions_at(self, offset: int) -> list[str]:
        return [text.decode("utf-8") for at, _, text in self._insertions if at == offset]

    def walk(self) -> Iterator[Node]:
        """Yield every node in document (pre-)order."""
        stack = [self.root_node]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def jsx_elements(self) -> Iterator[Node]:
        """Yield every JSX element, outer elements before the ones they contain."""
        for node in self.walk():
            if node.type in JSX_ELEMENT_TYPES:
                yield node


def _first_error(node: Node) -> Node | None:
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


def language_for(file_path: str) -> Language:
    """TypeScript grammar for `.ts` paths (`<T>expr` casts, no JSX), TSX otherwise."""
    if str(file_path).endswith(".ts"):
        return TS_LANGUAGE
    return TSX_LANGUAGE


def parse_code(code: str, file_path: str = "<string>") -> SourceTree:
    """
    Parse source code into a SourceTree, picking the grammar from file_path.
    Raises SourceParseError if the grammar reports any error or missing token.
    """
    source = code.encode("utf-8")
    tree = Parser(language_for(file_path)).parse(source)

    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        if bad is None:
            raise SourceParseError(file_path, 0, "unparseable source")
        if bad.is_missing:
            message = f"missing {bad.type}"
        else:
            snippet = source[bad.start_byte:bad.end_byte].decode("utf-8", "replace")
            message = f"unexpected {snippet[:40]!r}"
        raise SourceParseError(file_path, bad.start_point[0] + 1, message)

    return SourceTree(source, tree, file_path)


def generate_code(tree: SourceTree) -> str:
    """Serialize a SourceTree, applying pending insertions in offset order."""
    if not tree.modified:
        return tree.source.decode("utf-8")

    parts = []
    cursor = 0
    for offset, _, text in sorted(tree._insertions):
        parts.append(tree.source[cursor:offset])
        parts.append(text)
        cursor = offset
    parts.append(tree.source[cursor:])
    return b"".join(parts).decode("utf-8")
