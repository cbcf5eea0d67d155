"""
Parser adapter: source text + dialect -> tree-sitter syntax tree.

Both grammars accept JSX, class fields, optional chaining, nullish
coalescing, object rest/spread and decorators out of the box, and parse
``import``/``export`` at top level. The typed dialect uses the TSX grammar so
that markup stays enabled for TypeScript too.

tree-sitter recovers from syntax errors instead of failing, so a tree that
contains ``ERROR`` or missing nodes is turned into a ``ParseError`` here and
never handed to callers.
"""

from __future__ import annotations

from typing import Callable, Iterator

from loguru import logger
from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_javascript
import tree_sitter_typescript

from console_remover.dialect import Dialect
from console_remover.exceptions import ParseError

# Grammar objects are immutable and safe to share; parsers are not.
_LANGUAGES: dict[Dialect, Language] = {
    Dialect.SCRIPT: Language(tree_sitter_javascript.language()),
    Dialect.TYPED_SUPERSET: Language(tree_sitter_typescript.language_tsx()),
}


def get_language(dialect: Dialect) -> Language:
    return _LANGUAGES[dialect]


def parse_source(source: bytes, dialect: Dialect) -> Tree:
    """Parse ``source`` (UTF-8 bytes) or raise ``ParseError``."""
    parser = Parser(get_language(dialect))
    tree = parser.parse(source)
    root = tree.root_node
    if root.has_error:
        bad = first_error_node(root)
        line, column = (bad.start_point if bad is not None else root.start_point)
        what = _describe(bad, source)
        logger.debug(f"Parse failed ({dialect.value}) at {line + 1}:{column + 1}: {what}")
        raise ParseError(what, line=line + 1, column=column + 1)
    return tree


def _is_error(node: Node) -> bool:
    return node.type == "ERROR" or node.is_missing


def first_error_node(root: Node) -> Node | None:
    """First ``ERROR`` or missing node in document order."""
    for node in walk(root, prune=lambda n: not (n.has_error or _is_error(n))):
        if _is_error(node):
            return node
    return None


def walk(node: Node, prune: Callable[[Node], bool] | None = None) -> Iterator[Node]:
    """Pre-order walk over all nodes, skipping subtrees for which ``prune`` is true."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(
            child
            for child in reversed(current.children)
            if prune is None or not prune(child)
        )


def _describe(node: Node | None, source: bytes) -> str:
    if node is None:
        return "invalid syntax"
    if node.is_missing:
        return f"missing {node.type!r}"
    snippet = source[node.start_byte : node.end_byte].decode("utf-8", "replace")
    snippet = snippet.strip().splitlines()[0] if snippet.strip() else ""
    if len(snippet) > 40:
        snippet = snippet[:37] + "..."
    return f"unexpected {snippet!r}" if snippet else "unexpected end of input"
