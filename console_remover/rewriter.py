"""
Tree rewriter: finds ``console.*`` call sites and turns them into text edits.

The syntax tree is never mutated. Each ``visit_<node type>`` method returns
the children that still have to be walked; returning nothing marks the node
as consumed, so a call swallowed by one rule is never seen by another.

Rules, by context of the matching call:

* statement: the whole statement goes away (its line too when it stands
  alone). Slots that cannot be empty get ``{}``; an ``else`` branch is
  dropped with its keyword; a labelled statement is dropped as a whole.
* sub-expression: the call is replaced by ``undefined``.
* comma sequence: matching elements are cut out with their separators. A
  sequence made only of matching calls counts as one matching call.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import Iterable, Sequence

from loguru import logger
from tree_sitter import Node

from console_remover.classifier import (
    COMMENT_TYPES,
    is_console_call,
    is_console_expression,
    unwrap_parens,
)
from console_remover.exceptions import SerializationError

PLACEHOLDER = b"undefined"
EMPTY_BLOCK = b"{}"
HORIZONTAL_SPACE = b" \t"

# Statement slots that must keep a statement after removal.
REQUIRED_BODY_FIELDS: dict[str, str] = {
    "if_statement": "consequence",
    "for_statement": "body",
    "for_in_statement": "body",
    "while_statement": "body",
    "do_statement": "body",
    "with_statement": "body",
}


@dataclass(frozen=True, order=True)
class Edit:
    """Replace ``source[start:end]`` with ``replacement``."""

    start: int
    end: int
    replacement: bytes = b""


def sequence_elements(node: Node) -> list[Node]:
    """Flatten a comma sequence into its element expressions."""
    elements: list[Node] = []
    for child in node.named_children:
        if child.type in COMMENT_TYPES:
            continue
        if child.type == "sequence_expression":
            elements.extend(sequence_elements(child))
        else:
            elements.append(child)
    return elements


def is_console_sequence(node: Node) -> bool:
    node = unwrap_parens(node)
    if node.type != "sequence_expression":
        return False
    return all(is_console_expression(e) for e in sequence_elements(node))


class ConsoleCallRewriter:
    """Collects the edits that erase every ``console.*`` call in one tree."""

    def __init__(self, source: bytes):
        self.source = source
        self.removed = 0
        self._edits: list[Edit] = []
        self._statements: list[tuple[int, int]] = []

    def rewrite(self, root: Node) -> list[Edit]:
        stack = [root]
        while stack:
            node = stack.pop()
            visitor = getattr(self, f"visit_{node.type}", self.generic_visit)
            stack.extend(reversed(list(visitor(node))))
        edits = self._edits + self._statement_edits()
        logger.debug(f"Rewriter consumed {self.removed} console call(s), {len(edits)} edit(s)")
        return sorted(edits)

    def generic_visit(self, node: Node) -> Sequence[Node]:
        return node.named_children

    # -- statement context -------------------------------------------------

    def visit_expression_statement(self, node: Node) -> Sequence[Node]:
        if not self._is_statement_position(node):
            return node.named_children
        expression = self._statement_expression(node)
        if expression is None:
            return node.named_children
        if is_console_expression(expression):
            self.removed += 1
        elif is_console_sequence(expression):
            self.removed += len(sequence_elements(unwrap_parens(expression)))
        else:
            return node.named_children
        self._erase_statement(node)
        return ()

    @staticmethod
    def _statement_expression(node: Node) -> Node | None:
        for child in node.named_children:
            if child.type not in COMMENT_TYPES:
                return child
        return None

    @staticmethod
    def _is_statement_position(node: Node) -> bool:
        # ``for (init; test; ...)`` header clauses are expressions, not statements.
        parent = node.parent
        if parent is not None and parent.type == "for_statement":
            return parent.child_by_field_name("body") == node
        return True

    def _erase_statement(self, node: Node) -> None:
        parent = node.parent
        if parent is None:
            self._statements.append((node.start_byte, node.end_byte))
            return
        if parent.type == "labeled_statement":
            self._erase_statement(parent)
            return
        if parent.type == "else_clause":
            before = parent.prev_sibling
            start = before.end_byte if before is not None else parent.start_byte
            self._edits.append(Edit(start, parent.end_byte))
            return
        field = REQUIRED_BODY_FIELDS.get(parent.type)
        if field is not None and parent.child_by_field_name(field) == node:
            self._edits.append(Edit(node.start_byte, node.end_byte, EMPTY_BLOCK))
            return
        self._statements.append((node.start_byte, node.end_byte))

    def _statement_edits(self) -> list[Edit]:
        """Deletions for removed statements, widened to whole lines where possible.

        Statements separated only by spaces are merged first, so that
        ``console.log(a); console.log(b);`` on one line removes the line.
        """
        merged: list[list[int]] = []
        for start, end in sorted(self._statements):
            if merged and not self.source[merged[-1][1] : start].strip(HORIZONTAL_SPACE):
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])
        return [Edit(*self._widen(start, end)) for start, end in merged]

    def _widen(self, start: int, end: int) -> tuple[int, int]:
        src = self.source
        line_start = src.rfind(b"\n", 0, start) + 1
        if line_start == 0 and src.startswith(codecs.BOM_UTF8):
            line_start = len(codecs.BOM_UTF8)
        alone = not src[line_start:start].strip(HORIZONTAL_SPACE)
        if not alone:
            while start > line_start and src[start - 1] in HORIZONTAL_SPACE:
                start -= 1
            return start, end
        while end < len(src) and src[end] in HORIZONTAL_SPACE:
            end += 1
        if src.startswith(b"\r\n", end):
            return line_start, end + 2
        if src.startswith(b"\n", end) or end == len(src):
            return line_start, min(end + 1, len(src))
        return start, end

    # -- sub-expression context --------------------------------------------

    def visit_call_expression(self, node: Node) -> Sequence[Node]:
        if is_console_call(node):
            self.removed += 1
            self._edits.append(Edit(node.start_byte, node.end_byte, PLACEHOLDER))
            return ()
        return node.named_children

    # -- sequence context --------------------------------------------------

    def visit_sequence_expression(self, node: Node) -> Iterable[Node]:
        elements = sequence_elements(node)
        matches = [is_console_expression(e) for e in elements]
        if not any(matches):
            return elements
        if all(matches):
            self.removed += len(elements)
            self._edits.append(Edit(node.start_byte, node.end_byte, PLACEHOLDER))
            return ()

        self.removed += sum(matches)
        i = 0
        while i < len(elements):
            if not matches[i]:
                i += 1
                continue
            j = i
            while j + 1 < len(elements) and matches[j + 1]:
                j += 1
            if j + 1 < len(elements):
                # cut up to the next kept element, separator included
                self._edits.append(Edit(elements[i].start_byte, elements[j + 1].start_byte))
            else:
                self._edits.append(Edit(elements[i - 1].end_byte, elements[j].end_byte))
            i = j + 1
        return [e for e, matched in zip(elements, matches) if not matched]


def apply_edits(source: bytes, edits: Iterable[Edit]) -> bytes:
    """Splice non-overlapping edits into ``source``."""
    chunks: list[bytes] = []
    cursor = 0
    for edit in sorted(edits):
        if edit.start < cursor or edit.end < edit.start or edit.end > len(source):
            raise SerializationError(
                f"Conflicting edit {edit.start}:{edit.end} (cursor at {cursor})"
            )
        chunks.append(source[cursor : edit.start])
        chunks.append(edit.replacement)
        cursor = edit.end
    chunks.append(source[cursor:])
    return b"".join(chunks)
