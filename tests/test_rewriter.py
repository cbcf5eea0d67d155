from __future__ import annotations

import pytest

from console_remover.dialect import Dialect
from console_remover.exceptions import SerializationError
from console_remover.parser import parse_source, walk
from console_remover.rewriter import (
    ConsoleCallRewriter,
    Edit,
    apply_edits,
    sequence_elements,
)


def _edits(code: str) -> tuple[list[Edit], int]:
    source = code.encode("utf-8")
    rewriter = ConsoleCallRewriter(source)
    edits = rewriter.rewrite(parse_source(source, Dialect.SCRIPT).root_node)
    return edits, rewriter.removed


def test_no_console_no_edits():
    edits, removed = _edits("foo(1, 2);\nbar();\n")
    assert edits == []
    assert removed == 0


def test_each_call_is_consumed_once():
    # the inner call dies with the outer one, no overlapping edits
    edits, removed = _edits("x = console.log(console.log(1));\n")
    assert removed == 1
    assert edits == [Edit(4, 31, b"undefined")]


def test_edits_come_back_sorted():
    edits, removed = _edits("a(console.log(1));\nb(console.log(2));\n")
    assert removed == 2
    assert [e.start for e in edits] == sorted(e.start for e in edits)


def test_sequence_elements_are_flattened():
    tree = parse_source(b"a, /* c */ b, c, d;", Dialect.SCRIPT)
    sequence = next(n for n in walk(tree.root_node) if n.type == "sequence_expression")
    assert [e.text for e in sequence_elements(sequence)] == [b"a", b"b", b"c", b"d"]


def test_apply_edits_splices_in_order():
    source = b"0123456789"
    edits = [Edit(6, 8, b"x"), Edit(0, 2)]
    assert apply_edits(source, edits) == b"2345x89"


def test_apply_edits_rejects_overlap():
    with pytest.raises(SerializationError):
        apply_edits(b"0123456789", [Edit(0, 5), Edit(4, 6)])


def test_apply_edits_rejects_out_of_range():
    with pytest.raises(SerializationError):
        apply_edits(b"0123", [Edit(2, 10)])
