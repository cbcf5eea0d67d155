from __future__ import annotations

import sys

from loguru import logger
import pytest

from console_remover.dialect import Dialect
from console_remover.parser import parse_source, walk


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = logger.add(
        lambda msg: messages.append(msg.record["message"]), level="DEBUG"
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def first_call():
    """Parse a snippet and return its first call_expression node."""

    def _first_call(code: str, dialect: Dialect = Dialect.SCRIPT):
        tree = parse_source(code.encode("utf-8"), dialect)
        for node in walk(tree.root_node):
            if node.type == "call_expression":
                return node
        raise AssertionError(f"no call expression in {code!r}")

    return _first_call


@pytest.fixture
def make_tree(tmp_path):
    """Write ``{relative path: content}`` under tmp_path and return the root."""

    def _make_tree(files: dict[str, str]):
        for rel, content in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content.encode("utf-8"))
        return tmp_path

    return _make_tree
