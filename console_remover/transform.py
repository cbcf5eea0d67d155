from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from console_remover.dialect import Dialect
from console_remover.exceptions import ParseError, SerializationError
from console_remover.parser import parse_source
from console_remover.rewriter import ConsoleCallRewriter, apply_edits


@dataclass(frozen=True)
class TransformResult:
    text: str
    changed: bool
    removed: int = 0
    passes: int = 0


def transform_source(source_text: str, dialect: Dialect = Dialect.SCRIPT) -> TransformResult:
    """Remove every ``console.*`` call from ``source_text``.

    The rewritten text is parsed again after every pass. Output that no
    longer parses raises ``SerializationError``; output that still holds
    ``console`` calls (a filtered sequence can expose a new ``console`` base)
    gets another pass, so the result is a fixed point of the transformation.

    Raises:
        ParseError: ``source_text`` is not valid for ``dialect``.
        SerializationError: the rewrite produced invalid source.
    """
    text = source_text
    removed = 0
    passes = 0
    source = text.encode("utf-8")
    tree = parse_source(source, dialect)
    while True:
        rewriter = ConsoleCallRewriter(source)
        edits = rewriter.rewrite(tree.root_node)
        if not edits:
            break
        source = apply_edits(source, edits)
        removed += rewriter.removed
        passes += 1
        try:
            tree = parse_source(source, dialect)
        except ParseError as e:
            raise SerializationError(
                f"Rewritten source no longer parses ({e.message} at line {e.line})"
            ) from e
        text = source.decode("utf-8")

    changed = text != source_text
    if changed:
        logger.debug(f"Removed {removed} console call(s) in {passes} pass(es)")
    return TransformResult(
        text=text if changed else source_text,
        changed=changed,
        removed=removed,
        passes=passes,
    )


def transform(source_text: str, dialect: Dialect = Dialect.SCRIPT) -> str:
    """Return ``source_text`` without ``console.*`` calls.

    The input is returned unchanged when it holds no such calls.
    """
    return transform_source(source_text, dialect).text
