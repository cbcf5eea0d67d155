from __future__ import annotations

from pathlib import Path


class ConsoleRemoverError(Exception):
    """Base for all console-remover exceptions."""

    pass


class ParseError(ConsoleRemoverError):
    """Source text is not valid for the requested dialect."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        path: str | Path | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.path = str(path) if path is not None else None
        super().__init__(self._format())

    def _format(self) -> str:
        where = self.path or "<source>"
        if self.line is not None:
            where = f"{where}:{self.line}:{self.column or 1}"
        return f"{where}: {self.message}"

    def with_path(self, path: str | Path) -> ParseError:
        """Return a copy of this error attributed to ``path``."""
        return ParseError(self.message, line=self.line, column=self.column, path=path)


class SerializationError(ConsoleRemoverError):
    """Rewritten tree could not be turned back into valid source.

    Indicates a broken internal invariant (overlapping edits, unparseable
    output). Callers must not write anything back when this is raised.
    """

    pass


class ConfigError(ConsoleRemoverError):
    """Invalid or unreadable configuration."""

    pass
