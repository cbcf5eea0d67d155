from __future__ import annotations

from enum import Enum
from pathlib import Path

TYPED_SUFFIXES: frozenset[str] = frozenset({".ts", ".tsx"})


class Dialect(Enum):
    """Source dialects the parser adapter understands."""

    SCRIPT = "script"  # JavaScript with JSX
    TYPED_SUPERSET = "typed"  # TypeScript with JSX

    @classmethod
    def for_path(cls, path: str | Path) -> Dialect:
        """Pick the dialect from a file extension (``.ts``/``.tsx`` are typed)."""
        if Path(path).suffix.lower() in TYPED_SUFFIXES:
            return cls.TYPED_SUPERSET
        return cls.SCRIPT

    @classmethod
    def for_language_id(cls, language_id: str) -> Dialect:
        """Map an editor language id (``typescriptreact``, ``javascript``...)."""
        if "typescript" in language_id.lower():
            return cls.TYPED_SUPERSET
        return cls.SCRIPT
