from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatchcase
import os
from pathlib import Path
from typing import Callable, Iterable

from loguru import logger

from console_remover.config import WorkspaceConfig
from console_remover.dialect import Dialect
from console_remover.exceptions import ConsoleRemoverError, ParseError
from console_remover.transform import transform_source


class FileStatus(Enum):
    CHANGED = "changed"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class FileOutcome:
    path: Path
    status: FileStatus
    removed: int = 0
    error: str | None = None


@dataclass
class BatchReport:
    outcomes: list[FileOutcome] = field(default_factory=list)

    def _count(self, status: FileStatus) -> int:
        return sum(1 for o in self.outcomes if o.status is status)

    @property
    def changed(self) -> int:
        return self._count(FileStatus.CHANGED)

    @property
    def unchanged(self) -> int:
        return self._count(FileStatus.UNCHANGED)

    @property
    def failed(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status is FileStatus.FAILED]

    @property
    def removed(self) -> int:
        return sum(o.removed for o in self.outcomes)


def _match_parts(parts: list[str], pattern: list[str]) -> bool:
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        # zero or more whole path segments
        return any(_match_parts(parts[i:], rest) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_parts(parts[1:], rest)


def glob_match(rel_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob, one segment at a time.

    ``*`` and ``?`` never cross a ``/``; a ``**`` segment matches any number
    of directories, none included.
    """
    return _match_parts(rel_path.split("/"), pattern.split("/"))


def _matches_any(rel_path: str, patterns: Iterable[str]) -> bool:
    return any(glob_match(rel_path, p) for p in patterns)


def is_excluded_dir(rel_dir: str, patterns: Iterable[str]) -> bool:
    """Whether every path under ``rel_dir`` is excluded by some ``<dir>/**`` pattern."""
    return any(p.endswith("/**") and glob_match(rel_dir, p[:-3]) for p in patterns)


def discover_files(root: str | Path, config: WorkspaceConfig) -> list[Path]:
    """All files under ``root`` matching ``config.include`` and not ``config.exclude``.

    Excluded directories are pruned instead of walked.
    """
    root = Path(root)
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"
        dirnames[:] = sorted(
            d for d in dirnames if not is_excluded_dir(f"{prefix}{d}", config.exclude)
        )
        for name in sorted(filenames):
            rel = f"{prefix}{name}"
            if _matches_any(rel, config.include) and not _matches_any(rel, config.exclude):
                found.append(Path(dirpath) / name)
    logger.debug(f"Discovered {len(found)} file(s) under {root}")
    return found


def process_file(
    path: str | Path,
    *,
    dialect: Dialect | None = None,
    encoding: str = "utf-8",
    dry_run: bool = False,
) -> FileOutcome:
    """Strip ``console`` calls from one file, writing back only if it changed.

    Raises:
        ParseError: The file is not valid source (attributed to ``path``)
        SerializationError: The rewrite failed; the file is left untouched
        OSError, UnicodeError: The file could not be read or written
    """
    path = Path(path)
    dialect = dialect or Dialect.for_path(path)
    # bytes round-trip keeps line endings as they are
    text = path.read_bytes().decode(encoding)
    try:
        result = transform_source(text, dialect)
    except ParseError as e:
        raise e.with_path(path) from e

    if not result.changed:
        return FileOutcome(path=path, status=FileStatus.UNCHANGED)
    if not dry_run:
        path.write_bytes(result.text.encode(encoding))
    logger.info(
        f"{'Would remove' if dry_run else 'Removed'} {result.removed} console call(s) from {path}"
    )
    return FileOutcome(path=path, status=FileStatus.CHANGED, removed=result.removed)


def process_files(
    paths: Iterable[Path],
    *,
    encoding: str = "utf-8",
    dry_run: bool = False,
    on_progress: Callable[[FileOutcome], None] | None = None,
) -> BatchReport:
    """Process many files; a failing file is logged and skipped, never fatal."""
    report = BatchReport()
    for path in paths:
        try:
            outcome = process_file(path, encoding=encoding, dry_run=dry_run)
        except (ConsoleRemoverError, OSError, UnicodeError) as e:
            logger.error(f"Error processing file {path}: {e}")
            outcome = FileOutcome(path=Path(path), status=FileStatus.FAILED, error=str(e))
        report.outcomes.append(outcome)
        if on_progress is not None:
            on_progress(outcome)
    return report
