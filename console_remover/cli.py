"""
Command line entry point.

Usage:
    console-remover file src/app.ts
    console-remover file src/app.js --dry-run
    console-remover file build/entry.mjs --language-id typescript
    console-remover workspace . --yes
    console-remover workspace . --exclude "**/dist/**" --config remover.yaml
"""

from __future__ import annotations

from pathlib import Path
import sys

import click
from loguru import logger

from console_remover.config import load_config
from console_remover.dialect import Dialect
from console_remover.exceptions import ConfigError, ConsoleRemoverError
from console_remover.utils.logger_setup import setup_logger
from console_remover.workspace import (
    FileStatus,
    discover_files,
    process_file,
    process_files,
)

DIALECT_CHOICES = {
    "auto": None,
    "script": Dialect.SCRIPT,
    "typed": Dialect.TYPED_SUPERSET,
}


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (default: WARNING).",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write logs to this file.",
)
def main(log_level: str, log_file: Path | None) -> None:
    """Remove console.* calls from JavaScript and TypeScript sources."""
    setup_logger(level=log_level.upper(), log_file=log_file)


@main.command("file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--dialect",
    type=click.Choice(sorted(DIALECT_CHOICES)),
    default="auto",
    help="Source dialect; 'auto' picks it from the file extension.",
)
@click.option(
    "--language-id",
    default=None,
    help="Editor language id (e.g. typescriptreact); picks the dialect instead of --dialect.",
)
@click.option("--encoding", default="utf-8", help="File encoding (default: utf-8).")
@click.option("--dry-run", is_flag=True, help="Report changes without writing.")
def file_command(
    path: Path,
    dialect: str,
    language_id: str | None,
    encoding: str,
    dry_run: bool,
) -> None:
    """Remove console statements from a single file PATH."""
    if language_id is not None and dialect != "auto":
        raise click.UsageError("--language-id and --dialect are mutually exclusive.")
    chosen = (
        Dialect.for_language_id(language_id)
        if language_id is not None
        else DIALECT_CHOICES[dialect]
    )
    try:
        outcome = process_file(path, dialect=chosen, encoding=encoding, dry_run=dry_run)
    except (ConsoleRemoverError, OSError, UnicodeError) as e:
        click.echo(click.style(f"❌ {e}", fg="red"), err=True)
        click.echo("   File left unchanged.", err=True)
        sys.exit(1)

    if outcome.status is FileStatus.UNCHANGED:
        click.echo("No console statements found in this file.")
        return
    verb = "would be removed from" if dry_run else "removed from"
    click.echo(
        click.style(
            f"✅ {outcome.removed} console statement(s) {verb} {path}", fg="green"
        )
    )


@main.command("workspace")
@click.argument(
    "root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file with include/exclude/encoding settings.",
)
@click.option("--include", multiple=True, help="Glob of files to process (repeatable).")
@click.option("--exclude", multiple=True, help="Glob of files to skip (repeatable).")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option("--dry-run", is_flag=True, help="Report changes without writing.")
def workspace_command(
    root: Path,
    config_path: Path | None,
    include: tuple[str, ...],
    exclude: tuple[str, ...],
    yes: bool,
    dry_run: bool,
) -> None:
    """Remove console statements from every JS/TS file under ROOT."""
    try:
        config = load_config(
            config_path, include=list(include), exclude=list(exclude)
        )
    except ConfigError as e:
        click.echo(click.style(f"❌ {e}", fg="red"), err=True)
        sys.exit(1)

    files = discover_files(root, config)
    if not files:
        click.echo("No JS/TS files found in workspace.")
        return

    if not yes and not dry_run:
        click.confirm(
            f"This will modify {len(files)} files and remove all console statements. Continue?",
            abort=True,
        )

    with click.progressbar(
        length=len(files),
        label="Removing console statements",
        file=sys.stderr,
    ) as bar:
        report = process_files(
            files,
            encoding=config.encoding,
            dry_run=dry_run,
            on_progress=lambda _: bar.update(1),
        )

    click.echo(
        click.style(
            f"✅ {report.changed} of {len(files)} files "
            f"{'would change' if dry_run else 'changed'}, "
            f"{report.removed} console statement(s) removed",
            fg="green",
        )
    )
    if report.failed:
        click.echo(
            click.style(f"⚠️  {len(report.failed)} file(s) could not be processed:", fg="yellow"),
            err=True,
        )
        for outcome in report.failed:
            click.echo(f"   {outcome.error}", err=True)
        logger.warning(f"{len(report.failed)} file(s) failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
