"""
Colored logging setup for console-remover.

Loguru configuration with a colored stderr sink and an optional log file.
"""

from pathlib import Path
import sys

from loguru import logger


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    enable_colors: bool = True,
) -> str | None:
    """
    Set up colored console logging and, optionally, file logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path of a log file to write to, if any
        rotation: Log rotation policy for the file sink (e.g., "10 MB")
        retention: Log retention policy for the file sink (e.g., "7 days")
        enable_colors: Whether to enable colored console output

    Returns:
        Path to the log file, or None when logging to the console only
    """
    # Remove any existing handlers to avoid duplicates
    logger.remove()

    colorize = enable_colors and sys.stderr.isatty()
    if colorize:
        console_format = (
            "<green>{time:HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<level>{message}</level>"
        )
    else:
        console_format = "{time:HH:mm:ss.SSS} | {level: <8} | {message}"

    logger.add(
        sys.stderr,
        level=level,
        format=console_format,
        colorize=colorize,
        backtrace=False,
        diagnose=False,
    )

    if log_file is None:
        return None

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    # File sink keeps the call site, no colors
    logger.add(
        log_path,
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}",
        rotation=rotation,
        retention=retention,
        encoding="utf-8",
        backtrace=True,
        diagnose=False,
    )
    logger.debug(f"Log level: {level}, colors: {colorize}, file: {log_path}")
    return str(log_path)
