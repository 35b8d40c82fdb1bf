"""Logging utilities with rich console output.

Usage:
    from template_updater.logger import get_logger

    logger = get_logger(__name__)
    logger.debug("» git log master --format=%h")
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Shared console so progress lines, prompts and log records interleave cleanly
console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)


def _rich_handler() -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def get_logger(name: str, level: str | None = None) -> logging.Logger:
    """Get a logger writing through the shared rich console.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level. If None, uses LOG_LEVEL or defaults to INFO.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler())

    # Keep propagation so pytest's caplog sees the records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO") -> None:
    """Set the level of every template_updater logger.

    Called once from the command-line entry point.

    Args:
        level: Logging level name (DEBUG, INFO, ...)
    """
    level = level.upper()
    for name, candidate in logging.root.manager.loggerDict.items():
        if name.startswith("template_updater") and isinstance(candidate, logging.Logger):
            candidate.setLevel(level)


# Message text is escaped: commit subjects may contain square brackets
def progress(message: str, style: str | None = None) -> None:
    """Print a progress line without a logger prefix."""
    console.print(escape(message), style=style)


def success(message: str) -> None:
    """Print a success message with a green checkmark."""
    console.print(f"[green]✓[/green] {escape(message)}")


def warning(message: str) -> None:
    """Print a warning message with a yellow warning icon."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str) -> None:
    """Print an error message with a red cross on stderr."""
    error_console.print(f"[red]✗[/red] {escape(message)}")


def echo_raw(text: str) -> None:
    """Write tool output verbatim, bypassing rich markup."""
    console.file.write(text)
    console.file.flush()
