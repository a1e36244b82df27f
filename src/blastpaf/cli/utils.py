"""
Shared CLI utilities for blastpaf commands.

Provides console handling and logging setup used across CLI modules.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Context manager for spinner-style progress display.

    Args:
        description: Task description to display.
        console: Rich Console instance.
        quiet: If True, suppress the progress display entirely.

    Yields:
        Progress instance (even when quiet, for API consistency).
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console if not quiet else None,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route blastpaf log records through a Rich handler.

    Args:
        verbose: Log at DEBUG instead of WARNING.
        console: Console the handler writes to (stderr when None).
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    package_logger = logging.getLogger("blastpaf")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    package_logger.propagate = False


def validate_output_format_extension(
    output: Path,
    output_format: str,
    console: Any,
) -> Path:
    """
    Validate that output file extension matches the specified format.

    If there's a mismatch, warns the user and returns the corrected path.

    Args:
        output: Original output path
        output_format: Specified format ('csv' or 'parquet')
        console: Console for printing warnings

    Returns:
        Corrected output path with appropriate extension
    """
    actual_ext = output.suffix.lower()

    if output_format == "parquet" and actual_ext in (".csv", ".tsv"):
        corrected = output.with_suffix(".parquet")
        console.print(
            f"[yellow]Warning: Output extension '{actual_ext}' doesn't match "
            f"format 'parquet'[/yellow]\n"
            f"  Correcting to: {corrected.name}"
        )
        return corrected

    if output_format == "csv" and actual_ext == ".parquet":
        corrected = output.with_suffix(".csv")
        console.print(
            f"[yellow]Warning: Output extension '.parquet' doesn't match "
            f"format 'csv'[/yellow]\n"
            f"  Correcting to: {corrected.name}"
        )
        return corrected

    return output


class QuietConsole:
    """Console wrapper that suppresses output in quiet mode.

    Example:
        >>> console = Console()
        >>> qc = QuietConsole(console, quiet=True)
        >>> qc.print("This won't be shown")  # Suppressed
    """

    def __init__(self, console: Console, quiet: bool = False):
        self._console = console
        self._quiet = quiet

    @property
    def console(self) -> Console:
        """The wrapped Console, for output that ignores quiet mode."""
        return self._console

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print to console unless quiet mode is enabled."""
        if not self._quiet:
            self._console.print(*args, **kwargs)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._console, name)
