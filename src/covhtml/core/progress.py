"""User-facing progress feedback for CLI operations.

Design principles:
- Progress bar if rendering more than a handful of pages
- Single line updates, no spam
- Graceful degradation in non-TTY (CI, pipes)
- Suppress structlog console output while a bar is live

Usage::

    from covhtml.core.progress import progress, status, task

    status("Reading report...")

    for file in progress(files, desc="Rendering"):
        render(file)

    with task("Writing index"):
        write_index()
"""

from __future__ import annotations

import sys
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TypeVar

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

T = TypeVar("T")

_PROGRESS_THRESHOLD = 20

_console = Console(stderr=True)

_STYLES = {
    "success": "[green]✓[/green] ",
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
    "none": "",
}

# Process-wide: render workers log from their own threads while the bar is live
_suppress_console_logs = threading.Event()


def is_console_suppressed() -> bool:
    """Check if console logging is currently suppressed."""
    return _suppress_console_logs.is_set()


@contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Suppress structlog console output while a live display is active."""
    _suppress_console_logs.set()
    try:
        yield
    finally:
        _suppress_console_logs.clear()


def _get_logger() -> BoundLogger:
    """Get logger lazily to respect runtime config."""
    from covhtml.core.logging import get_logger

    return get_logger("progress")


def _is_tty() -> bool:
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def status(message: str, *, style: str = "info", indent: int = 0) -> None:
    """Print a styled status message to stderr."""
    prefix = _STYLES.get(style, "")
    padding = " " * indent
    _console.print(f"{padding}{prefix}{message}", highlight=False)
    _get_logger().debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Examples:
        pluralize(1, "file") -> "1 file"
        pluralize(3, "file") -> "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def progress(
    iterable: Iterable[T],
    *,
    desc: str | None = None,
    total: int | None = None,
    unit: str = "files",
    force: bool = False,
) -> Iterator[T]:
    """Wrap an iterable with a progress bar if TTY and enough items (or force=True)."""
    if total is None:
        try:
            total = len(iterable)  # type: ignore[arg-type]
        except TypeError:
            total = None

    show_bar = _is_tty() and total is not None and (force or total > _PROGRESS_THRESHOLD)

    if show_bar:
        with (
            suppress_console_logs(),
            Progress(
                TextColumn("    {task.description}:"),
                BarColumn(bar_width=25, style="cyan", complete_style="cyan"),
                TaskProgressColumn(),
                TextColumn("{task.completed}/{task.total} {task.fields[unit]}"),
                console=_console,
                transient=True,
            ) as pbar,
        ):
            task_id = pbar.add_task(desc or "Processing", total=total, unit=unit)
            for item in iterable:
                yield item
                pbar.advance(task_id)
    else:
        log = _get_logger()
        if desc and total:
            log.debug("progress_start", desc=desc, total=total)
        for item in iterable:
            yield item
        if desc and total:
            log.debug("progress_done", desc=desc, total=total)


@contextmanager
def task(name: str) -> Iterator[None]:
    """Context manager for a named task with timing.

    Usage::

        with task("Rendering pages"):
            ...
        # Prints: ✓ Rendering pages (0.4s)
    """
    log = _get_logger()
    log.debug("task_start", task=name)
    status(f"{name}...", style="none")
    start = time.perf_counter()

    try:
        yield
        elapsed = time.perf_counter() - start
        status(f"{name} ({elapsed:.1f}s)", style="success")
        log.debug("task_done", task=name, elapsed_s=elapsed)
    except Exception as e:
        elapsed = time.perf_counter() - start
        status(f"{name} failed: {e}", style="error")
        log.error("task_failed", task=name, elapsed_s=elapsed, error=str(e))
        raise
