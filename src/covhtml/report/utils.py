"""Small helpers shared by the page renderers."""

from __future__ import annotations

import math
from pathlib import Path

from covhtml.core.errors import SourceError


def sanitize_filename(filename: str) -> str:
    """Flatten a report filename into a single output page name.

    Examples:
        src/lib/mod.rs -> src_lib_mod.rs.html
    """
    return f"{filename.replace('/', '_')}.html"


def color_for_percent(percent: float) -> str:
    """Classify a hit percentage as "low", "medium" or "high".

    Raises:
        ValueError: For NaN or values outside [0, 100].
    """
    if math.isnan(percent) or percent < 0.0 or percent > 100.0:
        raise ValueError(f"percent must be within [0, 100], got {percent!r}")
    if percent < 75.0:
        return "low"
    if percent < 90.0:
        return "medium"
    return "high"


def split_percent(percent: float) -> tuple[str, str]:
    """Split a one-decimal percentage into whole and fractional text.

    Examples:
        83.333 -> ("83", "3")
    """
    whole, _, frac = f"{percent:.1f}".partition(".")
    return whole, frac


def line_count_width(line_count: int) -> int:
    """Digits needed to print the largest line number."""
    return len(str(line_count)) if line_count > 0 else 1


def read_source_lines(filename: str, path: Path) -> list[str]:
    """Read a source file as lines without their terminators.

    Only ``\\n`` (and a ``\\r`` before it) ends a line, matching the line
    numbering of the coverage data.

    Raises:
        SourceError: If the file is missing or not valid UTF-8.
    """
    try:
        # Bytes first: text mode would translate lone \r into line breaks
        text = path.read_bytes().decode("utf-8")
    except FileNotFoundError as e:
        raise SourceError.not_found(filename, str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError.unreadable(filename, str(path), str(e)) from e

    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
