"""Inline span markers for source lines.

Markers are short sentinel-delimited tokens inserted into source text at
character (code point) offsets:

    \\x02span <index> <count>\\x03   span <index> begins, hit <count> times
    \\x02/span\\x03                  innermost open span ends
    \\x02x\\x03                      a literal \\x02 from the source

All markers for a line are collected first, with offsets measured against
the original text, and then the line is rebuilt in one pass from slices of
that text.
"""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from covhtml.annotate.spans import CoverageSpan
from covhtml.core.logging import get_logger

log = get_logger("annotate")

MARKER_START = "\x02"
MARKER_STOP = "\x03"
END_MARKER = f"{MARKER_START}/span{MARKER_STOP}"
ESCAPED_START = f"{MARKER_START}x{MARKER_STOP}"
MARKER_RE = re.compile(
    r"\x02(?:span (?P<index>\d+) (?P<count>-?\d+)|(?P<end>/span)|(?P<literal>x))\x03"
)


def begin_marker(span_index: int, count: int) -> str:
    return f"{MARKER_START}span {span_index} {count}{MARKER_STOP}"


def escape_sentinels(text: str) -> str:
    """Escape source text so it cannot be read back as a marker."""
    return text.replace(MARKER_START, ESCAPED_START)


def strip_markers(text: str) -> str:
    """Remove every marker, giving back the original line."""
    return MARKER_RE.sub(lambda m: MARKER_START if m["literal"] else "", text)


def insert_at_char(text: str, index: int, insert: str) -> str:
    """Insert ``insert`` immediately before the character at ``index``.

    ``index`` counts code points, not bytes, so a multi-byte character is
    never split. An index at or past the end of ``text`` appends.

    Raises:
        ValueError: If ``index`` is negative.
    """
    if index < 0:
        raise ValueError(f"character index must be non-negative, got {index}")
    if index >= len(text):
        return text + insert
    return text[:index] + insert + text[index:]


class MarkerKind(Enum):
    BEGIN = "begin"
    END = "end"


@dataclass(frozen=True, slots=True)
class Marker:
    """One marker placed at a character offset of the original line."""

    offset: int
    kind: MarkerKind
    span_index: int
    count: int

    @property
    def text(self) -> str:
        if self.kind is MarkerKind.BEGIN:
            return begin_marker(self.span_index, self.count)
        return END_MARKER


@dataclass(frozen=True, slots=True)
class _Interval:
    """Part of one span that falls on one line, as [begin, end) offsets."""

    begin: int
    end: int
    span_index: int
    count: int


def _column_offset(column: int, line: str) -> int:
    """Map a 1-based column to a character offset within ``line``."""
    return min(max(column - 1, 0), len(line))


def _span_intervals(
    span: CoverageSpan, span_index: int, lines: Sequence[str]
) -> list[tuple[int, _Interval]]:
    """Split a span into per-line intervals keyed by 0-based line index."""
    first = span.start_line - 1
    last = span.end_line - 1
    start_text = lines[first]

    if span.is_open_ended:
        begin = _column_offset(span.start_col, start_text)
        return [(first, _Interval(begin, len(start_text), span_index, span.count))]

    if span.is_single_line:
        begin = _column_offset(span.start_col, start_text)
        end = max(_column_offset(span.end_col, start_text), begin)
        return [(first, _Interval(begin, end, span_index, span.count))]

    intervals = [
        (
            first,
            _Interval(
                _column_offset(span.start_col, start_text),
                len(start_text),
                span_index,
                span.count,
            ),
        )
    ]
    for idx in range(first + 1, last):
        intervals.append((idx, _Interval(0, len(lines[idx]), span_index, span.count)))
    intervals.append(
        (
            last,
            _Interval(0, _column_offset(span.end_col, lines[last]), span_index, span.count),
        )
    )
    return intervals


def _order_markers(intervals: list[_Interval]) -> list[Marker]:
    """Order a line's markers so begin/end pairs nest.

    At one offset: closing markers come first (innermost first), then empty
    intervals as adjacent begin/end pairs, then opening markers (outermost
    first). Identical intervals nest with the earlier span outside.
    """
    keyed: list[tuple[tuple[int, int, int, int], list[Marker]]] = []
    for iv in intervals:
        begin = Marker(iv.begin, MarkerKind.BEGIN, iv.span_index, iv.count)
        end = Marker(iv.end, MarkerKind.END, iv.span_index, iv.count)
        if iv.begin == iv.end:
            keyed.append(((iv.begin, 1, 0, iv.span_index), [begin, end]))
        else:
            keyed.append(((iv.end, 0, -iv.begin, iv.span_index), [end]))
            keyed.append(((iv.begin, 2, -iv.end, -iv.span_index), [begin]))

    keyed.sort(key=lambda item: item[0])
    return [marker for _, markers in keyed for marker in markers]


def collect_markers(
    lines: Sequence[str], spans: Sequence[CoverageSpan]
) -> dict[int, list[Marker]]:
    """Place markers for every span without touching the text.

    Args:
        lines: Source lines; line N of the coverage data is ``lines[N - 1]``.
        spans: Spans in rendering order (index 0 is the last span in the file).

    Returns:
        Mapping of 0-based line index to markers in output order.
    """
    per_line: dict[int, list[_Interval]] = defaultdict(list)

    for span_index, span in enumerate(spans):
        if span.start_line < 1 or span.end_line > len(lines) or span.end_line < span.start_line:
            log.warning(
                "span_out_of_range",
                span_index=span_index,
                start_line=span.start_line,
                end_line=span.end_line,
                line_count=len(lines),
            )
            continue
        for line_idx, interval in _span_intervals(span, span_index, lines):
            per_line[line_idx].append(interval)
        log.debug("span_placed", span_index=span_index, span=span)

    return {line_idx: _order_markers(ivs) for line_idx, ivs in per_line.items()}


def apply_markers(text: str, markers: Sequence[Marker]) -> str:
    """Rebuild one line with its markers, which must be in output order."""
    parts: list[str] = []
    prev = 0
    for marker in markers:
        offset = min(max(marker.offset, prev), len(text))
        parts.append(escape_sentinels(text[prev:offset]))
        parts.append(marker.text)
        prev = offset
    parts.append(escape_sentinels(text[prev:]))
    return "".join(parts)


def annotate_lines(lines: Sequence[str], spans: Sequence[CoverageSpan]) -> list[str]:
    """Return a copy of ``lines`` with span markers inserted.

    Removing the markers from the result gives back ``lines`` exactly.
    """
    markers = collect_markers(lines, spans)
    return [apply_markers(text, markers.get(idx, ())) for idx, text in enumerate(lines)]
