"""Segment collapsing.

Turns a file's ordered point segments into closed coverage spans. Each
region-entry segment opens a span; the non-entry segments after it move
the span's end and add their counts, until the next region entry.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from covhtml.coverage.models import CoverageSegment


class SegmentOrderError(ValueError):
    """A non-entry segment appeared before any region entry."""


@dataclass(frozen=True, slots=True)
class CoverageSpan:
    """Closed source interval with an aggregated hit count.

    Lines and columns are 1-based, as in the coverage export.
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    count: int

    @property
    def is_single_line(self) -> bool:
        return self.start_line == self.end_line

    @property
    def is_open_ended(self) -> bool:
        """No later segment closed this span; it runs to the end of its line."""
        return self.start_line == self.end_line and self.start_col == self.end_col


@dataclass(slots=True)
class _Accumulator:
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    count: int

    def freeze(self) -> CoverageSpan:
        return CoverageSpan(
            start_line=self.start_line,
            start_col=self.start_col,
            end_line=self.end_line,
            end_col=self.end_col,
            count=self.count,
        )


def collapse_segments(segments: Iterable[CoverageSegment]) -> list[CoverageSpan]:
    """Collapse segments into spans, in file order.

    Returns one span per region-entry segment. A span's count is the entry's
    count plus the counts of every non-entry segment up to the next entry.

    Raises:
        SegmentOrderError: If the first segment is not a region entry.
    """
    spans: list[CoverageSpan] = []
    current: _Accumulator | None = None

    for segment in segments:
        if segment.is_region_entry:
            if current is not None:
                spans.append(current.freeze())
            current = _Accumulator(
                start_line=segment.line,
                start_col=segment.column,
                end_line=segment.line,
                end_col=segment.column,
                count=segment.count,
            )
            continue

        if current is None:
            raise SegmentOrderError(
                f"segment at {segment.line}:{segment.column} extends no open region"
            )
        current.end_line = segment.line
        current.end_col = segment.column
        current.count += segment.count

    if current is not None:
        spans.append(current.freeze())

    return spans


def spans_for_rendering(segments: Iterable[CoverageSegment]) -> list[CoverageSpan]:
    """Collapse segments and reverse the result.

    The position of a span in the returned list is its rendering index:
    index 0 is the last span in the file.
    """
    spans = collapse_segments(segments)
    spans.reverse()
    return spans
