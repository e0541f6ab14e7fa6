"""Tests for segment collapsing."""

import pytest

from covhtml.annotate.spans import (
    CoverageSpan,
    SegmentOrderError,
    collapse_segments,
    spans_for_rendering,
)
from covhtml.coverage.models import CoverageSegment


def seg(line: int, col: int, count: int, entry: bool) -> CoverageSegment:
    return CoverageSegment(
        line=line,
        column=col,
        count=count,
        has_count=True,
        is_region_entry=entry,
        is_gap_region=False,
    )


class TestCollapseSegments:
    """Tests for collapse_segments."""

    def test_empty_input_yields_no_spans(self) -> None:
        assert collapse_segments([]) == []

    def test_single_entry_is_open_span(self) -> None:
        spans = collapse_segments([seg(4, 7, 2, True)])

        assert spans == [CoverageSpan(4, 7, 4, 7, 2)]
        assert spans[0].is_open_ended

    def test_entry_extended_by_following_segments(self) -> None:
        spans = collapse_segments(
            [seg(1, 1, 5, True), seg(1, 10, 1, False), seg(3, 4, 2, False)]
        )

        assert spans == [CoverageSpan(1, 1, 3, 4, 8)]
        assert not spans[0].is_single_line

    def test_end_to_end_example(self) -> None:
        spans = collapse_segments(
            [seg(1, 1, 5, True), seg(1, 10, 0, False), seg(2, 1, 3, True)]
        )

        assert spans == [CoverageSpan(1, 1, 1, 10, 5), CoverageSpan(2, 1, 2, 1, 3)]

    def test_one_span_per_region_entry(self) -> None:
        segments = [
            seg(1, 1, 1, True),
            seg(1, 5, 2, True),
            seg(1, 9, 3, False),
            seg(2, 1, 4, True),
            seg(2, 3, 5, False),
            seg(2, 8, 6, False),
            seg(5, 1, 7, True),
        ]

        spans = collapse_segments(segments)

        assert len(spans) == sum(1 for s in segments if s.is_region_entry)
        assert [s.count for s in spans] == [1, 2 + 3, 4 + 5 + 6, 7]
        assert sum(s.count for s in spans) == sum(s.count for s in segments)

    def test_spans_keep_entry_order(self) -> None:
        spans = collapse_segments([seg(1, 1, 0, True), seg(2, 1, 0, True), seg(3, 1, 0, True)])

        assert [s.start_line for s in spans] == [1, 2, 3]

    def test_leading_non_entry_rejected(self) -> None:
        with pytest.raises(SegmentOrderError, match="2:5"):
            collapse_segments([seg(2, 5, 1, False), seg(3, 1, 1, True)])

    def test_segment_order_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            collapse_segments([seg(1, 1, 0, False)])

    def test_spans_are_immutable(self) -> None:
        span = collapse_segments([seg(1, 1, 1, True)])[0]

        with pytest.raises(AttributeError):
            span.count = 10  # type: ignore[misc]


class TestSpansForRendering:
    """Tests for the reversed rendering order."""

    def test_last_span_gets_index_zero(self) -> None:
        segments = [seg(1, 1, 5, True), seg(1, 10, 0, False), seg(2, 1, 3, True)]

        spans = spans_for_rendering(segments)

        assert spans[0] == CoverageSpan(2, 1, 2, 1, 3)
        assert spans[1] == CoverageSpan(1, 1, 1, 10, 5)

    def test_reverse_of_collapse(self) -> None:
        segments = [seg(i, 1, i, True) for i in range(1, 6)]

        assert spans_for_rendering(segments) == list(reversed(collapse_segments(segments)))

    def test_empty(self) -> None:
        assert spans_for_rendering([]) == []
