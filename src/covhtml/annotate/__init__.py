"""Coverage-to-annotated-source transformation.

Pipeline for one file:

    spans = spans_for_rendering(file.segments)   # collapse, last span first
    annotated = annotate_lines(lines, spans)     # insert markers
    html_lines = render_lines(annotated)         # markers -> <span> markup
"""

from covhtml.annotate.markers import (
    END_MARKER,
    ESCAPED_START,
    MARKER_RE,
    Marker,
    MarkerKind,
    annotate_lines,
    apply_markers,
    begin_marker,
    collect_markers,
    escape_sentinels,
    insert_at_char,
    strip_markers,
)
from covhtml.annotate.render import render_line, render_lines
from covhtml.annotate.spans import (
    CoverageSpan,
    SegmentOrderError,
    collapse_segments,
    spans_for_rendering,
)

__all__ = [
    # Spans
    "CoverageSpan",
    "SegmentOrderError",
    "collapse_segments",
    "spans_for_rendering",
    # Markers
    "END_MARKER",
    "ESCAPED_START",
    "MARKER_RE",
    "Marker",
    "MarkerKind",
    "annotate_lines",
    "apply_markers",
    "begin_marker",
    "collect_markers",
    "escape_sentinels",
    "insert_at_char",
    "strip_markers",
    # Rendering
    "render_line",
    "render_lines",
]
