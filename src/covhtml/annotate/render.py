"""Span rendering: markers to HTML.

Source text between markers is HTML-escaped; each begin marker becomes a
``<span class="hit">`` carrying the hit count and span index, each end
marker a ``</span>``.
"""

from __future__ import annotations

from collections.abc import Iterable

from markupsafe import Markup, escape

from covhtml.annotate.markers import MARKER_RE, MARKER_START

SPAN_OPEN = Markup(
    '<span class="hit" title="{count} hits" data-count="{count}" '
    'data-segment-index="{index}">'
)
SPAN_CLOSE = Markup("</span>")


def render_line(line: str) -> Markup:
    """Replace the markers of one annotated line with span markup."""
    parts: list[Markup] = []
    pos = 0
    for match in MARKER_RE.finditer(line):
        parts.append(escape(line[pos : match.start()]))
        if match["literal"]:
            parts.append(escape(MARKER_START))
        elif match["end"]:
            parts.append(SPAN_CLOSE)
        else:
            parts.append(SPAN_OPEN.format(count=int(match["count"]), index=int(match["index"])))
        pos = match.end()
    parts.append(escape(line[pos:]))
    return Markup("").join(parts)


def render_lines(lines: Iterable[str]) -> list[Markup]:
    return [render_line(line) for line in lines]
