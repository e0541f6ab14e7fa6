"""Tests for marker to HTML rendering."""

from markupsafe import Markup

from covhtml.annotate import annotate_lines, render_line, render_lines, spans_for_rendering
from covhtml.annotate.markers import END_MARKER, begin_marker
from covhtml.coverage.models import CoverageSegment

from conftest import A_RS_SEGMENTS, A_RS_SOURCE

HIT_5 = '<span class="hit" title="5 hits" data-count="5" data-segment-index="1">'
HIT_3 = '<span class="hit" title="3 hits" data-count="3" data-segment-index="0">'


class TestRenderLine:
    """Tests for render_line."""

    def test_plain_text_is_escaped(self) -> None:
        result = render_line("if a < b && c > d {")

        assert isinstance(result, Markup)
        assert str(result) == "if a &lt; b &amp;&amp; c &gt; d {"

    def test_quotes_are_escaped(self) -> None:
        assert str(render_line('println!("x")')) == "println!(&#34;x&#34;)"

    def test_markers_become_spans(self) -> None:
        line = f"{begin_marker(1, 5)}let a = f{END_MARKER}oo(1);"

        assert str(render_line(line)) == f"{HIT_5}let a = f</span>oo(1);"

    def test_text_inside_span_is_escaped(self) -> None:
        line = f"{begin_marker(0, 0)}<T>{END_MARKER}"

        assert str(render_line(line)) == (
            '<span class="hit" title="0 hits" data-count="0" data-segment-index="0">'
            "&lt;T&gt;</span>"
        )

    def test_empty_line(self) -> None:
        assert render_line("") == Markup("")

    def test_marker_text_in_source_stays_literal(self) -> None:
        lines = annotate_lines([f"x{END_MARKER}y"], [])

        assert str(render_line(lines[0])) == f"x{END_MARKER}y"

    def test_markup_survives_template_escaping(self) -> None:
        """Given rendered markup, when escaped again, then nothing changes."""
        from markupsafe import escape

        # Given
        rendered = render_line(f"{begin_marker(2, 1)}x{END_MARKER}")

        # When
        escaped = escape(rendered)

        # Then
        assert escaped == rendered


class TestPipeline:
    """Segments to HTML, the way file pages are built."""

    def test_end_to_end_example(self) -> None:
        """Given the a.rs fixture, when rendered, then both hit counts appear."""
        # Given
        segments = [CoverageSegment.from_array(s) for s in A_RS_SEGMENTS]
        lines = A_RS_SOURCE.split("\n")[:-1]

        # When
        html = render_lines(annotate_lines(lines, spans_for_rendering(segments)))

        # Then
        assert [str(line) for line in html] == [
            f"{HIT_5}let a = f</span>oo(1);",
            f"{HIT_3}bar();</span>",
            "}",
        ]
        assert 'title="5 hits"' in html[0]
        assert 'title="3 hits"' in html[1]
