"""Page renderers: annotated source, index and function list."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from markupsafe import Markup

from covhtml.annotate import annotate_lines, render_lines, spans_for_rendering
from covhtml.core.logging import get_logger
from covhtml.coverage.models import FileCoverage, FileCoverageSummary, FunctionCoverage
from covhtml.report.demangle import Demangler
from covhtml.report.templating import RenderContext
from covhtml.report.utils import (
    color_for_percent,
    line_count_width,
    read_source_lines,
    sanitize_filename,
    split_percent,
)

log = get_logger("pages")


def page_title(package: str | None) -> str:
    return f"Code Coverage for {package}" if package else "Code Coverage Report"


def matches_prefixes(filename: str, prefixes: Sequence[str]) -> bool:
    """True if no prefixes are configured or ``filename`` starts with one."""
    return not prefixes or any(filename.startswith(p) for p in prefixes)


def select_files(files: Sequence[FileCoverage], prefixes: Sequence[str]) -> list[FileCoverage]:
    return [f for f in files if matches_prefixes(f.filename, prefixes)]


def select_functions(
    functions: Sequence[FunctionCoverage], prefixes: Sequence[str]
) -> list[FunctionCoverage]:
    """Functions with at least one filename passing the prefix filter."""
    return [
        f for f in functions if any(matches_prefixes(name, prefixes) for name in f.filenames)
    ]


@dataclass(frozen=True, slots=True)
class SourceLine:
    """One rendered line of a file page."""

    number: int
    html: Markup


def annotate_file(file: FileCoverage, lines: Sequence[str]) -> list[SourceLine]:
    """Run the segment-to-markup pipeline over one file's source lines."""
    spans = spans_for_rendering(file.segments)
    annotated = annotate_lines(lines, spans)
    return [
        SourceLine(number=i, html=html)
        for i, html in enumerate(render_lines(annotated), start=1)
    ]


def render_file_page(file: FileCoverage, source_root: Path, ctx: RenderContext) -> str:
    """Render the annotated source page for one file.

    Raises:
        SourceError: If the source file cannot be read.
        SegmentOrderError: If the file's segments do not start with a region entry.
    """
    source_path = source_root / file.filename
    log.debug("file_source", path=str(source_path))
    lines = read_source_lines(file.filename, source_path)

    summary = file.summary
    context: dict[str, Any] = {
        "title": page_title(ctx.config.package),
        "package": ctx.config.package,
        "filename": file.filename,
        "lines": annotate_file(file, lines),
        "max_line_len": max((len(line) for line in lines), default=0),
        "line_count_width": line_count_width(len(lines)),
        "lines_instrumented": summary.lines.count,
        "lines_hit": summary.lines.covered,
        "lines_hit_percent": f"{summary.lines.percent:.2f}",
        "line_hit_class": color_for_percent(summary.lines.percent),
        "functions_instrumented": summary.functions.count,
        "functions_hit": summary.functions.covered,
        "functions_hit_percent": f"{summary.functions.percent:.2f}",
        "function_hit_class": color_for_percent(summary.functions.percent),
    }
    return ctx.render("file", context)


def _index_entry(file: FileCoverage, *, rendered: bool) -> dict[str, Any]:
    lines = file.summary.lines
    functions = file.summary.functions
    lines_n, lines_d = split_percent(lines.percent)
    funcs_n, funcs_d = split_percent(functions.percent)
    return {
        "name": file.filename,
        "link": sanitize_filename(file.filename) if rendered else None,
        "lines_count": lines.count,
        "lines_covered": lines.covered,
        "lines_percent": f"{lines.percent:.1f}",
        "lines_percent_n": lines_n,
        "lines_percent_d": lines_d,
        "line_hit_class": color_for_percent(lines.percent),
        "functions_count": functions.count,
        "functions_covered": functions.covered,
        "functions_percent": f"{functions.percent:.1f}",
        "functions_percent_n": funcs_n,
        "functions_percent_d": funcs_d,
        "function_hit_class": color_for_percent(functions.percent),
    }


def render_index_page(
    files: Sequence[FileCoverage],
    totals: FileCoverageSummary,
    input_mtime: datetime | float,
    ctx: RenderContext,
    *,
    failed: Collection[str] = (),
) -> str:
    """Render the index page. Files in ``failed`` are listed without a link."""
    context: dict[str, Any] = {
        "title": page_title(ctx.config.package),
        "package": ctx.config.package,
        "input_mtime": input_mtime,
        "total_line_hit_rate": f"{totals.lines.percent:.1f}",
        "total_line_hit_class": color_for_percent(totals.lines.percent),
        "total_func_hit_rate": f"{totals.functions.percent:.1f}",
        "total_func_hit_class": color_for_percent(totals.functions.percent),
        "files": [_index_entry(f, rendered=f.filename not in failed) for f in files],
    }
    return ctx.render("index", context)


def render_functions_page(
    functions: Sequence[FunctionCoverage],
    demangler: Demangler,
    ctx: RenderContext,
) -> str:
    """Render the function list, sorted by demangled name."""
    names = demangler.demangle_all(f.name for f in functions)
    entries = sorted(
        ({"name": names[f.name], "count": f.count} for f in functions),
        key=lambda entry: entry["name"],
    )
    context: dict[str, Any] = {
        "title": page_title(ctx.config.package),
        "package": ctx.config.package,
        "functions": entries,
    }
    return ctx.render("functions", context)


def render_stylesheet(ctx: RenderContext) -> str:
    return ctx.render("style", {})
