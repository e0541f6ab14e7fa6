"""HTML report assembly.

Usage:
    from covhtml.report import generate_report

    result = generate_report(export, Path("coverage-html"), Path("."), config=config)
    for failure in result.failures:
        ...
"""

from covhtml.report.demangle import Demangler
from covhtml.report.pages import (
    render_file_page,
    render_functions_page,
    render_index_page,
    render_stylesheet,
)
from covhtml.report.templating import RenderContext
from covhtml.report.utils import color_for_percent, sanitize_filename
from covhtml.report.writer import (
    FileRenderFailure,
    ReportResult,
    ensure_output_dir,
    generate_report,
)

__all__ = [
    "Demangler",
    "FileRenderFailure",
    "RenderContext",
    "ReportResult",
    "color_for_percent",
    "ensure_output_dir",
    "generate_report",
    "render_file_page",
    "render_functions_page",
    "render_index_page",
    "render_stylesheet",
    "sanitize_filename",
]
