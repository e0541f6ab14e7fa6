"""Report assembly: renders every page of a coverage report to disk.

Per-file pages share no mutable state, so they may be rendered on a
thread pool. Each worker writes only its own page, whose name comes from
``sanitize_filename``.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import structlog

from covhtml.config.models import CovHtmlConfig
from covhtml.core.errors import ReportError, SourceError
from covhtml.core.logging import get_logger
from covhtml.core.progress import progress
from covhtml.coverage.models import CoverageExport, FileCoverage
from covhtml.report.demangle import Demangler
from covhtml.report.pages import (
    render_file_page,
    render_functions_page,
    render_index_page,
    render_stylesheet,
    select_files,
    select_functions,
)
from covhtml.report.templating import RenderContext
from covhtml.report.utils import sanitize_filename

log = get_logger("writer")

INDEX_PAGE = "index.html"
FUNCTIONS_PAGE = "functions.html"
STYLESHEET = "style.css"


@dataclass(frozen=True, slots=True)
class FileRenderFailure:
    """A file whose page could not be rendered."""

    filename: str
    error: SourceError


@dataclass(slots=True)
class ReportResult:
    """Outcome of one report run."""

    output_dir: Path
    pages: list[Path] = field(default_factory=list)
    failures: list[FileRenderFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def ensure_output_dir(path: Path) -> None:
    """Create the output directory if needed.

    Raises:
        ReportError: If something other than a directory exists at ``path``.
    """
    if path.exists():
        if not path.is_dir():
            raise ReportError.output_not_directory(str(path))
        log.info("output_dir_exists", path=str(path))
        return
    path.mkdir(parents=True)
    log.info("output_dir_created", path=str(path))


def _warn_on_collisions(files: Sequence[FileCoverage]) -> None:
    by_page: dict[str, list[str]] = defaultdict(list)
    for f in files:
        by_page[sanitize_filename(f.filename)].append(f.filename)
    for page, names in by_page.items():
        if len(names) > 1:
            log.warning("output_page_collision", page=page, filenames=names)


def _render_one(
    file: FileCoverage, source_root: Path, output_dir: Path, ctx: RenderContext
) -> Path:
    with structlog.contextvars.bound_contextvars(filename=file.filename):
        html = render_file_page(file, source_root, ctx)
        target = output_dir / sanitize_filename(file.filename)
        try:
            target.write_text(html, encoding="utf-8")
        except OSError as e:
            raise SourceError.page_write_failed(file.filename, str(target), str(e)) from e
        log.debug("file_rendered", page=target.name)
        return target


def _render_serial(
    files: Sequence[FileCoverage],
    source_root: Path,
    output_dir: Path,
    ctx: RenderContext,
    result: ReportResult,
) -> None:
    for file in progress(files, desc="Rendering", unit="files"):
        try:
            result.pages.append(_render_one(file, source_root, output_dir, ctx))
        except SourceError as e:
            if ctx.config.fail_fast:
                raise
            log.warning("file_render_failed", filename=file.filename, error=str(e))
            result.failures.append(FileRenderFailure(file.filename, e))


def _render_parallel(
    files: Sequence[FileCoverage],
    source_root: Path,
    output_dir: Path,
    ctx: RenderContext,
    result: ReportResult,
) -> None:
    with ThreadPoolExecutor(max_workers=ctx.config.workers) as pool:
        futures = {
            pool.submit(_render_one, f, source_root, output_dir, ctx): f for f in files
        }
        if ctx.config.fail_fast:
            done, _ = wait(futures, return_when=FIRST_EXCEPTION)
            for future in done:
                exc = future.exception()
                if exc is not None:
                    pool.shutdown(wait=True, cancel_futures=True)
                    raise exc

        # Preserve report order in the result regardless of completion order
        for future in progress(list(futures), desc="Rendering", unit="files"):
            file = futures[future]
            try:
                result.pages.append(future.result())
            except SourceError as e:
                if ctx.config.fail_fast:
                    raise
                log.warning("file_render_failed", filename=file.filename, error=str(e))
                result.failures.append(FileRenderFailure(file.filename, e))


def generate_report(
    export: CoverageExport,
    output_dir: Path,
    source_root: Path,
    *,
    config: CovHtmlConfig | None = None,
    input_mtime: datetime | float | None = None,
    demangler: Demangler | None = None,
) -> ReportResult:
    """Write every page of the report into ``output_dir``.

    Args:
        export: Decoded coverage export.
        output_dir: Destination directory (created if missing).
        source_root: Directory that report filenames are relative to.
        config: Resolved configuration; defaults apply when omitted.
        input_mtime: Report timestamp shown on the index page. Defaults to now.
        demangler: Function name demangler; built from config when omitted.

    Returns:
        ReportResult listing written pages and per-file failures.

    Raises:
        ReportError: If the output path is not a directory.
        SourceError: On the first unreadable source when fail_fast is set.
    """
    config = config or CovHtmlConfig()
    ctx = RenderContext(config.render)
    demangler = demangler or Demangler(config.demangle)
    mapping = export.primary
    prefixes = config.render.include_prefixes

    ensure_output_dir(output_dir)
    result = ReportResult(output_dir=output_dir)

    files = select_files(mapping.files, prefixes)
    log.info("report_files_selected", selected=len(files), total=len(mapping.files))
    _warn_on_collisions(files)

    if config.render.workers > 1 and len(files) > 1:
        _render_parallel(files, source_root, output_dir, ctx, result)
    else:
        _render_serial(files, source_root, output_dir, ctx, result)

    failed = {failure.filename for failure in result.failures}
    index_html = render_index_page(
        files,
        mapping.totals,
        input_mtime if input_mtime is not None else datetime.now().astimezone(),
        ctx,
        failed=failed,
    )
    result.pages.append(_write(output_dir / INDEX_PAGE, index_html))

    functions = select_functions(mapping.functions, prefixes)
    result.pages.append(
        _write(output_dir / FUNCTIONS_PAGE, render_functions_page(functions, demangler, ctx))
    )
    result.pages.append(_write(output_dir / STYLESHEET, render_stylesheet(ctx)))

    log.info(
        "report_written",
        output_dir=str(output_dir),
        pages=len(result.pages),
        failures=len(result.failures),
    )
    return result


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path
