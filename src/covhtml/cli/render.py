"""covhtml render command - write the HTML report."""

from pathlib import Path

import click

from covhtml.annotate import SegmentOrderError
from covhtml.cli.utils import load_export, resolve_config
from covhtml.core.errors import ReportError, SourceError
from covhtml.core.logging import configure_logging, get_logger
from covhtml.core.progress import pluralize, status, task
from covhtml.report import generate_report

log = get_logger("cli.render")


@click.command()
@click.option(
    "-i",
    "--input",
    "input_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="llvm-cov JSON export to read",
)
@click.option(
    "-o",
    "--output-directory",
    "output_dir",
    required=True,
    type=click.Path(path_type=Path),
    help="Directory to write the report into (created if missing)",
)
@click.option(
    "-p",
    "--source-prefix",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory that report filenames are relative to [default: the input's directory]",
)
@click.option("--package", default=None, help="Package name shown in page titles")
@click.option(
    "--include",
    "include_prefixes",
    multiple=True,
    help="Only render files whose name starts with this prefix (repeatable)",
)
@click.option("-j", "--workers", type=click.IntRange(min=1), default=None, help="Render workers")
@click.option(
    "--fail-fast/--keep-going",
    default=None,
    help="Abort on the first unreadable source file",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file",
)
@click.pass_context
def render_command(
    ctx: click.Context,
    input_path: Path,
    output_dir: Path,
    source_prefix: Path | None,
    package: str | None,
    include_prefixes: tuple[str, ...],
    workers: int | None,
    fail_fast: bool | None,
    config_path: Path | None,
) -> None:
    """Render an HTML coverage report from an llvm-cov JSON export."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    config = resolve_config(
        config_path,
        logging__level="DEBUG" if verbose else None,
        render__package=package,
        render__include_prefixes=include_prefixes,
        render__workers=workers,
        render__fail_fast=fail_fast,
    )
    configure_logging(config=config.logging)

    log.info("report_loading", path=str(input_path))
    export = load_export(input_path)
    mapping = export.primary
    log.info(
        "report_loaded",
        version=str(export.version),
        entries=len(export.data),
        files=len(mapping.files),
        functions=len(mapping.functions),
    )

    source_root = source_prefix if source_prefix is not None else input_path.parent

    try:
        with task(f"Rendering report into {output_dir}"):
            result = generate_report(
                export,
                output_dir,
                source_root,
                config=config,
                input_mtime=input_path.stat().st_mtime,
            )
    except (ReportError, SourceError) as e:
        raise click.ClickException(str(e)) from e
    except SegmentOrderError as e:
        raise click.ClickException(str(ReportError.malformed(str(input_path), str(e)))) from e

    status(f"Wrote {pluralize(len(result.pages), 'page')}", style="success")
    for failure in result.failures:
        status(f"{failure.filename}: {failure.error.message}", style="warning", indent=2)

    if not result.ok:
        status(
            f"Skipped {pluralize(len(result.failures), 'file')} with unreadable sources",
            style="error",
        )
        ctx.exit(1)
