"""covhtml summary command - print coverage totals without rendering."""

import json
from pathlib import Path

import click

from covhtml.cli.utils import load_export
from covhtml.coverage import build_summary, build_text_summary


@click.command()
@click.argument("input_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--files/--no-files", default=True, help="Include per-file rates in JSON")
def summary_command(input_path: Path, as_json: bool, files: bool) -> None:
    """Print coverage totals from an llvm-cov JSON export.

    INPUT_PATH is the file written by `llvm-cov export -format=text`.
    """
    export = load_export(input_path)

    if as_json:
        click.echo(json.dumps(build_summary(export, include_files=files), indent=2))
    else:
        click.echo(build_text_summary(export))
