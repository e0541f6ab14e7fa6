"""covhtml CLI - covhtml command."""

import click

from covhtml import __version__
from covhtml.cli.render import render_command
from covhtml.cli.summary import summary_command
from covhtml.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="covhtml")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """covhtml - HTML reports for llvm-cov JSON coverage exports."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(render_command, name="render")
cli.add_command(summary_command, name="summary")


if __name__ == "__main__":
    cli()
