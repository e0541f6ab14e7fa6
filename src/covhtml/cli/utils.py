"""CLI utilities."""

from pathlib import Path
from typing import Any

import click

from covhtml.config.loader import load_config
from covhtml.config.models import CovHtmlConfig
from covhtml.core.errors import ConfigError, ReportError
from covhtml.coverage import (
    CoverageExport,
    CoverageParseError,
    UnsupportedVersionError,
    load_report,
)


def load_export(path: Path) -> CoverageExport:
    """Load a coverage export, turning decode failures into CLI errors.

    Raises:
        click.ClickException: If the report is missing, malformed or of an
            unsupported version.
    """
    if not path.exists():
        raise click.ClickException(str(ReportError.not_found(str(path))))
    try:
        return load_report(path)
    except UnsupportedVersionError as e:
        raise click.ClickException(
            str(ReportError.unsupported_version(str(path), str(e.version)))
        ) from e
    except CoverageParseError as e:
        raise click.ClickException(str(ReportError.malformed(str(path), str(e)))) from e


def resolve_config(config_path: Path | None, **overrides: Any) -> CovHtmlConfig:
    """Load config, dropping unset CLI overrides so lower layers apply."""
    sections: dict[str, dict[str, Any]] = {}
    for key, value in overrides.items():
        section, _, name = key.partition("__")
        if value is None or value == ():
            continue
        sections.setdefault(section, {})[name] = list(value) if isinstance(value, tuple) else value
    try:
        return load_config(config_path, **sections)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
