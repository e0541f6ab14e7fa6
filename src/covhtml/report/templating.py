"""Jinja2 template service for report pages.

A RenderContext is constructed once per run and passed to every page
renderer. Bundled templates live in ``covhtml/report/templates``; a user
template directory, when configured, takes precedence.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    select_autoescape,
)

from covhtml.config.models import RenderConfig

PAGES: dict[str, str] = {
    "index": "index.html.j2",
    "file": "file.html.j2",
    "functions": "functions.html.j2",
    "style": "style.css",
}


class RenderContext:
    """Owns the template environment for one report run."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or RenderConfig()

        loader: BaseLoader = PackageLoader("covhtml.report", "templates")
        if self.config.template_dir is not None:
            loader = ChoiceLoader([FileSystemLoader(self.config.template_dir), loader])

        self.env = Environment(
            loader=loader,
            autoescape=select_autoescape(enabled_extensions=("html", "html.j2")),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["timestamp"] = self.format_timestamp

    def format_timestamp(self, value: datetime | float) -> str:
        """Format a datetime or POSIX timestamp with the configured format."""
        if not isinstance(value, datetime):
            value = datetime.fromtimestamp(value).astimezone()
        return value.strftime(self.config.timestamp_format)

    def render(self, page: str, context: dict[str, Any]) -> str:
        """Render a named page ("index", "file", "functions" or "style").

        Raises:
            KeyError: For an unknown page name.
        """
        template = self.env.get_template(PAGES[page])
        return template.render(**context)
