"""Core module exports."""

from covhtml.core.errors import (
    ConfigError,
    CovHtmlError,
    ErrorCode,
    ReportError,
    SourceError,
)
from covhtml.core.logging import configure_logging, get_logger
from covhtml.core.progress import pluralize, progress, status, task

__all__ = [
    # Errors
    "ConfigError",
    "CovHtmlError",
    "ErrorCode",
    "ReportError",
    "SourceError",
    # Logging
    "configure_logging",
    "get_logger",
    # Progress
    "pluralize",
    "progress",
    "status",
    "task",
]
