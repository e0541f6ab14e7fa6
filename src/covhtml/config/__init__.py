"""Config module exports."""

from covhtml.config.loader import load_config
from covhtml.config.models import (
    CovHtmlConfig,
    DemangleConfig,
    LoggingConfig,
    LogOutputConfig,
    RenderConfig,
)

__all__ = [
    "load_config",
    "CovHtmlConfig",
    "DemangleConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "RenderConfig",
]
