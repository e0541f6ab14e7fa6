"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI flags)
2. Environment variables (COVHTML__SECTION__KEY)
3. Config YAML (--config, or .covhtml.yaml in the working directory)
4. Global YAML (~/.config/covhtml/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    COVHTML__<SECTION>__<KEY>=<VALUE>

Examples:
    COVHTML__LOGGING__LEVEL=DEBUG
    COVHTML__RENDER__WORKERS=4
    COVHTML__DEMANGLE__TOOL=c++filt
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        COVHTML__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every span of every file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class RenderConfig(BaseModel):
    """Report rendering configuration.

    Env vars:
        COVHTML__RENDER__WORKERS: Parallel page-rendering workers
        COVHTML__RENDER__FAIL_FAST: Abort on the first unreadable source file
        COVHTML__RENDER__PACKAGE: Package label shown in page titles
    """

    workers: int = Field(
        default=1,
        description="Worker threads for per-file page rendering. 1 renders serially.",
    )
    fail_fast: bool = Field(
        default=False,
        description="Abort the run on the first missing or unreadable source file "
        "instead of skipping it.",
    )
    include_prefixes: list[str] = Field(
        default_factory=list,
        description="Only render files whose report filename starts with one of these "
        "prefixes. Empty renders every file.",
    )
    package: str | None = Field(
        default=None,
        description="Package name shown in page titles.",
    )
    timestamp_format: str = Field(
        default="%Y-%m-%d %H:%M:%S %z",
        description="strftime format for the report timestamp.",
    )
    template_dir: str | None = Field(
        default=None,
        description="Directory whose templates take precedence over the bundled ones.",
    )

    @field_validator("workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"workers must be >= 1, got {v}")
        return v


class DemangleConfig(BaseModel):
    """Function name demangling.

    Env vars:
        COVHTML__DEMANGLE__ENABLED: Pipe function names through the demangler
        COVHTML__DEMANGLE__TOOL: Demangler executable (rustfilt or c++filt)
    """

    enabled: bool = True
    tool: Literal["rustfilt", "c++filt"] = "rustfilt"
    timeout_sec: float = Field(
        default=30.0,
        description="Timeout for one batch demangler invocation.",
    )


class CovHtmlConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    demangle: DemangleConfig = Field(default_factory=DemangleConfig)
