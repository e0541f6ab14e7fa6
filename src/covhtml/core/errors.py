"""covhtml error types with typed error codes.

Error code ranges:
- 1xxx: Report (malformed or unsupported coverage export)
- 2xxx: Config
- 3xxx: Source (per-file, recoverable)
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Report (1xxx)
    REPORT_MALFORMED = 1001
    REPORT_UNSUPPORTED_VERSION = 1002
    REPORT_NOT_FOUND = 1003
    REPORT_OUTPUT_NOT_DIRECTORY = 1004

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Source (3xxx)
    SOURCE_NOT_FOUND = 3001
    SOURCE_UNREADABLE = 3002
    PAGE_WRITE_FAILED = 3003


@dataclass(frozen=True, slots=True)
class CovHtmlError(Exception):
    """Base error with structured context for CLI and log output."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'REPORT_MALFORMED')."""
        return self.code.name

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ReportError(CovHtmlError):
    """Coverage export could not be used. Aborts the whole run."""

    @classmethod
    def malformed(cls, path: str, reason: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_MALFORMED,
            message=f"Malformed coverage report {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def unsupported_version(cls, path: str, version: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_UNSUPPORTED_VERSION,
            message=f"Unsupported coverage export version {version} in {path}",
            details={"path": path, "version": version},
        )

    @classmethod
    def not_found(cls, path: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_NOT_FOUND,
            message=f"Coverage report not found: {path}",
            details={"path": path},
        )

    @classmethod
    def output_not_directory(cls, path: str) -> "ReportError":
        return cls(
            code=ErrorCode.REPORT_OUTPUT_NOT_DIRECTORY,
            message=f"Non-directory exists at output path: {path}",
            details={"path": path},
        )


class ConfigError(CovHtmlError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class SourceError(CovHtmlError):
    """A source file named by the report could not be read."""

    @classmethod
    def not_found(cls, filename: str, path: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Source file not found for {filename}: {path}",
            details={"filename": filename, "path": path},
        )

    @classmethod
    def unreadable(cls, filename: str, path: str, reason: str) -> "SourceError":
        return cls(
            code=ErrorCode.SOURCE_UNREADABLE,
            message=f"Cannot read source file {path}: {reason}",
            details={"filename": filename, "path": path, "reason": reason},
        )

    @classmethod
    def page_write_failed(cls, filename: str, path: str, reason: str) -> "SourceError":
        return cls(
            code=ErrorCode.PAGE_WRITE_FAILED,
            message=f"Cannot write page for {filename} to {path}: {reason}",
            details={"filename": filename, "path": path, "reason": reason},
        )

