"""Coverage model for llvm-cov JSON exports.

Mirrors the export schema: one CoverageExport holds CoverageMapping entries,
each with per-file segments/branches/expansions and per-function regions.
Positional arrays (segments, regions, branches) are decoded by named
constructors that check arity and field types before building anything.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


class CoverageParseError(Exception):
    """Error decoding coverage export data."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def _expect_int(value: Any, path: str) -> int:
    # bool is an int subclass; the export never uses one for the other
    if isinstance(value, bool) or not isinstance(value, int):
        raise CoverageParseError(f"expected integer, got {type(value).__name__}", path=path)
    return value


def _expect_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise CoverageParseError(f"expected boolean, got {type(value).__name__}", path=path)
    return value


def _expect_array(value: Any, arity: int, path: str) -> Sequence[Any]:
    if not isinstance(value, list):
        raise CoverageParseError(f"expected array, got {type(value).__name__}", path=path)
    if len(value) != arity:
        raise CoverageParseError(f"expected {arity} fields, got {len(value)}", path=path)
    return value


_SEMVER_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    """Semantic version of the export format (e.g. 2.0.1)."""

    major: int
    minor: int
    patch: int
    prerelease: str | None = None
    build: str | None = None

    @classmethod
    def parse(cls, value: str) -> SemVer:
        """Parse a semantic version string.

        Raises:
            CoverageParseError: If the string is not a valid semantic version.
        """
        match = _SEMVER_RE.match(value.strip())
        if not match:
            raise CoverageParseError(f"invalid semantic version {value!r}", path="version")
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"]),
            prerelease=match["prerelease"],
            build=match["build"],
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build:
            text += f"+{self.build}"
        return text


@dataclass(frozen=True, slots=True)
class CoverageSegment:
    """A point in source space where coverage changes.

    Segments arrive sorted by (line, column). A region entry opens a new
    span; following non-entry segments extend it.
    """

    line: int
    column: int
    count: int
    has_count: bool
    is_region_entry: bool
    is_gap_region: bool

    @classmethod
    def from_array(cls, value: Any, *, path: str = "segment") -> CoverageSegment:
        """Decode ``[line, col, count, has_count, is_region_entry, is_gap_region]``."""
        fields = _expect_array(value, 6, path)
        return cls(
            line=_expect_int(fields[0], f"{path}[0]"),
            column=_expect_int(fields[1], f"{path}[1]"),
            count=_expect_int(fields[2], f"{path}[2]"),
            has_count=_expect_bool(fields[3], f"{path}[3]"),
            is_region_entry=_expect_bool(fields[4], f"{path}[4]"),
            is_gap_region=_expect_bool(fields[5], f"{path}[5]"),
        )


@dataclass(frozen=True, slots=True)
class Region:
    """Function code region (8-field positional encoding)."""

    line_start: int
    column_start: int
    line_end: int
    column_end: int
    execution_count: int
    file_id: int
    expanded_file_id: int
    region_kind: int

    @classmethod
    def from_array(cls, value: Any, *, path: str = "region") -> Region:
        fields = _expect_array(value, 8, path)
        ints = [_expect_int(v, f"{path}[{i}]") for i, v in enumerate(fields)]
        return cls(*ints)


@dataclass(frozen=True, slots=True)
class BranchRegion:
    """Branch region (9-field positional encoding)."""

    line_start: int
    column_start: int
    line_end: int
    column_end: int
    execution_count: int
    false_execution_count: int
    file_id: int
    expanded_file_id: int
    region_kind: int

    @classmethod
    def from_array(cls, value: Any, *, path: str = "branch") -> BranchRegion:
        fields = _expect_array(value, 9, path)
        ints = [_expect_int(v, f"{path}[{i}]") for i, v in enumerate(fields)]
        return cls(*ints)


@dataclass(frozen=True, slots=True)
class Summary:
    """Aggregate counter for one coverage kind."""

    count: int
    covered: int
    percent: float
    not_covered: int | None = None


EMPTY_SUMMARY = Summary(count=0, covered=0, percent=0.0)


@dataclass(frozen=True, slots=True)
class FileCoverageSummary:
    """Per-file (or total) summary across coverage kinds."""

    lines: Summary
    functions: Summary
    instantiations: Summary
    regions: Summary
    branches: Summary = EMPTY_SUMMARY


@dataclass(frozen=True, slots=True)
class FileExpansion:
    """Macro expansion recorded for a file."""

    filenames: list[str]
    source_region: Region | None = None
    target_regions: list[Region] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FileCoverage:
    """Coverage data for a single source file."""

    filename: str
    segments: list[CoverageSegment]
    summary: FileCoverageSummary
    branches: list[BranchRegion] = field(default_factory=list)
    expansions: list[FileExpansion] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class FunctionCoverage:
    """Coverage for one function. ``name`` may be mangled."""

    name: str
    count: int
    regions: list[Region]
    filenames: list[str]
    branches: list[BranchRegion] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CoverageMapping:
    """One export data entry: files, functions and totals."""

    files: list[FileCoverage]
    functions: list[FunctionCoverage]
    totals: FileCoverageSummary


@dataclass(frozen=True, slots=True)
class CoverageExport:
    """Top-level llvm-cov export document."""

    report_type: str
    version: SemVer
    data: list[CoverageMapping]

    @property
    def primary(self) -> CoverageMapping:
        """First data entry. llvm-cov emits exactly one."""
        return self.data[0]
