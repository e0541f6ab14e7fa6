"""llvm-cov JSON export parser.

``llvm-cov export -format=text`` produces:
{
  "type": "llvm.coverage.json.export",
  "version": "2.0.1",
  "data": [
    {
      "files": [
        {
          "filename": "src/lib.rs",
          "segments": [[line, col, count, has_count, is_entry, is_gap], ...],
          "branches": [[l1, c1, l2, c2, count, false_count, file, exp_file, kind], ...],
          "expansions": [{"filenames": [...], "source_region": [...], ...}],
          "summary": {"lines": {"count": .., "covered": .., "percent": ..}, ...}
        }
      ],
      "functions": [
        {"name": "_RNv...", "count": 3, "regions": [[8 ints], ...], "filenames": [...]}
      ],
      "totals": {...same shape as a file summary...}
    }
  ]
}
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from covhtml.coverage.models import (
    EMPTY_SUMMARY,
    BranchRegion,
    CoverageExport,
    CoverageMapping,
    CoverageParseError,
    CoverageSegment,
    FileCoverage,
    FileCoverageSummary,
    FileExpansion,
    FunctionCoverage,
    Region,
    SemVer,
    Summary,
)

EXPORT_TYPE = "llvm.coverage.json.export"
SUPPORTED_MAJOR_VERSION = 2


class UnsupportedVersionError(CoverageParseError):
    """Export declares a format version this parser does not understand."""

    def __init__(self, version: SemVer) -> None:
        self.version = version
        super().__init__(
            f"unsupported export version {version} "
            f"(expected {SUPPORTED_MAJOR_VERSION}.x.y)",
            path="version",
        )


def _get(obj: dict[str, Any], key: str, path: str) -> Any:
    if key not in obj:
        raise CoverageParseError(f"missing key {key!r}", path=path)
    return obj[key]


def _expect_object(value: Any, path: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CoverageParseError(f"expected object, got {type(value).__name__}", path=path)
    return value


def _expect_list(value: Any, path: str) -> list[Any]:
    if not isinstance(value, list):
        raise CoverageParseError(f"expected array, got {type(value).__name__}", path=path)
    return value


def _expect_str(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise CoverageParseError(f"expected string, got {type(value).__name__}", path=path)
    return value


def _expect_count(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CoverageParseError(f"expected integer, got {type(value).__name__}", path=path)
    return value


def _expect_number(value: Any, path: str) -> float:
    # llvm's JSON writer prints 100.0 as 100
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise CoverageParseError(f"expected number, got {type(value).__name__}", path=path)
    return float(value)


def _parse_summary(value: Any, path: str) -> Summary:
    obj = _expect_object(value, path)
    not_covered = obj.get("notcovered")
    return Summary(
        count=_expect_count(_get(obj, "count", path), f"{path}.count"),
        covered=_expect_count(_get(obj, "covered", path), f"{path}.covered"),
        percent=_expect_number(_get(obj, "percent", path), f"{path}.percent"),
        not_covered=(
            None if not_covered is None else _expect_count(not_covered, f"{path}.notcovered")
        ),
    )


def _parse_file_summary(value: Any, path: str) -> FileCoverageSummary:
    obj = _expect_object(value, path)
    branches = obj.get("branches")
    return FileCoverageSummary(
        lines=_parse_summary(_get(obj, "lines", path), f"{path}.lines"),
        functions=_parse_summary(_get(obj, "functions", path), f"{path}.functions"),
        instantiations=_parse_summary(
            _get(obj, "instantiations", path), f"{path}.instantiations"
        ),
        regions=_parse_summary(_get(obj, "regions", path), f"{path}.regions"),
        branches=(
            EMPTY_SUMMARY if branches is None else _parse_summary(branches, f"{path}.branches")
        ),
    )


def _parse_regions(value: Any, path: str) -> list[Region]:
    items = _expect_list(value, path)
    return [Region.from_array(item, path=f"{path}[{i}]") for i, item in enumerate(items)]


def _parse_branches(value: Any, path: str) -> list[BranchRegion]:
    items = _expect_list(value, path)
    return [BranchRegion.from_array(item, path=f"{path}[{i}]") for i, item in enumerate(items)]


def _parse_filenames(value: Any, path: str) -> list[str]:
    items = _expect_list(value, path)
    return [_expect_str(item, f"{path}[{i}]") for i, item in enumerate(items)]


def _parse_expansion(value: Any, path: str) -> FileExpansion:
    obj = _expect_object(value, path)
    source_region = obj.get("source_region")
    return FileExpansion(
        filenames=_parse_filenames(_get(obj, "filenames", path), f"{path}.filenames"),
        source_region=(
            None
            if source_region is None
            else Region.from_array(source_region, path=f"{path}.source_region")
        ),
        target_regions=_parse_regions(obj.get("target_regions", []), f"{path}.target_regions"),
    )


def _parse_segments(value: Any, path: str) -> list[CoverageSegment]:
    items = _expect_list(value, path)
    segments = [
        CoverageSegment.from_array(item, path=f"{path}[{i}]") for i, item in enumerate(items)
    ]
    if segments and not segments[0].is_region_entry:
        raise CoverageParseError("first segment must be a region entry", path=f"{path}[0]")
    return segments


def _parse_file(value: Any, path: str) -> FileCoverage:
    obj = _expect_object(value, path)
    expansions = _expect_list(obj.get("expansions", []), f"{path}.expansions")
    return FileCoverage(
        filename=_expect_str(_get(obj, "filename", path), f"{path}.filename"),
        segments=_parse_segments(_get(obj, "segments", path), f"{path}.segments"),
        summary=_parse_file_summary(_get(obj, "summary", path), f"{path}.summary"),
        branches=_parse_branches(obj.get("branches", []), f"{path}.branches"),
        expansions=[
            _parse_expansion(exp, f"{path}.expansions[{i}]") for i, exp in enumerate(expansions)
        ],
    )


def _parse_function(value: Any, path: str) -> FunctionCoverage:
    obj = _expect_object(value, path)
    return FunctionCoverage(
        name=_expect_str(_get(obj, "name", path), f"{path}.name"),
        count=_expect_count(_get(obj, "count", path), f"{path}.count"),
        regions=_parse_regions(_get(obj, "regions", path), f"{path}.regions"),
        filenames=_parse_filenames(_get(obj, "filenames", path), f"{path}.filenames"),
        branches=_parse_branches(obj.get("branches", []), f"{path}.branches"),
    )


def _parse_mapping(value: Any, path: str) -> CoverageMapping:
    obj = _expect_object(value, path)
    files = _expect_list(_get(obj, "files", path), f"{path}.files")
    functions = _expect_list(obj.get("functions", []), f"{path}.functions")
    return CoverageMapping(
        files=[_parse_file(f, f"{path}.files[{i}]") for i, f in enumerate(files)],
        functions=[
            _parse_function(f, f"{path}.functions[{i}]") for i, f in enumerate(functions)
        ],
        totals=_parse_file_summary(_get(obj, "totals", path), f"{path}.totals"),
    )


def parse_report(data: Any) -> CoverageExport:
    """Decode an already-loaded export document.

    Raises:
        CoverageParseError: On wrong shapes, arity or field types.
        UnsupportedVersionError: If the version is not 2.x.y.
    """
    obj = _expect_object(data, "$")
    report_type = _expect_str(_get(obj, "type", "$"), "type")
    if report_type != EXPORT_TYPE:
        raise CoverageParseError(
            f"unexpected report type {report_type!r} (expected {EXPORT_TYPE!r})", path="type"
        )

    version = SemVer.parse(_expect_str(_get(obj, "version", "$"), "version"))
    if version.major != SUPPORTED_MAJOR_VERSION:
        raise UnsupportedVersionError(version)

    entries = _expect_list(_get(obj, "data", "$"), "data")
    if not entries:
        raise CoverageParseError("export contains no data entries", path="data")

    return CoverageExport(
        report_type=report_type,
        version=version,
        data=[_parse_mapping(entry, f"data[{i}]") for i, entry in enumerate(entries)],
    )


def load_report(path: Path) -> CoverageExport:
    """Read and decode an llvm-cov JSON export from disk.

    Raises:
        CoverageParseError: If the file cannot be read or decoded.
    """
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CoverageParseError(f"Failed to read coverage JSON {path}: {e}") from e

    return parse_report(data)
