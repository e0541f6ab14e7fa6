"""llvm-cov export model and parsing.

Usage:
    from covhtml.coverage import load_report

    export = load_report(Path("coverage.json"))
    for file in export.primary.files:
        ...
"""

from covhtml.coverage.models import (
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
from covhtml.coverage.parser import (
    EXPORT_TYPE,
    UnsupportedVersionError,
    load_report,
    parse_report,
)
from covhtml.coverage.summary import build_summary, build_text_summary

__all__ = [
    # Models
    "BranchRegion",
    "CoverageExport",
    "CoverageMapping",
    "CoverageParseError",
    "CoverageSegment",
    "FileCoverage",
    "FileCoverageSummary",
    "FileExpansion",
    "FunctionCoverage",
    "Region",
    "SemVer",
    "Summary",
    # Parsing
    "EXPORT_TYPE",
    "UnsupportedVersionError",
    "load_report",
    "parse_report",
    # Summary
    "build_summary",
    "build_text_summary",
]
