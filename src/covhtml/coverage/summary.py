"""Structured and text summaries of an export's totals.

Output schema for build_summary:
{
    "type": str,
    "version": str,
    "totals": {
        "lines": {"count": int, "covered": int, "percent": float},
        "functions": {...},
        "instantiations": {...},
        "regions": {...},
        "branches": {...}
    },
    "files": [
        {"filename": str, "lines_percent": float, "functions_percent": float},
        ...
    ]
}
"""

from typing import Any

from covhtml.coverage.models import CoverageExport, FileCoverageSummary, Summary

_KINDS = ("lines", "functions", "instantiations", "regions", "branches")


def _summary_dict(summary: Summary) -> dict[str, Any]:
    return {
        "count": summary.count,
        "covered": summary.covered,
        "percent": round(summary.percent, 2),
    }


def _totals_dict(totals: FileCoverageSummary) -> dict[str, Any]:
    return {kind: _summary_dict(getattr(totals, kind)) for kind in _KINDS}


def build_summary(export: CoverageExport, *, include_files: bool = True) -> dict[str, Any]:
    """Build a JSON-serializable summary of the export's first data entry.

    Files are sorted by line coverage, lowest first.
    """
    mapping = export.primary
    result: dict[str, Any] = {
        "type": export.report_type,
        "version": str(export.version),
        "totals": _totals_dict(mapping.totals),
    }

    if include_files:
        files = [
            {
                "filename": f.filename,
                "lines_percent": round(f.summary.lines.percent, 2),
                "functions_percent": round(f.summary.functions.percent, 2),
            }
            for f in mapping.files
        ]
        files.sort(key=lambda f: f["lines_percent"])
        result["files"] = files

    return result


def build_text_summary(export: CoverageExport) -> str:
    """One-line summary for terminal output."""
    totals = export.primary.totals
    if totals.lines.count == 0:
        return "No coverage data"

    return (
        f"Lines: {totals.lines.percent:.1f}% ({totals.lines.covered}/{totals.lines.count})  "
        f"Functions: {totals.functions.percent:.1f}% "
        f"({totals.functions.covered}/{totals.functions.count})"
    )
