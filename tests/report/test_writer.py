"""Tests for report assembly."""

from pathlib import Path
from typing import Any

import pytest

from covhtml.config.models import CovHtmlConfig, DemangleConfig, RenderConfig
from covhtml.core.errors import ErrorCode, ReportError, SourceError
from covhtml.coverage import CoverageExport, parse_report
from covhtml.report.writer import (
    FUNCTIONS_PAGE,
    INDEX_PAGE,
    STYLESHEET,
    ensure_output_dir,
    generate_report,
)

HIT_5 = '<span class="hit" title="5 hits" data-count="5" data-segment-index="1">'
HIT_3 = '<span class="hit" title="3 hits" data-count="3" data-segment-index="0">'


def make_config(**render: Any) -> CovHtmlConfig:
    return CovHtmlConfig(
        render=RenderConfig(**render),
        demangle=DemangleConfig(enabled=False),
    )


@pytest.fixture
def export(export_data: dict[str, Any]) -> CoverageExport:
    return parse_report(export_data)


class TestEnsureOutputDir:
    """Tests for output directory handling."""

    def test_creates_nested(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b"

        ensure_output_dir(target)

        assert target.is_dir()

    def test_existing_dir_reused(self, tmp_path: Path) -> None:
        (tmp_path / "keep.txt").write_text("x")

        ensure_output_dir(tmp_path)

        assert (tmp_path / "keep.txt").exists()

    def test_file_in_the_way(self, tmp_path: Path) -> None:
        target = tmp_path / "out"
        target.write_text("not a dir")

        with pytest.raises(ReportError) as exc_info:
            ensure_output_dir(target)

        assert exc_info.value.code == ErrorCode.REPORT_OUTPUT_NOT_DIRECTORY


class TestGenerateReport:
    """End-to-end report generation."""

    def test_writes_every_page(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        """Given a two-file export, when generating, then all pages are written."""
        # Given
        out = tmp_path / "html"

        # When
        result = generate_report(export, out, source_tree, config=make_config(), input_mtime=0.0)

        # Then
        assert result.ok
        assert [p.name for p in result.pages] == [
            "src_a.rs.html",
            "src_lib_mod.rs.html",
            INDEX_PAGE,
            FUNCTIONS_PAGE,
            STYLESHEET,
        ]
        for page in result.pages:
            assert page.is_file()

    def test_file_page_has_hit_counts(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "html"

        generate_report(export, out, source_tree, config=make_config())

        html = (out / "src_a.rs.html").read_text(encoding="utf-8")
        assert f"{HIT_5}let a = f</span>oo(1);" in html
        assert f"{HIT_3}bar();</span>" in html

    def test_missing_source_is_isolated(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        """Given one missing source, when generating, then the rest still renders."""
        # Given
        (source_tree / "src" / "lib" / "mod.rs").unlink()
        out = tmp_path / "html"

        # When
        result = generate_report(export, out, source_tree, config=make_config())

        # Then
        assert not result.ok
        assert [f.filename for f in result.failures] == ["src/lib/mod.rs"]
        assert result.failures[0].error.code == ErrorCode.SOURCE_NOT_FOUND
        assert (out / "src_a.rs.html").is_file()
        assert not (out / "src_lib_mod.rs.html").exists()
        index = (out / INDEX_PAGE).read_text(encoding="utf-8")
        assert '<span class="missing" title="source unavailable">src/lib/mod.rs</span>' in index

    def test_fail_fast_aborts(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        (source_tree / "src" / "a.rs").unlink()
        out = tmp_path / "html"

        with pytest.raises(SourceError):
            generate_report(export, out, source_tree, config=make_config(fail_fast=True))

        assert not (out / INDEX_PAGE).exists()

    def test_parallel_matches_serial(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        serial = generate_report(
            export, tmp_path / "serial", source_tree, config=make_config(), input_mtime=0.0
        )
        parallel = generate_report(
            export,
            tmp_path / "parallel",
            source_tree,
            config=make_config(workers=4),
            input_mtime=0.0,
        )

        assert [p.name for p in parallel.pages] == [p.name for p in serial.pages]
        for page in serial.pages:
            assert (tmp_path / "parallel" / page.name).read_text(encoding="utf-8") == (
                page.read_text(encoding="utf-8")
            )

    def test_parallel_failure_isolated(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        (source_tree / "src" / "a.rs").unlink()

        result = generate_report(
            export, tmp_path / "html", source_tree, config=make_config(workers=2)
        )

        assert [f.filename for f in result.failures] == ["src/a.rs"]
        assert (tmp_path / "html" / "src_lib_mod.rs.html").is_file()

    def test_parallel_fail_fast(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        (source_tree / "src" / "a.rs").unlink()

        with pytest.raises(SourceError):
            generate_report(
                export,
                tmp_path / "html",
                source_tree,
                config=make_config(workers=2, fail_fast=True),
            )

    def test_include_prefixes(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "html"

        result = generate_report(
            export, out, source_tree, config=make_config(include_prefixes=["src/lib/"])
        )

        assert "src_a.rs.html" not in [p.name for p in result.pages]
        functions = (out / FUNCTIONS_PAGE).read_text(encoding="utf-8")
        assert "<code>main</code>" in functions
        assert "_RNvCs1_1a3foo" not in functions

    def test_output_path_is_file(
        self, export: CoverageExport, source_tree: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "html"
        out.write_text("occupied")

        with pytest.raises(ReportError):
            generate_report(export, out, source_tree, config=make_config())

    def test_default_config(
        self,
        export: CoverageExport,
        source_tree: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("covhtml.report.demangle.shutil.which", lambda _tool: None)

        result = generate_report(export, tmp_path / "html", source_tree)

        assert result.ok
        assert (tmp_path / "html" / INDEX_PAGE).is_file()
