"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides small llvm-cov export documents shared across test modules.
"""

import json
import logging
import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

for module_name in list(sys.modules.keys()):
    if module_name.startswith("covhtml"):
        del sys.modules[module_name]


@pytest.fixture(autouse=True)
def reset_logging_config() -> Generator[None, None, None]:
    """Drop handlers left behind by commands that configured logging."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler).__module__.startswith("_pytest"):
            continue
        root.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def make_summary(count: int = 0, covered: int = 0, percent: float | None = None) -> dict[str, Any]:
    """Build one summary object the way llvm-cov writes it."""
    if percent is None:
        percent = (covered / count * 100.0) if count else 0.0
    return {"count": count, "covered": covered, "notcovered": count - covered, "percent": percent}


def make_file_summary(
    lines: tuple[int, int] = (0, 0), functions: tuple[int, int] = (0, 0)
) -> dict[str, Any]:
    return {
        "lines": make_summary(*lines),
        "functions": make_summary(*functions),
        "instantiations": make_summary(*functions),
        "regions": make_summary(),
        "branches": make_summary(),
    }


A_RS_SOURCE = "let a = foo(1);\nbar();\n}\n"
A_RS_SEGMENTS = [
    [1, 1, 5, True, True, False],
    [1, 10, 0, True, False, False],
    [2, 1, 3, True, True, False],
]

MOD_RS_SOURCE = "// привет мир\nfn main() {\n    println!(\"héllo\");\n}\n"
MOD_RS_SEGMENTS = [
    [2, 1, 1, True, True, False],
    [3, 5, 1, True, True, False],
    [3, 21, 0, True, False, False],
    [4, 2, 0, True, False, False],
]


@pytest.fixture
def export_data() -> dict[str, Any]:
    """A two-file llvm-cov export with one function per file."""
    return {
        "type": "llvm.coverage.json.export",
        "version": "2.0.1",
        "data": [
            {
                "files": [
                    {
                        "filename": "src/a.rs",
                        "segments": [list(s) for s in A_RS_SEGMENTS],
                        "branches": [],
                        "expansions": [],
                        "summary": make_file_summary(lines=(3, 2), functions=(1, 1)),
                    },
                    {
                        "filename": "src/lib/mod.rs",
                        "segments": [list(s) for s in MOD_RS_SEGMENTS],
                        "branches": [[3, 5, 3, 20, 1, 0, 0, 0, 4]],
                        "expansions": [
                            {
                                "filenames": ["src/lib/mod.rs"],
                                "source_region": [3, 5, 3, 13, 1, 0, 1, 1],
                                "target_regions": [[1, 1, 1, 10, 1, 1, 0, 0]],
                            }
                        ],
                        "summary": make_file_summary(lines=(3, 3), functions=(1, 1)),
                    },
                ],
                "functions": [
                    {
                        "name": "_RNvCs1_1a3foo",
                        "count": 5,
                        "regions": [[1, 1, 1, 10, 5, 0, 0, 0]],
                        "branches": [],
                        "filenames": ["src/a.rs"],
                    },
                    {
                        "name": "main",
                        "count": 1,
                        "regions": [[2, 11, 4, 2, 1, 0, 0, 0]],
                        "filenames": ["src/lib/mod.rs"],
                    },
                ],
                "totals": make_file_summary(lines=(6, 5), functions=(2, 2)),
            }
        ],
    }


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Source files matching ``export_data``."""
    root = tmp_path / "project"
    (root / "src" / "lib").mkdir(parents=True)
    (root / "src" / "a.rs").write_text(A_RS_SOURCE, encoding="utf-8")
    (root / "src" / "lib" / "mod.rs").write_text(MOD_RS_SOURCE, encoding="utf-8")
    return root


@pytest.fixture
def write_report(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write an export document to disk and return its path."""

    def _write(data: dict[str, Any], name: str = "coverage.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
