from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from cssdts.report import Reporter


class CapturedReporter(Reporter):
    """出力を StringIO に溜める Reporter。"""

    def __init__(self, *, quiet: bool = False) -> None:
        self.out = io.StringIO()
        self.err = io.StringIO()
        super().__init__(
            quiet=quiet,
            console=Console(file=self.out, width=1000, highlight=False),
            err_console=Console(file=self.err, width=1000, highlight=False),
        )

    @property
    def stdout(self) -> str:
        return self.out.getvalue()

    @property
    def stderr(self) -> str:
        return self.err.getvalue()


@pytest.fixture()
def reporter() -> CapturedReporter:
    return CapturedReporter()


@pytest.fixture()
def styles(tmp_path: Path) -> Path:
    """a/b/c の3ファイルを置いた作業ディレクトリ。"""
    (tmp_path / "a.css").write_text(".alpha { color: red; }\n", encoding="utf-8")
    (tmp_path / "b.css").write_text(".bravo { color: blue; }\n", encoding="utf-8")
    (tmp_path / "c.css").write_text(".charlie { color: green; }\n", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def make_reporter():
    return CapturedReporter
