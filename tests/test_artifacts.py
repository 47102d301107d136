"""出力パス導出のテスト。"""

from pathlib import Path

from cssdts.artifacts import output_path
from cssdts.config import Config


def test_output_path_next_to_source(tmp_path: Path) -> None:
    cfg = Config(root_dir=tmp_path, search_dir="src")
    assert output_path(tmp_path / "src" / "a.css", cfg) == tmp_path / "src" / "a.css.d.ts"


def test_output_path_relative_source(tmp_path: Path) -> None:
    cfg = Config(root_dir=tmp_path, search_dir="src")
    assert output_path(Path("src/x/a.css"), cfg) == tmp_path / "src" / "x" / "a.css.d.ts"


def test_output_path_is_deterministic(tmp_path: Path) -> None:
    cfg = Config(root_dir=tmp_path, search_dir="src", out_dir="types", drop_extension=True)
    src = tmp_path / "src" / "deep" / "a.module.css"
    first = output_path(src, cfg)
    assert all(output_path(src, cfg) == first for _ in range(5))


def test_output_path_out_dir(tmp_path: Path) -> None:
    cfg = Config(root_dir=tmp_path, search_dir="src", out_dir="dist")
    out = output_path(tmp_path / "src" / "sub" / "a.css", cfg)
    assert out == tmp_path / "dist" / "sub" / "a.css.d.ts"


def test_output_path_drop_extension(tmp_path: Path) -> None:
    cfg = Config(root_dir=tmp_path, search_dir=".", drop_extension=True)
    assert output_path(tmp_path / "a.module.css", cfg) == tmp_path / "a.module.d.ts"
