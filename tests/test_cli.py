"""CLI のテスト。"""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from cssdts.cli import app

runner = CliRunner()


def test_help_without_arguments() -> None:
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "--camelCase" in result.output


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip()


def test_batch_writes_declarations(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    src = tmp_path / "src"
    src.mkdir()
    (src / "a-b.css").write_text(".foo-bar {}", encoding="utf-8")

    result = runner.invoke(app, ["src", "-c", "-o", "types", "-d"])
    assert result.exit_code == 0, result.output
    out = tmp_path / "types" / "a-b.d.ts"
    assert out.read_text(encoding="utf-8") == "export const fooBar: string;\n"
    assert "Wrote" in result.output


def test_batch_error_exits_1(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "bad.css").write_text(".x {", encoding="utf-8")
    result = runner.invoke(app, ["."])
    assert result.exit_code == 1


def test_quiet_and_pattern_only(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.icss").write_text(".a {}", encoding="utf-8")
    result = runner.invoke(app, ["-p", "*.icss", "-q"])
    assert result.exit_code == 0
    assert result.output == ""
    assert (tmp_path / "a.icss.d.ts").exists()


def test_config_file_is_applied(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cssdts.toml").write_text('[cssdts]\nout_dir = "gen"\n', encoding="utf-8")
    (tmp_path / "a.css").write_text(".a {}", encoding="utf-8")
    result = runner.invoke(app, ["."])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "gen" / "a.css.d.ts").exists()


def test_invalid_config_exits_1(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cssdts.toml").write_text("[cssdts]\nforce = 1\n", encoding="utf-8")
    result = runner.invoke(app, ["."])
    assert result.exit_code == 1


def test_watch_missing_search_dir_exits_1(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["missing", "-w"])
    assert result.exit_code == 1


def test_flags_from_config_stay_on_without_cli_flag(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "cssdts.toml").write_text("[cssdts]\ncamel_case = true\n", encoding="utf-8")
    (tmp_path / "a.css").write_text(".foo-bar {}", encoding="utf-8")
    result = runner.invoke(app, ["."])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "a.css.d.ts").read_text(encoding="utf-8") == "export const fooBar: string;\n"
