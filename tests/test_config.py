"""設定のテスト。"""

from pathlib import Path

import pytest

from cssdts.config import DEFAULT_WATCH_SAVE_DELAY_MS, Config, load_config
from cssdts.errors import ConfigError


def test_effective_save_delay_defaults() -> None:
    assert Config().effective_save_delay_ms == 0
    assert Config(watch=True).effective_save_delay_ms == DEFAULT_WATCH_SAVE_DELAY_MS
    assert Config(watch=True, save_delay_ms=0).effective_save_delay_ms == 0
    assert Config(save_delay_ms=250).effective_save_delay_ms == 250


def test_files_pattern() -> None:
    assert Config(search_dir="src").files_pattern == str(Path("src") / "**/*.css")


def test_merged_ignores_none() -> None:
    cfg = Config(out_dir="types").merged(out_dir=None, camel_case=True)
    assert cfg.out_dir == "types"
    assert cfg.camel_case is True


def test_merged_rejects_unknown_keys() -> None:
    with pytest.raises(ConfigError):
        Config().merged(colour=True)


def test_load_config_missing_file(tmp_path: Path) -> None:
    cfg = load_config(tmp_path / "missing.toml")
    assert cfg == Config(root_dir=cfg.root_dir)


def test_load_config_from_file(tmp_path: Path) -> None:
    p = tmp_path / "cssdts.toml"
    p.write_text(
        """
[cssdts]
pattern = "**/*.module.css"
out_dir = "types"
camel_case = true
save_delay_ms = 200
""",
        encoding="utf-8",
    )
    cfg = load_config(p, base=Config(root_dir=tmp_path, search_dir="src"))
    assert cfg.search_dir == "src"
    assert cfg.pattern == "**/*.module.css"
    assert cfg.out_dir == "types"
    assert cfg.camel_case is True
    assert cfg.save_delay_ms == 200


@pytest.mark.parametrize(
    "body",
    ["[cssdts]\ncamel_case = 'yes'\n", "[cssdts]\nsave_delay_ms = -1\n", "not toml ["],
)
def test_load_config_invalid(tmp_path: Path, body: str) -> None:
    p = tmp_path / "cssdts.toml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)
