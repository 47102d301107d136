"""config: 実行設定。

- CLI 引数と（任意の）設定ファイル `cssdts.toml` から組み立てる
- 一度作ったら変更しない（frozen）。Orchestrator に明示的に渡す

設定ファイル例:

    [cssdts]
    pattern = "**/*.module.css"
    out_dir = "types"
    camel_case = true
    save_delay_ms = 200
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib  # type: ignore[no-redef]

from cssdts.errors import ConfigError

DEFAULT_PATTERN = "**/*.css"
DEFAULT_CONFIG_FILE = "cssdts.toml"

# watch 時に save_delay が未指定なら使う値（ミリ秒）。
# エディタが「空にしてから書き直す」保存をしても、後のイベントを勝たせるため。
DEFAULT_WATCH_SAVE_DELAY_MS = 100


@dataclass(frozen=True)
class Config:
    root_dir: Path = field(default_factory=Path.cwd)
    search_dir: str = "."
    pattern: str = DEFAULT_PATTERN
    out_dir: str | None = None
    camel_case: bool = False
    drop_extension: bool = False
    force: bool = False
    quiet: bool = False
    save_delay_ms: int | None = None
    watch: bool = False

    @property
    def effective_save_delay_ms(self) -> int:
        if self.save_delay_ms is not None:
            return max(0, int(self.save_delay_ms))
        return DEFAULT_WATCH_SAVE_DELAY_MS if self.watch else 0

    @property
    def files_pattern(self) -> str:
        return os.path.join(self.search_dir, self.pattern)

    def merged(self, **overrides: Any) -> Config:
        """None 以外の値だけ上書きした新しい Config を返す。"""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_BOOL_KEYS = ("camel_case", "drop_extension", "force", "quiet")
_STR_KEYS = ("pattern", "out_dir")


def load_config(path: Path | None = None, *, base: Config | None = None) -> Config:
    if path is None:
        path = Path(DEFAULT_CONFIG_FILE)
    cfg = base or Config()
    if not path.exists():
        return cfg

    try:
        raw = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"cannot read config: {e}", path=path) from e

    section = raw.get("cssdts", {})
    if not isinstance(section, dict):
        raise ConfigError("[cssdts] must be a table", path=path)

    values: dict[str, Any] = {}
    for key in _BOOL_KEYS:
        if key in section:
            if not isinstance(section[key], bool):
                raise ConfigError(f"{key} must be a boolean", path=path)
            values[key] = section[key]
    for key in _STR_KEYS:
        if key in section:
            if not isinstance(section[key], str):
                raise ConfigError(f"{key} must be a string", path=path)
            values[key] = section[key]
    if "save_delay_ms" in section:
        delay = section["save_delay_ms"]
        if isinstance(delay, bool) or not isinstance(delay, int) or delay < 0:
            raise ConfigError("save_delay_ms must be a non-negative integer", path=path)
        values["save_delay_ms"] = delay

    return cfg.merged(**values)
