"""Artifact: 1つのスタイルシートから生成した型定義（.d.ts）。

- 変換のたびに新しく作る（frozen、使い回さない）
- 出力先は source_path と Config だけで決まる
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from cssdts.config import Config

DTS_SUFFIX = ".d.ts"


@dataclass(frozen=True)
class Artifact:
    source_path: Path
    output_path: Path
    generated_text: str
    diagnostics: tuple[str, ...] = ()
    source_digest: str = ""
    tokens: tuple[str, ...] = ()


def output_path(source: Path | str, config: Config) -> Path:
    """source に対応する .d.ts のパス。

    out_dir があれば `root/out_dir/<search_dir からの相対>`、
    無ければソースの隣に置く。
    """
    root = Path(config.root_dir)
    search = root / config.search_dir
    src = Path(source)
    if not src.is_absolute():
        src = root / src

    rel = Path(os.path.relpath(os.path.normpath(src), os.path.normpath(search)))
    base = root / config.out_dir / rel if config.out_dir else search / rel
    if config.drop_extension:
        base = base.with_suffix("")
    p = Path(os.path.normpath(base))
    return p.with_name(p.name + DTS_SUFFIX)
