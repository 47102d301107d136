"""dirty チェック: 生成結果を書き込むべきかどうか。

同じ内容の書き込みを避けるのと、保存時に「一度空にしてから書き直す」
エディタ対策（遅延）を兼ねる。
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from cssdts.artifacts import Artifact

logger = logging.getLogger(__name__)


def _mtime_ns(p: Path) -> int | None:
    try:
        return p.stat().st_mtime_ns
    except OSError:
        return None


async def is_dirty(artifact: Artifact, delay_ms: int = 0, *, force: bool = False) -> bool:
    """artifact を書き込むべきなら True。

    - force: 常に True（ファイルは見ない）
    - 出力ファイルが無い / 読めない: True（書き込み側で本当のエラーを出す）
    - delay_ms > 0: 待っている間に出力ファイルの mtime が変わったら False
      （後から来たイベントの処理に任せる）
    - それ以外は既存内容と generated_text の比較
    """
    if force:
        return True

    out = artifact.output_path
    started_mtime = _mtime_ns(out)
    if started_mtime is None:
        return True
    try:
        current = out.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("cannot read %s (%s); treating as dirty", out, type(e).__name__)
        return True

    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)
        if _mtime_ns(out) != started_mtime:
            logger.debug("%s changed during save delay; skip", out)
            return False

    return current != artifact.generated_text
