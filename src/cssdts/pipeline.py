"""1ファイル分のパイプライン: 変換 → dirty チェック → 書き込み → 警告。

失敗は例外で返さず Err にする。どう扱うか（止める/続ける）は呼び出し側。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from cssdts.artifacts import Artifact
from cssdts.config import Config
from cssdts.dirty import is_dirty
from cssdts.errors import CssDtsError, OutputError
from cssdts.report import Reporter
from cssdts.result import Err, Ok, Result
from cssdts.transform import Transformer, transform
from cssdts.writer import write_artifact

logger = logging.getLogger(__name__)


async def process_file(
    path: Path,
    config: Config,
    *,
    reporter: Reporter,
    transformer: Transformer = transform,
) -> Result[Artifact]:
    try:
        artifact = transformer(path, config)
        dirty = await is_dirty(artifact, config.effective_save_delay_ms, force=config.force)
        if dirty:
            write_artifact(artifact)
            reporter.wrote(artifact)
        else:
            logger.debug("unchanged: %s", artifact.output_path)
    except CssDtsError as e:
        return Err(e)
    except OSError as e:
        # 包み漏れた I/O エラーもポリシーに渡す
        path_hint = e.filename or path
        return Err(OutputError(f"{type(e).__name__}: {e.strerror or e}", path=Path(os.fsdecode(path_hint))))

    reporter.warn(artifact)
    return Ok(artifact)
