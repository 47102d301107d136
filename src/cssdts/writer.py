"""Artifact を出力パスに書き出す。"""

from __future__ import annotations

import logging
from pathlib import Path

from cssdts.artifacts import Artifact
from cssdts.errors import OutputError

logger = logging.getLogger(__name__)


def write_artifact(artifact: Artifact) -> Path:
    p = artifact.output_path
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(artifact.generated_text, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"cannot write ({type(e).__name__}: {e.strerror or e})", path=p) from e
    logger.debug("wrote %s (%d bytes)", p, len(artifact.generated_text))
    return p
