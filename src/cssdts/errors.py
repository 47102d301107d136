"""エラー分類。

パイプラインで起きる失敗は全部 `CssDtsError` の子クラスにして、
`kind` でエラーポリシー側が判断できるようにしておく。
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class ErrorKind(str, Enum):
    DISCOVERY = "discovery"
    TRANSFORM = "transform"
    IO = "io"
    CONFIG = "config"


class CssDtsError(Exception):
    kind: ErrorKind = ErrorKind.IO

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class DiscoveryError(CssDtsError):
    """glob展開 / watch購読の失敗。"""

    kind = ErrorKind.DISCOVERY


class TransformError(CssDtsError):
    """スタイルシートを Artifact に変換できなかった（読めない・壊れている）。"""

    kind = ErrorKind.TRANSFORM


class OutputError(CssDtsError):
    """出力ファイルの書き込み失敗。"""

    kind = ErrorKind.IO


class ConfigError(CssDtsError):
    kind = ErrorKind.CONFIG
