"""処理結果 (Ok / Err) とエラーポリシー。

- 1ファイル分のパイプラインは例外を外に投げず `Result` を返す
- 返ってきた `Err` をどう扱うかは `decide(mode, error)` だけで決まる
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

from cssdts.errors import CssDtsError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: CssDtsError

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


class Mode(str, Enum):
    BATCH = "batch"
    WATCH = "watch"


class Action(str, Enum):
    ABORT = "abort"
    CONTINUE = "continue"


def decide(mode: Mode, error: CssDtsError) -> Action:  # noqa: ARG001
    """1ファイルの失敗に対する動作を返す。

    batch: 1件でも失敗したら全体を止める（exit 1）。
    watch: ログだけ出して監視を続ける。
    """
    if mode is Mode.WATCH:
        return Action.CONTINUE
    return Action.ABORT
