"""ファイル探索（glob）と監視（watchdog）。

- expand(): パターンを一度だけ展開する（batch 用）
- subscribe(): パターンに合うファイルの add/change を流し続ける（watch 用）

watchdog の Observer は別スレッドで動くので、ハンドラは
イベントをイベントループに渡すだけにする（処理はループ側）。
Subscription は close() で止められるので、テストでは inotify なしで
emit() を直接呼んで使う。
"""

from __future__ import annotations

import asyncio
import glob
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from cssdts.errors import DiscoveryError

logger = logging.getLogger(__name__)

ADD = "add"
CHANGE = "change"

_GLOB_CHARS = "*?["


@dataclass(frozen=True)
class FileEvent:
    kind: str  # add | change
    path: Path


def expand(pattern: str) -> list[Path]:
    try:
        found = glob.glob(pattern, recursive=True)
    except OSError as e:
        raise DiscoveryError(f"cannot expand pattern {pattern!r}: {e}") from e
    return sorted(Path(p) for p in found if os.path.isfile(p))


def base_dir(pattern: str) -> Path:
    """パターン先頭の、glob 文字を含まない部分（監視するディレクトリ）。"""
    parts = Path(pattern).parts
    static: list[str] = []
    for part in parts:
        if any(c in part for c in _GLOB_CHARS):
            break
        static.append(part)
    if len(static) == len(parts):
        # ワイルドカードなし = 1ファイル指定
        static = static[:-1]
    return Path(*static) if static else Path(".")


def _translate(pattern: str) -> str:
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif c == "*":
            out.append("[^/]*")
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
                i += 1
            else:
                body = pattern[i + 1 : end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end + 1
        else:
            out.append(re.escape(c))
            i += 1
    return "".join(out) + r"\Z"


def matches(pattern: str, path: Path | str) -> bool:
    """glob と同じ意味で path がパターンに合うか（`**/` は0階層も可）。"""
    pat = os.path.normpath(pattern).replace(os.sep, "/")
    target = os.path.normpath(str(path)).replace(os.sep, "/")
    return re.match(_translate(pat), target) is not None


class Subscription:
    """ファイルイベントの購読。`async for event in sub:` で受け取る。"""

    def __init__(self, *, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._queue: asyncio.Queue[FileEvent | None] = asyncio.Queue()
        self._observer: BaseObserver | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def attach(self, observer: BaseObserver) -> None:
        self._observer = observer

    def emit(self, event: FileEvent) -> None:
        """どのスレッドから呼んでもよい。"""
        if self._closed:
            return
        self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=2)
        self._loop.call_soon_threadsafe(self._queue.put_nowait, None)

    def __aiter__(self) -> Subscription:
        return self

    async def __anext__(self) -> FileEvent:
        event = await self._queue.get()
        if event is None:
            raise StopAsyncIteration
        return event

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()


class _Handler(FileSystemEventHandler):
    def __init__(self, sub: Subscription, pattern: str) -> None:
        self.sub = sub
        self.pattern = pattern

    def _emit(self, kind: str, raw_path: str | bytes) -> None:
        path = Path(os.fsdecode(raw_path)).absolute()
        if not matches(self.pattern, path):
            return
        logger.debug("%s: %s", kind, path)
        self.sub.emit(FileEvent(kind=kind, path=path))

    def on_created(self, event):  # type: ignore[override]
        if not event.is_directory:
            self._emit(ADD, event.src_path)

    def on_modified(self, event):  # type: ignore[override]
        if not event.is_directory:
            self._emit(CHANGE, event.src_path)

    def on_moved(self, event):  # type: ignore[override]
        # アトミック保存（一時ファイル → rename）は moved で来る
        if not event.is_directory:
            self._emit(ADD, event.dest_path)


def subscribe(
    pattern: str,
    *,
    initial: bool = True,
    observer_factory: Callable[[], BaseObserver] = Observer,
) -> Subscription:
    """pattern を監視する Subscription を作る。イベントループ内で呼ぶこと。

    initial=True なら既存ファイルを先に add として流す。
    """
    pattern = os.path.abspath(pattern)
    root = base_dir(pattern)
    if not root.is_dir():
        raise DiscoveryError(f"cannot watch {pattern!r}: {root} is not a directory")

    sub = Subscription()
    obs = observer_factory()
    obs.schedule(_Handler(sub, pattern), str(root), recursive=True)
    try:
        obs.start()
    except OSError as e:
        # 一部の emitter だけ起動している場合があるので止めておく
        obs.stop()
        raise DiscoveryError(f"cannot watch {pattern!r}: {e}") from e
    sub.attach(obs)

    if initial:
        try:
            existing = expand(pattern)
        except DiscoveryError:
            sub.close()
            raise
        for p in existing:
            sub.emit(FileEvent(kind=ADD, path=p))
    return sub
