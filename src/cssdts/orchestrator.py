"""Orchestrator: 探索 → 1ファイルごとのパイプライン → エラーポリシー。

- run_batch: glob で見つけたファイルを全部処理して終了コードを返す
- run_watch: Subscription が閉じられるまでイベントごとに処理する

モードは最初に走らせた方で固定（batch と watch を両方は走らせない）。
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable

from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver

from cssdts.config import Config
from cssdts.errors import CssDtsError, DiscoveryError
from cssdts.pipeline import process_file
from cssdts.report import Reporter
from cssdts.result import Action, Err, Mode, decide
from cssdts.transform import Transformer, transform
from cssdts.watch import Subscription, expand, subscribe

logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(
        self,
        config: Config,
        *,
        transformer: Transformer = transform,
        reporter: Reporter | None = None,
        observer_factory: Callable[[], BaseObserver] = Observer,
    ) -> None:
        self.config = config
        self.transformer = transformer
        self.reporter = reporter or Reporter(quiet=config.quiet)
        self.observer_factory = observer_factory
        self._subscription: Subscription | None = None
        self._mode: Mode | None = None
        self._aborted = False
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def mode(self) -> Mode | None:
        return self._mode

    @property
    def aborted(self) -> bool:
        return self._aborted

    def _start(self, mode: Mode) -> None:
        if self._mode is not None:
            raise RuntimeError(f"orchestrator already started in {self._mode.value} mode")
        self._mode = mode

    def stop(self) -> None:
        """watch を止める（run_watch は処理中のファイルを待ってから戻る）。"""
        if self._subscription is not None:
            self._subscription.close()

    def _resolve(self, pattern: str) -> str:
        return os.path.normpath(os.path.join(str(self.config.root_dir), pattern))

    def _handle(self, error: CssDtsError) -> None:
        if self._mode is None:
            raise RuntimeError("orchestrator has not been started")
        self.reporter.error(error)
        if decide(self._mode, error) is Action.ABORT:
            self._aborted = True
            for t in self._tasks:
                if t is not asyncio.current_task():
                    t.cancel()

    async def _run_one(self, path: Path) -> None:
        # batch で既に止まっていれば、まだ始まっていないファイルは触らない
        if self._aborted:
            return
        result = await process_file(
            path,
            self.config,
            reporter=self.reporter,
            transformer=self.transformer,
        )
        if isinstance(result, Err):
            self._handle(result.error)

    def _spawn(self, path: Path) -> asyncio.Task[None]:
        task = asyncio.create_task(self._run_one(path))
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._done(t, path))
        return task

    def _done(self, task: asyncio.Task[None], path: Path) -> None:
        self._tasks.discard(task)
        if self._mode is not Mode.WATCH or task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # ここで落とすと監視が止まるので、ログに残して次のイベントを待つ
            logger.error("pipeline crashed: %s", path, exc_info=exc)
            self.reporter.error(f"{path}: {type(exc).__name__}: {exc}")

    async def run_batch(self, pattern: str | None = None) -> int:
        """一回だけ処理する。0 = 正常終了, 1 = エラーで中断。"""
        self._start(Mode.BATCH)
        pattern = self._resolve(pattern or self.config.files_pattern)
        try:
            paths = expand(pattern)
        except DiscoveryError as e:
            self._handle(e)
            return 1

        logger.debug("batch: %d files match %s", len(paths), pattern)
        if not paths:
            return 0

        tasks = [self._spawn(p) for p in paths]
        await asyncio.gather(*tasks, return_exceptions=True)
        for t in tasks:
            if not t.cancelled() and t.exception() is not None:
                raise t.exception()  # type: ignore[misc]
        return 1 if self._aborted else 0

    async def run_watch(
        self,
        pattern: str | None = None,
        *,
        subscription: Subscription | None = None,
    ) -> None:
        """subscription が閉じられるまでイベントを処理し続ける。

        購読できなかった場合の DiscoveryError はそのまま投げる。
        """
        self._start(Mode.WATCH)
        if subscription is None:
            pattern = pattern or self.config.files_pattern
            subscription = subscribe(self._resolve(pattern), observer_factory=self.observer_factory)
            self.reporter.watching(pattern)
        self._subscription = subscription

        try:
            async for event in subscription:
                logger.debug("watch event %s: %s", event.kind, event.path)
                self._spawn(event.path)
        finally:
            subscription.close()
            pending = list(self._tasks)
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
