"""コンソール出力（wrote / warn / error）。

quiet のときは何も出さない。詳細は logging 側に残す。
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from cssdts.artifacts import Artifact
from cssdts.errors import CssDtsError

logger = logging.getLogger(__name__)


class Reporter:
    def __init__(
        self,
        *,
        quiet: bool = False,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.quiet = quiet
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def wrote(self, artifact: Artifact) -> None:
        logger.info("wrote %s", artifact.output_path)
        if self.quiet:
            return
        self.console.print(f"Wrote [green]{escape(str(artifact.output_path))}[/green]")

    def warn(self, artifact: Artifact) -> None:
        for message in artifact.diagnostics:
            logger.info("warn: %s", message)
            if not self.quiet:
                self.err_console.print(f"[Warn] {message}", style="yellow", markup=False)

    def error(self, error: CssDtsError | str) -> None:
        logger.info("error: %s", error)
        if self.quiet:
            return
        self.err_console.print(f"[Error] {error}", style="red", markup=False)

    def watching(self, pattern: str) -> None:
        if self.quiet:
            return
        self.console.print(f"Watching {pattern}...", style="cyan", markup=False)
