"""cssdts CLI エントリポイント。"""

from __future__ import annotations

import asyncio
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import typer

from cssdts.config import DEFAULT_CONFIG_FILE, Config, load_config
from cssdts.errors import ConfigError, DiscoveryError
from cssdts.logging_setup import setup_logging
from cssdts.orchestrator import Orchestrator
from cssdts.report import Reporter

APP_HELP = (
    "CSS Modules の *.css から .css.d.ts を生成する。\n\n"
    "例: cssdts src/styles / cssdts src -o dist / cssdts -p 'styles/**/*.icss' -w"
)

app = typer.Typer(
    add_completion=False,
    help=APP_HELP,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version() -> str:
    try:
        return version("cssdts")
    except PackageNotFoundError:
        return "0.0.0"


def _print_version(value: bool) -> None:
    if value:
        typer.echo(_version())
        raise typer.Exit()


@app.command()
def main(
    ctx: typer.Context,
    search_dir: str | None = typer.Argument(None, help="探索するディレクトリ (例: src/styles)"),
    camel_case: bool = typer.Option(False, "-c", "--camelCase", help="クラス名を camelCase に変換する"),
    out_dir: str | None = typer.Option(None, "-o", "--outDir", help="出力ディレクトリ"),
    pattern: str | None = typer.Option(None, "-p", "--pattern", help="css ファイルの glob パターン"),
    watch: bool = typer.Option(False, "-w", "--watch", help="css ファイルを監視して再生成する"),
    drop_extension: bool = typer.Option(False, "-d", "--dropExtension", help="入力ファイルの拡張子を落とす"),
    force: bool = typer.Option(False, "-f", "--force", help="内容が同じでも毎回書き込む"),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="ログを出さない"),
    save_delay: int | None = typer.Option(
        None,
        "-s",
        "--save-delay",
        min=0,
        help="書き込み前の待ち時間(ms)。保存時にファイルを一度空にするエディタ向け",
    ),
    config_path: Path = typer.Option(Path(DEFAULT_CONFIG_FILE), "--config", help="設定ファイル"),
    log_level: str | None = typer.Option(None, "--log-level", help="コンソールのログレベル"),
    log_file: Path | None = typer.Option(None, "--log-file", help="詳細ログの出力先"),
    show_version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="バージョンを表示"
    ),
) -> None:
    """スタイルシートからクラス名の型定義を生成する。"""
    if not search_dir:
        if not pattern:
            typer.echo(ctx.get_help())
            raise typer.Exit()
        search_dir = "./"

    try:
        config = load_config(config_path, base=Config(root_dir=Path.cwd(), search_dir=search_dir))
        config = config.merged(
            pattern=pattern,
            out_dir=out_dir,
            camel_case=camel_case or None,
            drop_extension=drop_extension or None,
            force=force or None,
            quiet=quiet or None,
            save_delay_ms=save_delay,
            watch=watch,
        )
    except ConfigError as e:
        Reporter(quiet=quiet).error(e)
        raise typer.Exit(code=1) from e

    level = log_level or ("CRITICAL" if config.quiet else "WARNING")
    setup_logging(level=level, log_path=log_file)

    reporter = Reporter(quiet=config.quiet)
    orchestrator = Orchestrator(config, reporter=reporter)

    if not config.watch:
        code = asyncio.run(orchestrator.run_batch())
        raise typer.Exit(code=code)

    try:
        asyncio.run(orchestrator.run_watch())
    except DiscoveryError as e:
        reporter.error(e)
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        pass
