"""VocaAgent 命令行入口."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import click

from vocaagent.config import Settings, get_settings
from vocaagent.errors import VocaError
from vocaagent.integration.server import McpServer
from vocaagent.scheduler import (
    collect_task,
    create_scheduler,
    export_task,
    notify_task,
    shutdown_scheduler,
)
from vocaagent.storage.sql import SQLVocabularyStore

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_logging(verbose: bool) -> None:
    # stdout 留给 MCP 协议，日志写 stderr
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def _build_settings(**overrides: Any) -> Settings:
    """命令行参数覆盖环境配置，未指定的参数不覆盖."""
    update = {k: v for k, v in overrides.items() if v not in (None, (), [])}
    if "feed_urls" in update:
        update["feed_urls"] = list(update["feed_urls"])
    return get_settings().model_copy(update=update)


def _run_or_exit(coro: Any) -> Any:
    """运行协程；初始化失败时记录日志并以退出码 1 结束."""
    try:
        return asyncio.run(coro)
    except VocaError as e:
        logger.error(f"启动失败: {e}")
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="输出 DEBUG 日志")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """从订阅源收集 TOEFL 高阶词汇."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option(
    "--obsidian-path",
    type=click.Path(file_okay=False, path_type=Path),
    help="收集完成后导出到该 Obsidian 目录",
)
@click.option("--feed", "feeds", multiple=True, help="订阅源 URL，可重复指定")
@click.option("--database-url", help="数据库连接串")
@click.option("--notify", is_flag=True, help="收集完成后推送今日词汇到 Telegram")
def run(
    obsidian_path: Path | None,
    feeds: tuple[str, ...],
    database_url: str | None,
    notify: bool,
) -> None:
    """执行一次收集流水线."""
    settings = _build_settings(feed_urls=feeds, database_url=database_url)
    stats = _run_or_exit(
        collect_task(settings, obsidian_path=obsidian_path, notify=notify)
    )
    click.echo(
        f"total={stats.total_items} articles={stats.articles_saved} "
        f"vocab={stats.vocabularies_saved} skipped={stats.skipped_duplicates} "
        f"feed_errors={stats.feed_errors} fetch_errors={stats.fetch_errors} "
        f"llm_errors={stats.llm_errors} storage_errors={stats.storage_errors}"
    )


@cli.command()
@click.option(
    "--obsidian-path",
    type=click.Path(file_okay=False, path_type=Path),
    help="导出目录，未指定时读取 OBSIDIAN_PATH",
)
@click.option("--database-url", help="数据库连接串")
def export(obsidian_path: Path | None, database_url: str | None) -> None:
    """把全部词汇导出为 Obsidian 笔记."""
    settings = _build_settings(database_url=database_url)
    count = _run_or_exit(export_task(settings, obsidian_path))
    click.echo(f"exported={count}")


@cli.command()
@click.option("--database-url", help="数据库连接串")
def mcp(database_url: str | None) -> None:
    """以 stdio 模式启动 MCP 查询服务."""
    settings = _build_settings(database_url=database_url)
    _run_or_exit(_serve_mcp(settings))


async def _serve_mcp(settings: Settings) -> None:
    store = await SQLVocabularyStore.connect(settings.database_url)
    try:
        await McpServer(store).run()
    finally:
        await store.close()


@cli.command()
@click.option("--database-url", help="数据库连接串")
def notify(database_url: str | None) -> None:
    """推送今日词汇到 Telegram."""
    settings = _build_settings(database_url=database_url)
    result = _run_or_exit(notify_task(settings))
    click.echo(f"sent={result.words_sent} skipped={result.skipped}")


@cli.command()
@click.option(
    "--obsidian-path",
    type=click.Path(file_okay=False, path_type=Path),
    help="每次收集后导出到该目录",
)
@click.option("--feed", "feeds", multiple=True, help="订阅源 URL，可重复指定")
@click.option("--database-url", help="数据库连接串")
@click.option("--notify", is_flag=True, help="每次收集后推送今日词汇")
def schedule(
    obsidian_path: Path | None,
    feeds: tuple[str, ...],
    database_url: str | None,
    notify: bool,
) -> None:
    """按 SYNC_INTERVAL_MINUTES 定时收集."""
    settings = _build_settings(feed_urls=feeds, database_url=database_url)
    try:
        _run_or_exit(_serve_schedule(settings, obsidian_path, notify))
    except KeyboardInterrupt:
        logger.info("收到中断信号，退出")


async def _serve_schedule(
    settings: Settings, obsidian_path: Path | None, notify: bool
) -> None:
    create_scheduler(settings, obsidian_path=obsidian_path, notify=notify)
    try:
        await asyncio.Event().wait()
    finally:
        await shutdown_scheduler()


if __name__ == "__main__":
    cli()
