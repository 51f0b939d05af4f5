"""任务定义：收集、导出、推送，以及定时调度."""

import logging
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from vocaagent.config import Settings
from vocaagent.core.pipeline import PipelineStats, run_pipeline
from vocaagent.core.ports import VocabularyStore
from vocaagent.errors import ConfigError
from vocaagent.fetcher.feed import FeedFetcher
from vocaagent.integration.obsidian import MarkdownExporter
from vocaagent.llm.factory import create_extractor
from vocaagent.notify.telegram import Notifier, NotifyResult, TelegramClient
from vocaagent.storage.sql import SQLVocabularyStore

logger = logging.getLogger(__name__)


async def collect_task(
    settings: Settings,
    obsidian_path: Path | None = None,
    notify: bool = False,
) -> PipelineStats:
    """
    执行一次词汇收集，可选导出与推送.

    初始化失败（数据库、提取服务凭证）直接抛出，不会处理任何条目。
    """
    extractor = create_extractor(settings)
    try:
        store = await SQLVocabularyStore.connect(settings.database_url)
    except Exception:
        await extractor.close()
        raise
    reader = FeedFetcher(timeout=settings.fetch_timeout_seconds)

    try:
        logger.info(f"开始收集，订阅源 {len(settings.feed_urls)} 个")
        stats = await run_pipeline(
            settings.feed_urls,
            reader,
            store,
            extractor,
            delay=settings.rate_limit_delay_seconds,
        )

        # 导出和推送失败不影响本次收集结果
        if obsidian_path:
            try:
                await export_vocabulary(store, obsidian_path)
            except Exception as e:
                logger.error(f"导出失败: {e}")

        if notify:
            try:
                await notify_daily_words(store, settings)
            except Exception as e:
                logger.error(f"推送失败: {e}")

        return stats
    finally:
        await reader.close()
        await extractor.close()
        await store.close()


async def export_task(settings: Settings, obsidian_path: Path | None) -> int:
    """导出全部词汇到 Obsidian，返回导出数量."""
    path = obsidian_path or settings.obsidian_path
    if path is None:
        msg = "未指定 Obsidian 路径（--obsidian-path 或 OBSIDIAN_PATH）"
        raise ConfigError(msg)

    store = await SQLVocabularyStore.connect(settings.database_url)
    try:
        return await export_vocabulary(store, path)
    finally:
        await store.close()


async def notify_task(settings: Settings) -> NotifyResult:
    """推送今日词汇."""
    store = await SQLVocabularyStore.connect(settings.database_url)
    try:
        return await notify_daily_words(store, settings)
    finally:
        await store.close()


async def export_vocabulary(store: VocabularyStore, path: Path) -> int:
    """把存储中的全部词汇写成笔记."""
    vocabs = await store.get_all_vocab()
    if not vocabs:
        logger.info("没有可导出的词汇")
        return 0

    exporter = MarkdownExporter(path)
    return len(exporter.export_batch(vocabs))


async def notify_daily_words(store: VocabularyStore, settings: Settings) -> NotifyResult:
    """推送今日词汇，未配置 Telegram 时抛出 ConfigError."""
    telegram = TelegramClient.from_settings(settings)
    if telegram is None:
        msg = "未配置 TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID"
        raise ConfigError(msg)

    try:
        notifier = Notifier(telegram, word_count=settings.notify_word_count)
        return await notifier.notify(await store.get_today_vocab())
    finally:
        await telegram.close()


async def scheduled_collect(
    settings: Settings,
    obsidian_path: Path | None,
    notify: bool,
) -> None:
    """定时任务入口：失败只记录日志，等待下一次调度."""
    try:
        await collect_task(settings, obsidian_path=obsidian_path, notify=notify)
    except Exception as e:
        logger.exception(f"定时收集失败: {e}")


_scheduler: AsyncIOScheduler | None = None


def create_scheduler(
    settings: Settings,
    obsidian_path: Path | None = None,
    notify: bool = False,
) -> AsyncIOScheduler:
    """创建并启动定时任务调度器."""
    global _scheduler

    _scheduler = AsyncIOScheduler()

    _scheduler.add_job(
        scheduled_collect,
        "interval",
        minutes=settings.sync_interval_minutes,
        args=[settings, obsidian_path, notify],
        id="collect_task",
        name="词汇收集",
        replace_existing=True,
        max_instances=1,
    )

    # 启动时立即执行一次
    _scheduler.add_job(
        scheduled_collect,
        "date",
        args=[settings, obsidian_path, notify],
        id="collect_task_initial",
        name="初始词汇收集",
    )

    _scheduler.start()
    logger.info(
        f"定时任务调度器已启动，收集间隔: {settings.sync_interval_minutes} 分钟"
    )

    return _scheduler


async def shutdown_scheduler() -> None:
    """关闭定时任务调度器."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        logger.info("定时任务调度器已关闭")
        _scheduler = None
