"""词汇收集流水线：读取 Feed → 去重 → 抓取正文 → 提取词汇 → 持久化."""

import asyncio
import logging
from dataclasses import asdict, dataclass

from vocaagent.core.ports import (
    ExtractedWord,
    FeedEntry,
    FeedReader,
    VocabularyExtractor,
    VocabularyStore,
)
from vocaagent.models.article import Article, SourceType
from vocaagent.models.vocabulary import Vocabulary
from vocaagent.utils.time import to_naive_utc, utcnow

logger = logging.getLogger(__name__)

# 每次调用提取服务后的固定间隔（秒）
LLM_RATE_LIMIT_DELAY = 2.0


@dataclass
class PipelineStats:
    """单次运行统计."""

    total_items: int = 0
    articles_saved: int = 0
    vocabularies_saved: int = 0
    skipped_duplicates: int = 0
    feed_errors: int = 0
    fetch_errors: int = 0
    llm_errors: int = 0
    storage_errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


async def run_pipeline(
    feed_urls: list[str],
    reader: FeedReader,
    store: VocabularyStore,
    extractor: VocabularyExtractor,
    *,
    delay: float = LLM_RATE_LIMIT_DELAY,
) -> PipelineStats:
    """
    依次处理所有订阅源，返回运行统计.

    单个条目或单个 Feed 的失败只会计数并记录日志，不会中断整批处理。

    Args:
        feed_urls: 订阅源 URL 列表，按顺序处理
        reader: Feed 读取与正文抓取
        store: 文章与词汇存储
        extractor: 词汇提取服务
        delay: 每次调用提取服务后的等待秒数

    Returns:
        PipelineStats: 运行统计
    """
    stats = PipelineStats()

    for feed_url in feed_urls:
        logger.info(f"读取订阅源: {feed_url}")

        try:
            entries = await reader.fetch_feed(feed_url)
        except Exception as e:
            logger.error(f"读取订阅源失败: {feed_url} - {e}")
            stats.feed_errors += 1
            continue

        logger.info(f"订阅源 {feed_url} 共 {len(entries)} 条")

        for entry in entries:
            stats.total_items += 1
            extracted = await _process_entry(entry, reader, store, extractor, stats)

            # 只在调用过提取服务后限速
            if extracted and delay > 0:
                await asyncio.sleep(delay)

    logger.info(
        f"流水线完成: 文章={stats.articles_saved}, 词汇={stats.vocabularies_saved}, "
        f"重复跳过={stats.skipped_duplicates}, 错误: feed={stats.feed_errors} "
        f"fetch={stats.fetch_errors} llm={stats.llm_errors} "
        f"storage={stats.storage_errors}"
    )
    return stats


async def _process_entry(
    entry: FeedEntry,
    reader: FeedReader,
    store: VocabularyStore,
    extractor: VocabularyExtractor,
    stats: PipelineStats,
) -> bool:
    """处理单个条目，返回是否调用过提取服务."""
    url = entry.url

    # 去重
    try:
        if await store.exists(url):
            logger.info(f"文章已存在，跳过: {url}")
            stats.skipped_duplicates += 1
            return False
    except Exception as e:
        logger.error(f"去重检查失败: {url} - {e}")
        stats.storage_errors += 1
        return False

    # 抓取正文
    try:
        body = await reader.fetch_body(url)
    except Exception as e:
        logger.error(f"抓取正文失败: {url} - {e}")
        stats.fetch_errors += 1
        return False

    if not body:
        logger.warning(f"正文为空: {url}")

    # 提取词汇，失败时仍保存文章
    words: list[ExtractedWord]
    try:
        words = await extractor.extract(body)
        logger.info(f"提取到 {len(words)} 个词汇: {url}")
    except Exception as e:
        logger.warning(f"词汇提取失败，仅保存文章: {url} - {e}")
        stats.llm_errors += 1
        words = []

    article = Article(
        url=url,
        title=entry.title,
        content=body,
        source=SourceType.RSS,
        published_at=to_naive_utc(entry.published_at),
        collected_at=utcnow(),
    )

    try:
        await store.save_article(article)
    except Exception as e:
        logger.error(f"保存文章失败: {url} - {e}")
        stats.storage_errors += 1
        return True

    logger.info(f"已保存文章: {entry.title}")
    stats.articles_saved += 1

    for word in words:
        vocab = Vocabulary(
            word=word.word,
            definition=word.definition,
            context_sentence=word.context_sentence,
            source_url=url,
        )
        try:
            await store.save_vocab(vocab)
        except Exception as e:
            logger.error(f"保存词汇失败: {word.word} - {e}")
            stats.storage_errors += 1
        else:
            stats.vocabularies_saved += 1

    return True
