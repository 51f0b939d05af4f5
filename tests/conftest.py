"""测试配置和 fixtures."""

import string
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio

from vocaagent.core.ports import (
    ExtractedWord,
    FeedEntry,
    FeedReader,
    VocabularyExtractor,
    VocabularyStore,
)
from vocaagent.errors import ExtractionError, NetworkError, StorageError
from vocaagent.models.article import Article
from vocaagent.models.vocabulary import Vocabulary
from vocaagent.storage.sql import SQLVocabularyStore
from vocaagent.utils.time import utc_day_bounds


class FakeReader(FeedReader):
    """内存订阅源：feeds 为 url → 条目列表，bodies 为 url → 正文."""

    def __init__(
        self,
        feeds: dict[str, list[FeedEntry]] | None = None,
        bodies: dict[str, str] | None = None,
        failing_feeds: set[str] | None = None,
        failing_bodies: set[str] | None = None,
    ) -> None:
        self.feeds = feeds or {}
        self.bodies = bodies or {}
        self.failing_feeds = failing_feeds or set()
        self.failing_bodies = failing_bodies or set()
        self.feed_calls: list[str] = []
        self.body_calls: list[str] = []

    async def fetch_feed(self, url: str) -> list[FeedEntry]:
        self.feed_calls.append(url)
        if url in self.failing_feeds:
            raise NetworkError(f"feed unreachable: {url}")
        return list(self.feeds.get(url, []))

    async def fetch_body(self, url: str) -> str:
        self.body_calls.append(url)
        if url in self.failing_bodies:
            raise NetworkError(f"body unreachable: {url}")
        return self.bodies.get(url, f"Body of {url}")


class FakeExtractor(VocabularyExtractor):
    """按固定结果返回词汇，fail=True 时抛出 ExtractionError."""

    def __init__(self, words: list[ExtractedWord] | None = None, fail: bool = False):
        self.words = words or []
        self.fail = fail
        self.calls: list[str] = []

    async def extract(self, text: str) -> list[ExtractedWord]:
        self.calls.append(text)
        if self.fail:
            raise ExtractionError("extraction service unavailable")
        return list(self.words)


# SQLite LIKE 只对 ASCII 字母忽略大小写
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class FakeStore(VocabularyStore):
    """内存存储，可按操作注入失败."""

    def __init__(self) -> None:
        self.articles: dict[str, Article] = {}
        self.vocabs: list[Vocabulary] = []
        self.fail_exists = False
        self.fail_save_article = False
        self.fail_save_vocab = False

    async def exists(self, url: str) -> bool:
        if self.fail_exists:
            raise StorageError("exists failed")
        return url in self.articles

    async def save_article(self, article: Article) -> None:
        if self.fail_save_article:
            raise StorageError("save_article failed")
        self.articles.setdefault(article.url, article)

    async def save_vocab(self, vocab: Vocabulary) -> None:
        if self.fail_save_vocab:
            raise StorageError("save_vocab failed")
        vocab.id = len(self.vocabs) + 1
        self.vocabs.append(vocab)

    async def get_all_vocab(self) -> list[Vocabulary]:
        return list(self.vocabs)

    async def search_vocab(self, query: str) -> list[Vocabulary]:
        q = _ascii_lower(query)
        return [
            v
            for v in self.vocabs
            if q in _ascii_lower(v.word) or q in _ascii_lower(v.definition)
        ]

    async def get_today_vocab(self) -> list[Vocabulary]:
        start, end = utc_day_bounds()
        return [
            v
            for v in self.vocabs
            if v.source_url in self.articles
            and start <= self.articles[v.source_url].collected_at < end
        ]

    async def get_random_vocab(self) -> Vocabulary | None:
        return self.vocabs[0] if self.vocabs else None


def make_word(word: str, definition: str = "", context: str = "") -> ExtractedWord:
    """构造候选词汇."""
    return ExtractedWord(
        word=word,
        definition=definition or f"definition of {word}",
        context_sentence=context or f"A sentence with {word}.",
    )


def make_vocab(
    word: str,
    definition: str = "",
    context: str = "",
    source_url: str = "https://example.com/a",
) -> Vocabulary:
    """构造词汇记录."""
    return Vocabulary(
        word=word,
        definition=definition or f"definition of {word}",
        context_sentence=context or f"A sentence with {word}.",
        source_url=source_url,
    )


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> AsyncGenerator[SQLVocabularyStore, None]:
    """创建测试用的文件数据库存储."""
    sql_store = await SQLVocabularyStore.connect(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    )
    yield sql_store
    await sql_store.close()
