"""流水线依赖的抽象接口."""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel, Field

from vocaagent.models.article import Article
from vocaagent.models.vocabulary import Vocabulary
from vocaagent.utils.time import utcnow


class FeedEntry(BaseModel):
    """Feed 中的一条目."""

    url: str
    title: str = "Untitled"
    published_at: datetime = Field(default_factory=utcnow)


class ExtractedWord(BaseModel):
    """提取服务返回的候选词汇."""

    word: str
    definition: str
    context_sentence: str


class FeedReader(ABC):
    """订阅源读取 + 正文抓取."""

    @abstractmethod
    async def fetch_feed(self, url: str) -> list[FeedEntry]:
        """读取 Feed，返回条目列表（可为空）."""
        ...

    @abstractmethod
    async def fetch_body(self, url: str) -> str:
        """抓取网页正文纯文本，空字符串也视为成功."""
        ...

    async def close(self) -> None:
        """释放连接."""


class VocabularyExtractor(ABC):
    """词汇提取服务."""

    @abstractmethod
    async def extract(self, text: str) -> list[ExtractedWord]:
        """从文本中提取高阶词汇."""
        ...

    async def close(self) -> None:
        """释放连接."""


class VocabularyStore(ABC):
    """文章与词汇存储."""

    @abstractmethod
    async def exists(self, url: str) -> bool: ...

    @abstractmethod
    async def save_article(self, article: Article) -> None:
        """保存文章；url 已存在时静默忽略（先写入者生效）."""
        ...

    @abstractmethod
    async def save_vocab(self, vocab: Vocabulary) -> None: ...

    @abstractmethod
    async def get_all_vocab(self) -> list[Vocabulary]: ...

    @abstractmethod
    async def search_vocab(self, query: str) -> list[Vocabulary]:
        """按单词或释义子串搜索."""
        ...

    @abstractmethod
    async def get_today_vocab(self) -> list[Vocabulary]:
        """所属文章在当前 UTC 日期收集的词汇."""
        ...

    @abstractmethod
    async def get_random_vocab(self) -> Vocabulary | None: ...

    async def close(self) -> None:
        """释放连接."""
