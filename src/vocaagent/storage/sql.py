"""基于 SQLModel 的词汇存储."""

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlmodel import col, or_, select

from vocaagent.core.ports import VocabularyStore
from vocaagent.errors import StorageError
from vocaagent.models.article import Article
from vocaagent.models.database import create_session_factory, init_db
from vocaagent.models.vocabulary import Vocabulary
from vocaagent.utils.time import utc_day_bounds

logger = logging.getLogger(__name__)


class SQLVocabularyStore(VocabularyStore):
    """
    文章与词汇的关系型存储.

    每次操作使用独立会话，读写可以并发进行。
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory

    @classmethod
    async def connect(cls, database_url: str) -> "SQLVocabularyStore":
        """连接数据库并初始化表结构."""
        try:
            engine = await init_db(database_url)
        except (SQLAlchemyError, OSError, ValueError) as e:
            msg = f"无法打开数据库: {e}"
            raise StorageError(msg) from e
        return cls(engine, create_session_factory(engine))

    async def close(self) -> None:
        """释放连接池."""
        await self._engine.dispose()

    async def exists(self, url: str) -> bool:
        try:
            async with self._session_factory() as session:
                article = await session.get(Article, url)
                return article is not None
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def save_article(self, article: Article) -> None:
        row = Article(
            url=article.url,
            title=article.title,
            content=article.content,
            source=article.source,
            published_at=article.published_at,
            collected_at=article.collected_at,
        )
        try:
            async with self._session_factory() as session:
                if await session.get(Article, article.url) is not None:
                    logger.debug(f"文章已存在，忽略写入: {article.url}")
                    return
                session.add(row)
                try:
                    await session.commit()
                except IntegrityError:
                    # 并发写入同一 url，先写入者生效
                    await session.rollback()
                    logger.debug(f"文章已存在，忽略写入: {article.url}")
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def save_vocab(self, vocab: Vocabulary) -> None:
        row = Vocabulary(
            word=vocab.word,
            definition=vocab.definition,
            context_sentence=vocab.context_sentence,
            source_url=vocab.source_url,
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def get_all_vocab(self) -> list[Vocabulary]:
        stmt = select(Vocabulary).order_by(col(Vocabulary.id))
        return await self._fetch_all(stmt)

    async def search_vocab(self, query: str) -> list[Vocabulary]:
        # SQLite LIKE：ASCII 不区分大小写
        stmt = (
            select(Vocabulary)
            .where(
                or_(
                    col(Vocabulary.word).contains(query, autoescape=True),
                    col(Vocabulary.definition).contains(query, autoescape=True),
                )
            )
            .order_by(col(Vocabulary.id))
        )
        return await self._fetch_all(stmt)

    async def get_today_vocab(self) -> list[Vocabulary]:
        start, end = utc_day_bounds()
        stmt = (
            select(Vocabulary)
            .join(Article, col(Vocabulary.source_url) == col(Article.url))
            .where(col(Article.collected_at) >= start)
            .where(col(Article.collected_at) < end)
            .order_by(col(Vocabulary.id))
        )
        return await self._fetch_all(stmt)

    async def get_random_vocab(self) -> Vocabulary | None:
        stmt = select(Vocabulary).order_by(func.random()).limit(1)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return result.scalars().first()
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e

    async def _fetch_all(self, stmt) -> list[Vocabulary]:  # type: ignore[no-untyped-def]
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(str(e)) from e
