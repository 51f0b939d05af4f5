"""数据库初始化和会话管理."""

import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

# 注册表模型到 metadata
from vocaagent.models.article import Article  # noqa: F401
from vocaagent.models.vocabulary import Vocabulary  # noqa: F401

logger = logging.getLogger(__name__)


async def init_db(database_url: str) -> AsyncEngine:
    """创建数据库引擎，并在表不存在时建表（幂等）."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.info(f"数据库已就绪: {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """创建会话工厂."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
