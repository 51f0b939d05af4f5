"""数据模型."""

from vocaagent.models.article import Article, SourceType
from vocaagent.models.database import create_session_factory, init_db
from vocaagent.models.vocabulary import Vocabulary

__all__ = [
    "Article",
    "SourceType",
    "Vocabulary",
    "create_session_factory",
    "init_db",
]
