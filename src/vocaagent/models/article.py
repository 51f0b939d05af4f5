"""Article 文章模型."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from vocaagent.utils.time import utcnow


class SourceType(str, Enum):
    """文章来源."""

    RSS = "rss"
    MANUAL = "manual"
    YOUTUBE = "youtube"


class Article(SQLModel, table=True):
    """已收集的文章，url 全局唯一."""

    __tablename__ = "articles"  # type: ignore[assignment]

    url: str = Field(primary_key=True, description="原文链接")
    title: str = Field(description="标题")
    content: str = Field(default="", description="纯文本正文")
    source: SourceType = Field(default=SourceType.RSS, description="来源: rss|manual|youtube")
    # naive UTC，列类型固定为不带时区的 DateTime
    published_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime, description="发布时间 (UTC)"
    )
    collected_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime, description="收集时间 (UTC)"
    )
