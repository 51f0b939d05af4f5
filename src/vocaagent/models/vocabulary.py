"""Vocabulary 词汇模型."""

from sqlmodel import Field, SQLModel


class Vocabulary(SQLModel, table=True):
    """从文章中提取的单个词汇."""

    __tablename__ = "vocabularies"  # type: ignore[assignment]

    id: int | None = Field(default=None, primary_key=True)
    word: str = Field(description="单词（原形）")
    definition: str = Field(description="英文释义")
    context_sentence: str = Field(description="原文例句")
    source_url: str = Field(
        default="", foreign_key="articles.url", description="来源文章"
    )
