"""核心业务逻辑."""

from vocaagent.core.pipeline import PipelineStats, run_pipeline
from vocaagent.core.ports import (
    ExtractedWord,
    FeedEntry,
    FeedReader,
    VocabularyExtractor,
    VocabularyStore,
)
from vocaagent.core.query import QueryService, format_vocabulary

__all__ = [
    "ExtractedWord",
    "FeedEntry",
    "FeedReader",
    "PipelineStats",
    "QueryService",
    "VocabularyExtractor",
    "VocabularyStore",
    "format_vocabulary",
    "run_pipeline",
]
