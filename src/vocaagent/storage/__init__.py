"""存储层."""

from vocaagent.storage.sql import SQLVocabularyStore

__all__ = ["SQLVocabularyStore"]
