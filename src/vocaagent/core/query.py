"""词汇查询服务（搜索 / 随机测验 / 今日词汇）."""

import json

from vocaagent.core.ports import VocabularyStore
from vocaagent.models.vocabulary import Vocabulary

SEPARATOR = "\n\n---\n\n"


def format_vocabulary(vocab: Vocabulary) -> str:
    """渲染单个词汇为 Markdown."""
    return (
        f"**{vocab.word}**\n\n"
        f"*Definition:* {vocab.definition}\n\n"
        f"> {vocab.context_sentence}\n\n"
        f"Source: {vocab.source_url}"
    )


class QueryService:
    """只读查询，结果渲染为文本."""

    def __init__(self, store: VocabularyStore) -> None:
        self.store = store

    async def search(self, query: str) -> str:
        """按单词或释义搜索."""
        vocabs = await self.store.search_vocab(query)
        if not vocabs:
            return f"No vocabulary found matching '{query}'"
        return SEPARATOR.join(format_vocabulary(v) for v in vocabs)

    async def random_quiz(self) -> str:
        """随机抽取一个词汇生成测验题."""
        vocab = await self.store.get_random_vocab()
        if vocab is None:
            return "No vocabulary available for quiz. Please collect some words first."

        quiz = {
            "type": "quiz",
            "word": vocab.word,
            "question": f"What is the meaning of '{vocab.word}'?",
            "answer": vocab.definition,
            "context": vocab.context_sentence,
            "source": vocab.source_url,
        }
        return json.dumps(quiz, ensure_ascii=False, indent=2)

    async def daily_digest(self) -> str:
        """今日收集的词汇."""
        vocabs = await self.store.get_today_vocab()
        if not vocabs:
            return "No vocabulary collected today."

        header = f"# Today's Vocabulary ({len(vocabs)} words)\n\n"
        return header + SEPARATOR.join(format_vocabulary(v) for v in vocabs)
