"""词汇提取器."""

import json
import re

from pydantic import ValidationError

from vocaagent.core.ports import ExtractedWord, VocabularyExtractor
from vocaagent.errors import ExtractionError
from vocaagent.llm.base import LLMProvider, Message

SYSTEM_PROMPT = """You are a strict TOEFL exam creator. Identify 3-5 distinct English words from the text that are CEFR Level C1 or C2.
Ignore common words. For each word, provide:
1. The word itself (lemma form).
2. A concise definition in English suitable for academic context.
3. The specific sentence from the text where it was used (context).

Output must be valid JSON array with the following structure:
[
  {
    "word": "string",
    "definition": "string",
    "context_sentence": "string"
  }
]

Only output the JSON array, no other text."""

USER_PROMPT_TEMPLATE = """Extract vocabulary words from the following text:

{content}"""

# 避免超过 token 限制
MAX_CONTENT_LENGTH = 8000

STOP_WORDS = frozenset(
    """
    the a an is are was were be been being have has had do does did will would
    could should may might must can this that these those i you he she it we
    they what which who whom when where why how all each every both few more
    most other some such no nor not only own same so than too very just but
    and or if for with about against between into through during before after
    above below to from up down in out on off over under
    """.split()
)


def filter_words(words: list[ExtractedWord]) -> list[ExtractedWord]:
    """过滤短词（≤3 个字符）和常用词."""
    return [
        w
        for w in words
        if len(w.word) > 3 and w.word.lower() not in STOP_WORDS
    ]


class LLMVocabularyExtractor(VocabularyExtractor):
    """通过 LLM 提取 C1/C2 级别词汇."""

    def __init__(self, provider: LLMProvider) -> None:
        self.provider = provider

    async def extract(self, text: str) -> list[ExtractedWord]:
        messages = self._build_messages(text)
        response = await self.provider.chat(messages)
        return filter_words(self._parse_response(response))

    async def close(self) -> None:
        await self.provider.close()

    def _build_messages(self, text: str) -> list[Message]:
        """构建对话消息."""
        if len(text) > MAX_CONTENT_LENGTH:
            text = text[:MAX_CONTENT_LENGTH]

        return [
            Message(role="system", content=SYSTEM_PROMPT),
            Message(role="user", content=USER_PROMPT_TEMPLATE.format(content=text)),
        ]

    def _parse_response(self, response: str) -> list[ExtractedWord]:
        """解析 LLM 响应，格式错误时抛出 ExtractionError."""
        response = response.strip()

        # 移除可能的 markdown 代码块标记
        if response.startswith("```json"):
            response = response[7:]
        if response.startswith("```"):
            response = response[3:]
        if response.endswith("```"):
            response = response[:-3]

        response = response.strip()

        try:
            data = json.loads(response)
        except json.JSONDecodeError as e:
            msg = f"JSON 解析失败 - LLM 返回格式错误: {e}"
            raise ExtractionError(msg) from e

        if not isinstance(data, list):
            msg = f"LLM 返回的不是 JSON 数组: {type(data).__name__}"
            raise ExtractionError(msg)

        try:
            return [ExtractedWord.model_validate(item) for item in data]
        except ValidationError as e:
            msg = f"LLM 返回字段缺失: {e}"
            raise ExtractionError(msg) from e


class MockVocabularyExtractor(VocabularyExtractor):
    """
    离线启发式提取器，不调用任何外部服务.

    选取长度 ≥ 9 的非常用词作为候选，用于本地调试和测试。
    """

    MIN_WORD_LENGTH = 9
    MAX_WORDS = 5

    async def extract(self, text: str) -> list[ExtractedWord]:
        results: list[ExtractedWord] = []
        seen: set[str] = set()

        for sentence in re.split(r"(?<=[.!?])\s+", text):
            sentence = " ".join(sentence.split())
            for word in re.findall(r"[A-Za-z]+", sentence):
                key = word.lower()
                if len(key) < self.MIN_WORD_LENGTH or key in seen:
                    continue
                if key in STOP_WORDS:
                    continue
                seen.add(key)
                results.append(
                    ExtractedWord(
                        word=key,
                        definition=f"(offline) definition of '{key}' unavailable",
                        context_sentence=sentence,
                    )
                )
                if len(results) >= self.MAX_WORDS:
                    return results

        return results
