"""LLM 抽象层."""

from vocaagent.llm.base import LLMConfig, LLMProvider, Message
from vocaagent.llm.extractor import (
    LLMVocabularyExtractor,
    MockVocabularyExtractor,
    filter_words,
)
from vocaagent.llm.factory import create_extractor, create_llm_provider
from vocaagent.llm.ollama import OllamaProvider
from vocaagent.llm.openai import OpenAIProvider

__all__ = [
    "LLMConfig",
    "LLMProvider",
    "LLMVocabularyExtractor",
    "Message",
    "MockVocabularyExtractor",
    "OllamaProvider",
    "OpenAIProvider",
    "create_extractor",
    "create_llm_provider",
    "filter_words",
]
