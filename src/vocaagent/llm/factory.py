"""词汇提取器工厂."""

from vocaagent.config import Settings
from vocaagent.core.ports import VocabularyExtractor
from vocaagent.errors import ConfigError
from vocaagent.llm.base import LLMConfig, LLMProvider
from vocaagent.llm.extractor import LLMVocabularyExtractor, MockVocabularyExtractor
from vocaagent.llm.ollama import OllamaProvider
from vocaagent.llm.openai import OpenAIProvider


def create_llm_provider(settings: Settings) -> LLMProvider:
    """根据配置创建 LLM Provider."""
    if settings.extractor_provider == "ollama":
        config = LLMConfig(model=settings.ollama_model)
        return OllamaProvider(config=config, host=settings.ollama_host)

    if not settings.openai_api_key:
        msg = "未配置 OPENAI_API_KEY"
        raise ConfigError(msg)

    config = LLMConfig(model=settings.openai_model)
    return OpenAIProvider(
        config=config,
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
    )


def create_extractor(settings: Settings) -> VocabularyExtractor:
    """根据配置创建词汇提取器."""
    if settings.extractor_provider == "mock":
        return MockVocabularyExtractor()
    return LLMVocabularyExtractor(create_llm_provider(settings))
