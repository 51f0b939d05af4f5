"""应用配置管理."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FEED_URLS = ["https://blog.rust-lang.org/feed.xml"]


class Settings(BaseSettings):
    """应用配置（环境变量）."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # 订阅源配置
    feed_urls: list[str] = DEFAULT_FEED_URLS

    # 存储配置
    database_url: str = "sqlite+aiosqlite:///./voca-agent.db"

    # 词汇提取配置
    extractor_provider: Literal["openai", "ollama", "mock"] = "openai"

    # OpenAI 配置
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Ollama 配置
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # 流水线配置
    rate_limit_delay_seconds: float = 2.0
    fetch_timeout_seconds: int = 30

    # Obsidian 导出配置
    obsidian_path: Path | None = None

    # Telegram 推送配置
    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    notify_word_count: int = 3

    # 定时任务配置
    sync_interval_minutes: int = 60


@lru_cache
def get_settings() -> Settings:
    """获取应用配置（带缓存）."""
    return Settings()
