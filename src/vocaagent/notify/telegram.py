"""Telegram 每日词汇推送."""

import logging
import random
from dataclasses import dataclass

import httpx

from vocaagent.config import Settings
from vocaagent.errors import NetworkError
from vocaagent.models.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

TELEGRAM_API_BASE = "https://api.telegram.org"

# MarkdownV2 需要转义的字符
_MARKDOWN_SPECIAL = set("\\_*[]()~`>#+-=|{}.!")


def escape_markdown(text: str) -> str:
    """转义 Telegram MarkdownV2 特殊字符."""
    return "".join(f"\\{c}" if c in _MARKDOWN_SPECIAL else c for c in text)


class TelegramClient:
    """Telegram Bot API 客户端."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.bot_token = bot_token
        self.chat_id = chat_id
        self._client = client or httpx.AsyncClient(timeout=30.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelegramClient | None":
        """未配置 token 或 chat_id 时返回 None."""
        if not settings.telegram_bot_token or not settings.telegram_chat_id:
            return None
        return cls(settings.telegram_bot_token, settings.telegram_chat_id)

    async def close(self) -> None:
        await self._client.aclose()

    async def send_message(self, text: str) -> None:
        """发送 MarkdownV2 消息."""
        url = f"{TELEGRAM_API_BASE}/bot{self.bot_token}/sendMessage"
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": "MarkdownV2"}

        try:
            response = await self._client.post(url, json=payload)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            msg = f"Telegram 请求失败: {e}"
            raise NetworkError(msg) from e

        if not data.get("ok"):
            msg = f"Telegram API 错误: {data.get('description') or 'Unknown error'}"
            raise NetworkError(msg)


@dataclass
class NotifyResult:
    """推送结果."""

    words_sent: int
    skipped: bool


class Notifier:
    """从今日词汇中随机选取若干个推送."""

    def __init__(self, telegram: TelegramClient, word_count: int = 3) -> None:
        self.telegram = telegram
        self.word_count = word_count

    def select_words(self, vocabs: list[Vocabulary]) -> list[Vocabulary]:
        """随机选取，不足 word_count 时全部返回."""
        count = min(self.word_count, len(vocabs))
        return random.sample(vocabs, count)

    def format_message(self, vocabs: list[Vocabulary]) -> str:
        """格式化为 MarkdownV2 消息."""
        if not vocabs:
            return "📚 *Today's Vocabulary*\n\nNo words collected today\\!"

        lines = ["📚 *Today's Vocabulary*\n"]
        for i, vocab in enumerate(vocabs, 1):
            lines.append(
                f"{i}\\. *{escape_markdown(vocab.word)}*\n"
                f"   📖 _{escape_markdown(vocab.definition)}_\n"
                f"   > \"{escape_markdown(vocab.context_sentence)}\"\n"
            )
        return "\n".join(lines)

    async def notify(self, vocabs: list[Vocabulary]) -> NotifyResult:
        """发送推送；没有词汇时跳过."""
        if not vocabs:
            logger.warning("没有可推送的词汇")
            return NotifyResult(words_sent=0, skipped=True)

        selected = self.select_words(vocabs)
        await self.telegram.send_message(self.format_message(selected))
        logger.info(f"已推送 {len(selected)} 个词汇")
        return NotifyResult(words_sent=len(selected), skipped=False)
