"""OpenAI LLM Provider."""

from typing import Any

from openai import AsyncOpenAI, OpenAIError

from vocaagent.errors import ExtractionError
from vocaagent.llm.base import LLMConfig, LLMProvider, Message


class OpenAIProvider(LLMProvider):
    """OpenAI API Provider（支持所有 OpenAI 兼容接口）."""

    def __init__(
        self,
        config: LLMConfig,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
    ) -> None:
        super().__init__(config)
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def close(self) -> None:
        await self.client.close()

    async def chat(self, messages: list[Message]) -> str:
        openai_messages: list[dict[str, Any]] = [
            {"role": m.role, "content": m.content} for m in messages
        ]

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=openai_messages,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except OpenAIError as e:
            msg = f"OpenAI 请求失败: {e}"
            raise ExtractionError(msg) from e

        if not response.choices:
            msg = "OpenAI 返回空响应"
            raise ExtractionError(msg)
        return response.choices[0].message.content or ""
