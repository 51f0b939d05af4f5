"""Ollama LLM Provider."""

import httpx

from vocaagent.errors import ExtractionError
from vocaagent.llm.base import LLMConfig, LLMProvider, Message


class OllamaProvider(LLMProvider):
    """Ollama 本地模型 Provider."""

    def __init__(
        self,
        config: LLMConfig,
        host: str = "http://localhost:11434",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config)
        self.host = host.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=120.0)

    async def close(self) -> None:
        """关闭客户端."""
        await self._client.aclose()

    async def chat(self, messages: list[Message]) -> str:
        url = f"{self.host}/api/chat"
        payload = {
            "model": self.config.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.max_tokens,
            },
        }

        try:
            response = await self._client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            msg = f"Ollama 请求失败: {e}"
            raise ExtractionError(msg) from e

        return data.get("message", {}).get("content", "")
