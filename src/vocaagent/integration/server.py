"""MCP 服务（stdio 模式，每行一个 JSON-RPC 消息）."""

import asyncio
import json
import logging
import sys
from typing import IO, Any, TextIO

from pydantic import ValidationError

from vocaagent.core.ports import VocabularyStore
from vocaagent.core.query import QueryService
from vocaagent.integration.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolCallParams,
    ToolCallResult,
)

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "voca-agent"
SERVER_VERSION = "0.1.0"

DAILY_WORDS_URI = "voca://daily-words"

TOOLS: list[dict[str, Any]] = [
    {
        "name": "search_voca",
        "description": "Search vocabulary in my word bank by word or definition",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query for word or definition",
                }
            },
            "required": ["query"],
        },
    },
    {
        "name": "get_random_quiz",
        "description": "Get a random vocabulary quiz question",
        "inputSchema": {"type": "object", "properties": {}},
    },
]

RESOURCES: list[dict[str, Any]] = [
    {
        "uri": DAILY_WORDS_URI,
        "name": "Today's Vocabulary",
        "description": "List of vocabulary words collected today",
        "mimeType": "text/markdown",
    }
]


class McpServer:
    """把 JSON-RPC 请求分发到 QueryService."""

    def __init__(self, store: VocabularyStore) -> None:
        self.query = QueryService(store)

    async def run(
        self,
        stdin: IO[bytes] | IO[str] | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        """读取请求直到 EOF；默认按字节读取 stdin，解码失败按解析错误回复."""
        stdin = stdin or sys.stdin.buffer
        stdout = stdout or sys.stdout
        logger.info("MCP 服务启动 (stdio)")

        while True:
            line = await asyncio.to_thread(stdin.readline)
            if not line:
                break
            if not line.strip():
                continue

            logger.debug(f"收到请求: {line.strip()!r}")
            response = await self.handle_request(line)
            if response is None:
                continue

            payload = response.to_json()
            logger.debug(f"发送响应: {payload}")
            stdout.write(payload + "\n")
            stdout.flush()

        logger.info("MCP 服务关闭")

    async def handle_request(self, line: str | bytes) -> JsonRpcResponse | None:
        """处理单行请求；通知消息返回 None."""
        try:
            if isinstance(line, bytes):
                line = line.decode("utf-8")
            request = JsonRpcRequest.model_validate(json.loads(line))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"请求解析失败: {e}")
            return JsonRpcResponse.failure(None, PARSE_ERROR, f"Parse error: {e}")

        rid = request.id
        method = request.method

        if method.startswith("notifications/") and rid is None:
            return None

        if method == "initialize":
            return JsonRpcResponse.success(
                rid,
                {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {
                        "tools": {"listChanged": False},
                        "resources": {"listChanged": False, "subscribe": False},
                    },
                    "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                },
            )
        if method in ("initialized", "ping"):
            return JsonRpcResponse.success(rid, {})
        if method == "tools/list":
            return JsonRpcResponse.success(rid, {"tools": TOOLS})
        if method == "tools/call":
            return await self._handle_tools_call(rid, request.params)
        if method == "resources/list":
            return JsonRpcResponse.success(rid, {"resources": RESOURCES})
        if method == "resources/read":
            return await self._handle_resources_read(rid, request.params)

        logger.error(f"未知方法: {method}")
        return JsonRpcResponse.failure(
            rid, METHOD_NOT_FOUND, f"Method not found: {method}"
        )

    async def _handle_tools_call(
        self, rid: int | str | None, params: dict[str, Any] | None
    ) -> JsonRpcResponse:
        if params is None:
            return JsonRpcResponse.failure(rid, INVALID_PARAMS, "Missing params")
        try:
            call = ToolCallParams.model_validate(params)
        except ValidationError as e:
            return JsonRpcResponse.failure(rid, INVALID_PARAMS, f"Invalid params: {e}")

        if call.name == "search_voca":
            query = (call.arguments or {}).get("query")
            if not isinstance(query, str):
                return JsonRpcResponse.failure(
                    rid, INVALID_PARAMS, "Invalid arguments: 'query' is required"
                )
            try:
                text = await self.query.search(query)
            except Exception as e:
                logger.exception("搜索失败")
                return JsonRpcResponse.failure(
                    rid, INTERNAL_ERROR, f"Search failed: {e}"
                )
        elif call.name == "get_random_quiz":
            try:
                text = await self.query.random_quiz()
            except Exception as e:
                logger.exception("测验生成失败")
                return JsonRpcResponse.failure(rid, INTERNAL_ERROR, f"Quiz failed: {e}")
        else:
            return JsonRpcResponse.failure(
                rid, METHOD_NOT_FOUND, f"Unknown tool: {call.name}"
            )

        result = ToolCallResult(content=[TextContent(text=text)])
        return JsonRpcResponse.success(rid, result.model_dump())

    async def _handle_resources_read(
        self, rid: int | str | None, params: dict[str, Any] | None
    ) -> JsonRpcResponse:
        if params is None:
            return JsonRpcResponse.failure(rid, INVALID_PARAMS, "Missing params")
        uri = params.get("uri")
        if not isinstance(uri, str):
            return JsonRpcResponse.failure(rid, INVALID_PARAMS, "Missing uri parameter")
        if uri != DAILY_WORDS_URI:
            return JsonRpcResponse.failure(
                rid, INVALID_PARAMS, f"Unknown resource: {uri}"
            )

        try:
            text = await self.query.daily_digest()
        except Exception as e:
            logger.exception("读取今日词汇失败")
            return JsonRpcResponse.failure(rid, INTERNAL_ERROR, f"Failed to read: {e}")

        return JsonRpcResponse.success(
            rid,
            {
                "contents": [
                    {"uri": DAILY_WORDS_URI, "mimeType": "text/markdown", "text": text}
                ]
            },
        )
