"""测试 MCP 服务."""

import io
import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import FakeStore, make_vocab

from vocaagent.errors import StorageError
from vocaagent.integration.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
)
from vocaagent.integration.server import DAILY_WORDS_URI, PROTOCOL_VERSION, McpServer
from vocaagent.models.article import Article


def _request(method: str, params: dict[str, Any] | None = None, rid: int = 1) -> str:
    payload: dict[str, Any] = {"jsonrpc": "2.0", "id": rid, "method": method}
    if params is not None:
        payload["params"] = params
    return json.dumps(payload)


async def _call(server: McpServer, line: str) -> dict[str, Any]:
    response = await server.handle_request(line)
    assert response is not None
    return json.loads(response.to_json())


@pytest.fixture
def server(fake_store: FakeStore) -> McpServer:
    return McpServer(fake_store)


class TestProtocol:
    """测试协议层."""

    async def test_malformed_json(self, server: McpServer) -> None:
        """非法 JSON 返回解析错误."""
        data = await _call(server, "{not json")
        assert data["id"] is None
        assert data["error"]["code"] == PARSE_ERROR
        assert "result" not in data

    async def test_non_object_request(self, server: McpServer) -> None:
        """不是请求对象的 JSON 也返回解析错误."""
        data = await _call(server, "[1, 2, 3]")
        assert data["error"]["code"] == PARSE_ERROR

    async def test_unknown_method(self, server: McpServer) -> None:
        """未知方法返回 method not found."""
        data = await _call(server, _request("foo/bar", rid=7))
        assert data["id"] == 7
        assert data["error"] == {
            "code": METHOD_NOT_FOUND,
            "message": "Method not found: foo/bar",
        }

    async def test_notification_gets_no_response(self, server: McpServer) -> None:
        """没有 id 的通知不回复."""
        line = json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert await server.handle_request(line) is None

    async def test_initialize(self, server: McpServer) -> None:
        """initialize 返回协议版本和能力."""
        data = await _call(server, _request("initialize", {}))
        result = data["result"]
        assert result["protocolVersion"] == PROTOCOL_VERSION
        assert "tools" in result["capabilities"]
        assert result["serverInfo"]["name"] == "voca-agent"
        assert "error" not in data

    async def test_string_id_is_echoed(self, server: McpServer) -> None:
        """字符串 id 原样返回."""
        line = json.dumps({"jsonrpc": "2.0", "id": "abc", "method": "ping"})
        data = await _call(server, line)
        assert data == {"jsonrpc": "2.0", "id": "abc", "result": {}}


class TestTools:
    """测试工具调用."""

    async def test_tools_list(self, server: McpServer) -> None:
        """列出两个工具."""
        data = await _call(server, _request("tools/list"))
        names = [tool["name"] for tool in data["result"]["tools"]]
        assert names == ["search_voca", "get_random_quiz"]

    async def test_search_voca(self, server: McpServer, fake_store: FakeStore) -> None:
        """search_voca 返回文本内容."""
        await fake_store.save_vocab(make_vocab("serendipity"))

        data = await _call(
            server,
            _request("tools/call", {"name": "search_voca", "arguments": {"query": "seren"}}),
        )

        content = data["result"]["content"]
        assert content[0]["type"] == "text"
        assert "**serendipity**" in content[0]["text"]

    async def test_search_voca_no_match(self, server: McpServer) -> None:
        """无结果时返回提示文本而不是错误."""
        data = await _call(
            server,
            _request("tools/call", {"name": "search_voca", "arguments": {"query": "xyz"}}),
        )
        assert data["result"]["content"][0]["text"] == "No vocabulary found matching 'xyz'"

    async def test_search_voca_missing_query(self, server: McpServer) -> None:
        """缺少 query 参数返回 invalid params."""
        data = await _call(
            server, _request("tools/call", {"name": "search_voca", "arguments": {}})
        )
        assert data["error"]["code"] == INVALID_PARAMS

    async def test_tools_call_without_params(self, server: McpServer) -> None:
        """缺少 params 返回 invalid params."""
        data = await _call(server, _request("tools/call"))
        assert data["error"]["code"] == INVALID_PARAMS

    async def test_get_random_quiz(self, server: McpServer, fake_store: FakeStore) -> None:
        """get_random_quiz 返回 JSON 测验."""
        await fake_store.save_vocab(make_vocab("ephemeral"))

        data = await _call(server, _request("tools/call", {"name": "get_random_quiz"}))

        quiz = json.loads(data["result"]["content"][0]["text"])
        assert quiz["word"] == "ephemeral"

    async def test_unknown_tool(self, server: McpServer) -> None:
        """未知工具返回 method not found."""
        data = await _call(server, _request("tools/call", {"name": "nope"}))
        assert data["error"] == {"code": METHOD_NOT_FOUND, "message": "Unknown tool: nope"}

    async def test_store_failure_is_internal_error(self) -> None:
        """存储异常返回 internal error."""
        store = MagicMock()
        store.search_vocab = AsyncMock(side_effect=StorageError("disk I/O error"))
        server = McpServer(store)

        data = await _call(
            server,
            _request("tools/call", {"name": "search_voca", "arguments": {"query": "a"}}),
        )

        assert data["error"]["code"] == INTERNAL_ERROR
        assert "disk I/O error" in data["error"]["message"]


class TestResources:
    """测试资源读取."""

    async def test_resources_list(self, server: McpServer) -> None:
        """列出今日词汇资源."""
        data = await _call(server, _request("resources/list"))
        assert data["result"]["resources"][0]["uri"] == DAILY_WORDS_URI

    async def test_read_daily_words(self, server: McpServer, fake_store: FakeStore) -> None:
        """读取今日词汇."""
        await fake_store.save_article(Article(url="https://example.com/a", title="A"))
        await fake_store.save_vocab(make_vocab("ephemeral"))

        data = await _call(server, _request("resources/read", {"uri": DAILY_WORDS_URI}))

        contents = data["result"]["contents"]
        assert contents[0]["uri"] == DAILY_WORDS_URI
        assert contents[0]["mimeType"] == "text/markdown"
        assert contents[0]["text"].startswith("# Today's Vocabulary (1 words)")

    async def test_read_unknown_resource(self, server: McpServer) -> None:
        """未知资源返回 invalid params."""
        data = await _call(server, _request("resources/read", {"uri": "voca://nope"}))
        assert data["error"]["code"] == INVALID_PARAMS


class TestRunLoop:
    """测试 stdio 循环."""

    async def test_one_response_per_request_line(self, server: McpServer) -> None:
        """每个请求一行响应，空行和通知不输出."""
        stdin = io.StringIO(
            _request("ping", rid=1)
            + "\n\n"
            + json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
            + "\n"
            + "garbage\n"
            + _request("tools/list", rid=2)
            + "\n"
        )
        stdout = io.StringIO()

        await server.run(stdin=stdin, stdout=stdout)

        lines = stdout.getvalue().splitlines()
        assert len(lines) == 3
        assert json.loads(lines[0])["id"] == 1
        assert json.loads(lines[1])["error"]["code"] == PARSE_ERROR
        assert json.loads(lines[2])["id"] == 2

    async def test_invalid_utf8_line_does_not_stop_loop(self, server: McpServer) -> None:
        """无法按 UTF-8 解码的行回复解析错误，后续请求照常处理."""
        stdin = io.BytesIO(
            b"\xff\xfe garbage\n" + _request("ping", rid=1).encode("utf-8") + b"\n"
        )
        stdout = io.StringIO()

        await server.run(stdin=stdin, stdout=stdout)

        lines = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert len(lines) == 2
        assert lines[0]["id"] is None
        assert lines[0]["error"]["code"] == PARSE_ERROR
        assert lines[1]["id"] == 1
        assert lines[1]["result"] == {}
