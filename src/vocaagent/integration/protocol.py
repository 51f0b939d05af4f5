"""JSON-RPC 2.0 消息模型."""

import json
from typing import Any

from pydantic import BaseModel

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JsonRpcRequest(BaseModel):
    """请求（id 为空时为通知）."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    method: str
    params: dict[str, Any] | None = None


class JsonRpcError(BaseModel):
    """错误体."""

    code: int
    message: str


class JsonRpcResponse(BaseModel):
    """响应：result 与 error 二选一."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: Any | None = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, id: int | str | None, result: Any) -> "JsonRpcResponse":
        return cls(id=id, result=result)

    @classmethod
    def failure(cls, id: int | str | None, code: int, message: str) -> "JsonRpcResponse":
        return cls(id=id, error=JsonRpcError(code=code, message=message))

    def to_json(self) -> str:
        """序列化为单行 JSON，省略未设置的 result/error."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump()
        else:
            data["result"] = self.result
        return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


class TextContent(BaseModel):
    """工具返回的文本内容."""

    type: str = "text"
    text: str


class ToolCallResult(BaseModel):
    """tools/call 结果."""

    content: list[TextContent]


class ToolCallParams(BaseModel):
    """tools/call 参数."""

    name: str
    arguments: dict[str, Any] | None = None
