"""外部集成：MCP 服务与 Obsidian 导出."""

from vocaagent.integration.obsidian import MarkdownExporter
from vocaagent.integration.server import McpServer

__all__ = [
    "MarkdownExporter",
    "McpServer",
]
