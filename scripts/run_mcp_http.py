"""Serve the conversation MCP tools over streamable HTTP instead of stdio."""

import os

from conversation_cli.mcp_server import mcp

if __name__ == "__main__":
    mcp.settings.host = os.environ.get("CONVERSATION_MCP_HTTP_HOST", "127.0.0.1")
    mcp.settings.port = int(os.environ.get("CONVERSATION_MCP_HTTP_PORT", "8808"))
    mcp.run(transport="streamable-http")
