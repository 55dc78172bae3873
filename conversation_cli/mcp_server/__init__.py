"""MCP server exposing ConversationV1 methods as tools.

Package structure:
  __init__.py       — FastMCP init, register() calls, re-exports
  __main__.py       — ``python -m conversation_cli.mcp_server`` entry point
  _core.py          — Client caching, _call dispatcher, response contract
  _tools_read.py    — 8 message/listing tools
  _tools_write.py   — 4 training-data and generic-call tools

Run: python -m conversation_cli.mcp_server
Requires: pip install .[mcp]
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from conversation_cli.mcp_server import _tools_read, _tools_write

mcp = FastMCP(
    "conversation",
    instructions=(
        "Conversation v1 API tools: send utterances to a workspace and manage "
        "its intents, examples and counterexamples. "
        "To continue a conversation, pass the 'context' from the previous "
        "message response back into message. "
        "Use list_operations + call_operation for anything without a dedicated tool "
        "(updates and deletes)."
    ),
)

for _mod in [_tools_read, _tools_write]:
    _mod.register(mcp)

# ---------------------------------------------------------------------------
# Re-exports (tests import via mcp_mod.xxx)
# ---------------------------------------------------------------------------

from conversation_cli.mcp_server._core import (  # noqa: E402, F401
    _call,
    _contract_error,
    _ensure_contract_dict,
    _finalize_tool_result,
    _get_client,
)
from conversation_cli.mcp_server._tools_read import (  # noqa: E402, F401
    get_counter_examples,
    get_examples,
    get_intents,
    get_workspace,
    list_operations,
    list_workspaces,
    message,
    workspace_status,
)
from conversation_cli.mcp_server._tools_write import (  # noqa: E402, F401
    call_operation,
    create_counter_example,
    create_example,
    create_intent,
)


def main():
    """Run the MCP server (stdio transport)."""
    mcp.run()
