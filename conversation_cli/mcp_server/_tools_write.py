"""Write tools: training data mutations and the generic operation call (4 tools)."""

from __future__ import annotations

from conversation_cli import endpoints
from conversation_cli.mcp_server._core import _call, _contract_error, _finalize_tool_result


def create_intent(
    workspace_id: str,
    intent: str,
    description: str | None = None,
    examples: list[str] | None = None,
) -> dict:
    """Create an intent, optionally seeded with example utterances.

    Args:
        workspace_id: Target workspace.
        intent: Intent name (letters, digits, '_', '-', '.').
        description: Optional description.
        examples: Example utterances (plain strings).
    """
    params = {"workspace_id": workspace_id, "intent": intent, "description": description}
    if examples:
        params["examples"] = [{"text": text} for text in examples]
    return _finalize_tool_result(_call("create_intent", params=params))


def create_example(workspace_id: str, intent: str, text: str) -> dict:
    """Add one training example to an intent."""
    return _finalize_tool_result(
        _call("create_example", workspace_id=workspace_id, intent=intent, text=text)
    )


def create_counter_example(workspace_id: str, text: str) -> dict:
    """Mark an input as irrelevant to the workspace."""
    return _finalize_tool_result(
        _call("create_counter_example", workspace_id=workspace_id, text=text)
    )


def call_operation(operation: str, params: dict | None = None) -> dict:
    """Run any Conversation API operation by name (see list_operations).

    Args:
        operation: Wire name such as 'deleteExample' or 'updateIntent'.
        params: Field values. Path fields and required fields must be present;
            undeclared fields are dropped.
    """
    if endpoints.lookup(operation) is None:
        return _finalize_tool_result(
            _contract_error(f"Unknown operation: {operation}", "error")
        )
    result = _call("call", operation=operation, params=params or {})
    if not isinstance(result, dict):
        result = {"result": result}
    return _finalize_tool_result(result)


def register(mcp):
    """Register all write tools with the FastMCP instance."""
    mcp.tool()(create_intent)
    mcp.tool()(create_example)
    mcp.tool()(create_counter_example)
    mcp.tool()(call_operation)
