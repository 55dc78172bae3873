"""Read tools: message, workspace/intent/example listings (8 tools)."""

from __future__ import annotations

from dataclasses import asdict

from conversation_cli import endpoints
from conversation_cli.mcp_server._core import _call, _finalize_tool_result


def _paging(page_limit, include_count, sort, cursor):
    params = {"page_limit": page_limit, "sort": sort, "cursor": cursor}
    if include_count:
        params["include_count"] = True
    return {k: v for k, v in params.items() if v is not None}


def message(
    workspace_id: str,
    text: str = "",
    context: dict | None = None,
    alternate_intents: bool = False,
) -> dict:
    """Send a user utterance to a workspace and return the interpreted response.

    Args:
        workspace_id: Workspace to converse with.
        text: The user's utterance.
        context: The 'context' object from the previous response, to continue
            the same conversation.
        alternate_intents: Include lower-confidence intents.

    Returns:
        Dict with intents, entities, input, output (text, nodes_visited), context.
    """
    params = {"workspace_id": workspace_id, "input": {"text": text}}
    if context:
        params["context"] = context
    if alternate_intents:
        params["alternate_intents"] = True
    return _finalize_tool_result(_call("message", params=params))


def list_workspaces(
    page_limit: int | None = None,
    include_count: bool = False,
    sort: str | None = None,
    cursor: str | None = None,
) -> dict:
    """List workspaces (id, name, language, description, updated)."""
    return _finalize_tool_result(
        _call("list_workspaces", params=_paging(page_limit, include_count, sort, cursor))
    )


def get_workspace(workspace_id: str, export: bool = False) -> dict:
    """Get one workspace. export=True includes intents, entities and dialog nodes."""
    params = {"workspace_id": workspace_id}
    if export:
        params["export"] = True
    return _finalize_tool_result(_call("get_workspace", params=params))


def workspace_status(workspace_id: str) -> dict:
    """Get the training status of a workspace."""
    return _finalize_tool_result(_call("workspace_status", workspace_id=workspace_id))


def get_intents(
    workspace_id: str,
    export: bool = False,
    page_limit: int | None = None,
    include_count: bool = False,
    sort: str | None = None,
    cursor: str | None = None,
) -> dict:
    """List intents in a workspace. export=True includes each intent's examples."""
    params = {"workspace_id": workspace_id, **_paging(page_limit, include_count, sort, cursor)}
    if export:
        params["export"] = True
    return _finalize_tool_result(_call("get_intents", params=params))


def get_examples(
    workspace_id: str,
    intent: str,
    page_limit: int | None = None,
    cursor: str | None = None,
) -> dict:
    """List training examples of one intent."""
    params = {"workspace_id": workspace_id, "intent": intent}
    params.update(_paging(page_limit, False, None, cursor))
    return _finalize_tool_result(_call("get_examples", params=params))


def get_counter_examples(
    workspace_id: str,
    page_limit: int | None = None,
    cursor: str | None = None,
) -> dict:
    """List counterexamples (inputs marked irrelevant) of a workspace."""
    params = {"workspace_id": workspace_id}
    params.update(_paging(page_limit, False, None, cursor))
    return _finalize_tool_result(_call("get_counter_examples", params=params))


def list_operations() -> dict:
    """List every API operation with its method, URL and field sets.

    Use the 'name' with call_operation.
    """
    ops = []
    for decl in endpoints.DECLARATIONS.values():
        row = asdict(decl)
        row["path_fields"] = list(decl.path_fields)
        ops.append(row)
    return _finalize_tool_result({"operations": ops})


def register(mcp):
    """Register all read tools with the FastMCP instance."""
    mcp.tool()(message)
    mcp.tool()(list_workspaces)
    mcp.tool()(get_workspace)
    mcp.tool()(workspace_status)
    mcp.tool()(get_intents)
    mcp.tool()(get_examples)
    mcp.tool()(get_counter_examples)
    mcp.tool()(list_operations)
