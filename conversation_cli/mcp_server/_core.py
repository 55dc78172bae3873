"""Core helpers: client caching, _call dispatcher, response contract."""

from __future__ import annotations

from conversation_cli import CliError, ConversationV1, SetupError
from conversation_cli.config import CONTRACT_SCHEMA_VERSION, MCP_RESPONSE_MODE

_client: ConversationV1 | None = None


def _get_client() -> ConversationV1:
    """Return a cached ConversationV1, creating one from .env on first use."""
    global _client
    if _client is None:
        _client = ConversationV1.from_env()
    return _client


def _contract_error(message: str, error_type: str = "error", status: int | None = None) -> dict:
    """Return a stable MCP error envelope with legacy compatibility fields."""
    detail = {"type": error_type, "message": message}
    if status is not None:
        detail["status"] = status
    return {
        "ok": False,
        "schema_version": CONTRACT_SCHEMA_VERSION,
        "type": error_type,  # legacy
        "error": message,  # legacy
        "error_detail": detail,
    }


def _ensure_contract_dict(payload: dict) -> dict:
    """Add stable contract metadata to dict responses."""
    out = dict(payload)
    out.setdefault("schema_version", CONTRACT_SCHEMA_VERSION)
    if out.get("ok") is False:
        error_type = str(out.get("type", "error"))
        error_message = out.get("error", "Unknown error")
        if not isinstance(error_message, str):
            error_message = str(error_message)
            out["error"] = error_message
        out.setdefault("error_detail", {"type": error_type, "message": error_message})
        return out
    out.setdefault("ok", True)
    return out


def _finalize_tool_result(result):
    """Finalize tool response based on configured MCP response mode.

    Modes:
        - legacy (default): preserve API shapes; dicts gain ok/schema_version.
        - envelope: always return {"ok", "schema_version", "data"} for success.
    """
    if isinstance(result, dict):
        normalized = _ensure_contract_dict(result)
        if normalized.get("ok") is False:
            return normalized
        if MCP_RESPONSE_MODE == "envelope":
            data = dict(normalized)
            data.pop("ok", None)
            data.pop("schema_version", None)
            return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": data}
        return normalized
    if MCP_RESPONSE_MODE == "envelope":
        return {"ok": True, "schema_version": CONTRACT_SCHEMA_VERSION, "data": result}
    return result


_ALLOWED_METHODS = {
    "message",
    "list_workspaces",
    "get_workspace",
    "workspace_status",
    "get_intents",
    "get_intent",
    "get_examples",
    "get_counter_examples",
    "create_intent",
    "create_example",
    "create_counter_example",
    "call",
}


def _call(method_name: str, **kwargs):
    """Call a ConversationV1 method, converting exceptions to error dicts."""
    if method_name not in _ALLOWED_METHODS:
        return _contract_error(f"Unknown method: {method_name}", "error")
    try:
        client = _get_client()
        return getattr(client, method_name)(**kwargs)
    except SetupError as e:
        return _contract_error(str(e), "setup")
    except CliError as e:
        status = getattr(e, "code", None)
        return _contract_error(str(e), "error", status if isinstance(status, int) else None)
    except Exception as e:
        return _contract_error(f"Unexpected error: {e}", "error")
