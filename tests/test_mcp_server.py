"""Tests for MCP server tool wrappers.

Mocks at ConversationV1 level. Verifies each tool calls the correct
client method and that errors are converted to dicts.
"""

import pytest

mcp_mod = pytest.importorskip("conversation_cli.mcp_server", reason="mcp package not installed")

import importlib  # noqa: E402
from unittest.mock import MagicMock, patch  # noqa: E402

from conversation_cli.exceptions import (  # noqa: E402
    CliError,
    ConfigurationError,
    MissingRequiredParameter,
    TransportError,
)

_core = importlib.import_module("conversation_cli.mcp_server._core")


@pytest.fixture(autouse=True)
def _reset_client_cache():
    """Reset the cached ConversationV1 between tests."""
    _core._client = None
    yield
    _core._client = None


def _mock_client(**method_returns):
    """Return a ConversationV1 stand-in whose methods return given values."""
    client = MagicMock()
    for name, val in method_returns.items():
        getattr(client, name).return_value = val
    return client


# ---------------------------------------------------------------------------
# Read tools
# ---------------------------------------------------------------------------


class TestReadTools:
    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_message(self, MockClient):
        client = _mock_client(message={"output": {"text": ["Hi"]}})
        MockClient.from_env.return_value = client
        result = mcp_mod.message("ws1", text="hello", context={"conversation_id": "c1"})
        assert result["output"]["text"] == ["Hi"]
        assert result["ok"] is True
        client.message.assert_called_once_with(
            params={
                "workspace_id": "ws1",
                "input": {"text": "hello"},
                "context": {"conversation_id": "c1"},
            }
        )

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_list_workspaces_paging(self, MockClient):
        client = _mock_client(list_workspaces={"workspaces": []})
        MockClient.from_env.return_value = client
        mcp_mod.list_workspaces(page_limit=10, include_count=True)
        client.list_workspaces.assert_called_once_with(
            params={"page_limit": 10, "include_count": True}
        )

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_get_workspace_export(self, MockClient):
        client = _mock_client(get_workspace={"name": "Pizza"})
        MockClient.from_env.return_value = client
        assert mcp_mod.get_workspace("ws1", export=True)["name"] == "Pizza"
        client.get_workspace.assert_called_once_with(
            params={"workspace_id": "ws1", "export": True}
        )

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_workspace_status(self, MockClient):
        client = _mock_client(workspace_status={"status": "Training"})
        MockClient.from_env.return_value = client
        assert mcp_mod.workspace_status("ws1")["status"] == "Training"
        client.workspace_status.assert_called_once_with(workspace_id="ws1")

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_get_examples(self, MockClient):
        client = _mock_client(get_examples={"examples": []})
        MockClient.from_env.return_value = client
        mcp_mod.get_examples("ws1", "greet", cursor="abc")
        client.get_examples.assert_called_once_with(
            params={"workspace_id": "ws1", "intent": "greet", "cursor": "abc"}
        )

    def test_list_operations_no_client(self):
        result = mcp_mod.list_operations()
        names = {op["name"] for op in result["operations"]}
        assert len(names) == 22
        assert {"message", "updateCounterExample", "workspaceStatus"} <= names

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_client_cached(self, MockClient):
        MockClient.from_env.return_value = _mock_client(workspace_status={})
        mcp_mod.workspace_status("ws1")
        mcp_mod.workspace_status("ws2")
        MockClient.from_env.assert_called_once_with()


# ---------------------------------------------------------------------------
# Write tools
# ---------------------------------------------------------------------------


class TestWriteTools:
    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_create_intent_wraps_examples(self, MockClient):
        client = _mock_client(create_intent={"intent": "greet"})
        MockClient.from_env.return_value = client
        mcp_mod.create_intent("ws1", "greet", examples=["hi", "hello"])
        client.create_intent.assert_called_once_with(
            params={
                "workspace_id": "ws1",
                "intent": "greet",
                "description": None,
                "examples": [{"text": "hi"}, {"text": "hello"}],
            }
        )

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_create_example(self, MockClient):
        client = _mock_client(create_example={"text": "hi"})
        MockClient.from_env.return_value = client
        assert mcp_mod.create_example("ws1", "greet", "hi")["text"] == "hi"
        client.create_example.assert_called_once_with(workspace_id="ws1", intent="greet", text="hi")

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_create_counter_example(self, MockClient):
        client = _mock_client(create_counter_example={"text": "buy a car"})
        MockClient.from_env.return_value = client
        mcp_mod.create_counter_example("ws1", "buy a car")
        client.create_counter_example.assert_called_once_with(workspace_id="ws1", text="buy a car")

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_call_operation(self, MockClient):
        client = _mock_client(call={})
        MockClient.from_env.return_value = client
        result = mcp_mod.call_operation("deleteIntent", {"workspace_id": "ws1", "intent": "x"})
        assert result["ok"] is True
        client.call.assert_called_once_with(
            operation="deleteIntent", params={"workspace_id": "ws1", "intent": "x"}
        )

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_call_operation_wraps_text(self, MockClient):
        MockClient.from_env.return_value = _mock_client(call="plain text")
        assert mcp_mod.call_operation("listWorkspaces")["result"] == "plain text"

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_call_operation_unknown(self, MockClient):
        result = mcp_mod.call_operation("frobnicate")
        assert result["ok"] is False
        assert "Unknown operation" in result["error"]
        MockClient.from_env.assert_not_called()


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


class TestErrors:
    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_setup_error(self, MockClient):
        MockClient.from_env.side_effect = ConfigurationError("[SETUP_NEEDED] no credentials")
        result = mcp_mod.list_workspaces()
        assert result["ok"] is False
        assert result["type"] == "setup"
        assert result["error_detail"]["type"] == "setup"

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_missing_parameter(self, MockClient):
        client = MagicMock()
        client.get_examples.side_effect = MissingRequiredParameter("getExamples", "intent")
        MockClient.from_env.return_value = client
        result = mcp_mod.get_examples("ws1", "")
        assert result["ok"] is False
        assert "missing required parameter 'intent'" in result["error"]
        assert "status" not in result["error_detail"]

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_transport_error_carries_status(self, MockClient):
        client = MagicMock()
        client.get_workspace.side_effect = TransportError(404, "Not Found")
        MockClient.from_env.return_value = client
        result = mcp_mod.get_workspace("missing")
        assert result["error_detail"]["status"] == 404

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_cli_error(self, MockClient):
        client = MagicMock()
        client.message.side_effect = CliError("[ERROR] boom")
        MockClient.from_env.return_value = client
        result = mcp_mod.message("ws1", "hi")
        assert result == {
            "ok": False,
            "schema_version": _core.CONTRACT_SCHEMA_VERSION,
            "type": "error",
            "error": "[ERROR] boom",
            "error_detail": {"type": "error", "message": "[ERROR] boom"},
        }

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_unexpected_error(self, MockClient):
        client = MagicMock()
        client.workspace_status.side_effect = RuntimeError("kaboom")
        MockClient.from_env.return_value = client
        result = mcp_mod.workspace_status("ws1")
        assert result["error"] == "Unexpected error: kaboom"

    def test_disallowed_method(self):
        result = mcp_mod._call("delete_workspace", workspace_id="ws1")
        assert result["ok"] is False
        assert "Unknown method" in result["error"]


# ---------------------------------------------------------------------------
# Response contract
# ---------------------------------------------------------------------------


class TestResponseMode:
    @pytest.fixture
    def envelope(self, monkeypatch):
        monkeypatch.setattr(_core, "MCP_RESPONSE_MODE", "envelope")

    def test_legacy_passes_lists_through(self):
        assert _core._finalize_tool_result([1, 2]) == [1, 2]

    @patch("conversation_cli.mcp_server._core.ConversationV1")
    def test_envelope_mode_wraps_success_dict(self, MockClient, envelope):
        MockClient.from_env.return_value = _mock_client(workspace_status={"status": "Available"})
        result = mcp_mod.workspace_status("ws1")
        assert result["ok"] is True
        assert result["data"] == {"status": "Available"}

    def test_envelope_mode_wraps_list(self, envelope):
        result = _core._finalize_tool_result(["a"])
        assert result == {"ok": True, "schema_version": _core.CONTRACT_SCHEMA_VERSION, "data": ["a"]}

    def test_envelope_mode_keeps_error_shape(self, envelope):
        result = _core._finalize_tool_result(_core._contract_error("nope"))
        assert result["ok"] is False
        assert "data" not in result
