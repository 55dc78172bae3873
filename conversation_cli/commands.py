"""
Command implementations for conversation-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

API calls go through ConversationV1. These thin wrappers handle
argparse → params dicts, format selection, and formatter dispatch.
"""

import sys
from dataclasses import asdict

from conversation_cli import config, endpoints
from conversation_cli.api import _safe_json_parse
from conversation_cli.client import ConversationV1
from conversation_cli.formatters import (
    format_counterexamples_table,
    format_examples_table,
    format_intents_table,
    format_message_response,
    format_operations_table,
    format_workspace_detail,
    format_workspaces_table,
    output,
)
from conversation_cli.models import ObjectPayload


def _client():
    return ConversationV1.from_env()


def _paging(ns):
    """Collect paging flags present on the namespace."""
    params = {}
    for key in ("page_limit", "sort", "cursor"):
        value = getattr(ns, key, None)
        if value is not None:
            params[key] = value
    if getattr(ns, "include_count", False):
        params["include_count"] = True
    return params


# ---------------------------------------------------------------------------
# Message
# ---------------------------------------------------------------------------


def cmd_message(ns):
    params = {"workspace_id": ns.workspace_id, "input": {"text": ns.text or ""}}
    if ns.context:
        params["context"] = ObjectPayload.from_value(
            _safe_json_parse(ns.context, "context"), "context"
        ).data
    if ns.alternate_intents:
        params["alternate_intents"] = True
    output(_client().message(params), format_message_response, ns.format)


# ---------------------------------------------------------------------------
# Read commands
# ---------------------------------------------------------------------------


def cmd_workspaces(ns):
    output(_client().list_workspaces(_paging(ns)), format_workspaces_table, ns.format)


def cmd_workspace(ns):
    params = {"workspace_id": ns.workspace_id}
    if ns.export:
        params["export"] = True
    output(_client().get_workspace(params), format_workspace_detail, ns.format)


def cmd_status(ns):
    output(
        _client().workspace_status(workspace_id=ns.workspace_id),
        format_workspace_detail,
        ns.format,
    )


def cmd_intents(ns):
    params = {"workspace_id": ns.workspace_id, **_paging(ns)}
    if ns.export:
        params["export"] = True
    output(_client().get_intents(params), format_intents_table, ns.format)


def cmd_intent(ns):
    params = {"workspace_id": ns.workspace_id, "intent": ns.intent}
    if ns.export:
        params["export"] = True
    output(_client().get_intent(params), fmt=ns.format)


def cmd_examples(ns):
    params = {"workspace_id": ns.workspace_id, "intent": ns.intent, **_paging(ns)}
    output(_client().get_examples(params), format_examples_table, ns.format)


def cmd_counterexamples(ns):
    params = {"workspace_id": ns.workspace_id, **_paging(ns)}
    output(_client().get_counter_examples(params), format_counterexamples_table, ns.format)


# ---------------------------------------------------------------------------
# Generic commands
# ---------------------------------------------------------------------------


def warn_unknown_params(operation, params):
    """Warn on stderr about keys the operation will silently drop."""
    if config.RUNTIME_QUIET:
        return
    decl = endpoints.lookup(operation)
    if decl is None:
        return
    allowed = set(decl.body_fields) | set(decl.query_fields) | set(decl.path_fields)
    unknown = sorted(k for k in params if k not in allowed)
    if unknown:
        print(
            f"[WARN] {decl.name} ignores unknown parameters: {', '.join(unknown)}",
            file=sys.stderr,
        )


def cmd_call(ns):
    params = {}
    if ns.json_params:
        params = ObjectPayload.from_value(
            _safe_json_parse(ns.json_params, "params"), "params"
        ).data
    warn_unknown_params(ns.operation, params)
    output(_client().call(ns.operation, params), fmt=ns.format)


def cmd_operations(ns):
    ops = []
    for decl in endpoints.DECLARATIONS.values():
        row = asdict(decl)
        row["path_fields"] = list(decl.path_fields)
        row["method_name"] = endpoints.snake_name(decl.name)
        ops.append(row)
    output(ops, format_operations_table, ns.format)
