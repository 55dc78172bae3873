"""Output dispatchers and table formatters for conversation-cli."""

import json
import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


# ---------------------------------------------------------------------------
# Core output
# ---------------------------------------------------------------------------


def pretty_print(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json"):
    """Output data in requested format."""
    if fmt == "table" and formatter:
        print(formatter(data))
    else:
        pretty_print(data)


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------


def _trunc(s, maxlen):
    """Truncate string with ellipsis indicator."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from table output.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _table(columns, rows, footer=None):
    """Build a formatted table string.
    columns: list of (name, width) tuples. Last column has no width (fills).
    rows: list of tuples matching columns."""
    parts = []
    for i, (name, width) in enumerate(columns):
        if i == len(columns) - 1:
            parts.append(name)
        else:
            parts.append(f"{name:<{width}}")
    header = " ".join(parts)
    sep = "-" * max(len(header), 72)
    lines = [header, sep]
    for row in rows:
        parts = []
        for i, val in enumerate(row):
            safe = _sanitize_str(val) if isinstance(val, str) else str(val)
            if i == len(columns) - 1:
                parts.append(safe)
            else:
                parts.append(f"{safe:<{columns[i][1]}}")
        lines.append(" ".join(parts))
    if footer:
        lines.append(f"\n{footer}")
    return "\n".join(lines)


def _pagination_footer(result, noun, count):
    footer = f"Total: {count} {noun}"
    pagination = result.get("pagination") or {}
    if pagination.get("next_url"):
        footer += " (more available, use --cursor)"
    return footer


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


def format_workspaces_table(result):
    workspaces = result.get("workspaces", [])
    rows = [
        (
            _trunc(ws.get("workspace_id", ""), 38),
            ws.get("language", "") or "",
            _trunc(ws.get("updated", "") or "", 24),
            _trunc(ws.get("name", "") or "", 40),
        )
        for ws in workspaces
    ]
    return _table(
        [("ID", 38), ("Lang", 5), ("Updated", 24), ("Name", 0)],
        rows,
        _pagination_footer(result, "workspaces", len(workspaces)),
    )


def format_workspace_detail(ws):
    lines = [
        f"Workspace: {_sanitize_str(ws.get('name', ''))}",
        f"ID:        {ws.get('workspace_id', '')}",
        f"Language:  {ws.get('language', '')}",
        f"Created:   {ws.get('created', '')}",
        f"Updated:   {ws.get('updated', '')}",
    ]
    if ws.get("status"):
        lines.append(f"Status:    {ws['status']}")
    if ws.get("description"):
        lines.append(f"\n{_sanitize_str(ws['description'])}")
    intents = ws.get("intents")
    if intents:
        lines.append(f"\nIntents ({len(intents)}):")
        for intent in intents:
            examples = intent.get("examples") or []
            lines.append(f"  - #{intent.get('intent', '')} ({len(examples)} examples)")
    return "\n".join(lines)


def format_intents_table(result):
    intents = result.get("intents", [])
    rows = [
        (
            _trunc(intent.get("intent", ""), 30),
            str(len(intent.get("examples") or [])) if "examples" in intent else "-",
            _trunc(intent.get("description", "") or "", 50),
        )
        for intent in intents
    ]
    return _table(
        [("Intent", 30), ("Examples", 9), ("Description", 0)],
        rows,
        _pagination_footer(result, "intents", len(intents)),
    )


def format_examples_table(result):
    examples = result.get("examples", [])
    rows = [(_trunc(ex.get("updated", "") or "", 24), ex.get("text", "")) for ex in examples]
    return _table(
        [("Updated", 24), ("Text", 0)],
        rows,
        _pagination_footer(result, "examples", len(examples)),
    )


def format_counterexamples_table(result):
    examples = result.get("counterexamples", [])
    rows = [(_trunc(ex.get("updated", "") or "", 24), ex.get("text", "")) for ex in examples]
    return _table(
        [("Updated", 24), ("Text", 0)],
        rows,
        _pagination_footer(result, "counterexamples", len(examples)),
    )


def format_message_response(result):
    lines = []
    text = (result.get("input") or {}).get("text")
    if text:
        lines.append(f"You:    {_sanitize_str(text)}")
    replies = (result.get("output") or {}).get("text") or []
    if isinstance(replies, str):
        replies = [replies]
    for reply in replies:
        lines.append(f"Bot:    {_sanitize_str(reply)}")
    intents = result.get("intents") or []
    if intents:
        lines.append("")
        lines.append("Intents:")
        for intent in intents:
            lines.append(
                f"  #{intent.get('intent', '')}  {float(intent.get('confidence', 0)):.3f}"
            )
    entities = result.get("entities") or []
    if entities:
        lines.append("")
        lines.append("Entities:")
        for entity in entities:
            lines.append(f"  @{entity.get('entity', '')}:{entity.get('value', '')}")
    conversation_id = (result.get("context") or {}).get("conversation_id")
    if conversation_id:
        lines.append("")
        lines.append(f"Conversation: {conversation_id}")
    return "\n".join(lines)


def format_operations_table(operations):
    rows = [
        (op["name"], op["method"], op["url"], ", ".join(op["required"]) or "-")
        for op in operations
    ]
    return _table(
        [("Operation", 22), ("Method", 7), ("URL", 60), ("Required", 0)],
        rows,
        f"Total: {len(rows)} operations",
    )
