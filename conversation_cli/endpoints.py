"""
Declarations for every Conversation v1 operation.

These tuples are the wire contract with the remote service: the allowed
body/query fields and the required fields must match it exactly.
"""

from conversation_cli.dispatch import Declaration

_PAGING = ("page_limit", "include_count", "sort", "cursor")
_WORKSPACE_BODY = (
    "name",
    "language",
    "entities",
    "intents",
    "dialog_nodes",
    "metadata",
    "description",
    "counterexamples",
)
_INTENT_BODY = ("intent", "description", "examples")

# --- message ---

MESSAGE = Declaration(
    name="message",
    method="POST",
    url="/v1/workspaces/{workspace_id}/message",
    body_fields=("input", "context", "alternate_intents", "output", "entities", "intents"),
    required=("workspace_id",),
)

# --- workspaces ---

LIST_WORKSPACES = Declaration(
    name="listWorkspaces",
    method="GET",
    url="/v1/workspaces",
    query_fields=_PAGING,
)

CREATE_WORKSPACE = Declaration(
    name="createWorkspace",
    method="POST",
    url="/v1/workspaces",
    body_fields=_WORKSPACE_BODY,
)

GET_WORKSPACE = Declaration(
    name="getWorkspace",
    method="GET",
    url="/v1/workspaces/{workspace_id}",
    query_fields=("export",),
    required=("workspace_id",),
)

DELETE_WORKSPACE = Declaration(
    name="deleteWorkspace",
    method="DELETE",
    url="/v1/workspaces/{workspace_id}",
    required=("workspace_id",),
)

UPDATE_WORKSPACE = Declaration(
    name="updateWorkspace",
    method="POST",
    url="/v1/workspaces/{workspace_id}",
    body_fields=_WORKSPACE_BODY,
    required=("workspace_id",),
)

WORKSPACE_STATUS = Declaration(
    name="workspaceStatus",
    method="GET",
    url="/v1/workspaces/{workspace_id}/status",
    required=("workspace_id",),
)

# --- intents ---

CREATE_INTENT = Declaration(
    name="createIntent",
    method="POST",
    url="/v1/workspaces/{workspace_id}/intents",
    body_fields=_INTENT_BODY,
    required=("workspace_id", "intent"),
)

GET_INTENTS = Declaration(
    name="getIntents",
    method="GET",
    url="/v1/workspaces/{workspace_id}/intents",
    query_fields=("export",) + _PAGING,
    required=("workspace_id",),
)

GET_INTENT = Declaration(
    name="getIntent",
    method="GET",
    url="/v1/workspaces/{workspace_id}/intents/{intent}",
    query_fields=("export",),
    required=("workspace_id", "intent"),
)

# The new name travels in the body; the path addresses the old one.
UPDATE_INTENT = Declaration(
    name="updateIntent",
    method="POST",
    url="/v1/workspaces/{workspace_id}/intents/{old_intent}",
    body_fields=_INTENT_BODY,
    required=("workspace_id", "old_intent", "intent"),
)

DELETE_INTENT = Declaration(
    name="deleteIntent",
    method="DELETE",
    url="/v1/workspaces/{workspace_id}/intents/{intent}",
    required=("workspace_id", "intent"),
)

# --- examples ---

GET_EXAMPLES = Declaration(
    name="getExamples",
    method="GET",
    url="/v1/workspaces/{workspace_id}/intents/{intent}/examples",
    query_fields=_PAGING,
    required=("workspace_id", "intent"),
)

CREATE_EXAMPLE = Declaration(
    name="createExample",
    method="POST",
    url="/v1/workspaces/{workspace_id}/intents/{intent}/examples",
    body_fields=("text",),
    required=("workspace_id", "intent"),
)

DELETE_EXAMPLE = Declaration(
    name="deleteExample",
    method="DELETE",
    url="/v1/workspaces/{workspace_id}/intents/{intent}/examples/{text}",
    required=("workspace_id", "intent", "text"),
)

GET_EXAMPLE = Declaration(
    name="getExample",
    method="GET",
    url="/v1/workspaces/{workspace_id}/intents/{intent}/examples/{text}",
    required=("workspace_id", "intent", "text"),
)

UPDATE_EXAMPLE = Declaration(
    name="updateExample",
    method="POST",
    url="/v1/workspaces/{workspace_id}/intents/{intent}/examples/{old_text}",
    body_fields=("text",),
    required=("workspace_id", "intent", "old_text", "text"),
)

# --- counterexamples ---

GET_COUNTER_EXAMPLES = Declaration(
    name="getCounterExamples",
    method="GET",
    url="/v1/workspaces/{workspace_id}/counterexamples",
    query_fields=_PAGING,
    required=("workspace_id",),
)

CREATE_COUNTER_EXAMPLE = Declaration(
    name="createCounterExample",
    method="POST",
    url="/v1/workspaces/{workspace_id}/counterexamples",
    body_fields=("text",),
    required=("workspace_id", "text"),
)

DELETE_COUNTER_EXAMPLE = Declaration(
    name="deleteCounterExample",
    method="DELETE",
    url="/v1/workspaces/{workspace_id}/counterexamples/{text}",
    required=("workspace_id", "text"),
)

GET_COUNTER_EXAMPLE = Declaration(
    name="getCounterExample",
    method="GET",
    url="/v1/workspaces/{workspace_id}/counterexamples/{text}",
    required=("workspace_id", "text"),
)

UPDATE_COUNTER_EXAMPLE = Declaration(
    name="updateCounterExample",
    method="POST",
    url="/v1/workspaces/{workspace_id}/counterexamples/{old_text}",
    body_fields=("text",),
    required=("workspace_id", "old_text", "text"),
)

DECLARATIONS = {
    d.name: d
    for d in (
        MESSAGE,
        LIST_WORKSPACES,
        CREATE_WORKSPACE,
        GET_WORKSPACE,
        DELETE_WORKSPACE,
        UPDATE_WORKSPACE,
        WORKSPACE_STATUS,
        CREATE_INTENT,
        GET_INTENTS,
        GET_INTENT,
        UPDATE_INTENT,
        DELETE_INTENT,
        GET_EXAMPLES,
        CREATE_EXAMPLE,
        DELETE_EXAMPLE,
        GET_EXAMPLE,
        UPDATE_EXAMPLE,
        GET_COUNTER_EXAMPLES,
        CREATE_COUNTER_EXAMPLE,
        DELETE_COUNTER_EXAMPLE,
        GET_COUNTER_EXAMPLE,
        UPDATE_COUNTER_EXAMPLE,
    )
}


def snake_name(name):
    """'getCounterExamples' -> 'get_counter_examples'."""
    out = []
    for ch in name:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


def lookup(name):
    """Find a declaration by wire name or snake_case method name, or None."""
    if name in DECLARATIONS:
        return DECLARATIONS[name]
    for decl in DECLARATIONS.values():
        if snake_name(decl.name) == name:
            return decl
    return None
