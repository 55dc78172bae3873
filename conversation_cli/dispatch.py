"""
Generic request dispatch for Conversation API operations.

Every endpoint is a Declaration (method, URL template, allowed body/query
fields, required fields). dispatch() turns a declaration plus a caller's
parameter dict into one OutboundRequest, sends it, and returns the decoded
JSON or raises a typed error.
"""

from __future__ import annotations

import json
import re
import urllib.parse
import uuid
from dataclasses import dataclass
from typing import Any

from conversation_cli import api
from conversation_cli.exceptions import DecodeError, MissingRequiredParameter, TransportError
from conversation_cli.models import OutboundRequest, ServiceConfig

VALID_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})
_BODYLESS_METHODS = frozenset({"GET", "DELETE"})
_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(frozen=True)
class Declaration:
    """Static description of one remote operation."""

    name: str
    method: str
    url: str
    body_fields: tuple[str, ...] = ()
    query_fields: tuple[str, ...] = ()
    required: tuple[str, ...] = ()
    json: bool = True

    def __post_init__(self):
        if self.method not in VALID_METHODS:
            raise ValueError(f"{self.name}: unsupported HTTP method {self.method!r}")
        allowed = set(self.body_fields) | set(self.query_fields) | set(self.path_fields)
        unknown = [f for f in self.required if f not in allowed]
        if unknown:
            raise ValueError(f"{self.name}: required fields not declared anywhere: {unknown}")
        missing_path = [f for f in self.path_fields if f not in self.required]
        if missing_path:
            raise ValueError(f"{self.name}: path fields must be required: {missing_path}")

    @property
    def path_fields(self) -> tuple[str, ...]:
        return tuple(_PLACEHOLDER_RE.findall(self.url))

    @property
    def has_body(self) -> bool:
        return self.method not in _BODYLESS_METHODS and bool(self.body_fields)


# ---------------------------------------------------------------------------
# Parameter helpers
# ---------------------------------------------------------------------------


def _is_missing(value):
    return value is None or value == ""


def pick(params: dict | None, keys) -> dict[str, Any]:
    """Return the subset of *params* whose keys are in *keys*, in *keys* order.

    Values are passed through by reference. None params mean no params;
    None values are treated as absent.
    """
    if not params:
        return {}
    return {k: params[k] for k in keys if params.get(k) is not None}


def resolve_path(template: str, path_params: dict) -> str:
    """Substitute each {field} in *template* with its percent-encoded value.

    Raises KeyError for an unresolvable placeholder; check_required() must
    have run first.
    """
    return _PLACEHOLDER_RE.sub(
        lambda m: urllib.parse.quote(str(path_params[m.group(1)]), safe=""), template
    )


def check_required(declaration: Declaration, params: dict | None) -> None:
    """Raise MissingRequiredParameter for the first missing required field."""
    params = params or {}
    for name in declaration.required:
        if _is_missing(params.get(name)):
            raise MissingRequiredParameter(declaration.name, name)


# ---------------------------------------------------------------------------
# Request construction and dispatch
# ---------------------------------------------------------------------------


def build_request(
    declaration: Declaration, params: dict | None, service: ServiceConfig
) -> OutboundRequest:
    """Validate *params* and build the OutboundRequest for *declaration*."""
    check_required(declaration, params)

    body = pick(params, declaration.body_fields) if declaration.has_body else None

    query = pick(params, declaration.query_fields)
    # Service defaults (the version date) override caller collisions.
    query.update(service.query)

    path = resolve_path(declaration.url, pick(params, declaration.path_fields))

    headers = {"Accept": "application/json"}
    if body is not None:
        headers["Content-Type"] = "application/json"
    headers.update(service.headers)
    headers.update(service.auth_headers())
    headers["X-Request-Id"] = str(uuid.uuid4())

    return OutboundRequest(
        method=declaration.method,
        url=service.base_url + path,
        query=query,
        body=body,
        headers=headers,
    )


def _transport_error(declaration, response):
    text = response.body.decode("utf-8", errors="replace")
    request_hint = ""
    if response.status in (401, 403):
        request_hint = (
            "\n[TOKEN_EXPIRED] Credentials were rejected. "
            "Check CONVERSATION_USERNAME / CONVERSATION_PASSWORD in .env."
        )
    message = api._error_envelope(
        f"{declaration.name}: HTTP {response.status}: {response.reason}",
        status=response.status,
        request_id=response.headers.get("X-Global-Transaction-Id"),
        retryable=response.status in api._RETRYABLE_HTTP_CODES,
        detail=api._sanitize_error(text),
    )
    return TransportError(
        response.status,
        response.reason,
        text,
        headers=response.headers,
        message=message + request_hint,
    )


def decode_response(declaration: Declaration, response):
    """Turn a successful TransportResponse into structured data."""
    if not declaration.json:
        return response.body.decode("utf-8", errors="replace")
    if not response.body:
        return {}
    try:
        return json.loads(response.body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError):
        content_type = response.headers.get("Content-Type", "")
        raise DecodeError(
            f"[ERROR] {declaration.name}: response is not valid JSON"
            + (f" (Content-Type: {content_type})." if content_type else "."),
            body=response.body.decode("utf-8", errors="replace"),
        ) from None


def dispatch(
    declaration: Declaration,
    params: dict | None,
    service: ServiceConfig,
    transport=None,
) -> Any:
    """Send one operation and return its decoded response.

    Raises MissingRequiredParameter before any I/O, TransportError for
    network failures and non-2xx responses, DecodeError for bad JSON.
    """
    request = build_request(declaration, params, service)
    response = (transport or api.send)(request)
    if not response.ok:
        raise _transport_error(declaration, response)
    return decode_response(declaration, response)
