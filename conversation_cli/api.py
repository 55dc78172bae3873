"""
HTTP transport, logging, and security helpers for conversation-cli.
"""

import hashlib
import http.client
import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request

from conversation_cli import config
from conversation_cli.exceptions import CliError, TransportError
from conversation_cli.models import TransportResponse

_RETRYABLE_HTTP_CODES = frozenset({429, 502, 503, 504})
_IDEMPOTENT_METHODS = frozenset({"GET", "DELETE"})
_SECRET_QUERY_KEYS = {"password", "token", "api_key", "apikey"}


# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _safe_json_parse(text, context="input"):
    """Parse JSON with friendly error message on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CliError(f"[ERROR] Invalid JSON in {context}: {e.msg} at position {e.pos}") from None


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


def _error_envelope(message, status=None, request_id=None, retryable=None, detail=None):
    """Build a consistent CLI-safe HTTP error message."""
    meta = []
    if status is not None:
        meta.append(f"status={status}")
    if request_id:
        meta.append(f"request_id={request_id}")
    if retryable is not None:
        meta.append(f"retryable={'yes' if retryable else 'no'}")
    suffix = f" ({', '.join(meta)})" if meta else ""
    body = f"[ERROR] {message}{suffix}"
    if detail:
        body += f"\n{detail}"
    return body


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def _sanitize_url_for_log(url):
    """Mask sensitive query params in URLs before logging."""
    parsed = urllib.parse.urlsplit(url)
    if not parsed.query:
        return url
    pairs = urllib.parse.parse_qsl(parsed.query, keep_blank_values=True)
    masked = []
    for key, value in pairs:
        if key.lower() in _SECRET_QUERY_KEYS:
            masked.append((key, "***"))
        else:
            masked.append((key, value))
    safe_query = urllib.parse.urlencode(masked, doseq=True)
    return urllib.parse.urlunsplit(
        (parsed.scheme, parsed.netloc, parsed.path, safe_query, parsed.fragment)
    )


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


def _parse_retry_after(headers):
    """Return Retry-After seconds from response headers, or None."""
    if not headers:
        return None
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        secs = int(str(value).strip())
    except ValueError:
        return None
    return max(0, secs)


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def send(request):
    """Default transport: send an OutboundRequest with urllib.

    Returns a TransportResponse for every HTTP status, 4xx/5xx included.
    Raises TransportError (code=None) on timeouts and connection failures.
    GET/DELETE are retried on 429/502/503/504 and network errors only.
    """
    url = request.full_url
    method = request.method
    headers = dict(request.headers)
    body = json.dumps(request.body).encode("utf-8") if request.body is not None else None
    request_id = headers.get("X-Request-Id")
    safe_url = _sanitize_url_for_log(url)
    sampled = _is_sampled_request(request_id)
    idempotent = method in _IDEMPOTENT_METHODS
    max_attempts = 1 + max(0, config.HTTP_MAX_RETRIES if idempotent else 0)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    last_error = None

    for attempt in range(max_attempts):
        start = time.perf_counter()
        can_retry = idempotent and attempt < max_attempts - 1
        req = urllib.request.Request(url, data=body, headers=headers, method=method)
        if sampled:
            _log_http_event(
                phase="request",
                method=method,
                url=safe_url,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                request_id=request_id,
                timeout_seconds=timeout,
            )
        try:
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
                status = getattr(resp, "status", 200)
                if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
                    raise TransportError(
                        status,
                        "Response too large",
                        message=_error_envelope(
                            "Response too large from Conversation API "
                            f"(>{config.HTTP_MAX_RESPONSE_BYTES} bytes).",
                            status=status,
                            request_id=request_id,
                            retryable=False,
                        ),
                    )
                if sampled:
                    _log_http_event(
                        phase="response",
                        method=method,
                        url=safe_url,
                        attempt=attempt + 1,
                        status=status,
                        bytes=len(raw),
                        latency_ms=round((time.perf_counter() - start) * 1000, 2),
                        request_id=request_id,
                    )
                return TransportResponse(
                    status=status,
                    reason=getattr(resp, "reason", "") or "",
                    headers=dict(resp.headers or {}),
                    body=raw,
                )
        except urllib.error.HTTPError as e:
            error_body = e.read(config.HTTP_MAX_RESPONSE_BYTES) if e.fp else b""
            retry = can_retry and e.code in _RETRYABLE_HTTP_CODES
            if sampled:
                _log_http_event(
                    phase="response",
                    method=method,
                    url=safe_url,
                    attempt=attempt + 1,
                    status=e.code,
                    will_retry=retry,
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                    request_id=request_id,
                )
            if retry:
                retry_after = _parse_retry_after(getattr(e, "headers", None))
                if retry_after is None:
                    retry_after = config.HTTP_RETRY_BASE_SECONDS * (2**attempt)
                time.sleep(retry_after)
                continue
            return TransportResponse(
                status=e.code,
                reason=str(e.reason or ""),
                headers=dict(e.headers or {}),
                body=error_body,
            )
        except (OSError, http.client.HTTPException) as e:
            # urllib only wraps connect-time failures; read-time ones arrive raw.
            if isinstance(e, TimeoutError):
                last_error = f"Request timed out after {timeout} seconds"
            elif isinstance(e, urllib.error.URLError):
                last_error = f"Connection failed: {e.reason}"
            else:
                last_error = f"Connection failed: {type(e).__name__}: {e}"
            if sampled:
                _log_http_event(
                    phase="network_error",
                    method=method,
                    url=safe_url,
                    attempt=attempt + 1,
                    error=last_error,
                    will_retry=can_retry,
                    request_id=request_id,
                )
            if can_retry:
                time.sleep(config.HTTP_RETRY_BASE_SECONDS * (2**attempt))
                continue
            raise TransportError(
                None,
                last_error,
                message=_error_envelope(last_error, request_id=request_id, retryable=False),
            ) from e

    raise TransportError(
        None,
        last_error or "Request failed",
        message=_error_envelope(last_error or "Request failed.", request_id=request_id),
    )
