"""Tests for api.py — security helpers, HTTP logging, urllib transport."""

import http.client
import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from conversation_cli.api import (
    _error_envelope,
    _is_sampled_request,
    _log_http_event,
    _parse_retry_after,
    _safe_json_parse,
    _sanitize_error,
    _sanitize_url_for_log,
    send,
)
from conversation_cli.exceptions import CliError, TransportError
from conversation_cli.models import OutboundRequest

_URL = "https://conv.example.test/api/v1/workspaces"


def _request(method="GET", body=None):
    return OutboundRequest(
        method=method,
        url=_URL,
        query={"version": "2017-02-03"},
        body=body,
        headers={"Accept": "application/json", "X-Request-Id": "req-1"},
    )


def _ok_response(mock_urlopen, raw=b'{"ok": true}', status=200):
    resp = mock_urlopen.return_value.__enter__.return_value
    resp.read.return_value = raw
    resp.status = status
    resp.reason = "OK"
    resp.headers = {"Content-Type": "application/json"}
    return resp


def _http_error(code, reason="Error", body=b"", headers=None):
    return urllib.error.HTTPError(_URL, code, reason, headers or {}, io.BytesIO(body))


class TestSanitizeUrlForLog:
    def test_masks_secrets(self):
        safe = _sanitize_url_for_log(f"{_URL}?version=2017-02-03&password=hunter2&api_key=k")
        assert "hunter2" not in safe
        assert "password=%2A%2A%2A" in safe
        assert "api_key=%2A%2A%2A" in safe
        assert "version=2017-02-03" in safe

    def test_no_query_unchanged(self):
        assert _sanitize_url_for_log(_URL) == _URL


class TestSampling:
    def test_sample_rate_zero_disables(self, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_LOG_SAMPLE_RATE", 0.0)
        assert _is_sampled_request("req-1") is False

    def test_sample_rate_one_enables(self, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_LOG_SAMPLE_RATE", 1.0)
        assert _is_sampled_request("req-1") is True

    def test_sampling_is_deterministic(self, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_LOG_SAMPLE_RATE", 0.5)
        assert _is_sampled_request("req-stable") == _is_sampled_request("req-stable")


class TestLogHttpEvent:
    def test_disabled_by_default(self, capsys):
        _log_http_event(phase="request")
        assert capsys.readouterr().err == ""

    def test_emits_json_line(self, capsys, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_LOG_ENABLED", True)
        _log_http_event(phase="request", method="GET")
        err = capsys.readouterr().err
        assert err.startswith("[HTTP] ")
        assert json.loads(err[len("[HTTP] ") :]) == {"method": "GET", "phase": "request"}


class TestSafeJsonParse:
    def test_valid(self):
        assert _safe_json_parse('{"a": 1}') == {"a": 1}

    def test_invalid(self):
        with pytest.raises(CliError, match="Invalid JSON in params"):
            _safe_json_parse("nope", "params")


class TestSanitizeError:
    def test_strips_html(self):
        assert _sanitize_error("<h1>Error</h1><p>Details</p>") == "ErrorDetails"

    def test_truncates(self):
        assert _sanitize_error("x" * 1000).endswith("... [truncated]")

    def test_empty(self):
        assert _sanitize_error(None) == ""


class TestErrorEnvelope:
    def test_with_meta(self):
        msg = _error_envelope("HTTP 500", status=500, retryable=False, detail="boom")
        assert msg == "[ERROR] HTTP 500 (status=500, retryable=no)\nboom"

    def test_plain(self):
        assert _error_envelope("Failed") == "[ERROR] Failed"


class TestParseRetryAfter:
    def test_seconds(self):
        assert _parse_retry_after({"Retry-After": "3"}) == 3

    def test_invalid(self):
        assert _parse_retry_after({"Retry-After": "soon"}) is None

    def test_missing(self):
        assert _parse_retry_after(None) is None


class TestSend:
    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_success(self, mock_urlopen):
        _ok_response(mock_urlopen)
        resp = send(_request())
        assert resp.status == 200
        assert resp.ok is True
        assert resp.body == b'{"ok": true}'
        sent = mock_urlopen.call_args.args[0]
        assert sent.full_url == f"{_URL}?version=2017-02-03"
        assert sent.get_method() == "GET"
        assert sent.data is None

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_post_encodes_json_body(self, mock_urlopen):
        _ok_response(mock_urlopen)
        send(_request("POST", {"input": {"text": "hi"}}))
        sent = mock_urlopen.call_args.args[0]
        assert json.loads(sent.data) == {"input": {"text": "hi"}}

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_empty_body_dict_is_sent(self, mock_urlopen):
        _ok_response(mock_urlopen)
        send(_request("POST", {}))
        assert mock_urlopen.call_args.args[0].data == b"{}"

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_401_returned_without_retry(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(401, "Unauthorized", b'{"error": "no"}')
        resp = send(_request())
        assert resp.status == 401
        assert resp.ok is False
        assert resp.body == b'{"error": "no"}'
        assert mock_urlopen.call_count == 1

    @patch("conversation_cli.api.time.sleep")
    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_retries_503_for_get(self, mock_urlopen, mock_sleep):
        success_cm = MagicMock()
        success = success_cm.__enter__.return_value
        success.read.return_value = b"{}"
        success.status = 200
        success.reason = "OK"
        success.headers = {}
        mock_urlopen.side_effect = [_http_error(503, headers={"Retry-After": "0"}), success_cm]
        resp = send(_request())
        assert resp.status == 200
        assert mock_urlopen.call_count == 2
        mock_sleep.assert_called_once_with(0)

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_does_not_retry_post(self, mock_urlopen):
        mock_urlopen.side_effect = _http_error(503)
        resp = send(_request("POST", {"text": "x"}))
        assert resp.status == 503
        assert mock_urlopen.call_count == 1

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_network_error_raises_transport_error(self, mock_urlopen):
        mock_urlopen.side_effect = urllib.error.URLError("refused")
        with pytest.raises(TransportError) as exc_info:
            send(_request("POST", {}))
        assert exc_info.value.code is None
        assert "Connection failed: refused" in str(exc_info.value)

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_remote_disconnect_raises_transport_error(self, mock_urlopen):
        mock_urlopen.side_effect = http.client.RemoteDisconnected("closed")
        with pytest.raises(TransportError, match="RemoteDisconnected") as exc_info:
            send(_request("POST", {}))
        assert exc_info.value.code is None
        assert mock_urlopen.call_count == 1

    @patch("conversation_cli.api.time.sleep")
    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_reset_during_read_retried_for_get(self, mock_urlopen, mock_sleep, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_MAX_RETRIES", 1)
        resp = _ok_response(mock_urlopen)
        resp.read.side_effect = [ConnectionResetError("reset"), b"{}"]
        assert send(_request()).body == b"{}"
        assert mock_urlopen.call_count == 2

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_incomplete_read_raises_transport_error(self, mock_urlopen):
        resp = _ok_response(mock_urlopen)
        resp.read.side_effect = http.client.IncompleteRead(b"{", 10)
        with pytest.raises(TransportError, match="IncompleteRead"):
            send(_request("PUT", {}))

    @patch("conversation_cli.api.time.sleep")
    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_timeout_retried_then_raised(self, mock_urlopen, mock_sleep, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_MAX_RETRIES", 1)
        mock_urlopen.side_effect = TimeoutError()
        with pytest.raises(TransportError, match="timed out"):
            send(_request())
        assert mock_urlopen.call_count == 2
        assert mock_sleep.call_count == 1

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_response_size_limit(self, mock_urlopen, monkeypatch):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_MAX_RESPONSE_BYTES", 4)
        _ok_response(mock_urlopen, raw=b"12345")
        with pytest.raises(TransportError, match="too large") as exc_info:
            send(_request())
        assert exc_info.value.code == 200
        assert exc_info.value.reason == "Response too large"

    @patch("conversation_cli.api.urllib.request.urlopen")
    def test_logs_request_and_response(self, mock_urlopen, monkeypatch, capsys):
        monkeypatch.setattr("conversation_cli.api.config.HTTP_LOG_ENABLED", True)
        monkeypatch.setattr("conversation_cli.api.config.HTTP_LOG_SAMPLE_RATE", 1.0)
        _ok_response(mock_urlopen)
        send(_request())
        lines = capsys.readouterr().err.strip().splitlines()
        phases = [json.loads(line[len("[HTTP] ") :])["phase"] for line in lines]
        assert phases == ["request", "response"]
