"""
conversation-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 — validation, network, decode errors."""

    exit_code = 1


class SetupError(CliError):
    """Exit code 2 — missing credentials or service configuration."""

    exit_code = 2


class ConfigurationError(SetupError):
    """A mandatory service setting (e.g. the version date) is absent."""


class MissingRequiredParameter(CliError):
    """Raised before any request is sent when a required field is missing."""

    def __init__(self, operation, parameter):
        self.operation = operation
        self.parameter = parameter
        super().__init__(f"[ERROR] {operation}: missing required parameter '{parameter}'.")


class TransportError(CliError):
    """Non-2xx response or network failure. code is None for network failures."""

    def __init__(self, code, reason, body="", headers=None, message=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
        super().__init__(message or f"[ERROR] HTTP {code}: {reason}")


class DecodeError(CliError):
    """Response body was not valid JSON."""

    def __init__(self, message, body=""):
        self.body = body
        super().__init__(message)
