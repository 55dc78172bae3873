"""conversation-cli — Python client and CLI for the Conversation v1 API."""

from conversation_cli.client import ConversationV1
from conversation_cli.config import VERSION
from conversation_cli.dispatch import Declaration
from conversation_cli.exceptions import (
    CliError,
    ConfigurationError,
    DecodeError,
    MissingRequiredParameter,
    SetupError,
    TransportError,
)
from conversation_cli.models import OutboundRequest, ServiceConfig, TransportResponse

__all__ = [
    "VERSION",
    "ConversationV1",
    "Declaration",
    "CliError",
    "ConfigurationError",
    "DecodeError",
    "MissingRequiredParameter",
    "SetupError",
    "TransportError",
    "OutboundRequest",
    "ServiceConfig",
    "TransportResponse",
]
