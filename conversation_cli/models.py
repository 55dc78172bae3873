"""
Typed models for service configuration and CLI payloads.
"""

import base64
import urllib.parse
from dataclasses import dataclass, field
from types import MappingProxyType

from conversation_cli import config
from conversation_cli.exceptions import CliError, ConfigurationError


@dataclass(frozen=True)
class ObjectPayload:
    """Typed wrapper for raw JSON object payloads."""

    data: dict

    @classmethod
    def from_value(cls, value, context):
        if isinstance(value, dict):
            return cls(data=value)
        raise CliError(
            f"[ERROR] Invalid JSON in {context}: expected object, got {type(value).__name__}."
        )


@dataclass(frozen=True)
class ServiceConfig:
    """Per-service defaults shared by every request a façade sends.

    Never mutated after construction; ``headers`` and ``query`` are
    read-only mappings so concurrent calls can share one instance.
    """

    base_url: str
    username: str = ""
    password: str = ""
    headers: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    query: MappingProxyType = field(default_factory=lambda: MappingProxyType({}))
    use_unauthenticated: bool = False

    @classmethod
    def create(
        cls,
        *,
        version_date=None,
        url=None,
        username=None,
        password=None,
        headers=None,
        use_unauthenticated=False,
    ):
        """Validate settings and build a ServiceConfig.

        Raises ConfigurationError when the version date is missing, since
        every request carries it, or when credentials are missing and
        ``use_unauthenticated`` is not set.
        """
        if not version_date:
            raise ConfigurationError(
                "[SETUP_NEEDED] Argument error: version_date was not specified, "
                f"use VERSION_DATE_2017_02_03 ('{config.VERSION_DATE_2017_02_03}')."
            )
        if not use_unauthenticated and not (username and password):
            raise ConfigurationError(
                "[SETUP_NEEDED] Argument error: username and password are required "
                "unless use_unauthenticated is set."
            )
        base_url = (url or config.DEFAULT_URL).rstrip("/")
        return cls(
            base_url=base_url,
            username=username or "",
            password=password or "",
            headers=MappingProxyType(dict(headers or {})),
            query=MappingProxyType({"version": version_date}),
            use_unauthenticated=use_unauthenticated,
        )

    @classmethod
    def from_env(cls):
        """Build a ServiceConfig from the values loaded out of .env."""
        return cls.create(
            version_date=config.VERSION_DATE,
            url=config.SERVICE_URL,
            username=config.USERNAME,
            password=config.PASSWORD,
        )

    def auth_headers(self):
        if self.use_unauthenticated:
            return {}
        raw = f"{self.username}:{self.password}".encode("utf-8")
        return {"Authorization": "Basic " + base64.b64encode(raw).decode("ascii")}


@dataclass(frozen=True)
class OutboundRequest:
    """A fully resolved request, ready for the transport."""

    method: str
    url: str
    query: dict
    body: dict | None = None
    headers: dict = field(default_factory=dict)

    @property
    def full_url(self):
        if not self.query:
            return self.url
        # Booleans go over the wire as "true"/"false".
        pairs = {
            k: (str(v).lower() if isinstance(v, bool) else v) for k, v in self.query.items()
        }
        return self.url + "?" + urllib.parse.urlencode(pairs, doseq=True)


@dataclass
class TransportResponse:
    """Raw response handed back by a transport, whatever its status."""

    status: int
    reason: str = ""
    headers: dict = field(default_factory=dict)
    body: bytes = b""

    @property
    def ok(self):
        return 200 <= self.status < 300
