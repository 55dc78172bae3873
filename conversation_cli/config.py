"""
conversation-cli shared configuration, constants, and module-level state.
Standalone module — no imports from other project files.
"""

import os

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")

# Keys also read from os.environ when the .env file does not set them.
_ENV_KEYS = (
    "CONVERSATION_URL",
    "CONVERSATION_USERNAME",
    "CONVERSATION_PASSWORD",
    "CONVERSATION_VERSION_DATE",
    "CONVERSATION_HTTP_TIMEOUT_SECONDS",
    "CONVERSATION_HTTP_MAX_RETRIES",
    "CONVERSATION_HTTP_RETRY_BASE_SECONDS",
    "CONVERSATION_HTTP_MAX_RESPONSE_BYTES",
    "CONVERSATION_HTTP_LOG",
    "CONVERSATION_HTTP_LOG_SAMPLE_RATE",
    "CONVERSATION_MCP_RESPONSE_MODE",
)


def load_env():
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    for key in _ENV_KEYS:
        if key not in env and os.environ.get(key):
            env[key] = os.environ[key]
    return env


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.1.0"
CONTRACT_SCHEMA_VERSION = "1.0"

DEFAULT_URL = "https://gateway.watsonplatform.net/conversation/api"

# Initial release.
VERSION_DATE_2016_07_11 = "2016-07-11"
# context.system.dialog_stack became a list of {"dialog_node": ...} objects.
VERSION_DATE_2016_09_20 = "2016-09-20"
# Absolute intent scoring; irrelevant input returns an empty intents list.
VERSION_DATE_2017_02_03 = "2017-02-03"

VALID_RESPONSE_MODES = {"legacy", "envelope"}

# ---------------------------------------------------------------------------
# Module-level state (loaded from .env)
# ---------------------------------------------------------------------------

env = load_env()

SERVICE_URL = env.get("CONVERSATION_URL", "") or DEFAULT_URL
USERNAME = env.get("CONVERSATION_USERNAME", "")
PASSWORD = env.get("CONVERSATION_PASSWORD", "")
VERSION_DATE = env.get("CONVERSATION_VERSION_DATE", "")
HTTP_TIMEOUT_SECONDS = _env_int("CONVERSATION_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RETRIES = _env_int("CONVERSATION_HTTP_MAX_RETRIES", 2)
HTTP_RETRY_BASE_SECONDS = _env_float("CONVERSATION_HTTP_RETRY_BASE_SECONDS", 1.0)
HTTP_MAX_RESPONSE_BYTES = _env_int("CONVERSATION_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("CONVERSATION_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("CONVERSATION_HTTP_LOG_SAMPLE_RATE", 1.0)))

MCP_RESPONSE_MODE = env.get("CONVERSATION_MCP_RESPONSE_MODE", "legacy")
if MCP_RESPONSE_MODE not in VALID_RESPONSE_MODES:
    MCP_RESPONSE_MODE = "legacy"

# ---------------------------------------------------------------------------
# Runtime flags (set by the CLI)
# ---------------------------------------------------------------------------

RUNTIME_QUIET = False
