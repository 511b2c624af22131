# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client._runner_config — Runner Configuration
===================================================

Configuration defaults, environment mappings and validation for
ClientRunner.
"""

import logging
from typing import Any, Dict

logger = logging.getLogger("trivia_client")

DEFAULTS: Dict[str, Any] = {
    "session_db": "trivia_session.db",
    "log_file": "trivia_client.log",
    "auth_timeout_seconds": 10.0,
    "trace": True,
}

# Environment variable → config key (env wins over the config file)
ENV_MAPPINGS = {
    "TRIVIA_SERVER_URL": "server_url",
    "TRIVIA_API_URL": "api_url",
    "TRIVIA_SESSION_DB": "session_db",
    "TRIVIA_LOG_FILE": "log_file",
    "TRIVIA_DISPLAY_NAME": "display_name",
    "TRIVIA_AUTH_TIMEOUT": "auth_timeout_seconds",
}

FLOAT_KEYS = {"auth_timeout_seconds"}

REQUIRED_CONFIG_KEYS = [
    "server_url",
]


def apply_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of ``config`` with defaults filled in.

    ``api_url`` defaults to ``server_url``: the auth endpoints are
    usually served from the same origin as the channel.
    """
    merged = {**DEFAULTS, **config}
    if not merged.get("api_url") and merged.get("server_url"):
        merged["api_url"] = merged["server_url"]
    return merged


def coerce_env_value(config_key: str, value: str) -> Any:
    """Convert an environment string to the type of its config key."""
    if config_key in FLOAT_KEYS:
        try:
            return float(value)
        except ValueError:
            raise ValueError(f"{config_key} must be a number, got {value!r}") from None
    return value


def validate_config(config: dict) -> None:
    """
    Validate required configuration keys.

    Args:
        config: Configuration dict

    Raises:
        ValueError: If required keys are missing or invalid
    """
    missing = [k for k in REQUIRED_CONFIG_KEYS if not config.get(k)]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    timeout = config.get("auth_timeout_seconds", DEFAULTS["auth_timeout_seconds"])
    if not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError(f"auth_timeout_seconds must be a positive number, got {timeout!r}")
