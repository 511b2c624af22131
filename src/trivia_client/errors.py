# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client.errors — Custom exception classes
================================================

Defines the exception hierarchy surfaced by the client.
Each exception stores its context for structured logging.

Connection failures never appear here: they stay inside the
connection manager and only show up as ``connected=False``.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional
import json


# Server messages that mean the persisted session is no longer usable
HOST_INVALIDATING_MESSAGES = frozenset({"Game not found", "Invalid game code"})
PLAYER_INVALIDATING_MESSAGES = frozenset({
    "Game not found",
    "Room Full",
    "Game already started",
})


class TriviaClientError(Exception):
    """Base exception for all trivia client errors."""

    error_type = "CLIENT_ERROR"

    def format_error_log(self) -> str:
        return _format_error_block(error_type=self.error_type, message=str(self))


class PayloadError(TriviaClientError):
    """Raised when an inbound event payload fails boundary validation."""

    error_type = "INVALID_PAYLOAD"

    def __init__(self, event_name: str, raw_payload: Any, errors: List[str]):
        self.event_name = event_name
        self.raw_payload = raw_payload
        self.errors = errors
        super().__init__(f"Invalid '{event_name}' payload: {errors}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context={"event": self.event_name, "payload": self.raw_payload},
            details=self.errors,
        )


class RequestTimeout(TriviaClientError):
    """Raised when an auxiliary HTTP request exceeds its deadline."""

    error_type = "REQUEST_TIMEOUT"
    user_message = "Request timed out. Is the server running?"

    def __init__(self, url: str, timeout_seconds: float):
        self.url = url
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Request to {url} timed out after {timeout_seconds} seconds")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            message=str(self),
            context={"url": self.url, "timeout_seconds": self.timeout_seconds},
        )


class AuthError(TriviaClientError):
    """Raised when a login/signup request fails for any other reason."""

    error_type = "AUTH_FAILURE"

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class SessionInvalid(TriviaClientError):
    """The server rejected the joined or resumed session.

    The message is kept verbatim so it can be shown to the user.
    """

    error_type = "SESSION_INVALID"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ServerError(TriviaClientError):
    """Opaque, non-fatal error message relayed by the server."""

    error_type = "SERVER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def classify_server_error(
    message: str, invalidating: Iterable[str]
) -> TriviaClientError:
    """
    Map a server ``error`` message to SessionInvalid or ServerError.

    Args:
        message: The message string sent by the server
        invalidating: Messages that invalidate the current session

    Returns:
        SessionInvalid when the message matches, otherwise ServerError
    """
    if message in set(invalidating):
        return SessionInvalid(message)
    return ServerError(message)


def _format_error_block(
    error_type: str,
    message: str,
    context: Optional[Dict[str, Any]] = None,
    details: Optional[List[str]] = None,
) -> str:
    """Format a structured error block for the log."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " TRIVIA CLIENT ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Message:      {message}",
    ]

    if context is not None:
        lines.append("")
        lines.append(" ── CONTEXT " + "─" * 52)
        lines.append(_indent_json(context))

    if details:
        lines.append("")
        lines.append(" ── DETAILS " + "─" * 52)
        for detail in details:
            lines.append(f" • {detail}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
