# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
Shared infrastructure used by both controllers.

This package contains:
- The real-time connection manager
- The persisted session store
- The auxiliary auth client
- Logging configuration and the event trace
"""

from .auth_client import AuthClient, Identity, JoinAddress
from .connection import ConnectionManager
from .session_store import SessionStore
from .logging_config import (
    setup_logging,
    log_client_error,
    enable_trace_mode,
    disable_trace_mode,
    is_trace_mode_enabled,
)
from .event_logger import get_event_logger, EventLogger

__all__ = [
    "AuthClient",
    "Identity",
    "JoinAddress",
    "ConnectionManager",
    "SessionStore",
    "setup_logging",
    "log_client_error",
    "enable_trace_mode",
    "disable_trace_mode",
    "is_trace_mode_enabled",
    "get_event_logger",
    "EventLogger",
]
