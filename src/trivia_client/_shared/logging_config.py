# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client._shared.logging_config — Structured logging setup
===============================================================

Configures dual logging: terminal (colored) + file (JSON).
Trace mode suppresses standard logs on the terminal so the event
trace (see event_logger) stays readable.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..errors import TriviaClientError

# Package logger
logger = logging.getLogger("trivia_client")

# Flag to control trace-only terminal output
_trace_mode_enabled = False


class TraceFilter(logging.Filter):
    """Filter that suppresses terminal logs when trace mode is enabled."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not _trace_mode_enabled


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Format a copy so the file handler still sees the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(
    log_file_path: str = "trivia_client.log",
    level: int = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str
        Path to the log file. Defaults to 'trivia_client.log' in current dir.
    level : int
        Logging level. Defaults to INFO.
    """
    pkg_logger = logging.getLogger("trivia_client")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(TraceFilter())
    pkg_logger.addHandler(terminal_handler)

    try:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        pkg_logger.addHandler(file_handler)
    except OSError as e:
        pkg_logger.warning(f"Could not create log file: {e}")

    pkg_logger.propagate = False


def log_client_error(error: "TriviaClientError") -> None:
    """
    Log a client error in the structured format.

    The framed block goes to stderr; a one-line record goes to the
    package logger (and so to the JSON file).
    """
    print(error.format_error_log(), file=sys.stderr)
    logger.error(
        f"Client error: {error.__class__.__name__}: {error}",
        extra={"error_type": error.__class__.__name__},
    )


def enable_trace_mode() -> None:
    """
    Enable trace mode.

    In trace mode:
    - Standard logs are suppressed from terminal
    - Only the colored event trace is shown
    - File logging remains unchanged for debugging
    """
    global _trace_mode_enabled
    _trace_mode_enabled = True


def disable_trace_mode() -> None:
    """Disable trace mode (restore standard logging)."""
    global _trace_mode_enabled
    _trace_mode_enabled = False


def is_trace_mode_enabled() -> bool:
    return _trace_mode_enabled
