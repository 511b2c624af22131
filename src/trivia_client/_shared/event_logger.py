# Area: Shared
# PRD: docs/LOGGER_OUTPUT_CLIENT.md
"""
trivia_client._shared.event_logger — Event trace output
=======================================================

Colored one-line trace of channel traffic and phase changes,
printed directly to the terminal in trace mode.
"""

from __future__ import annotations
import sys
from datetime import datetime
from typing import Optional

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

GREEN = "\033[32m"         # Channel traffic
ORANGE = "\033[38;5;208m"  # Phase changes
RED = "\033[31m"           # Errors
RESET = "\033[0m"

# ══════════════════════════════════════════════════════════════
# EVENT NAME → DISPLAY NAME MAPPINGS
# ══════════════════════════════════════════════════════════════

RECEIVE_DISPLAY_NAMES = {
    "update_player_list": "PLAYER-LIST",
    "game_created": "GAME-CREATED",
    "host_reconnected": "HOST-RESUMED",
    "game_started": "GAME-STARTED",
    "round_start": "ROUND-START",
    "topic_request": "PICK-TOPIC",
    "topic_waiting": "TOPIC-WAIT",
    "topic_chosen": "TOPIC-CHOSEN",
    "question_start": "QUESTION",
    "player_answered": "PLAYER-ANSWERED",
    "round_reveal": "REVEAL",
    "update_leaderboard": "LEADERBOARD",
    "round_over": "ROUND-OVER",
    "game_over": "GAME-OVER",
    "error": "SERVER-ERROR",
}

SEND_DISPLAY_NAMES = {
    "create_game": "CREATE-GAME",
    "reconnect_host": "RESUME-HOST",
    "join_game": "JOIN-GAME",
    "submit_answer": "ANSWER",
    "submit_topic": "TOPIC",
    "request_player_list": "GET-PLAYERS",
}

# What the client waits for after each event
EXPECTED_NEXT = {
    "update_player_list": "None",
    "game_created": "Players joining",
    "host_reconnected": "Players joining",
    "game_started": "ROUND-START",
    "round_start": "PICK-TOPIC or TOPIC-WAIT",
    "topic_request": "Send TOPIC",
    "topic_waiting": "TOPIC-CHOSEN",
    "topic_chosen": "QUESTION",
    "question_start": "REVEAL",
    "player_answered": "None",
    "round_reveal": "QUESTION or ROUND-OVER",
    "update_leaderboard": "None",
    "round_over": "ROUND-START or GAME-OVER",
    "game_over": "None (terminal)",
    "error": "None",
    # Sent events
    "create_game": "GAME-CREATED",
    "reconnect_host": "HOST-RESUMED",
    "join_game": "PLAYER-LIST",
    "submit_answer": "REVEAL",
    "submit_topic": "TOPIC-CHOSEN",
    "request_player_list": "PLAYER-LIST",
}


class EventLogger:
    """Trace logger for channel events and phase changes."""

    def __init__(self, role: str = "", game_code: Optional[str] = None):
        self.role = role
        self._game_code: str = game_code or "----"

    def set_game_code(self, game_code: Optional[str]) -> None:
        """Set current game code for logging context."""
        self._game_code = game_code or "----"

    def set_role(self, role: str) -> None:
        self.role = role

    def _get_role(self) -> str:
        return self.role.upper() if self.role else "UNKNOWN"

    def _now(self) -> str:
        return datetime.now().strftime("%H:%M:%S")

    def log_received(self, event: str) -> None:
        """Log an inbound event."""
        display = RECEIVE_DISPLAY_NAMES.get(event, event)
        expected = EXPECTED_NEXT.get(event, "Unknown")
        line = (
            f"{GREEN}{self._now()} | GAME: {self._game_code:4} | RECEIVED | "
            f"{display:16} | EXPECTED-NEXT: {expected:26} | ROLE: {self._get_role()}{RESET}"
        )
        print(line, file=sys.stdout)

    def log_sent(self, event: str) -> None:
        """Log an outbound event."""
        display = SEND_DISPLAY_NAMES.get(event, event)
        expected = EXPECTED_NEXT.get(event, "Unknown")
        line = (
            f"{GREEN}{self._now()} | GAME: {self._game_code:4} | SENT     | "
            f"{display:16} | EXPECTED-NEXT: {expected:26} | ROLE: {self._get_role()}{RESET}"
        )
        print(line, file=sys.stdout)

    def log_phase(self, old: str, new: str) -> None:
        """Log a phase transition."""
        line = (
            f"{ORANGE}{self._now()} | GAME: {self._game_code:4} | PHASE    | "
            f"{old} → {new} | ROLE: {self._get_role()}{RESET}"
        )
        print(line, file=sys.stdout)

    def log_error(self, description: str) -> None:
        line = f"{RED}[ERROR] {self._now()} | {description}{RESET}"
        print(line, file=sys.stderr)


_event_logger: Optional[EventLogger] = None


def get_event_logger() -> EventLogger:
    """Get or create the process-wide event logger."""
    global _event_logger
    if _event_logger is None:
        _event_logger = EventLogger()
    return _event_logger
