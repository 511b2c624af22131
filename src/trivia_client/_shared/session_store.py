# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client._shared.session_store — Persisted client session
==============================================================

Repository for the few values that must survive a restart: game
code, role, display name and auth token. Game-scoped values are
cleared on game over or invalidation; everything is cleared on
logout.
"""

import logging
from typing import Dict, Optional

from .database import BaseRepository, DEFAULT_DB_PATH

logger = logging.getLogger("trivia_client.session_store")

GAME_CODE = "game_code"
ROLE = "role"
DISPLAY_NAME = "display_name"
AUTH_TOKEN = "auth_token"

SESSION_KEYS = (GAME_CODE, ROLE, DISPLAY_NAME, AUTH_TOKEN)
GAME_KEYS = (GAME_CODE, ROLE)


class SessionStore(BaseRepository):
    """
    Repository for the session_values table.

    Values are plain strings. Reading a key that was never set, or
    was cleared, returns None.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        super().__init__(db_path)

    def get(self, key: str) -> Optional[str]:
        row = self._execute_one(
            "SELECT value FROM session_values WHERE key = ?", (key,)
        )
        return row["value"] if row else None

    def set(self, key: str, value: Optional[str]) -> None:
        """Store a value. Setting None removes the key."""
        if value is None:
            self.remove(key)
            return
        query = """
            INSERT OR REPLACE INTO session_values (key, value, updated_at)
            VALUES (?, ?, CURRENT_TIMESTAMP)
        """
        self._execute(query, (key, str(value)))

    def remove(self, key: str) -> None:
        self._execute("DELETE FROM session_values WHERE key = ?", (key,))

    def snapshot(self) -> Dict[str, str]:
        rows = self._execute("SELECT key, value FROM session_values", fetch=True) or []
        return {row["key"]: row["value"] for row in rows}

    # ── Convenience accessors ────────────────────────────────

    @property
    def game_code(self) -> Optional[str]:
        return self.get(GAME_CODE)

    @property
    def display_name(self) -> Optional[str]:
        return self.get(DISPLAY_NAME)

    @property
    def auth_token(self) -> Optional[str]:
        return self.get(AUTH_TOKEN)

    @property
    def role(self) -> Optional[str]:
        return self.get(ROLE)

    def save_game(self, game_code: str, role: str) -> None:
        self.set(GAME_CODE, game_code)
        self.set(ROLE, role)

    def clear_game(self) -> None:
        """Forget the current game (game over or invalidated session)."""
        for key in GAME_KEYS:
            self.remove(key)
        logger.info("Persisted game session cleared")

    def clear(self) -> None:
        """Forget everything, including identity (logout)."""
        self._execute("DELETE FROM session_values")
        logger.info("Persisted session cleared")
