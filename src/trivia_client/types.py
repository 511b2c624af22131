"""
trivia_client.types — TypedDict schemas for outbound events
============================================================

This module documents the exact structure of the payloads the client
emits on the real-time channel. Field names follow the server's
camelCase wire format.

All types are exported from the main package:

    from trivia_client import CreateGamePayload, JoinGamePayload, ...
"""

from typing import TypedDict


# ============================================
# Host → server
# ============================================

class CreateGamePayload(TypedDict):
    """Payload of ``create_game``.

    Fields
    ------
    maxPlayers : int
        Number of players the lobby waits for (2-8).
    roundsPerPlayer : int
        How many rounds each player picks a topic for (1-5).
    questionsPerRound : int
        Questions asked per round (3-10).
    """
    maxPlayers: int
    roundsPerPlayer: int
    questionsPerRound: int


class ReconnectHostPayload(TypedDict):
    """Payload of ``reconnect_host``: the persisted game code."""
    gameCode: str


# ============================================
# Player → server
# ============================================

class JoinGamePayload(TypedDict):
    """Payload of ``join_game``. Re-sent on every reconnection."""
    username: str
    gameCode: str


class SubmitAnswerPayload(TypedDict):
    """Payload of ``submit_answer``. Sent at most once per question."""
    answerIndex: int
    gameCode: str


class SubmitTopicPayload(TypedDict):
    """Payload of ``submit_topic``."""
    topic: str
    gameCode: str


class RequestPlayerListPayload(TypedDict):
    """Payload of ``request_player_list`` (always empty)."""
