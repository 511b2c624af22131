"""
trivia_client — Trivia Party Game Client
========================================

Client side of a real-time multiplayer trivia party game. One process
drives either the host (big screen) display or a player device; both
follow the phases announced by the game server and never advance on
their own.

Quick Start:
    from trivia_client import ClientRunner, Role
    runner = ClientRunner({"server_url": "http://localhost:3000"}, Role.PLAYER,
                          join_args=("ABCD", "ana"))
    runner.run()

Embedding the controllers:
    from trivia_client import ConnectionManager, SessionStore, PlayerPhaseController
    conn = ConnectionManager("http://localhost:3000")
    player = PlayerPhaseController(conn, SessionStore(), asyncio.get_running_loop())
    player.mount()
    await conn.start()
"""

from .runner import ClientRunner
from ._shared import AuthClient, ConnectionManager, SessionStore
from ._state import HostPhase, PlayerPhase, Role
from ._sync import (
    HostPhaseController,
    LeaderboardRow,
    PlayerPhaseController,
    aggregate,
)
from .errors import (
    TriviaClientError,
    PayloadError,
    RequestTimeout,
    AuthError,
    SessionInvalid,
    ServerError,
)
from .types import (
    CreateGamePayload,
    ReconnectHostPayload,
    JoinGamePayload,
    SubmitAnswerPayload,
    SubmitTopicPayload,
    RequestPlayerListPayload,
)

__all__ = [
    # Main classes
    "ClientRunner",
    "HostPhaseController",
    "PlayerPhaseController",
    "ConnectionManager",
    "SessionStore",
    "AuthClient",
    # Phases
    "Role",
    "HostPhase",
    "PlayerPhase",
    # Leaderboard
    "LeaderboardRow",
    "aggregate",
    # Errors
    "TriviaClientError",
    "PayloadError",
    "RequestTimeout",
    "AuthError",
    "SessionInvalid",
    "ServerError",
    # Outbound payload types
    "CreateGamePayload",
    "ReconnectHostPayload",
    "JoinGamePayload",
    "SubmitAnswerPayload",
    "SubmitTopicPayload",
    "RequestPlayerListPayload",
]
__version__ = "1.0.0"
