# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.controller_base — Base Phase Controller
===========================================================

Abstract base class for the host and player phase controllers.
Provides the mount/unmount lifecycle, phase bookkeeping, the
question countdown, the roster snapshot and the game-over exit
shared by both roles.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .._shared.connection import ConnectionManager
from .._shared.event_logger import EventLogger
from .._shared.session_store import SessionStore
from .._state import Player, Question, Role, RoundContext
from ..types import RequestPlayerListPayload
from .countdown import CountdownTicker, Scheduler
from .event_router import EventRouter
from .leaderboard import LeaderboardRow, rows_from_entries
from .schemas import PlayerList, QuestionStart, ScoresPayload

logger = logging.getLogger("trivia_client.controller")

# Navigation targets handed to the ``navigate`` hook
ROUTE_SUMMARY = "summary"
ROUTE_JOIN = "join"

Navigate = Callable[[str, Dict[str, Any]], None]


class BasePhaseController(ABC):
    """
    Shared state machine plumbing.

    Subclasses set the class attributes below and register their
    event handlers in ``_register_handlers``. Phases only change in
    response to inbound events or explicit user operations.
    """

    role: Role
    INITIAL_PHASE: Enum
    QUESTION_PHASE: Enum
    GAME_OVER_PHASE: Enum

    def __init__(
        self,
        connection: ConnectionManager,
        session_store: SessionStore,
        scheduler: Scheduler,
        navigate: Optional[Navigate] = None,
        event_logger: Optional[EventLogger] = None,
        on_phase_change: Optional[Callable[[Enum, Enum], None]] = None,
        on_countdown: Optional[Callable[[int], None]] = None,
    ):
        self.connection = connection
        self.session_store = session_store
        self.navigate = navigate
        self.event_logger = event_logger
        self.on_phase_change = on_phase_change

        self.phase = self.INITIAL_PHASE
        self.game_code: Optional[str] = None
        self.players: List[Player] = []
        self.question: Optional[Question] = None
        self.round = RoundContext()
        self.final_scores: Optional[List[LeaderboardRow]] = None
        self.last_error: Optional[Exception] = None

        self.router = EventRouter(connection, event_logger)
        self.countdown = CountdownTicker(
            scheduler,
            should_continue=lambda: self.phase is self.QUESTION_PHASE,
            on_tick=on_countdown,
        )
        self._register_handlers()

    @abstractmethod
    def _register_handlers(self) -> None:
        """Register inbound event handlers on ``self.router``."""

    def _on_mount(self) -> None:
        """Hook run after the router is mounted."""

    # ── Lifecycle ────────────────────────────────────────────

    def mount(self) -> None:
        self.router.mount()
        logger.info(f"{self.role.value} controller mounted")
        self._on_mount()

    def unmount(self) -> None:
        self.router.unmount()
        self.countdown.cancel()
        logger.info(f"{self.role.value} controller unmounted")

    @property
    def mounted(self) -> bool:
        return self.router.mounted

    # ── Phase bookkeeping ────────────────────────────────────

    def advance_phase(self, new_phase: Enum) -> None:
        old_phase = self.phase
        if new_phase is not self.QUESTION_PHASE:
            self.countdown.cancel()
        self.phase = new_phase
        if old_phase is new_phase:
            return
        logger.info(f"[{self.game_code or '----'}] Phase: {old_phase.value} → {new_phase.value}")
        if self.event_logger is not None:
            self.event_logger.log_phase(old_phase.value, new_phase.value)
        if self.on_phase_change is not None:
            self.on_phase_change(old_phase, new_phase)

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self.countdown.remaining

    # ── Outbound ─────────────────────────────────────────────

    def emit(self, event: str, payload: Dict[str, Any]) -> None:
        self.connection.emit(event, payload)
        if self.event_logger is not None:
            self.event_logger.log_sent(event)

    def request_player_list(self) -> None:
        self.emit("request_player_list", RequestPlayerListPayload())

    # ── Shared handlers ──────────────────────────────────────

    def _on_player_list(self, payload: PlayerList) -> None:
        self.players = [
            Player(username=entry.username, id=entry.id, score=entry.score)
            for entry in payload.players
            if entry.username
        ]
        logger.debug(f"Roster: {self.names}")

    @property
    def names(self) -> List[str]:
        return [player.username for player in self.players]

    def _start_question(self, payload: QuestionStart) -> None:
        """Replace the question wholesale and start its countdown."""
        self.question = Question(
            text=payload.text,
            options=list(payload.options),
            time_limit=payload.time_limit,
            type=payload.type,
        )
        if payload.topic:
            self.round.topic = payload.topic
        if payload.picker_username:
            self.round.picker_username = payload.picker_username
        self.advance_phase(self.QUESTION_PHASE)
        self.countdown.start(payload.time_limit)

    def _on_game_over(self, payload: ScoresPayload) -> None:
        """Terminal: summarize, forget the game and stop listening."""
        entries = payload.scores.players if payload.scores is not None else []
        self.final_scores = rows_from_entries(entries)
        self.session_store.clear_game()
        self.advance_phase(self.GAME_OVER_PHASE)
        self.unmount()
        if self.navigate is not None:
            self.navigate(ROUTE_SUMMARY, {"final_scores": self.final_scores})

    def _set_game_code(self, game_code: Optional[str]) -> None:
        self.game_code = game_code
        if self.event_logger is not None:
            self.event_logger.set_game_code(game_code)
