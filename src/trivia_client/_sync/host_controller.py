# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.host_controller — Host Phase Controller
===========================================================

State machine of the host (big screen) display.

Phases:
UNCONFIGURED -> CREATING (create_game sent)
CREATING -> LOBBY (on game_created)
UNCONFIGURED -> LOBBY (on host_reconnected, unless the game is over)
* -> INTERMISSION (on round_start)
* -> TOPIC_SELECTION (on topic_waiting)
* -> TOPIC_CHOSEN (on topic_chosen)
* -> QUESTION (on question_start)
* -> REVEAL (on round_reveal)
* -> ROUND_OVER (on round_over)
* -> GAME_OVER (on game_over, terminal)

The host never advances on its own; only the countdown display runs
locally.
"""

import logging
from typing import Any, List, Optional, Set

from .._state import GameSession, HostPhase, Role
from ..errors import HOST_INVALIDATING_MESSAGES, SessionInvalid, classify_server_error
from ..types import CreateGamePayload, ReconnectHostPayload
from .controller_base import BasePhaseController
from .leaderboard import LeaderboardRow, rows_from_entries
from .schemas import (
    GameCreated,
    HostReconnected,
    PlayerAnswered,
    QuestionStart,
    RoundOver,
    RoundReveal,
    RoundStart,
    ScoresPayload,
    TopicChosen,
    TopicWaiting,
)

logger = logging.getLogger("trivia_client.host")

FINISHED_GAME_STATE = "GAME_OVER"

# (minimum, maximum) accepted for each create_game setting
MAX_PLAYERS_RANGE = (2, 8)
ROUNDS_PER_PLAYER_RANGE = (1, 5)
QUESTIONS_PER_ROUND_RANGE = (3, 10)


def clamp_int(value: Any, minimum: int, maximum: int) -> int:
    """Parse ``value`` as an int and clamp it; unparseable → minimum."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return minimum
    return max(minimum, min(maximum, parsed))


class HostPhaseController(BasePhaseController):
    """
    Drives the host display from server events.

    Attributes:
        session: Game code and configuration once known
        previous_code: Game code found in the session store at mount
        answered: Player ids that answered the current question
        leaderboard: Latest leaderboard snapshot
        correct_index: Correct option of the current question once revealed
    """

    role = Role.HOST
    INITIAL_PHASE = HostPhase.UNCONFIGURED
    QUESTION_PHASE = HostPhase.QUESTION
    GAME_OVER_PHASE = HostPhase.GAME_OVER

    def __init__(self, *args, **kwargs):
        self.session = GameSession(role=Role.HOST)
        self.previous_code: Optional[str] = None
        self.answered: Set[str] = set()
        self.leaderboard: List[LeaderboardRow] = []
        self.correct_index: Optional[int] = None
        self.correct_answer_display: Optional[str] = None
        self.started = False
        super().__init__(*args, **kwargs)

    def _register_handlers(self) -> None:
        reg = self.router.register_handler
        reg("update_player_list", self._on_player_list)
        reg("game_created", self._on_game_created)
        reg("host_reconnected", self._on_host_reconnected)
        reg("game_started", self._on_game_started)
        reg("round_start", self._on_round_start)
        reg("topic_waiting", self._on_topic_waiting)
        reg("topic_chosen", self._on_topic_chosen)
        reg("question_start", self._on_question_start)
        reg("player_answered", self._on_player_answered)
        reg("round_reveal", self._on_round_reveal)
        reg("update_leaderboard", self._on_update_leaderboard)
        reg("round_over", self._on_round_over)
        reg("game_over", self._on_game_over)
        reg("error", self._on_error)
        self.router.register_connect_handler(self._on_connect)

    def _on_mount(self) -> None:
        self.previous_code = self.session_store.game_code
        if self.connection.connected:
            self._try_resume()

    # ── User operations ──────────────────────────────────────

    def create_game(
        self, max_players: Any, rounds_per_player: Any, questions_per_round: Any
    ) -> None:
        """Clamp the settings and ask the server for a new game."""
        max_players = clamp_int(max_players, *MAX_PLAYERS_RANGE)
        rounds = clamp_int(rounds_per_player, *ROUNDS_PER_PLAYER_RANGE)
        questions = clamp_int(questions_per_round, *QUESTIONS_PER_ROUND_RANGE)

        self.players = []
        self._set_game_code(None)
        self.session = GameSession(
            role=Role.HOST,
            max_players=max_players,
            rounds_per_player=rounds,
            questions_per_round=questions,
        )
        self.advance_phase(HostPhase.CREATING)
        self.emit("create_game", CreateGamePayload(
            maxPlayers=max_players,
            roundsPerPlayer=rounds,
            questionsPerRound=questions,
        ))

    @property
    def ready_to_start(self) -> bool:
        """The lobby is full."""
        return (
            self.game_code is not None
            and self.session.max_players is not None
            and len(self.players) == self.session.max_players
        )

    # ── Resumption ───────────────────────────────────────────

    def _on_connect(self) -> None:
        self._try_resume()

    def _try_resume(self) -> None:
        """Ask to resume the persisted game, once per connection event."""
        stored = self.session_store.game_code
        if not stored or self.game_code or self.phase is HostPhase.CREATING:
            return
        logger.info(f"Resuming host session for {stored}")
        self.emit("reconnect_host", ReconnectHostPayload(gameCode=stored))

    # ── Inbound handlers ─────────────────────────────────────

    def _on_game_created(self, payload: GameCreated) -> None:
        self._apply_config(payload)
        self.advance_phase(HostPhase.LOBBY)

    def _on_host_reconnected(self, payload: HostReconnected) -> None:
        if payload.game_state == FINISHED_GAME_STATE:
            logger.info(f"Game {payload.game_code} is over, clearing session")
            self.session_store.clear_game()
            self.previous_code = None
            self._set_game_code(None)
            self.session = GameSession(role=Role.HOST)
            self.advance_phase(HostPhase.UNCONFIGURED)
            return
        self._apply_config(payload)
        self.advance_phase(HostPhase.LOBBY)

    def _apply_config(self, payload: GameCreated) -> None:
        self.session = GameSession(
            role=Role.HOST,
            game_code=payload.game_code,
            max_players=payload.max_players or self.session.max_players,
            rounds_per_player=payload.rounds_per_player or self.session.rounds_per_player,
            questions_per_round=payload.questions_per_round or self.session.questions_per_round,
        )
        self._set_game_code(payload.game_code)
        self.session_store.save_game(payload.game_code, Role.HOST.value)

    def _on_game_started(self, payload: Any) -> None:
        self.started = True
        logger.info(f"[{self.game_code}] Game started")

    def _on_round_start(self, payload: RoundStart) -> None:
        if payload.round_number:
            self.round.round_number = payload.round_number
        self.question = None
        self.correct_index = None
        self.correct_answer_display = None
        self.advance_phase(HostPhase.INTERMISSION)

    def _on_topic_waiting(self, payload: TopicWaiting) -> None:
        self.round.picker_username = payload.picker_username or "a player"
        if payload.round is not None:
            self.round.round_number = payload.round
        self.advance_phase(HostPhase.TOPIC_SELECTION)

    def _on_topic_chosen(self, payload: TopicChosen) -> None:
        self.round.topic = payload.topic
        self.round.picker_username = payload.picker_username
        self.advance_phase(HostPhase.TOPIC_CHOSEN)

    def _on_question_start(self, payload: QuestionStart) -> None:
        self.answered = set()
        self.correct_index = None
        self.correct_answer_display = None
        self._start_question(payload)

    def _on_player_answered(self, payload: PlayerAnswered) -> None:
        self.answered.add(payload.player_id)

    def _on_round_reveal(self, payload: RoundReveal) -> None:
        self.correct_index = payload.correct_index
        self.correct_answer_display = payload.correct_answer_display
        self._replace_leaderboard(payload)
        self.advance_phase(HostPhase.REVEAL)

    def _on_update_leaderboard(self, payload: ScoresPayload) -> None:
        self._replace_leaderboard(payload)

    def _on_round_over(self, payload: RoundOver) -> None:
        self._replace_leaderboard(payload)
        if payload.round is not None:
            self.round.round_number = payload.round
        self.advance_phase(HostPhase.ROUND_OVER)

    def _on_error(self, message: str) -> None:
        error = classify_server_error(message, HOST_INVALIDATING_MESSAGES)
        self.last_error = error
        logger.error(f"Server error: {message}")
        if isinstance(error, SessionInvalid):
            self.session_store.clear_game()
            self.previous_code = None
        if self.phase is HostPhase.CREATING:
            self.advance_phase(HostPhase.UNCONFIGURED)

    def _replace_leaderboard(self, payload: ScoresPayload) -> None:
        if payload.scores is not None:
            self.leaderboard = rows_from_entries(payload.scores.players)

    # ── Derived display values ───────────────────────────────

    @property
    def answered_count(self) -> int:
        return len(self.answered)
