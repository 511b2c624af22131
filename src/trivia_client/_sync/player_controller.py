# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.player_controller — Player Phase Controller
===============================================================

State machine of a player device.

Phases:
UNCONFIGURED -> JOINING (join)
JOINING -> WAITING (on game_started)
* -> WAITING (on round_start, or after submitting a topic)
* -> TOPIC_INPUT (on topic_request: this player picks)
* -> TOPIC_WAITING (on topic_waiting: someone else picks)
* -> TOPIC_CHOSEN (on topic_chosen)
* -> QUESTION (on question_start)
QUESTION -> ANSWERED (submit_answer, optimistic)
* -> RESULT (on round_reveal)
* -> GAME_OVER (on game_over, terminal)
* -> UNCONFIGURED (on an invalidating error, or leave)

Which players pick a topic is decided by the server; the client only
follows the event it receives.
"""

import logging
from typing import Any, Optional

from .._shared.session_store import DISPLAY_NAME, GAME_CODE, ROLE
from .._state import PlayerPhase, Role
from ..errors import PLAYER_INVALIDATING_MESSAGES, SessionInvalid, classify_server_error
from ..types import JoinGamePayload, SubmitAnswerPayload, SubmitTopicPayload
from .controller_base import ROUTE_JOIN, BasePhaseController
from .leaderboard import Score, score_for
from .schemas import QuestionStart, RoundReveal, TopicChosen, TopicWaiting

logger = logging.getLogger("trivia_client.player")

GAME_CODE_LENGTH = 4
MAX_TOPIC_LENGTH = 50


def normalize_game_code(code: str) -> str:
    """Trim and upper-case a typed game code."""
    return code.strip().upper()


class PlayerPhaseController(BasePhaseController):
    """
    Drives a player device from server events and user input.

    Attributes:
        username: Display name this player joined with
        selected_answer: Answer index recorded for the current question
        was_correct: Verdict of the last reveal (None if no answer was sent)
        score: Last known score of this player
        is_picker: This player was asked to pick the topic
    """

    role = Role.PLAYER
    INITIAL_PHASE = PlayerPhase.UNCONFIGURED
    QUESTION_PHASE = PlayerPhase.QUESTION
    GAME_OVER_PHASE = PlayerPhase.GAME_OVER

    def __init__(self, *args, **kwargs):
        self.username: Optional[str] = None
        self.selected_answer: Optional[int] = None
        self.was_correct: Optional[bool] = None
        self.correct_index: Optional[int] = None
        self.score: Score = 0
        self.is_picker = False
        super().__init__(*args, **kwargs)

    def _register_handlers(self) -> None:
        reg = self.router.register_handler
        reg("update_player_list", self._on_player_list)
        reg("game_started", self._on_game_started)
        reg("round_start", self._on_round_start)
        reg("topic_request", self._on_topic_request)
        reg("topic_waiting", self._on_topic_waiting)
        reg("topic_chosen", self._on_topic_chosen)
        reg("question_start", self._on_question_start)
        reg("round_reveal", self._on_round_reveal)
        reg("game_over", self._on_game_over)
        reg("error", self._on_error)
        self.router.register_connect_handler(self._on_connect)

    def _on_mount(self) -> None:
        stored_code = self.session_store.game_code
        stored_name = self.session_store.display_name
        if stored_code and stored_name and self.phase is PlayerPhase.UNCONFIGURED:
            self._set_game_code(stored_code)
            self.username = stored_name
            self.advance_phase(PlayerPhase.JOINING)
        if self.connection.connected:
            self._rejoin()

    # ── User operations ──────────────────────────────────────

    def join(self, game_code: str, username: str) -> None:
        """
        Join a game and remember it for reconnection.

        Raises:
            ValueError: If the code is not 4 characters or the name is empty
        """
        code = normalize_game_code(game_code)
        if len(code) != GAME_CODE_LENGTH:
            raise ValueError(f"Game code must be {GAME_CODE_LENGTH} characters, got {code!r}")
        username = username.strip()
        if not username:
            raise ValueError("Username is required")

        self._set_game_code(code)
        self.username = username
        self.session_store.set(GAME_CODE, code)
        self.session_store.set(DISPLAY_NAME, username)
        self.session_store.set(ROLE, Role.PLAYER.value)
        self.advance_phase(PlayerPhase.JOINING)
        if self.connection.connected:
            self._emit_join()

    def submit_answer(self, answer_index: int) -> bool:
        """
        Send an answer for the current question. Single-shot.

        Returns:
            True if the answer was sent, False if ignored
        """
        if self.selected_answer is not None:
            logger.debug("Answer already recorded, ignoring")
            return False
        if self.phase is not PlayerPhase.QUESTION:
            logger.debug(f"No question open (phase {self.phase.value}), ignoring answer")
            return False

        self.selected_answer = answer_index
        self.advance_phase(PlayerPhase.ANSWERED)
        self.emit(
            "submit_answer",
            SubmitAnswerPayload(answerIndex=answer_index, gameCode=self.game_code),
        )
        return True

    def submit_topic(self, topic: str) -> bool:
        """
        Send this round's topic and go back to waiting.

        Acceptance is not confirmed; the next topic_chosen says what
        the server actually used.
        """
        topic = topic.strip()[:MAX_TOPIC_LENGTH]
        if not topic:
            return False
        self.emit("submit_topic", SubmitTopicPayload(topic=topic, gameCode=self.game_code))
        self.advance_phase(PlayerPhase.WAITING)
        return True

    def leave(self) -> None:
        """Forget the current game and return to the entry flow."""
        self.session_store.clear_game()
        self._set_game_code(None)
        self.advance_phase(PlayerPhase.UNCONFIGURED)

    # ── Reconnection ─────────────────────────────────────────

    def _on_connect(self) -> None:
        self._rejoin()

    def _rejoin(self) -> None:
        """Every (re)connection re-sends join_game for the stored game."""
        stored_code = self.session_store.game_code
        stored_name = self.session_store.display_name
        if not stored_code or not stored_name:
            return
        self._set_game_code(stored_code)
        self.username = stored_name
        logger.info(f"Rejoining game {stored_code} as {stored_name}")
        self._emit_join()

    def _emit_join(self) -> None:
        self.emit("join_game", JoinGamePayload(username=self.username, gameCode=self.game_code))

    # ── Inbound handlers ─────────────────────────────────────

    def _on_game_started(self, payload: Any) -> None:
        self.advance_phase(PlayerPhase.WAITING)

    def _on_round_start(self, payload: Any) -> None:
        self.selected_answer = None
        self.was_correct = None
        self.advance_phase(PlayerPhase.WAITING)

    def _on_topic_request(self, payload: Any) -> None:
        self.is_picker = True
        self.advance_phase(PlayerPhase.TOPIC_INPUT)

    def _on_topic_waiting(self, payload: TopicWaiting) -> None:
        # The picker gets topic_request; its copy of topic_waiting is ignored
        if self.username and payload.picker_username == self.username:
            logger.debug("Ignoring topic_waiting: this player is the picker")
            return
        self.is_picker = False
        self.round.picker_username = payload.picker_username or "another player"
        self.advance_phase(PlayerPhase.TOPIC_WAITING)

    def _on_topic_chosen(self, payload: TopicChosen) -> None:
        self.round.topic = payload.topic
        self.round.picker_username = payload.picker_username
        self.advance_phase(PlayerPhase.TOPIC_CHOSEN)

    def _on_question_start(self, payload: QuestionStart) -> None:
        self.selected_answer = None
        self.was_correct = None
        self.correct_index = None
        self._start_question(payload)

    def _on_round_reveal(self, payload: RoundReveal) -> None:
        self.correct_index = payload.correct_index
        if self.selected_answer is not None:
            self.was_correct = self.selected_answer == payload.correct_index
        else:
            self.was_correct = None
        if payload.scores is not None and self.username:
            my_score = score_for(payload.scores.players, self.username)
            if my_score is not None:
                self.score = my_score
        self.advance_phase(PlayerPhase.RESULT)

    def _on_error(self, message: str) -> None:
        error = classify_server_error(message, PLAYER_INVALIDATING_MESSAGES)
        self.last_error = error
        logger.error(f"Server error: {message}")
        if isinstance(error, SessionInvalid):
            self.session_store.clear_game()
            self._set_game_code(None)
            self.advance_phase(PlayerPhase.UNCONFIGURED)
            if self.navigate is not None:
                self.navigate(ROUTE_JOIN, {"message": error.message})

    # ── Derived display values ───────────────────────────────

    @property
    def verdict(self) -> Optional[str]:
        """'correct', 'wrong', or None when no answer was recorded."""
        if self.was_correct is None:
            return None
        return "correct" if self.was_correct else "wrong"
