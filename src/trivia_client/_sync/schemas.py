# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.schemas — Inbound payload schemas
=====================================================

Pydantic models for every server event the controllers consume.
Payloads are validated once, at the boundary, and either become a
typed value or raise PayloadError. The accepted shapes of player
lists (bare list, or an object wrapping one) are resolved here so
no handler has to sniff payload shapes itself.
"""

from __future__ import annotations

import dataclasses
import math
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..errors import PayloadError
from .._state import DEFAULT_TIME_LIMIT, QuestionType


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ══════════════════════════════════════════════════════════════
# PLAYER LISTS
# ══════════════════════════════════════════════════════════════


class PlayerEntry(_Payload):
    """One player-like value: a bare username or a mapping."""

    username: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("username", "name"),
    )
    id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("id", "playerId"),
    )
    score: Optional[Union[int, float]] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"username": value}
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            value = dataclasses.asdict(value)
        if not isinstance(value, dict):
            # Nameless; dropped by the roster and leaderboard builders
            return {}

        data = dict(value)
        for key in ("username", "name"):
            if key in data and not isinstance(data[key], str):
                data.pop(key)
        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            data["score"] = None
        elif not math.isfinite(score):
            data["score"] = None
        for key in ("id", "playerId"):
            if isinstance(data.get(key), int):
                data[key] = str(data[key])
        return data


class PlayerList(_Payload):
    """A full roster/scores snapshot."""

    players: List[PlayerEntry]

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return {"players": list(value)}
        if isinstance(value, dict):
            for key in ("players", "scores"):
                if isinstance(value.get(key), list):
                    return {"players": value[key]}
        raise ValueError("expected a list of players or an object wrapping one")


def parse_player_list(raw: Any, event_name: str = "players") -> List[PlayerEntry]:
    """Validate a player list payload and return its entries."""
    return _validate(PlayerList, raw, event_name).players


# ══════════════════════════════════════════════════════════════
# EVENT PAYLOADS
# ══════════════════════════════════════════════════════════════


class GameCreated(_Payload):
    game_code: str = Field(
        min_length=1, validation_alias=AliasChoices("gameCode", "code"),
    )
    max_players: Optional[int] = Field(default=None, alias="maxPlayers")
    rounds_per_player: Optional[int] = Field(default=None, alias="roundsPerPlayer")
    questions_per_round: Optional[int] = Field(default=None, alias="questionsPerRound")


class HostReconnected(GameCreated):
    game_state: Optional[str] = Field(default=None, alias="gameState")


class QuestionStart(_Payload):
    text: str = ""
    options: List[str] = Field(default_factory=list)
    time_limit: int = Field(default=DEFAULT_TIME_LIMIT, alias="timeLimit", ge=0)
    topic: Optional[str] = None
    picker_username: Optional[str] = Field(default=None, alias="pickerUsername")
    type: QuestionType = QuestionType.MULTIPLE_CHOICE

    @field_validator("time_limit", mode="before")
    @classmethod
    def _default_time_limit(cls, value: Any) -> Any:
        # A missing or zero limit falls back to the default
        if value is None or value == 0:
            return DEFAULT_TIME_LIMIT
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            if not math.isfinite(value):
                return DEFAULT_TIME_LIMIT
            return max(0, int(value))
        return value

    @field_validator("options", mode="before")
    @classmethod
    def _none_options(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("type", mode="before")
    @classmethod
    def _none_type(cls, value: Any) -> Any:
        return QuestionType.MULTIPLE_CHOICE if value is None else value


class PlayerAnswered(_Payload):
    player_id: str = Field(alias="playerId")

    @field_validator("player_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ScoresPayload(_Payload):
    """Any event carrying an optional ``scores`` snapshot."""
    scores: Optional[PlayerList] = None


class RoundReveal(ScoresPayload):
    correct_index: int = Field(alias="correctIndex")
    correct_answer_display: Optional[str] = Field(default=None, alias="correctAnswerDisplay")


class RoundOver(ScoresPayload):
    round: Optional[int] = None


class RoundStart(_Payload):
    round_number: Optional[int] = Field(default=None, alias="roundNumber")


class TopicWaiting(_Payload):
    picker_username: Optional[str] = Field(default=None, alias="pickerUsername")
    round: Optional[int] = None


class TopicChosen(_Payload):
    topic: str = ""
    picker_username: str = Field(default="", alias="pickerUsername")

    @field_validator("topic", "picker_username", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class EmptyPayload(_Payload):
    """For events whose payload carries nothing the client reads."""


EVENT_SCHEMAS: Dict[str, Type[BaseModel]] = {
    "update_player_list": PlayerList,
    "game_created": GameCreated,
    "host_reconnected": HostReconnected,
    "question_start": QuestionStart,
    "player_answered": PlayerAnswered,
    "round_reveal": RoundReveal,
    "update_leaderboard": ScoresPayload,
    "round_start": RoundStart,
    "topic_request": EmptyPayload,
    "topic_waiting": TopicWaiting,
    "topic_chosen": TopicChosen,
    "round_over": RoundOver,
    "game_started": EmptyPayload,
    "game_over": ScoresPayload,
}


# ══════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════


def parse_event(event_name: str, raw: Any) -> Any:
    """
    Validate the payload of an inbound event.

    Parameters
    ----------
    event_name : str
        Name of the event as received on the channel.
    raw : Any
        The decoded JSON payload.

    Returns
    -------
    BaseModel or str
        The typed payload; the message string for ``error``. Events
        with no registered schema are returned unchanged.

    Raises
    ------
    PayloadError
        If the payload does not match the event's schema.
    """
    if event_name == "error":
        return parse_error_message(raw)

    schema = EVENT_SCHEMAS.get(event_name)
    if schema is None:
        return raw
    if raw is None and schema is not PlayerList:
        raw = {}
    return _validate(schema, raw, event_name)


def parse_error_message(raw: Any) -> str:
    """The server sends errors as a bare string; accept {message} too."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("message"), str):
        return raw["message"]
    raise PayloadError("error", raw, ["error payload must be a message string"])


def _validate(schema: Type[BaseModel], raw: Any, event_name: str) -> Any:
    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise PayloadError(event_name, raw, errors) from e
