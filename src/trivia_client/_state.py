# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client.state — Phases and local game model
==================================================

Holds the enumerated phases for both client roles and the small
data model the controllers keep between events. Everything here is
a snapshot of what the server last sent; nothing is merged.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

DEFAULT_TIME_LIMIT = 30


class Role(Enum):
    """Which side of the game this process plays."""
    HOST = "host"
    PLAYER = "player"


class HostPhase(Enum):
    """Visible phase of the host (big screen) display."""
    UNCONFIGURED     = "unconfigured"      # No game yet, config form shown
    CREATING         = "creating"          # create_game sent, waiting for game_created
    LOBBY            = "lobby"             # Game code known, players joining
    INTERMISSION     = "intermission"      # round_start received
    TOPIC_SELECTION  = "topic_selection"   # A player is picking the topic
    TOPIC_CHOSEN     = "topic_chosen"      # Topic announced
    QUESTION         = "question"          # Question on screen, countdown running
    REVEAL           = "reveal"            # Correct answer + leaderboard
    ROUND_OVER       = "round_over"        # Round summary
    GAME_OVER        = "game_over"         # Terminal


class PlayerPhase(Enum):
    """Visible phase of a player device."""
    UNCONFIGURED   = "unconfigured"    # Entry flow (enter game code)
    JOINING        = "joining"         # join_game sent, waiting for the game to start
    WAITING        = "waiting"         # Between rounds/questions
    TOPIC_INPUT    = "topic_input"     # This player picks the topic
    TOPIC_WAITING  = "topic_waiting"   # Someone else picks the topic
    TOPIC_CHOSEN   = "topic_chosen"
    QUESTION       = "question"
    ANSWERED       = "answered"        # Answer sent, result unknown
    RESULT         = "result"          # Verdict and score shown
    GAME_OVER      = "game_over"       # Terminal


class QuestionType(Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    FREE_TEXT = "free_text"


@dataclass
class Player:
    """One roster entry as sent by the server."""
    username: str
    id: Optional[str] = None
    score: Optional[float] = None


@dataclass
class Question:
    """The question currently on screen. Replaced wholesale per question."""
    text: str
    options: List[str] = field(default_factory=list)
    time_limit: int = DEFAULT_TIME_LIMIT
    type: QuestionType = QuestionType.MULTIPLE_CHOICE


@dataclass
class RoundContext:
    """Round number plus the topic and who picked it."""
    round_number: Optional[int] = None
    topic: Optional[str] = None
    picker_username: Optional[str] = None


@dataclass
class GameSession:
    """
    Identity and configuration of the game this client belongs to.

    Created on create/join, persisted through the session store and
    dropped on game over or invalidation.
    """
    role: Role
    game_code: Optional[str] = None
    max_players: Optional[int] = None
    rounds_per_player: Optional[int] = None
    questions_per_round: Optional[int] = None
