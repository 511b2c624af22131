# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.leaderboard — Leaderboard aggregation
=========================================================

Turns a scores payload into display rows. Pure: no state, no I/O.
The result is rebuilt from each payload and never merged with a
previous leaderboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from .schemas import PlayerEntry, parse_player_list

Score = Optional[Union[int, float]]


@dataclass(frozen=True)
class LeaderboardRow:
    """One display row. ``score`` is None when the server sent none."""
    name: str
    score: Score = None


def aggregate(payload: Any) -> List[LeaderboardRow]:
    """
    Normalize and sort a scores payload.

    Accepts a list of player-like values or an object wrapping one
    (see PlayerList). Entries without a name are dropped. Rows are
    ordered by score, highest first; an unknown score sorts as 0 but
    is kept as None. Ties keep their incoming order.

    Raises:
        PayloadError: If the payload is not a recognisable player list
    """
    return rows_from_entries(parse_player_list(payload, "scores"))


def rows_from_entries(entries: List[PlayerEntry]) -> List[LeaderboardRow]:
    """Same as aggregate() for entries that were already validated."""
    rows = [
        LeaderboardRow(name=entry.username, score=entry.score)
        for entry in entries
        if entry.username
    ]
    rows.sort(key=lambda row: row.score if row.score is not None else 0, reverse=True)
    return rows


def score_for(entries: List[PlayerEntry], username: str) -> Score:
    """Score of ``username`` in a scores snapshot, or None if absent."""
    for entry in entries:
        if entry.username == username:
            return entry.score
    return None
