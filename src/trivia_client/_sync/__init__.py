# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
Game-phase synchronization.

This package contains:
- Boundary schemas for inbound events
- The leaderboard aggregator and the question countdown
- The host and player phase controllers
"""

from .countdown import CountdownTicker
from .event_router import EventRouter
from .host_controller import HostPhaseController
from .leaderboard import LeaderboardRow, aggregate
from .player_controller import PlayerPhaseController
from .schemas import parse_event

__all__ = [
    "CountdownTicker",
    "EventRouter",
    "HostPhaseController",
    "LeaderboardRow",
    "aggregate",
    "PlayerPhaseController",
    "parse_event",
]
