# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.countdown — Question countdown
==================================================

A presentation timer for the question phase. It ticks once per
second on the event loop, decrements the remaining seconds and
reschedules itself only while its owner still shows a question.
The server decides when the question ends; this never does.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

logger = logging.getLogger("trivia_client.countdown")

TICK_SECONDS = 1.0


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything with asyncio's ``call_later`` signature."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class CountdownTicker:
    """
    Self-rescheduling one-second countdown.

    At most one tick is pending at any time. ``should_continue`` is
    asked before every reschedule; the owning controller answers
    whether its phase is still the question phase.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        should_continue: Callable[[], bool],
        on_tick: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._scheduler = scheduler
        self._should_continue = should_continue
        self._on_tick = on_tick
        self._handle: Optional[TimerHandle] = None
        self.remaining: Optional[int] = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self, seconds: int) -> None:
        """Seed the countdown and schedule the first tick."""
        self.cancel()
        self.remaining = max(0, int(seconds))
        logger.debug("Countdown started at %ss", self.remaining)
        self._schedule_next()

    def cancel(self) -> None:
        """Drop the pending tick, if any. ``remaining`` is kept for display."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            logger.debug("Countdown cancelled at %ss", self.remaining)

    def _schedule_next(self) -> None:
        if self.remaining and self.remaining > 0 and self._should_continue():
            self._handle = self._scheduler.call_later(TICK_SECONDS, self._tick)
        else:
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        if not self._should_continue() or not self.remaining:
            return
        self.remaining -= 1
        if self._on_tick is not None:
            self._on_tick(self.remaining)
        self._schedule_next()
