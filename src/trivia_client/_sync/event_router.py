# Area: Sync
# PRD: docs/prd-phase-sync.md
"""
trivia_client._sync.event_router — Inbound event router
=======================================================

Routes inbound channel events to a controller's handlers after
validating their payloads. One router is one subscription scope:
mount() subscribes every registered handler, unmount() removes the
very same handler references, so remounting never doubles handling.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from ..errors import PayloadError
from .._shared.connection import CONNECT
from .._shared.event_logger import EventLogger
from .schemas import parse_event

logger = logging.getLogger("trivia_client.router")


class Channel(Protocol):
    """The part of ConnectionManager a router needs."""

    connected: bool

    def subscribe(self, event: str, handler: Callable[..., None]) -> Callable[[], None]: ...

    def unsubscribe(self, event: str, handler: Callable[..., None]) -> None: ...


class EventRouter:
    """
    Validates and dispatches inbound events for one controller.

    Usage:
        router = EventRouter(connection)
        router.register_handler("round_start", on_round_start)
        router.mount()
        ...
        router.unmount()
    """

    def __init__(self, channel: Channel, event_logger: Optional[EventLogger] = None):
        self._channel = channel
        self._event_logger = event_logger
        self._handlers: Dict[str, Callable[[Any], None]] = {}
        self._connect_handlers: List[Callable[[], None]] = []
        self._subscriptions: List[Tuple[str, Callable[..., None]]] = []

    @property
    def mounted(self) -> bool:
        return bool(self._subscriptions)

    def register_handler(self, event: str, handler: Callable[[Any], None]) -> None:
        """
        Register a handler for an event.

        Args:
            event: The inbound event name
            handler: Called with the validated payload
        """
        self._handlers[event] = handler
        logger.debug(f"Registered handler for {event}")

    def register_connect_handler(self, handler: Callable[[], None]) -> None:
        """Register a handler called on every (re)connection."""
        self._connect_handlers.append(handler)

    def get_handler(self, event: str) -> Optional[Callable[[Any], None]]:
        return self._handlers.get(event)

    def mount(self) -> None:
        """Subscribe all handlers on the channel. No-op if mounted."""
        if self.mounted:
            return
        for event in self._handlers:
            listener = self._make_listener(event)
            self._channel.subscribe(event, listener)
            self._subscriptions.append((event, listener))
        for handler in self._connect_handlers:
            self._channel.subscribe(CONNECT, handler)
            self._subscriptions.append((CONNECT, handler))

    def unmount(self) -> None:
        """Remove every subscription made by mount()."""
        for event, listener in self._subscriptions:
            self._channel.unsubscribe(event, listener)
        self._subscriptions.clear()

    def route(self, event: str, raw: Any) -> Optional[Any]:
        """
        Validate ``raw`` and pass it to the event's handler.

        Invalid payloads are logged and dropped; the controller state
        is left as it was.

        Returns:
            The handler's result, or None if no handler ran
        """
        handler = self._handlers.get(event)
        if handler is None:
            logger.warning(f"No handler for event: {event}")
            return None

        if self._event_logger is not None:
            self._event_logger.log_received(event)
        try:
            payload = parse_event(event, raw)
        except PayloadError as e:
            logger.warning(f"Ignoring {event}: {e}")
            if self._event_logger is not None:
                self._event_logger.log_error(str(e))
            return None

        logger.debug(f"Routing {event} to handler")
        return handler(payload)

    def _make_listener(self, event: str) -> Callable[..., None]:
        def listener(raw: Any = None) -> None:
            self.route(event, raw)
        return listener
