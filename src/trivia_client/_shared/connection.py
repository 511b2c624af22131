# Area: Shared
# PRD: docs/prd-phase-sync.md
"""
trivia_client._shared.connection — Real-time channel
====================================================

Owns the single Socket.IO connection of the process. The runner
creates one ConnectionManager, starts it, injects it into whichever
controller is mounted and closes it on shutdown. Controllers come
and go; the channel stays up.

Reconnection is handled by the Socket.IO transport (exponential
backoff). Connection errors are logged here and never raised to
controllers; they only ever see ``connected`` flip to False.

Auth token staleness
--------------------
The token is captured once, at construction, and the transport
replays that same value on every automatic reconnection. A token
rotated later is NOT picked up until a new manager is built.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

import socketio
from socketio import exceptions as sio_exceptions

logger = logging.getLogger("trivia_client.connection")

CONNECT = "connect"
DISCONNECT = "disconnect"

Handler = Callable[..., None]
Unsubscribe = Callable[[], None]


class ConnectionManager:
    """
    Connectivity flag plus emit/subscribe over one Socket.IO client.

    Usage:
        conn = ConnectionManager("http://localhost:3000", auth_token=token)
        off = conn.subscribe("round_start", on_round_start)
        await conn.start()
        conn.emit("join_game", {"username": "ana", "gameCode": "ABCD"})
        off()
        await conn.close()
    """

    def __init__(
        self,
        url: str,
        auth_token: Optional[str] = None,
        client: Optional[socketio.AsyncClient] = None,
        reconnection_delay: float = 1,
        reconnection_delay_max: float = 5,
    ):
        self.url = url
        self._auth: Optional[Dict[str, str]] = {"token": auth_token} if auth_token else None
        self._sio = client or socketio.AsyncClient(
            reconnection=True,
            reconnection_attempts=0,
            reconnection_delay=reconnection_delay,
            reconnection_delay_max=reconnection_delay_max,
            logger=False,
        )
        self.connected = False
        self._handlers: Dict[str, List[Handler]] = {}
        self._bound_events: Set[str] = set()
        self._pending_sends: Set[asyncio.Task] = set()

        self._sio.on(CONNECT, self._on_connect)
        self._sio.on(DISCONNECT, self._on_disconnect)
        self._sio.on("connect_error", self._on_connect_error)

    # ── Lifecycle ────────────────────────────────────────────

    async def start(self) -> None:
        """Open the channel. Failures are logged, never raised."""
        logger.info(f"Connecting to {self.url}")
        try:
            await self._sio.connect(self.url, auth=self._auth, retry=True)
        except sio_exceptions.ConnectionError as e:
            logger.error(f"Connection to {self.url} failed: {e}")

    async def close(self) -> None:
        """Dispose of the channel. Subscriptions are dropped with it."""
        if self._pending_sends:
            await asyncio.gather(*self._pending_sends, return_exceptions=True)
        await self._sio.disconnect()
        self.connected = False
        self._handlers.clear()
        logger.info("Connection closed")

    # ── Subscriptions ────────────────────────────────────────

    def subscribe(self, event: str, handler: Handler) -> Unsubscribe:
        """
        Register ``handler`` for ``event``.

        Returns:
            A callable that removes exactly this handler reference
        """
        self._handlers.setdefault(event, []).append(handler)
        if event not in (CONNECT, DISCONNECT) and event not in self._bound_events:
            self._sio.on(event, self._make_dispatcher(event))
            self._bound_events.add(event)
        logger.debug(f"Subscribed to {event}")

        def unsubscribe() -> None:
            self.unsubscribe(event, handler)

        return unsubscribe

    def unsubscribe(self, event: str, handler: Handler) -> None:
        """Remove ``handler`` from ``event``. No-op if not registered."""
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(f"Unsubscribed from {event}")

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    # ── Outbound ─────────────────────────────────────────────

    def emit(self, event: str, payload: Optional[Dict[str, Any]] = None) -> None:
        """
        Fire-and-forget send. Never blocks, never retried.

        While disconnected the event is dropped; the controllers
        re-send what matters (join/reconnect) on the next connect.
        """
        if not self.connected:
            logger.warning(f"Dropped {event}: not connected")
            return
        task = asyncio.get_running_loop().create_task(self._send(event, payload or {}))
        self._pending_sends.add(task)
        task.add_done_callback(self._pending_sends.discard)

    async def _send(self, event: str, payload: Dict[str, Any]) -> None:
        try:
            await self._sio.emit(event, payload)
            logger.debug(f"Sent {event}: {payload}")
        except sio_exceptions.SocketIOError as e:
            logger.warning(f"Failed to send {event}: {e}")

    # ── Inbound ──────────────────────────────────────────────

    def _make_dispatcher(self, event: str) -> Handler:
        def dispatch(*args: Any) -> None:
            payload = args[0] if args else None
            self._dispatch(event, payload)
        return dispatch

    def _dispatch(self, event: str, *args: Any) -> None:
        # Copy: handlers may unsubscribe while being called
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(*args)
            except Exception as e:
                logger.error(f"Handler error for {event}: {e}", exc_info=True)

    def _on_connect(self) -> None:
        self.connected = True
        logger.info("Connected")
        self._dispatch(CONNECT)

    def _on_disconnect(self, *args: Any) -> None:
        self.connected = False
        reason = args[0] if args else "unknown"
        logger.warning(f"Disconnected ({reason}); transport will retry")
        self._dispatch(DISCONNECT)

    def _on_connect_error(self, data: Any = None) -> None:
        logger.error(f"Connection error: {data}")
