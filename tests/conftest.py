# Area: Sync Tests
# PRD: docs/prd-phase-sync.md
"""Shared fakes: an in-memory channel and a manually advanced scheduler."""

import pytest

from trivia_client._shared.session_store import SessionStore


class FakeConnection:
    """Stands in for ConnectionManager; records emits, fires events by hand."""

    def __init__(self, connected=True):
        self.connected = connected
        self.emitted = []
        self._handlers = {}

    def subscribe(self, event, handler):
        self._handlers.setdefault(event, []).append(handler)
        return lambda: self.unsubscribe(event, handler)

    def unsubscribe(self, event, handler):
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event):
        return len(self._handlers.get(event, []))

    def emit(self, event, payload=None):
        if not self.connected:
            return
        self.emitted.append((event, payload or {}))

    def sent(self, event):
        """Payloads emitted for ``event``, in order."""
        return [payload for name, payload in self.emitted if name == event]

    def fire(self, event, payload=None):
        """Deliver a server event to every subscriber."""
        for handler in list(self._handlers.get(event, [])):
            handler(payload)

    def connect(self):
        self.connected = True
        for handler in list(self._handlers.get("connect", [])):
            handler()

    def disconnect(self):
        self.connected = False


class ManualHandle:
    def __init__(self, delay, callback, args):
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """call_later that only fires when the test calls advance()."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback, *args):
        handle = ManualHandle(delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def advance(self, ticks=1):
        """Run every pending callback, ``ticks`` times over."""
        for _ in range(ticks):
            due = self.pending
            self.handles = []
            for handle in due:
                handle.callback(*handle.args)


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store(tmp_path):
    return SessionStore(str(tmp_path / "session.db"))


@pytest.fixture
def offline_connection():
    return FakeConnection(connected=False)
