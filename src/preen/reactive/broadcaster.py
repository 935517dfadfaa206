"""Live-reload broadcaster — the registry of open SSE connections.

Each browser tab holds one ``/__livereload`` connection. When a watched
file changes, the registry hands a single ``reload`` event to every
connection. Delivery is best-effort and at-most-once: a client that is
not connected at that moment simply stays stale until the next change.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from chirp import SSEEvent

from preen._errors import TransportError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from preen._types import ClientID

logger = logging.getLogger("preen.reactive")

RELOAD_MESSAGE = "reload"
OPEN_EVENT = "preen:open"

# Reconnect hint sent with the opening event
RETRY_MS = 2000


class Connection(Protocol):
    """Anything the registry can deliver an event to."""

    def deliver(self, event: SSEEvent) -> None: ...


@dataclass(eq=False, slots=True)
class LiveConnection:
    """A connected live-reload client.

    Compared by identity: two tabs are always two connections.

    Attributes:
        client_id: Unique identifier for this connection.
        loop: Event loop that owns the queue and serves the response.
        queue: Events waiting to be written to the client.
        closed: Set once the client has gone away.

    """

    loop: asyncio.AbstractEventLoop
    client_id: ClientID = field(default_factory=lambda: str(uuid.uuid4()))
    queue: asyncio.Queue[Any] = field(default_factory=asyncio.Queue)
    closed: bool = False

    def deliver(self, event: SSEEvent) -> None:
        """Queue *event* for the client. Safe to call from any thread.

        Raises:
            TransportError: If the connection is closed or its loop is gone.

        """
        if self.closed:
            msg = f"connection {self.client_id} is closed"
            raise TransportError(msg)
        try:
            self.loop.call_soon_threadsafe(self.queue.put_nowait, event)
        except RuntimeError as exc:
            # Event loop is closed: the server is shutting down.
            self.closed = True
            raise TransportError(str(exc)) from exc

    def close(self) -> None:
        """Mark the connection dead; further deliveries fail."""
        self.closed = True

    async def events(self) -> AsyncIterator[Any]:
        """Yield the opening event, then queued events until cancelled.

        Used as the generator for Chirp's ``EventStream``. Catches
        ``CancelledError`` (client disconnect) and ``GeneratorExit``
        (generator cleanup) so shutdown stays quiet.
        """
        try:
            # Flushes headers and a first frame so the browser's
            # EventSource reports "open" right away.
            yield SSEEvent(data="connected", event=OPEN_EVENT, retry=RETRY_MS)
            while True:
                yield await self.queue.get()
        except (asyncio.CancelledError, GeneratorExit):
            return


class ClientRegistry:
    """The set of open live-reload connections.

    Thread-safe: the set is protected by a lock. Connections register from
    the server's event loop; broadcasts arrive from the watcher thread.

    """

    __slots__ = ("_clients", "_lock")

    def __init__(self) -> None:
        self._clients: set[Connection] = set()
        self._lock = threading.Lock()

    @property
    def connection_count(self) -> int:
        """Number of registered connections."""
        with self._lock:
            return len(self._clients)

    def register(self, conn: Connection) -> None:
        """Add a connection. Registering twice keeps a single entry."""
        with self._lock:
            self._clients.add(conn)

    def unregister(self, conn: Connection) -> None:
        """Remove a connection. Unknown connections are ignored."""
        with self._lock:
            self._clients.discard(conn)

    def snapshot(self) -> frozenset[Connection]:
        """Current connections (snapshot, no lock held on return)."""
        with self._lock:
            return frozenset(self._clients)

    def broadcast_reload(self) -> int:
        """Send one ``reload`` event to every registered connection.

        A connection whose delivery fails is dropped and the broadcast
        carries on with the rest. Nothing is queued or retried.

        Returns:
            Number of connections the event was handed to.

        """
        event = SSEEvent(data=RELOAD_MESSAGE)
        delivered = 0
        for conn in self.snapshot():
            try:
                conn.deliver(event)
                delivered += 1
            except (TransportError, asyncio.QueueFull) as exc:
                logger.debug("Dropping live-reload client: %s", exc)
                self.unregister(conn)
        return delivered
