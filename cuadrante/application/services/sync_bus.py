"""Sync bus — in-process broadcaster that pushes calendar and user mutations.

Every connected client receives every event; deciding whether an event is
relevant (e.g. whether an entry falls in the month on screen) is left to
the client.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from enum import Enum
from typing import Any

from cuadrante.domain.entities import CalendarEntry, User

logger = logging.getLogger(__name__)


class SyncEventType(str, Enum):
    USER_ADDED = "user_added"
    USER_DELETED = "user_deleted"
    ENTRY_UPSERTED = "entry_upserted"
    ENTRY_DELETED = "entry_deleted"


def format_sse(event_type: str, data: Any) -> str:
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


class SyncBus:
    """Manages SSE client connections and broadcasts mutation events.

    Each connected client gets its own bounded asyncio.Queue. Broadcasting
    pushes the event to all queues without waiting; a client that falls
    too far behind is disconnected rather than allowed to block the writer.
    """

    def __init__(self, queue_size: int = 256) -> None:
        self._queue_size = queue_size
        self._queues: list[asyncio.Queue[str | None]] = []

    async def subscribe(self) -> AsyncGenerator[str, None]:
        """Subscribe to sync events. Yields formatted SSE strings.

        The generator automatically unsubscribes when the client disconnects.
        """
        queue: asyncio.Queue[str | None] = asyncio.Queue(maxsize=self._queue_size)
        self._queues.append(queue)
        logger.info("Sync client connected (%d total)", len(self._queues))
        try:
            while True:
                event = await queue.get()
                if event is None:
                    break
                yield event
        finally:
            if queue in self._queues:
                self._queues.remove(queue)
            logger.info("Sync client disconnected (%d remaining)", len(self._queues))

    async def broadcast(self, event_type: SyncEventType, data: Any) -> None:
        """Broadcast an event to all connected clients."""
        sse_message = format_sse(event_type.value, data)
        dead_queues: list[asyncio.Queue[str | None]] = []

        for queue in self._queues:
            try:
                queue.put_nowait(sse_message)
            except asyncio.QueueFull:
                dead_queues.append(queue)
                logger.warning("Sync client queue full — disconnecting")

        for q in dead_queues:
            self._disconnect(q)

        logger.debug("Broadcast %s to %d client(s)", event_type.value, len(self._queues))

    async def entry_upserted(self, entry: CalendarEntry) -> None:
        await self.broadcast(SyncEventType.ENTRY_UPSERTED, entry.snapshot())

    async def entry_deleted(self, date_key: str) -> None:
        await self.broadcast(SyncEventType.ENTRY_DELETED, {"date_key": date_key})

    async def user_added(self, user: User) -> None:
        await self.broadcast(SyncEventType.USER_ADDED, user.to_payload())

    async def user_deleted(self, user_id: str) -> None:
        await self.broadcast(SyncEventType.USER_DELETED, {"id": user_id})

    def _disconnect(self, queue: asyncio.Queue[str | None]) -> None:
        # Drop pending events so the close sentinel always fits.
        while not queue.empty():
            queue.get_nowait()
        queue.put_nowait(None)
        if queue in self._queues:
            self._queues.remove(queue)

    async def shutdown(self) -> None:
        """Disconnect all connected clients."""
        for queue in list(self._queues):
            self._disconnect(queue)
        self._queues.clear()

    @property
    def client_count(self) -> int:
        return len(self._queues)
