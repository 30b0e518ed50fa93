"""Broadcast gateway - pushes entity events to every connected client.

Each connection gets a bounded outbound queue drained by its own writer task.
Publishing only enqueues, so a mutation never waits on a client, and a slow or
broken client cannot hold up the others. Events stay in publish order per
connection; there is no ordering across concurrent publishers and no ack/retry.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional, Protocol
from uuid import UUID, uuid4

from taskhub.config import settings
from taskhub.engine.errors import BroadcastError
from taskhub.models import Activity, BroadcastEvent, Note, Task
from taskhub.observability.metrics import metrics
from taskhub.realtime.messages import (
    ConnectedMessage,
    NoteDeletedMessage,
    TaskDeletedMessage,
    activity_payload,
    completion_payload,
    envelope,
    note_payload,
    note_updated_payload,
    task_payload,
)

logger = logging.getLogger("taskhub.realtime")


class RealtimeSocket(Protocol):
    """What the gateway needs from a connection (Starlette's WebSocket fits)."""

    async def send_json(self, data: Any, mode: str = "text") -> None: ...

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None: ...


@dataclass
class Connection:
    """A registered subscriber."""

    connection_id: str
    socket: RealtimeSocket
    queue: asyncio.Queue
    writer: Optional[asyncio.Task] = None


class BroadcastGateway:
    """Registry of live connections plus one fire-and-forget notifier per event."""

    def __init__(
        self,
        queue_size: Optional[int] = None,
        send_timeout_seconds: Optional[float] = None,
    ):
        if queue_size is None:
            queue_size = settings.broadcast_queue_size
        if send_timeout_seconds is None:
            send_timeout_seconds = settings.broadcast_send_timeout_seconds
        self.queue_size = queue_size
        self.send_timeout_seconds = send_timeout_seconds
        self._connections: dict[str, Connection] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def connection_ids(self) -> list[str]:
        return list(self._connections)

    # =========================================================================
    # Connection lifecycle
    # =========================================================================

    def connect(self, socket: RealtimeSocket, connection_id: Optional[str] = None) -> str:
        """Register an accepted socket and start its writer. Returns the connection id."""
        connection_id = connection_id or uuid4().hex
        connection = Connection(
            connection_id=connection_id,
            socket=socket,
            queue=asyncio.Queue(maxsize=self.queue_size),
        )
        self._connections[connection_id] = connection
        connection.writer = asyncio.create_task(
            self._pump(connection), name=f"taskhub-realtime-{connection_id}"
        )
        metrics.set_gauge("realtime.connections", len(self._connections))
        logger.info(f"Client connected: {connection_id}")

        self.send_to(
            connection_id,
            BroadcastEvent.CONNECTED,
            ConnectedMessage(connection_id=connection_id),
        )
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        """Unregister a connection and stop its writer. Unknown ids are ignored."""
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return
        metrics.set_gauge("realtime.connections", len(self._connections))
        await self._stop_writer(connection)
        logger.info(f"Client disconnected: {connection_id}")

    async def drain(self) -> None:
        """Wait until every queued event has been sent or dropped."""
        await asyncio.gather(
            *(c.queue.join() for c in list(self._connections.values()))
        )

    async def close(self) -> None:
        """Stop all writers. Used on application shutdown."""
        connections = list(self._connections.values())
        self._connections.clear()
        metrics.set_gauge("realtime.connections", 0)
        for connection in connections:
            await self._stop_writer(connection)
        if connections:
            logger.info(f"Broadcast gateway closed ({len(connections)} connections)")

    # =========================================================================
    # Publishing
    # =========================================================================

    def publish(self, event: BroadcastEvent, payload: Any) -> int:
        """Enqueue an event for every live connection. Returns how many accepted it."""
        message = envelope(event, payload)
        accepted = 0
        # Snapshot: clients connect and disconnect while we iterate
        for connection in list(self._connections.values()):
            if self._enqueue(connection, message):
                accepted += 1
        metrics.inc_counter("broadcast.published")
        return accepted

    def send_to(self, connection_id: str, event: BroadcastEvent, payload: Any) -> bool:
        """Enqueue an event for a single connection."""
        connection = self._connections.get(connection_id)
        if connection is None:
            return False
        return self._enqueue(connection, envelope(event, payload))

    def notify_task_created(self, task: Task) -> None:
        self._notify(BroadcastEvent.TASK_CREATED, task_payload, task)

    def notify_task_updated(self, task: Task) -> None:
        self._notify(BroadcastEvent.TASK_UPDATED, task_payload, task)

    def notify_task_deleted(self, task_id: UUID) -> None:
        self._notify(BroadcastEvent.TASK_DELETED, lambda: TaskDeletedMessage(task_id=task_id))

    def notify_task_completion_changed(self, task: Task) -> None:
        self._notify(BroadcastEvent.TASK_COMPLETION_CHANGED, completion_payload, task)

    def notify_note_added(self, note: Note) -> None:
        self._notify(BroadcastEvent.NOTE_ADDED, note_payload, note)

    def notify_note_updated(self, note: Note, updated_at: datetime) -> None:
        self._notify(BroadcastEvent.NOTE_UPDATED, note_updated_payload, note, updated_at)

    def notify_note_deleted(self, message: NoteDeletedMessage) -> None:
        self._notify(BroadcastEvent.NOTE_DELETED, lambda: message)

    def notify_activity_update(self, activity: Activity) -> None:
        self._notify(BroadcastEvent.ACTIVITY_UPDATE, activity_payload, activity)

    def _notify(self, event: BroadcastEvent, build: Callable[..., Any], *args: Any) -> None:
        # Callers are mutations that already committed: nothing may escape here
        try:
            accepted = self.publish(event, build(*args))
            logger.debug(f"{event.value} notification queued for {accepted} clients")
        except Exception as e:
            metrics.inc_counter("broadcast.failed")
            logger.error(f"Error sending {event.value} notification: {e}", exc_info=True)

    def _enqueue(self, connection: Connection, message: dict[str, Any]) -> bool:
        try:
            connection.queue.put_nowait(message)
            return True
        except asyncio.QueueFull:
            metrics.inc_counter("broadcast.dropped")
            logger.warning(
                f"Outbound queue full for {connection.connection_id}, "
                f"dropping {message['event']}"
            )
            return False

    # =========================================================================
    # Writers
    # =========================================================================

    async def _pump(self, connection: Connection) -> None:
        """Send queued events to one client until it fails or is disconnected."""
        while True:
            message = await connection.queue.get()
            try:
                await asyncio.wait_for(
                    connection.socket.send_json(message),
                    timeout=self.send_timeout_seconds,
                )
                metrics.inc_counter("broadcast.sent")
            except Exception as e:
                error = BroadcastError(connection.connection_id, str(e) or type(e).__name__)
                metrics.inc_counter("broadcast.failed")
                logger.error(f"Error sending {message['event']} to client: {error.message}")
                self._drop(connection)
                connection.queue.task_done()
                await self._close_quietly(connection)
                return
            connection.queue.task_done()

    def _drop(self, connection: Connection) -> None:
        if self._connections.get(connection.connection_id) is connection:
            del self._connections[connection.connection_id]
            metrics.set_gauge("realtime.connections", len(self._connections))
        self._discard_pending(connection)

    async def _stop_writer(self, connection: Connection) -> None:
        writer = connection.writer
        if writer and not writer.done():
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass
        self._discard_pending(connection)

    async def _close_quietly(self, connection: Connection) -> None:
        try:
            await asyncio.wait_for(
                connection.socket.close(code=1011), timeout=self.send_timeout_seconds
            )
        except Exception as e:
            logger.debug(f"Ignoring close failure for {connection.connection_id}: {e}")

    @staticmethod
    def _discard_pending(connection: Connection) -> None:
        while True:
            try:
                connection.queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            connection.queue.task_done()
