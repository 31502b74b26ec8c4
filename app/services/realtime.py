import asyncio
import logging
from typing import Any, Dict, Optional

import socketio
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

REALTIME_EVENT = "realtime"
BOOKINGS_ROOM = "bookings"


class RealtimeBroadcaster:
    """Bounded fan-out of `{type, data}` events to Socket.IO clients.

    `publish` never waits: when the queue is full the new event is dropped.
    A single pump task drains the queue and emits to the bookings room.
    """

    def __init__(self, sio: socketio.AsyncServer, maxsize: int = 32):
        self.sio = sio
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0
        self._task: Optional[asyncio.Task] = None

    def publish(self, event_type: str, data: Any) -> bool:
        event = {"type": event_type, "data": jsonable_encoder(data)}
        try:
            self.queue.put_nowait(event)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(f"Realtime queue full, dropping '{event_type}' event (dropped={self.dropped})")
            return False
        return True

    async def _emit(self, event: Dict[str, Any]) -> None:
        try:
            await self.sio.emit(REALTIME_EVENT, event, room=BOOKINGS_ROOM)
        except Exception as e:
            logger.error(f"Failed to emit realtime event '{event.get('type')}': {e}", exc_info=True)

    async def _pump(self) -> None:
        while True:
            event = await self.queue.get()
            try:
                await self._emit(event)
            finally:
                self.queue.task_done()

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._pump())
            logger.info("Realtime broadcaster started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Realtime broadcaster stopped")
