"""
Fan-out of occupancy updates to live subscribers (WebSocket clients).

Each subscriber gets its own outbox and writer task, so every subscriber
sees updates in the order they were applied and a slow client never holds
up the event applier. attach() and broadcast() never await: the catch-up
snapshot is queued before the subscriber becomes visible to broadcasts.
"""

import asyncio
import itertools
from typing import Any, Awaitable, Callable, Optional

from parkbridge.schemas.status import ParkingUpdate, StatusOut
from parkbridge.services.event_parser import ParkingEvent
from parkbridge.services.occupancy_store import OccupancyStore
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)

SendFunc = Callable[[dict], Awaitable[Any]]

_ids = itertools.count(1)


def build_update(status: StatusOut, event: Optional[ParkingEvent] = None) -> dict:
    update = ParkingUpdate(
        **status.model_dump(),
        lastEvent=event.to_message() if event else None,
    )
    return update.model_dump(by_alias=True)


class Subscriber:
    def __init__(self, send: SendFunc):
        self.id = next(_ids)
        self._send = send
        self._outbox: asyncio.Queue = asyncio.Queue()
        self._task: Optional[asyncio.Task] = None
        self.closed = False

    def push(self, frame: dict):
        if not self.closed:
            self._outbox.put_nowait(frame)

    def start(self):
        self._task = asyncio.create_task(self._run(), name=f"subscriber-{self.id}")

    async def _run(self):
        while True:
            frame = await self._outbox.get()
            try:
                await self._send(frame)
            except Exception as e:
                logger.warning(f"[Hub] Send to subscriber {self.id} failed: {e}")
                self.closed = True
                return
            finally:
                self._outbox.task_done()

    async def flush(self):
        """Wait until every queued frame has been handed to the transport."""
        if not self.closed:
            await self._outbox.join()

    async def close(self):
        self.closed = True
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass


class BroadcastHub:
    def __init__(self, store: OccupancyStore):
        self._store = store
        self._subscribers: dict[int, Subscriber] = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def attach(self, send: SendFunc) -> Subscriber:
        subscriber = Subscriber(send)
        subscriber.push(build_update(self._store.snapshot()))
        subscriber.start()
        self._subscribers[subscriber.id] = subscriber
        return subscriber

    async def detach(self, subscriber: Subscriber) -> bool:
        if self._subscribers.pop(subscriber.id, None) is None:
            return False
        await subscriber.close()
        return True

    def broadcast(self, frame: dict):
        for subscriber in list(self._subscribers.values()):
            subscriber.push(frame)

    async def close_all(self):
        for subscriber in list(self._subscribers.values()):
            await self.detach(subscriber)
