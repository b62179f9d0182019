"""
Starts and stops queue consumption based on the number of live subscribers.

  IDLE      → CONSUMING   when the count goes 0 → 1
  CONSUMING → IDLE        when the count drops to 0

Events published while idle stay durably queued until the next subscriber
attaches. Transitions are serialised by a lock and re-checked after every
broker call, so rapid attach/detach churn converges on the right state.
"""

import asyncio
from enum import Enum
from typing import Optional

from parkbridge.services.broker import MessageHandler, ParkingBroker
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)


class ConsumerState(str, Enum):
    IDLE = "idle"
    CONSUMING = "consuming"


class ConsumerLifecycle:
    def __init__(self, broker: ParkingBroker, handler: MessageHandler):
        self._broker = broker
        self._handler = handler
        self._subscribers = 0
        self._state = ConsumerState.IDLE
        self._consumer_tag: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def subscriber_count(self) -> int:
        return self._subscribers

    async def subscriber_attached(self):
        self._subscribers += 1
        logger.info(f"[Socket] Subscriber attached ({self._subscribers} active)")
        await self._reconcile()

    async def subscriber_detached(self):
        self._subscribers = max(0, self._subscribers - 1)
        logger.info(f"[Socket] Subscriber detached ({self._subscribers} active)")
        await self._reconcile()

    async def shutdown(self):
        self._subscribers = 0
        await self._reconcile()

    async def _reconcile(self):
        async with self._lock:
            try:
                while True:
                    wanted = self._subscribers > 0
                    if wanted and self._state is ConsumerState.IDLE:
                        await self._start()
                    elif not wanted and self._state is ConsumerState.CONSUMING:
                        await self._stop()
                    else:
                        return
            except Exception as e:
                # Not retried here; the next attach/detach triggers another attempt
                logger.error(f"[RabbitMQ] Consumer transition failed: {e}", exc_info=True)

    async def _start(self):
        self._consumer_tag = await self._broker.consume(self._handler)
        self._state = ConsumerState.CONSUMING
        logger.info("[RabbitMQ] Consumption started")

    async def _stop(self):
        await self._broker.cancel(self._consumer_tag)
        self._consumer_tag = None
        self._state = ConsumerState.IDLE
        logger.info("[RabbitMQ] Consumption stopped (no subscribers)")
