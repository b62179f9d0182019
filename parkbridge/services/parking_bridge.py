"""
ParkingBridge: the single service object that owns all occupancy state.

One instance per process, created by the FastAPI app and started/stopped
from its startup/shutdown hooks:

  HTTP command → EventPublisher → RabbitMQ → EventApplier → OccupancyStore
                                                          → BroadcastHub → WebSocket clients
"""

from datetime import datetime, timezone
from typing import Optional

from parkbridge.config import Settings
from parkbridge.schemas.status import StatusOut
from parkbridge.services.broadcast_hub import BroadcastHub, SendFunc, Subscriber
from parkbridge.services.broker import ParkingBroker
from parkbridge.services.consumer_lifecycle import ConsumerLifecycle
from parkbridge.services.event_applier import EventApplier
from parkbridge.services.event_parser import ParkingEvent
from parkbridge.services.event_publisher import EventPublisher
from parkbridge.services.occupancy_store import OccupancyStore
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)


class ParkingBridge:
    def __init__(self, settings: Settings, broker: Optional[ParkingBroker] = None):
        self.settings = settings
        self.store = OccupancyStore(settings.CAPACITY)
        self.hub = BroadcastHub(self.store)
        self.broker = broker or ParkingBroker(settings)
        self.publisher = EventPublisher(self.store, self.broker)
        self.applier = EventApplier(self.store, self.hub)
        self.consumer = ConsumerLifecycle(self.broker, self.applier.handle)

    async def start(self):
        """Connect to RabbitMQ. Raises BrokerUnavailableError if it cannot."""
        await self.broker.connect()
        logger.info(f"[Bridge] Ready | Capacity {self.settings.CAPACITY}")

    async def stop(self):
        await self.consumer.shutdown()
        await self.hub.close_all()
        await self.broker.close()

    # ── Commands / queries ────────────────────────────────────────────────
    async def submit_entry(self, plate: str) -> ParkingEvent:
        return await self.publisher.submit_entry(plate)

    async def submit_exit(self, plate: str) -> ParkingEvent:
        return await self.publisher.submit_exit(plate)

    def status(self) -> StatusOut:
        return self.store.snapshot()

    # ── Subscribers ───────────────────────────────────────────────────────
    async def attach(self, send: SendFunc) -> Subscriber:
        subscriber = self.hub.attach(send)
        await self.consumer.subscriber_attached()
        return subscriber

    async def detach(self, subscriber: Subscriber):
        if await self.hub.detach(subscriber):
            await self.consumer.subscriber_detached()

    def health(self) -> dict:
        broker_ok = self.broker.is_connected
        return {
            "status": "ok" if broker_ok else "degraded",
            "timestamp": datetime.now(timezone.utc),
            "broker": "ok" if broker_ok else "disconnected",
            "consumer": self.consumer.state.value,
            "subscribers": self.consumer.subscriber_count,
            **self.status().model_dump(),
            "applied": self.applier.applied,
            "ignored": self.applier.ignored,
            "dropped": self.applier.dropped,
        }
