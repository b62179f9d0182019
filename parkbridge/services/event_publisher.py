"""
Command side: validate entry/exit against the current occupancy view and
append accepted commands to the durable log.

Validation here is advisory. The store is not touched; the event applier
re-checks every event when it comes back off the queue and is the only
source of truth.
"""

from parkbridge.exceptions import CommandRejected, RejectionReason
from parkbridge.services.broker import ParkingBroker
from parkbridge.services.event_parser import EventKind, ParkingEvent
from parkbridge.services.occupancy_store import OccupancyStore
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)


class EventPublisher:
    def __init__(self, store: OccupancyStore, broker: ParkingBroker):
        self._store = store
        self._broker = broker

    async def submit_entry(self, plate: str) -> ParkingEvent:
        if self._store.snapshot().free <= 0:
            raise CommandRejected(RejectionReason.FACILITY_FULL, plate)
        if self._store.contains(plate):
            raise CommandRejected(RejectionReason.ALREADY_PRESENT, plate)
        return await self._publish(EventKind.ENTRY, plate)

    async def submit_exit(self, plate: str) -> ParkingEvent:
        if not self._store.contains(plate):
            raise CommandRejected(RejectionReason.NOT_PRESENT, plate)
        return await self._publish(EventKind.EXIT, plate)

    async def _publish(self, kind: EventKind, plate: str) -> ParkingEvent:
        event = ParkingEvent.create(kind, plate)
        await self._broker.publish(event)
        logger.info(f"[Publisher] Accepted {kind.value} | Plate={plate}")
        return event
