"""
Queue consumer callback: turns log entries into occupancy changes.

  valid + changed   → ack, broadcast {snapshot, lastEvent}
  valid + no change → ack only (duplicate or stale delivery)
  unparsable        → nack without requeue (poison message, dropped)
"""

from aio_pika.abc import AbstractIncomingMessage

from parkbridge.exceptions import PoisonMessageError
from parkbridge.services.broadcast_hub import BroadcastHub, build_update
from parkbridge.services.event_parser import EventKind, ParkingEvent, parse_parking_event
from parkbridge.services.occupancy_store import OccupancyStore
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)


class EventApplier:
    def __init__(self, store: OccupancyStore, hub: BroadcastHub):
        self._store = store
        self._hub = hub
        self.applied = 0
        self.ignored = 0
        self.dropped = 0

    def apply(self, event: ParkingEvent) -> bool:
        """Apply one event to the store and broadcast it if anything changed."""
        if event.kind is EventKind.ENTRY:
            changed = self._store.try_add_entry(event.plate)
        else:
            changed = self._store.try_remove_exit(event.plate)

        if not changed:
            self.ignored += 1
            logger.debug(f"[Applier] Inapplicable {event.kind.value} | Plate={event.plate} (ignored)")
            return False

        self.applied += 1
        status = self._store.snapshot()
        logger.info(
            f"[Applier] {event.kind.value} | Plate={event.plate} | "
            f"{status.occupied}/{status.capacity} occupied"
        )
        self._hub.broadcast(build_update(status, event))
        return True

    async def handle(self, message: AbstractIncomingMessage):
        try:
            event = parse_parking_event(message.body)
        except PoisonMessageError as e:
            self.dropped += 1
            logger.error(f"[Applier] Dropping poison message (tag={message.delivery_tag}): {e}")
            await message.nack(requeue=False)
            return

        self.apply(event)
        await message.ack()
