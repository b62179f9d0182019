"""
Authoritative in-memory occupancy: the set of plates currently inside.

try_add_entry / try_remove_exit are the only mutations in the whole system
and are only called by the event applier. Both are idempotent: re-applying
a duplicate delivery is a no-op that returns False.
"""

from parkbridge.schemas.status import StatusOut


class OccupancyStore:
    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise ValueError(f"capacity must be a positive integer, got {capacity!r}")
        self._capacity = capacity
        self._plates: set[str] = set()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def occupied(self) -> int:
        return len(self._plates)

    def contains(self, plate: str) -> bool:
        return plate in self._plates

    def plates(self) -> list[str]:
        return sorted(self._plates)

    def try_add_entry(self, plate: str) -> bool:
        if plate in self._plates or len(self._plates) >= self._capacity:
            return False
        self._plates.add(plate)
        return True

    def try_remove_exit(self, plate: str) -> bool:
        if plate not in self._plates:
            return False
        self._plates.remove(plate)
        return True

    def snapshot(self) -> StatusOut:
        occupied = len(self._plates)
        return StatusOut(
            capacity=self._capacity,
            occupied=occupied,
            free=max(0, self._capacity - occupied),
        )
