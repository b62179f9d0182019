"""
ParkingEvent record and its JSON wire format on the durable log.

Body: {"type": "entry"|"exit", "plate": "<PlateId>", "ts": <epoch millis>}
Routing key: "<prefix>.<type>", e.g. parking.entry
"""

import json
import time
from dataclasses import dataclass
from enum import Enum
from parkbridge.exceptions import InvalidPlateError, PoisonMessageError
from parkbridge.schemas.commands import normalize_plate


class EventKind(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"


@dataclass(frozen=True)
class ParkingEvent:
    kind: EventKind
    plate: str
    ts: int           # epoch millis

    @classmethod
    def create(cls, kind: EventKind, plate: str) -> "ParkingEvent":
        return cls(kind=kind, plate=plate, ts=int(time.time() * 1000))

    def to_message(self) -> dict:
        return {"type": self.kind.value, "plate": self.plate, "ts": self.ts}

    def to_json(self) -> bytes:
        return json.dumps(self.to_message()).encode("utf-8")


def routing_key(kind: EventKind, prefix: str) -> str:
    return f"{prefix}.{kind.value}"


def parse_parking_event(body: bytes) -> ParkingEvent:
    """
    Decode one message body from the queue.
    Raises PoisonMessageError for anything that is not a well-formed event;
    such messages must be dropped, never requeued.
    """
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PoisonMessageError(f"body is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PoisonMessageError(f"expected a JSON object, got {type(data).__name__}")

    try:
        kind = EventKind(data.get("type"))
    except ValueError:
        raise PoisonMessageError(f"unknown event type {data.get('type')!r}") from None

    plate = data.get("plate")
    if not isinstance(plate, str):
        raise PoisonMessageError(f"plate must be a string, got {plate!r}")
    try:
        normalized = normalize_plate(plate)
    except InvalidPlateError as e:
        raise PoisonMessageError(str(e)) from e
    if normalized != plate:
        raise PoisonMessageError(f"plate {plate!r} is not normalized")

    ts = data.get("ts")
    # bool is an int subclass; reject it explicitly
    if not isinstance(ts, int) or isinstance(ts, bool):
        raise PoisonMessageError(f"ts must be integer epoch millis, got {ts!r}")

    return ParkingEvent(kind=kind, plate=plate, ts=ts)
