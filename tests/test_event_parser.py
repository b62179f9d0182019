"""Unit tests for the ParkingEvent wire format and plate normalisation."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import pytest
from parkbridge.exceptions import InvalidPlateError, PoisonMessageError
from parkbridge.schemas.commands import normalize_plate
from parkbridge.services.event_parser import (
    EventKind, ParkingEvent, parse_parking_event, routing_key,
)


class TestPlateNormalisation:
    def test_uppercases_and_strips(self):
        assert normalize_plate(" abc 1234 ") == "ABC1234"
        assert normalize_plate("abc-12.3") == "ABC-123"

    def test_empty_after_normalisation_rejected(self):
        with pytest.raises(InvalidPlateError):
            normalize_plate("  ..  ")

    def test_too_long_rejected(self):
        assert normalize_plate("ABCD-123") == "ABCD-123"
        with pytest.raises(InvalidPlateError):
            normalize_plate("ABCDE-1234")


class TestParkingEvent:
    def test_message_shape(self):
        event = ParkingEvent(kind=EventKind.ENTRY, plate="ABC1234", ts=1700000000000)
        assert event.to_message() == {"type": "entry", "plate": "ABC1234", "ts": 1700000000000}
        assert json.loads(event.to_json()) == event.to_message()

    def test_create_stamps_epoch_millis(self):
        event = ParkingEvent.create(EventKind.EXIT, "XYZ")
        assert event.kind is EventKind.EXIT
        assert event.ts > 1_600_000_000_000

    def test_events_are_immutable(self):
        event = ParkingEvent.create(EventKind.ENTRY, "A")
        with pytest.raises(Exception):
            event.plate = "B"

    def test_routing_keys(self):
        assert routing_key(EventKind.ENTRY, "parking") == "parking.entry"
        assert routing_key(EventKind.EXIT, "parking") == "parking.exit"


class TestParseParkingEvent:
    def test_entry_message(self):
        event = parse_parking_event(b'{"type": "entry", "plate": "ABC1234", "ts": 1700000000000}')
        assert event == ParkingEvent(EventKind.ENTRY, "ABC1234", 1700000000000)

    def test_exit_message(self):
        event = parse_parking_event(b'{"type": "exit", "plate": "XYZ-567", "ts": 5}')
        assert event.kind is EventKind.EXIT
        assert event.plate == "XYZ-567"

    @pytest.mark.parametrize("body", [
        b"not json",
        b"\xff\xfe",
        b"[1, 2, 3]",
        b'"entry"',
        b'{"type": "park", "plate": "A", "ts": 1}',
        b'{"plate": "A", "ts": 1}',
        b'{"type": "entry", "ts": 1}',
        b'{"type": "entry", "plate": 42, "ts": 1}',
        b'{"type": "entry", "plate": "", "ts": 1}',
        b'{"type": "entry", "plate": "abc", "ts": 1}',
        b'{"type": "entry", "plate": "A"}',
        b'{"type": "entry", "plate": "A", "ts": "yesterday"}',
        b'{"type": "entry", "plate": "A", "ts": true}',
    ])
    def test_poison_messages(self, body):
        with pytest.raises(PoisonMessageError):
            parse_parking_event(body)
