"""Unit tests for the in-memory occupancy store."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from parkbridge.services.occupancy_store import OccupancyStore


class TestOccupancyStore:
    def test_entry_adds_plate(self):
        store = OccupancyStore(capacity=2)
        assert store.try_add_entry("ABC1234") is True
        assert store.contains("ABC1234")
        assert store.snapshot().model_dump() == {"capacity": 2, "occupied": 1, "free": 1}

    def test_duplicate_entry_is_noop(self):
        store = OccupancyStore(capacity=5)
        assert store.try_add_entry("ABC1234") is True
        assert store.try_add_entry("ABC1234") is False
        assert store.occupied == 1

    def test_entry_refused_when_full(self):
        store = OccupancyStore(capacity=1)
        assert store.try_add_entry("A") is True
        assert store.try_add_entry("B") is False
        assert store.plates() == ["A"]
        assert store.snapshot().free == 0

    def test_exit_removes_plate(self):
        store = OccupancyStore(capacity=2)
        store.try_add_entry("XYZ-567")
        assert store.try_remove_exit("XYZ-567") is True
        assert store.occupied == 0
        assert store.snapshot().free == 2

    def test_exit_of_absent_plate_is_noop(self):
        store = OccupancyStore(capacity=2)
        assert store.try_remove_exit("Z") is False
        assert store.occupied == 0

    def test_duplicate_exit_is_noop(self):
        store = OccupancyStore(capacity=2)
        store.try_add_entry("A")
        assert store.try_remove_exit("A") is True
        assert store.try_remove_exit("A") is False
        assert store.occupied == 0

    def test_exit_frees_a_slot_for_the_next_entry(self):
        store = OccupancyStore(capacity=1)
        store.try_add_entry("A")
        store.try_remove_exit("A")
        assert store.try_add_entry("B") is True

    def test_counts_stay_within_bounds(self):
        store = OccupancyStore(capacity=3)
        ops = [("in", "A"), ("in", "B"), ("in", "A"), ("in", "C"), ("in", "D"),
               ("out", "B"), ("out", "B"), ("in", "D"), ("in", "E"), ("out", "Q")]
        for op, plate in ops:
            if op == "in":
                store.try_add_entry(plate)
            else:
                store.try_remove_exit(plate)
            s = store.snapshot()
            assert 0 <= s.occupied <= s.capacity
            assert s.free == s.capacity - s.occupied
        assert store.plates() == ["A", "C", "D"]

    @pytest.mark.parametrize("capacity", [0, -1, 2.5, "10", True])
    def test_capacity_must_be_positive_int(self, capacity):
        with pytest.raises(ValueError):
            OccupancyStore(capacity=capacity)
