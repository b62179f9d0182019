"""Shared fixtures: an in-memory stand-in for RabbitMQ and a bridge wired to it."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import itertools
import json
from collections import deque

import pytest
from parkbridge.config import Settings
from parkbridge.services.parking_bridge import ParkingBridge


class FakeMessage:
    """Mimics the parts of aio_pika.IncomingMessage the applier uses."""

    def __init__(self, body: bytes, delivery_tag: int):
        self.body = body
        self.delivery_tag = delivery_tag
        self.acked = False
        self.nacked = False
        self.requeue = None

    async def ack(self):
        self.acked = True

    async def nack(self, requeue=True):
        self.nacked = True
        self.requeue = requeue


class FakeBroker:
    """
    One durable FIFO queue. Messages wait until a consumer is registered and
    deliver() is called (or immediately, with auto_deliver=True).
    """

    def __init__(self, auto_deliver=False):
        self.auto_deliver = auto_deliver
        self.queue = deque()
        self.published = []
        self.handler = None
        self.connected = False
        self.consume_calls = 0
        self.cancel_calls = 0
        self._tags = itertools.count(1)

    @property
    def is_connected(self):
        return self.connected

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False

    async def publish(self, event):
        self.published.append(event)
        self.enqueue(event.to_json())
        if self.auto_deliver:
            await self.deliver()

    def enqueue(self, body):
        if isinstance(body, dict):
            body = json.dumps(body).encode()
        message = FakeMessage(body, next(self._tags))
        self.queue.append(message)
        return message

    async def consume(self, handler):
        self.handler = handler
        self.consume_calls += 1
        if self.auto_deliver:
            asyncio.get_running_loop().create_task(self.deliver())
        return f"ctag-{self.consume_calls}"

    async def cancel(self, consumer_tag):
        self.handler = None
        self.cancel_calls += 1

    async def deliver(self):
        """Hand every queued message to the active consumer, in order."""
        delivered = []
        while self.handler is not None and self.queue:
            message = self.queue.popleft()
            await self.handler(message)
            delivered.append(message)
        return delivered


class Recorder:
    """A subscriber transport that just remembers what it was sent."""

    def __init__(self):
        self.frames = []

    async def send(self, frame):
        self.frames.append(frame)

    @property
    def events(self):
        return [f["lastEvent"] for f in self.frames if f["lastEvent"] is not None]


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def make_bridge(broker):
    def _make(capacity=50):
        return ParkingBridge(Settings(CAPACITY=capacity), broker=broker)
    return _make


@pytest.fixture
def recorder_factory():
    return Recorder
