"""
RabbitMQ adapter for the durable event log.

Topology (declared idempotently on connect):
  exchange  <EXCHANGE>  topic, durable
  queue     <QUEUE>     durable, non-exclusive, no auto-delete
  binding   <ROUTING_PREFIX>.*   → matches parking.entry and parking.exit

Messages are published persistent and acknowledged individually by the
consumer. Cancelling a consumer leaves unacked and queued messages in place.
"""

import asyncio
from typing import Awaitable, Callable

import aio_pika
from aio_pika.abc import AbstractIncomingMessage
from aio_pika.exceptions import AMQPConnectionError

from parkbridge.config import Settings
from parkbridge.exceptions import BrokerUnavailableError
from parkbridge.services.event_parser import ParkingEvent, routing_key
from parkbridge.utils.logger import get_logger

logger = get_logger(__name__)

MessageHandler = Callable[[AbstractIncomingMessage], Awaitable[None]]


class ParkingBroker:
    def __init__(self, settings: Settings):
        self._settings = settings
        self._connection = None
        self._channel = None
        self._exchange = None
        self._queue = None

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and not self._connection.is_closed

    async def connect(self):
        s = self._settings
        try:
            self._connection = await aio_pika.connect(s.RABBIT_URL)
            self._channel = await self._connection.channel()
            await self._channel.set_qos(prefetch_count=s.PREFETCH_COUNT)
            self._exchange = await self._channel.declare_exchange(
                s.EXCHANGE, aio_pika.ExchangeType.TOPIC, durable=True,
            )
            self._queue = await self._channel.declare_queue(
                s.QUEUE, durable=True, exclusive=False, auto_delete=False,
            )
            await self._queue.bind(self._exchange, routing_key=s.BINDING_KEY)
        except (AMQPConnectionError, OSError, asyncio.TimeoutError) as e:
            raise BrokerUnavailableError(f"Cannot connect to RabbitMQ: {e}") from e

        logger.info(
            f"[RabbitMQ] Exchange '{s.EXCHANGE}' | Queue '{s.QUEUE}' | Binding '{s.BINDING_KEY}'"
        )

    async def publish(self, event: ParkingEvent):
        key = routing_key(event.kind, self._settings.ROUTING_PREFIX)
        await self._exchange.publish(
            aio_pika.Message(
                body=event.to_json(),
                content_type="application/json",
                delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
            ),
            routing_key=key,
        )
        logger.debug(f"[RabbitMQ] Published {key} plate={event.plate}")

    async def consume(self, handler: MessageHandler) -> str:
        return await self._queue.consume(handler, no_ack=False)

    async def cancel(self, consumer_tag: str):
        await self._queue.cancel(consumer_tag)

    async def close(self):
        connection = self._connection
        self._connection = None
        if connection is not None and not connection.is_closed:
            await connection.close()
            logger.info("[RabbitMQ] Connection closed")
