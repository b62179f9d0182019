# scripts/setup/init_broker.py
"""
Initialize RabbitMQ topology: exchange, durable queue and binding.
The bridge declares the same topology on startup; run this to check the
broker before first launch or to see how many events are waiting.
Usage: python scripts/setup/init_broker.py
"""

import sys
import os
import asyncio
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

import aio_pika
from parkbridge.config import settings


async def main():
    print("🐇 ParkBridge Broker Initialization")
    print("=" * 40)
    print(f"📡 Broker: {settings.RABBIT_URL}")

    try:
        connection = await aio_pika.connect(settings.RABBIT_URL)
    except Exception as e:
        print(f"❌ Cannot connect to RabbitMQ: {e}")
        print("\nMake sure RabbitMQ is running:")
        print("  docker run -d -p 5672:5672 -p 15672:15672 rabbitmq:3-management")
        sys.exit(1)
    print("✅ Broker connection OK")

    async with connection:
        channel = await connection.channel()
        exchange = await channel.declare_exchange(
            settings.EXCHANGE, aio_pika.ExchangeType.TOPIC, durable=True,
        )
        queue = await channel.declare_queue(
            settings.QUEUE, durable=True, exclusive=False, auto_delete=False,
        )
        await queue.bind(exchange, routing_key=settings.BINDING_KEY)

        print(f"\n📋 Exchange '{settings.EXCHANGE}' (topic, durable)")
        print(f"📋 Queue    '{settings.QUEUE}' (durable) ← '{settings.BINDING_KEY}'")
        print(f"📊 Messages waiting: {queue.declaration_result.message_count}")

    print("\n🎉 Broker ready! You can now start the bridge:")
    print(f"   python -m parkbridge   # http://{settings.HOST}:{settings.PORT}")


if __name__ == "__main__":
    asyncio.run(main())
