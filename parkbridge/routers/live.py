"""
Real-time occupancy feed.

On connect the client receives {capacity, occupied, free, lastEvent: null};
after that, one frame per applied entry/exit with lastEvent = {type, plate, ts}.
Queue consumption only runs while at least one client is connected.
"""

from fastapi import APIRouter, WebSocket
from parkbridge.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.websocket("/ws")
async def live_updates(websocket: WebSocket):
    bridge = websocket.app.state.bridge
    await websocket.accept()
    subscriber = await bridge.attach(websocket.send_json)
    logger.debug(f"[Socket] Subscriber {subscriber.id} from {websocket.client}")
    try:
        while True:
            # Client frames carry nothing; only the disconnect matters
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        await bridge.detach(subscriber)
