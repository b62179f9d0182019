"""FastAPI dependencies shared by the routers."""

from fastapi import Request
from parkbridge.services.parking_bridge import ParkingBridge


def get_bridge(request: Request) -> ParkingBridge:
    """The process-wide bridge created in create_app()."""
    return request.app.state.bridge
