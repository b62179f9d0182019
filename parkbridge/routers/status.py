"""Current occupancy, read straight from memory (no queue round-trip)."""

from fastapi import APIRouter, Depends
from parkbridge.dependencies import get_bridge
from parkbridge.schemas.status import StatusOut
from parkbridge.services.parking_bridge import ParkingBridge

router = APIRouter()


@router.get("/status", response_model=StatusOut, summary="Current occupancy")
def get_status(bridge: ParkingBridge = Depends(get_bridge)):
    return bridge.status()
