"""
System health check endpoint.
Returns status of the bridge, the RabbitMQ connection and the consumer.
"""

from fastapi import APIRouter, Depends
from parkbridge.dependencies import get_bridge
from parkbridge.schemas.status import HealthOut
from parkbridge.services.parking_bridge import ParkingBridge

router = APIRouter()


@router.get("/health", response_model=HealthOut, summary="System health check")
def health_check(bridge: ParkingBridge = Depends(get_bridge)):
    """
    Returns:
    - Broker connectivity ("degraded" when the connection is gone)
    - Consumer state (idle | consuming) and live subscriber count
    - Current occupancy and applied / ignored / dropped message counters
    """
    return bridge.health()
