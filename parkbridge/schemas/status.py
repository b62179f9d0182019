from pydantic import BaseModel, Field
from datetime import datetime
from typing import Literal, Optional


class StatusOut(BaseModel):
    capacity: int
    occupied: int
    free: int


class ParkingEventOut(BaseModel):
    type: Literal["entry", "exit"]
    plate: str
    ts: int           # epoch millis


class ParkingUpdate(StatusOut):
    """Frame pushed to every WebSocket subscriber."""
    last_event: Optional[ParkingEventOut] = Field(default=None, alias="lastEvent")

    class Config:
        populate_by_name = True


class HealthOut(StatusOut):
    status: str
    timestamp: datetime
    broker: str
    consumer: str
    subscribers: int
    applied: int
    ignored: int
    dropped: int
