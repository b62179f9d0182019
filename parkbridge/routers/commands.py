"""
Entry/exit command endpoints used by the gate operator dashboard.

200 means the command was accepted onto the queue, not that it has been
applied yet; the change shows up on the live feed once it is consumed.
"""

from fastapi import APIRouter, Depends
from parkbridge.dependencies import get_bridge
from parkbridge.schemas.commands import CommandAccepted, ErrorOut, PlateCommand
from parkbridge.services.parking_bridge import ParkingBridge

router = APIRouter()


@router.post(
    "/entrada",
    response_model=CommandAccepted,
    responses={400: {"model": ErrorOut}, 409: {"model": ErrorOut}},
    summary="Register a vehicle entering",
)
async def register_entry(body: PlateCommand, bridge: ParkingBridge = Depends(get_bridge)):
    await bridge.submit_entry(body.placa)
    return CommandAccepted()


@router.post(
    "/saida",
    response_model=CommandAccepted,
    responses={400: {"model": ErrorOut}, 404: {"model": ErrorOut}},
    summary="Register a vehicle leaving",
)
async def register_exit(body: PlateCommand, bridge: ParkingBridge = Depends(get_bridge)):
    await bridge.submit_exit(body.placa)
    return CommandAccepted()
