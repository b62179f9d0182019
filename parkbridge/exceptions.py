"""
Error taxonomy shared by the services and the HTTP layer.

  InvalidPlateError      → 400, malformed command, no state change
  CommandRejected        → 409 / 404, conflicts with current occupancy
  PoisonMessageError     → unparsable log entry, dropped without requeue
  BrokerUnavailableError → cannot reach RabbitMQ at startup, fatal
"""

from enum import Enum


class ParkBridgeError(Exception):
    """Base class for every error raised by parkbridge."""


class InvalidPlateError(ParkBridgeError, ValueError):
    pass


class RejectionReason(str, Enum):
    FACILITY_FULL = "facility full"
    ALREADY_PRESENT = "already present"
    NOT_PRESENT = "not present"


class CommandRejected(ParkBridgeError):
    def __init__(self, reason: RejectionReason, plate: str):
        self.reason = reason
        self.plate = plate
        super().__init__(f"{reason.value}: {plate}")


class PoisonMessageError(ParkBridgeError):
    pass


class BrokerUnavailableError(ParkBridgeError):
    pass
