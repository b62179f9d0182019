"""Request bodies for the entry/exit command endpoints."""

import re
from pydantic import BaseModel, StrictStr, field_validator
from parkbridge.exceptions import InvalidPlateError

PLATE_MAX_LENGTH = 8
_PLATE_DISALLOWED = re.compile(r"[^A-Z0-9-]")


def normalize_plate(raw: str) -> str:
    """Uppercase and strip everything outside A-Z, 0-9 and '-'."""
    plate = _PLATE_DISALLOWED.sub("", raw.upper())
    if not plate:
        raise InvalidPlateError("Field 'placa' is required.")
    if len(plate) > PLATE_MAX_LENGTH:
        raise InvalidPlateError(f"Field 'placa' must have at most {PLATE_MAX_LENGTH} characters.")
    return plate


class PlateCommand(BaseModel):
    placa: StrictStr

    @field_validator("placa")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return normalize_plate(value)


class CommandAccepted(BaseModel):
    ok: bool = True


class ErrorOut(BaseModel):
    error: str
