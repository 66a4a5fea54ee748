"""Decoding of the measurement stream and formatting of history records."""

from __future__ import annotations

import re
from datetime import datetime
from enum import Enum, auto
from typing import Optional

from .patients import Patient

HEART_RATE_HEADER = 0
OXYGEN_HEADER = 1

_INT_PATTERN = re.compile(r"\s*([+-]?\d+)\s*")
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


class _State(Enum):
    HEADER = auto()
    HEART_RATE = auto()
    OXYGEN = auto()


def _parse_int(text: str) -> Optional[int]:
    match = _INT_PATTERN.fullmatch(text)
    if match is None:
        return None
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        return None
    return value


class MeasurementParser:
    """Decodes a stream of header/value pairs.

    A header of 0 announces a heart rate, 1 an oxygen level; the next value
    is stored accordingly. Any other header value is ignored.
    """

    def __init__(self) -> None:
        self._state = _State.HEADER
        self.heart_rate: Optional[int] = None
        self.oxygen: Optional[int] = None

    @property
    def awaiting_value(self) -> bool:
        """True when a header was seen and its value is expected next."""
        return self._state is not _State.HEADER

    def feed(self, value: int) -> None:
        """Process one integer of the stream."""
        if self._state is _State.HEADER:
            if value == HEART_RATE_HEADER:
                self._state = _State.HEART_RATE
            elif value == OXYGEN_HEADER:
                self._state = _State.OXYGEN
        elif self._state is _State.HEART_RATE:
            self.heart_rate = value
            self._state = _State.HEADER
        else:
            self.oxygen = value
            self._state = _State.HEADER

    def parse_chunk(self, data: bytes) -> bool:
        """Decode one received chunk as a single decimal integer and feed it.

        Returns False, leaving the state unchanged, when the chunk is empty
        or is not a number.
        """
        if not data:
            return False
        value = _parse_int(bytes(data).decode("utf-8", errors="replace"))
        if value is None:
            return False
        self.feed(value)
        return True


def format_record(patient: Patient, oxygen: int, heart_rate: int) -> str:
    """Format one history line for a patient's measurement.

    The patient's date is used, or the current time when it has none.
    """
    date = patient.date if patient.date is not None else datetime.now()
    return (
        date.strftime("%d/%m/%Y  %H:%M:%S").ljust(20)
        + f"\tPaciente: {patient.surname}, {patient.name}".ljust(50)
        + f"\tDNI: {patient.dni}".ljust(15)
        + f"\tSexo: {patient.sex}".ljust(20)
        + f"\tNivel de oxigeno: {oxygen}".ljust(25)
        + f"\tHeart rate: {heart_rate}".ljust(25)
        + "\n"
    )