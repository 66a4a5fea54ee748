"""Patient details as entered on the patient form."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

WOMAN = "Mujer"
MAN = "Hombre"

_INT_PATTERN = re.compile(r"\s*([+-]?\d+)\s*")
_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def _to_int(text: str) -> int:
    """Parse a decimal 32-bit integer; anything else reads as 0."""
    match = _INT_PATTERN.fullmatch(text)
    if match is None:
        return 0
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        return 0
    return value


@dataclass
class Patient:
    """A patient a measurement is recorded for."""

    name: str = ""
    surname: str = ""
    dni: int = 0
    sex: str = ""
    date: Optional[datetime] = None


def patient_from_form(name: str, surname: str, dni: str, woman: bool, man: bool) -> Patient:
    """Build a patient from the form fields.

    The surname is upper-cased, a DNI that is not a number reads as 0, and
    the sex is taken from whichever option is checked, woman first.
    """
    if woman:
        sex = WOMAN
    elif man:
        sex = MAN
    else:
        sex = ""
    return Patient(name=name, surname=surname.upper(), dni=_to_int(dni), sex=sex)