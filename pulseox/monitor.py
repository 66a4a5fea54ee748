"""State machine that reads the sensor and reports averaged measurements."""

from __future__ import annotations

from enum import Enum, auto
from typing import Protocol, Sequence

from .sensor import BYTES_PER_SAMPLE, FIFO_DEPTH, Max30102
from .spo2 import heart_rate_and_oxygen_saturation

SAMPLES_PER_REPORT = 60
"""Valid readings averaged into one report."""

HEART_RATE_HEADER = 0
OXYGEN_HEADER = 1


class ValueSink(Protocol):
    def send(self, value: int) -> None:
        ...


class _Transaction(Enum):
    POINTERS = auto()
    DATA = auto()


def average(values: Sequence[int]) -> int:
    """Integer mean, rounded toward zero."""
    if not values:
        raise ValueError("cannot average an empty sequence")
    total = sum(values)
    quotient = abs(total) // len(values)
    return quotient if total >= 0 else -quotient


class Max30102StateMachine:
    """Alternates between reading the FIFO pointers and reading samples.

    Once a full window of samples has been read, heart rate and SpO2 are
    estimated. Every SAMPLES_PER_REPORT valid values of either are averaged
    and sent as a header (0 for heart rate, 1 for SpO2) followed by the value.
    """

    def __init__(self, sensor: Max30102, wifi: ValueSink) -> None:
        self.sensor = sensor
        self.wifi = wifi
        self._state = _Transaction.POINTERS
        self._available_samples = 0
        self._heart_rates: list[int] = []
        self._spo2_values: list[int] = []

    @property
    def pending_heart_rates(self) -> list[int]:
        return list(self._heart_rates)

    @property
    def pending_spo2(self) -> list[int]:
        return list(self._spo2_values)

    def step(self) -> None:
        """Perform one transaction."""
        if self._state is _Transaction.POINTERS:
            write, read = self.sensor.fifo_pointers()
            if write != read:
                count = write - read
                if count < 0:
                    count += FIFO_DEPTH
                self._available_samples = count
            self._state = _Transaction.DATA
            return

        if self._available_samples > 0:
            self.sensor.read_fifo_data(self._available_samples * BYTES_PER_SAMPLE)
            if not self.sensor.continue_reading():
                self.sensor.reset_samples_counter()
                reading = heart_rate_and_oxygen_saturation(
                    self.sensor.ir_values(), self.sensor.red_values()
                )
                if reading.heart_rate_valid:
                    self._collect(self._heart_rates, reading.heart_rate, HEART_RATE_HEADER)
                if reading.spo2_valid:
                    self._collect(self._spo2_values, reading.spo2, OXYGEN_HEADER)
                self.sensor.reset_fifo_write()
        self._state = _Transaction.POINTERS

    def _collect(self, values: list[int], value: int, header: int) -> None:
        values.append(value)
        if len(values) == SAMPLES_PER_REPORT:
            self.wifi.send(header)
            self.wifi.send(average(values))
            values.clear()