"""Millisecond tick scheduling: periodic peripherals and software timers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional


class TimedPeripheral(ABC):
    """Anything that wants to be called once per system tick."""

    @abstractmethod
    def callback(self) -> None:
        """Called on every tick."""


class TickScheduler:
    """Holds the registered peripherals and runs them on each tick."""

    def __init__(self) -> None:
        self._peripherals: list[TimedPeripheral] = []

    def register(self, peripheral: TimedPeripheral) -> TimedPeripheral:
        """Add a peripheral to the end of the tick list and return it."""
        self._peripherals.append(peripheral)
        return peripheral

    def unregister(self, peripheral: TimedPeripheral) -> None:
        """Remove a peripheral; raises ValueError if it was not registered."""
        try:
            self._peripherals.remove(peripheral)
        except ValueError:
            raise ValueError("peripheral is not registered") from None

    def tick(self) -> None:
        """Run the callback of every registered peripheral, in order."""
        for peripheral in list(self._peripherals):
            peripheral.callback()

    def __len__(self) -> int:
        return len(self._peripherals)


class Timer(TimedPeripheral):
    """Counts ticks down and calls a handler when the count reaches zero.

    A reloading timer restarts itself after each expiry; otherwise it stops.
    """

    def __init__(
        self,
        ticks: int,
        handler: Optional[Callable[[], object]],
        reload: bool = False,
    ) -> None:
        if ticks < 0:
            raise ValueError(f"tick count must not be negative, got {ticks}")
        self.ticks = ticks
        self.handler = handler
        self.reload = reload
        self._remaining = 0

    @property
    def remaining(self) -> int:
        """Ticks left before expiry; zero when stopped."""
        return self._remaining

    @property
    def running(self) -> bool:
        return self._remaining != 0

    def start(self) -> None:
        """Start (or restart) the countdown if there is a period and a handler."""
        if self.ticks != 0 and self.handler is not None:
            self._remaining = self.ticks

    def stop(self) -> None:
        self._remaining = 0

    def callback(self) -> None:
        if self._remaining == 0:
            return
        self._remaining -= 1
        if self._remaining == 0:
            if self.handler is not None:
                self.handler()
            if self.reload:
                self._remaining = self.ticks