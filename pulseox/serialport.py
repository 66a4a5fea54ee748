"""Buffered serial port: bytes queued for sending and bytes received."""

from __future__ import annotations

from typing import Iterable, Optional, Union

from .buffers import CircularBuffer

CLOCK_HZ = 30_000_000


class SerialPort:
    """A UART with software transmit and receive buffers.

    ``transmit`` queues outgoing bytes and ``drain`` hands them to the line;
    ``feed`` stores incoming bytes and ``receive`` reads them one at a time.
    """

    def __init__(self, baudrate: int = 9600, buffer_size: int = 255) -> None:
        self._tx = CircularBuffer(buffer_size)
        self._rx = CircularBuffer(buffer_size)
        self.baudrate = baudrate

    @property
    def baudrate(self) -> int:
        return self._baudrate

    @baudrate.setter
    def baudrate(self, value: int) -> None:
        if value <= 0:
            raise ValueError(f"baud rate must be positive, got {value}")
        self._baudrate = value

    @property
    def divider(self) -> int:
        """Baud-rate generator value for 16x oversampling of the 30 MHz clock."""
        return CLOCK_HZ // (self._baudrate * 16)

    def transmit(self, data: Union[int, bytes, bytearray, Iterable[int]]) -> None:
        """Queue one byte or a sequence of bytes; overflow is dropped."""
        if isinstance(data, int):
            self._tx.push(data)
            return
        for value in data:
            self._tx.push(value)

    def transmit_decimal(self, number: int) -> None:
        """Queue the ASCII decimal digits of a non-negative integer."""
        if number < 0:
            raise ValueError(f"cannot send a negative number: {number}")
        self.transmit(str(number).encode("ascii"))

    def receive(self) -> Optional[int]:
        """Return the next received byte, or None when nothing is waiting."""
        try:
            return self._rx.pop()
        except IndexError:
            return None

    def feed(self, data: Union[int, bytes, bytearray, Iterable[int]]) -> None:
        """Store bytes arriving from the line; overflow is dropped."""
        if isinstance(data, int):
            self._rx.push(data)
            return
        for value in data:
            self._rx.push(value)

    def drain(self) -> bytes:
        """Take every queued outgoing byte, oldest first."""
        out = bytearray()
        while len(self._tx):
            out.append(self._tx.pop())
        return bytes(out)