"""Driver for the MAX30102 pulse-oximetry sensor over a register bus."""

from __future__ import annotations

from abc import ABC, abstractmethod

SLAVE_ADDRESS = 0x57

INTR_ENABLE_1 = 0x02
FIFO_WR_PTR = 0x04
OV_COUNTER = 0x05
FIFO_RD_PTR = 0x06
FIFO_DATA = 0x07
FIFO_CONFIG = 0x08
MODE_CONFIG = 0x09
SPO2_CONFIG = 0x0A
LED1_PA = 0x0C
LED2_PA = 0x0D
MULTILED_CONFIG1 = 0x11

BUFFER_LENGTH = 32
"""Largest number of bytes requested from the FIFO in one transfer."""

SAMPLES_SIZE = 100
"""Number of samples kept for each LED."""

FIFO_DEPTH = 32
"""Number of sample slots in the sensor's own FIFO."""

BYTES_PER_SAMPLE = 6
"""Three bytes of red followed by three bytes of infrared."""

SAMPLE_MASK = 0x3FFFF
"""Only the low 18 bits of each reading are meaningful."""

CONFIGURATION: tuple[tuple[int, int], ...] = (
    (FIFO_WR_PTR, 0x00),
    (OV_COUNTER, 0x00),
    (FIFO_RD_PTR, 0x00),
    (FIFO_CONFIG, 0x50),  # 4-sample averaging
    (MODE_CONFIG, 0x40),  # reset
    (MODE_CONFIG, 0x07),  # multi-LED mode
    (MULTILED_CONFIG1, 0x21),  # slot 1 red, slot 2 infrared
    (SPO2_CONFIG, 0x27),  # 100 samples/s, 411 us pulse width
    (LED1_PA, 0x3C),
    (LED2_PA, 0x3C),
)
"""Register writes performed, in order, when the sensor is configured."""


class RegisterBus(ABC):
    """A bus that addresses the sensor: writes bytes and reads bytes back."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Send bytes to the device and wait until they are sent."""

    @abstractmethod
    def read(self, count: int) -> bytes:
        """Read up to ``count`` bytes from the device."""


class Max30102:
    """The sensor, with ring buffers of the red and infrared samples read."""

    def __init__(self, bus: RegisterBus) -> None:
        self._bus = bus
        self._red = [0] * SAMPLES_SIZE
        self._ir = [0] * SAMPLES_SIZE
        self._head = 0
        self._tail = 0
        self._samples_read = 0
        self.configure()

    @property
    def samples_read(self) -> int:
        """Samples read since the counter was last reset."""
        return self._samples_read

    def configure(self) -> dict[int, int]:
        """Write the configuration, reading each register back.

        Returns the value last read back from each register written.
        """
        readback: dict[int, int] = {}
        for register, value in CONFIGURATION:
            self.write_register(register, value)
            readback[register] = self.read_register(register)
        return readback

    def read_register(self, register: int) -> int:
        """Read one byte from a register."""
        self._bus.write(bytes([register]))
        data = bytes(self._bus.read(1))
        return data[0] if data else 0

    def write_register(self, register: int, value: int) -> None:
        self._bus.write(bytes([register, value]))

    def fifo_pointers(self) -> tuple[int, int]:
        """Return the FIFO write and read pointers."""
        write = self.read_register(FIFO_WR_PTR)
        read = self.read_register(FIFO_RD_PTR)
        return write, read

    def read_fifo_data(self, byte_count: int) -> int:
        """Read ``byte_count`` bytes of samples from the FIFO into the buffers.

        Transfers are split into chunks of at most 30 bytes. Bytes missing
        from a short reply read as zero. Returns the number of samples stored.
        """
        if byte_count < 0:
            raise ValueError(f"byte count must not be negative: {byte_count}")
        stored = 0
        remaining = byte_count
        while remaining > 0:
            chunk = remaining
            if chunk > BUFFER_LENGTH:
                chunk = BUFFER_LENGTH - BUFFER_LENGTH % BYTES_PER_SAMPLE
            remaining -= chunk

            self._bus.write(bytes([FIFO_DATA]))
            data = bytes(self._bus.read(chunk))
            length = -(-chunk // BYTES_PER_SAMPLE) * BYTES_PER_SAMPLE
            data = data[:length].ljust(length, b"\0")
            for offset in range(0, length, BYTES_PER_SAMPLE):
                self._store(data[offset:offset + BYTES_PER_SAMPLE])
                stored += 1
        return stored

    def _store(self, sample: bytes) -> None:
        self._head = (self._head + 1) % SAMPLES_SIZE
        self._samples_read += 1
        self._red[self._head] = int.from_bytes(sample[0:3], "big") & SAMPLE_MASK
        self._ir[self._head] = int.from_bytes(sample[3:6], "big") & SAMPLE_MASK

    def continue_reading(self) -> bool:
        """True while fewer than SAMPLES_SIZE samples have been read."""
        return self._samples_read < SAMPLES_SIZE

    def reset_samples_counter(self) -> None:
        self._samples_read = 0

    def reset_fifo_write(self) -> None:
        """Reset the sensor's FIFO write pointer."""
        self.write_register(FIFO_WR_PTR, 0x00)

    def available(self) -> int:
        """Samples stored but not yet consumed with ``next_sample``."""
        return (self._head - self._tail) % SAMPLES_SIZE

    def next_sample(self) -> None:
        """Advance to the next stored sample, if there is one."""
        if self.available():
            self._tail = (self._tail + 1) % SAMPLES_SIZE

    def fifo_red(self) -> int:
        """Red value of the current sample."""
        return self._red[self._tail]

    def fifo_ir(self) -> int:
        """Infrared value of the current sample."""
        return self._ir[self._tail]

    def ir_values(self) -> list[int]:
        """Copy of the whole infrared buffer, in storage order."""
        return list(self._ir)

    def red_values(self) -> list[int]:
        """Copy of the whole red buffer, in storage order."""
        return list(self._red)