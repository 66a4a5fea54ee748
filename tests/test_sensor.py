import pytest

from pulseox.sensor import (
    CONFIGURATION,
    FIFO_DATA,
    FIFO_RD_PTR,
    FIFO_WR_PTR,
    MODE_CONFIG,
    SAMPLE_MASK,
    SAMPLES_SIZE,
    Max30102,
    RegisterBus,
)


class FakeBus(RegisterBus):
    def __init__(self, fifo=b""):
        self.registers = {}
        self.fifo = bytearray(fifo)
        self.pointer = None
        self.writes = []
        self.reads = []

    def write(self, data):
        data = bytes(data)
        self.writes.append(data)
        self.pointer = data[0]
        if len(data) > 1:
            self.registers[data[0]] = data[1]

    def read(self, count):
        self.reads.append(count)
        if self.pointer == FIFO_DATA:
            out = bytes(self.fifo[:count])
            del self.fifo[:count]
            return out
        return bytes([self.registers.get(self.pointer, 0)]) * count


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def sensor(bus):
    device = Max30102(bus)
    bus.writes.clear()
    bus.reads.clear()
    return device


def test_register_bus_is_abstract():
    with pytest.raises(TypeError):
        RegisterBus()


def test_construction_writes_configuration(bus):
    Max30102(bus)
    register_writes = [tuple(w) for w in bus.writes if len(w) == 2]
    assert register_writes == list(CONFIGURATION)
    assert (MODE_CONFIG, 0x07) in register_writes
    assert (0x11, 0x21) in register_writes
    assert (0x0A, 0x27) in register_writes


def test_configure_returns_readback(sensor):
    readback = sensor.configure()
    assert readback[MODE_CONFIG] == 0x07
    assert readback[0x08] == 0x50
    assert readback[0x0C] == 0x3C


def test_write_then_read_register(sensor, bus):
    sensor.write_register(0x02, 0xAB)
    assert bus.writes[-1] == bytes([0x02, 0xAB])
    assert sensor.read_register(0x02) == 0xAB


def test_fifo_pointers(sensor, bus):
    bus.registers[FIFO_WR_PTR] = 9
    bus.registers[FIFO_RD_PTR] = 3
    assert sensor.fifo_pointers() == (9, 3)


def test_reset_fifo_write(sensor, bus):
    bus.registers[FIFO_WR_PTR] = 17
    bus.registers[FIFO_RD_PTR] = 4
    assert sensor.fifo_pointers() == (17, 4)
    sensor.reset_fifo_write()
    assert sensor.read_register(FIFO_WR_PTR) == 0
    assert sensor.fifo_pointers() == (0, 4)


def test_read_fifo_data_parses_sample(sensor, bus):
    bus.fifo = bytearray(b"\x00\x12\x34\x03\xff\xff")
    assert sensor.read_fifo_data(6) == 1
    assert sensor.red_values()[1] == 0x1234
    assert sensor.ir_values()[1] == SAMPLE_MASK
    assert bus.writes[-1] == bytes([FIFO_DATA])


def test_read_fifo_data_masks_to_18_bits(sensor, bus):
    bus.fifo = bytearray(b"\xff" * 6)
    sensor.read_fifo_data(6)
    assert sensor.red_values()[1] == SAMPLE_MASK
    assert sensor.ir_values()[1] == SAMPLE_MASK


def test_read_fifo_data_splits_transfers(sensor, bus):
    bus.fifo = bytearray(60)
    assert sensor.read_fifo_data(60) == 10
    assert bus.reads == [30, 30]


def test_read_fifo_data_remainder_transfer(sensor, bus):
    bus.fifo = bytearray(36)
    assert sensor.read_fifo_data(36) == 6
    assert sensor.samples_read == 6
    assert bus.reads == [30, 6]


def test_short_reply_reads_as_zero(sensor, bus):
    bus.fifo = bytearray(b"\x00\x00\x07")
    assert sensor.read_fifo_data(6) == 1
    assert sensor.red_values()[1] == 7
    assert sensor.ir_values()[1] == 0


def test_negative_byte_count_rejected(sensor):
    with pytest.raises(ValueError):
        sensor.read_fifo_data(-6)


def test_samples_counter(sensor, bus):
    bus.fifo = bytearray(SAMPLES_SIZE * 6)
    assert sensor.continue_reading()
    assert sensor.read_fifo_data(SAMPLES_SIZE * 6) == SAMPLES_SIZE
    assert sensor.samples_read == SAMPLES_SIZE
    assert not sensor.continue_reading()
    sensor.reset_samples_counter()
    assert sensor.continue_reading()
    assert sensor.samples_read == 0


def test_available_and_next_sample(sensor, bus):
    bus.fifo = bytearray(b"\x00\x12\x34\x00\x00\x05")
    assert sensor.available() == 0
    sensor.read_fifo_data(6)
    assert sensor.available() == 1
    assert sensor.fifo_red() == 0
    sensor.next_sample()
    assert sensor.available() == 0
    assert sensor.fifo_red() == 0x1234
    assert sensor.fifo_ir() == 5
    sensor.next_sample()
    assert sensor.fifo_red() == 0x1234


def test_head_wraps_after_full_buffer(sensor, bus):
    bus.fifo = bytearray(SAMPLES_SIZE * 6)
    sensor.read_fifo_data(SAMPLES_SIZE * 6)
    assert sensor.available() == 0
    assert len(sensor.ir_values()) == SAMPLES_SIZE
    assert len(sensor.red_values()) == SAMPLES_SIZE


def test_values_are_copies(sensor):
    values = sensor.ir_values()
    values[0] = 123
    assert sensor.ir_values()[0] == 0