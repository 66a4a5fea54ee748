import asyncio

import pytest

from pulseox.measurements import MeasurementParser
from pulseox.receiver import MeasurementReceiver


class FakeReader:
    def __init__(self, chunks):
        self._chunks = list(chunks)

    async def read(self, n):
        return self._chunks.pop(0) if self._chunks else b""


class FakeWriter:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True

    async def wait_closed(self):
        return None


@pytest.mark.asyncio
async def test_handle_decodes_chunks_and_reports():
    updates = []
    receiver = MeasurementReceiver(MeasurementParser(), lambda o, h: updates.append((o, h)))
    writer = FakeWriter()
    await receiver.handle(FakeReader([b"0", b"75", b"1", b"96"]), writer)
    assert updates[-1] == (96, 75)
    assert len(updates) == 4
    assert writer.closed


@pytest.mark.asyncio
async def test_handle_skips_invalid_chunks():
    updates = []
    receiver = MeasurementReceiver(on_update=lambda o, h: updates.append((o, h)))
    await receiver.handle(FakeReader([b"x", b"1", b"??", b"99"]), FakeWriter())
    assert updates == [(None, None), (99, None)]


@pytest.mark.asyncio
async def test_second_client_is_turned_away():
    updates = []
    receiver = MeasurementReceiver(on_update=lambda o, h: updates.append((o, h)))
    await receiver.handle(FakeReader([]), FakeWriter())
    assert receiver.has_client
    second = FakeWriter()
    await receiver.handle(FakeReader([b"1", b"90"]), second)
    assert second.closed
    assert updates == []


@pytest.mark.asyncio
async def test_serve_over_tcp():
    updates: asyncio.Queue = asyncio.Queue()
    receiver = MeasurementReceiver(on_update=lambda o, h: updates.put_nowait((o, h)))
    server = await receiver.serve("127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        reader, writer = await asyncio.open_connection("127.0.0.1", port)
        for chunk in (b"1", b"97"):
            writer.write(chunk)
            await writer.drain()
            last = await asyncio.wait_for(updates.get(), timeout=5)
        assert last == (97, None)

        other_reader, other_writer = await asyncio.open_connection("127.0.0.1", port)
        assert await asyncio.wait_for(other_reader.read(10), timeout=5) == b""
        other_writer.close()
        writer.close()
    finally:
        server.close()
        await server.wait_closed()