"""TCP server receiving measurements from the oximeter."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
from typing import Callable, Optional

from .esp8266 import TCP_PORT
from .measurements import MeasurementParser

_CHUNK_SIZE = 1024

UpdateCallback = Callable[[Optional[int], Optional[int]], object]


class MeasurementReceiver:
    """Accepts the first client that connects and decodes what it sends.

    After every chunk that decodes as a number, ``on_update`` is called with
    the current oxygen level and heart rate. Later clients are turned away.
    """

    def __init__(
        self,
        parser: Optional[MeasurementParser] = None,
        on_update: Optional[UpdateCallback] = None,
    ) -> None:
        self.parser = parser if parser is not None else MeasurementParser()
        self.on_update = on_update
        self._client_taken = False

    @property
    def has_client(self) -> bool:
        return self._client_taken

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Serve one connection until it closes."""
        if self._client_taken:
            await self._close(writer)
            return
        self._client_taken = True
        try:
            while True:
                data = await reader.read(_CHUNK_SIZE)
                if not data:
                    break
                if self.parser.parse_chunk(data) and self.on_update is not None:
                    self.on_update(self.parser.oxygen, self.parser.heart_rate)
        finally:
            await self._close(writer)

    @staticmethod
    async def _close(writer: asyncio.StreamWriter) -> None:
        writer.close()
        with contextlib.suppress(ConnectionError):
            await writer.wait_closed()

    async def serve(self, host: str, port: int) -> asyncio.AbstractServer:
        """Start listening and return the running server."""
        return await asyncio.start_server(self.handle, host, port)


def main(argv=None) -> int:
    """Listen for the oximeter and print every measurement update."""
    arg_parser = argparse.ArgumentParser(description="Receive pulse oximeter measurements.")
    arg_parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    arg_parser.add_argument("--port", type=int, default=int(TCP_PORT), help="TCP port")
    args = arg_parser.parse_args(argv)

    def show(oxygen: Optional[int], heart_rate: Optional[int]) -> None:
        print(f"SpO2: {oxygen}  Heart rate: {heart_rate}", flush=True)

    async def run() -> None:
        server = await MeasurementReceiver(on_update=show).serve(args.host, args.port)
        async with server:
            await server.serve_forever()

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run())
    return 0