from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging

logger = logging.getLogger("msgpet.echo")


class EchoServer:
    def __init__(self, host: str = "127.0.0.1", port: int = 0, latency_sec: float = 0.0) -> None:
        self.host = host
        self.port = port
        self.latency_sec = latency_sec
        self.connections = 0
        self.open_connections = 0
        self.in_flight = 0  # lines received but not yet answered, across connections
        self.peak_in_flight = 0
        self.lines: list[bytes] = []
        self._server: asyncio.Server | None = None

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, self.host, self.port)
        self.port = self._server.sockets[0].getsockname()[1]
        logger.info("Listening on %s", self.address)

    async def stop(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        if self._server is None:
            msg = "Echo server failed to start"
            raise RuntimeError(msg)
        await self._server.serve_forever()

    async def __aenter__(self) -> EchoServer:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()

    async def _handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        self.connections += 1
        self.open_connections += 1
        try:
            while True:
                try:
                    line = await reader.readuntil(b"\n")
                except (asyncio.IncompleteReadError, ConnectionError):
                    break
                self.lines.append(line.rstrip(b"\n"))
                self.in_flight += 1
                self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
                try:
                    if self.latency_sec > 0:
                        await asyncio.sleep(self.latency_sec)
                    writer.write(line)
                    await writer.drain()
                except ConnectionError:
                    break
                finally:
                    self.in_flight -= 1
        finally:
            self.open_connections -= 1
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()


def main() -> None:
    parser = argparse.ArgumentParser(description="Line echo server for msgpet runs")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--latency", type=float, default=0.0, help="Seconds to wait before each reply")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    server = EchoServer(args.host, args.port, args.latency)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(server.serve_forever())


if __name__ == "__main__":
    main()
