#!/usr/bin/env python3
"""MAX! Cube - A virtual cube (a TCP server) for testing sessions.

On connect, the cube sends its (captured) initial burst of lines. Thereafter it
responds to each s: command according to its behaviour, and closes the
connection when it receives a q: command (or at EOF).
"""

import asyncio
import logging
from enum import StrEnum
from typing import Final

_LOGGER = logging.getLogger(__name__)

ACK_ACCEPTED: Final = b"S:00,0,31\r\n"
ACK_REJECTED: Final = b"S:00,1,31\r\n"


class CubeBehaviour(StrEnum):
    ACCEPT = "accept"  # respond with S:, command accepted
    REJECT = "reject"  # respond with S:, command not accepted
    CLOSE = "close"  # close the connection instead of responding
    SILENT = "silent"  # don't respond at all
    BAD_ACK = "bad_ack"  # respond with a line that is not a S:


class VirtualCube:
    """A virtual cube that serves one connection at a time, on a random port."""

    def __init__(
        self,
        lines: list[str],
        behaviour: CubeBehaviour = CubeBehaviour.ACCEPT,
    ) -> None:
        self.lines = lines
        self.behaviour = behaviour

        self.rcvd: list[bytes] = []  # the lines received from the client
        self.disconnected = asyncio.Event()

        self._server: asyncio.Server | None = None
        self._writers: set[asyncio.StreamWriter] = set()

    @property
    def port(self) -> int:
        assert self._server is not None  # mypy hint
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)

    async def stop(self) -> None:
        if self._server is not None:
            self._server.close()
            for writer in list(self._writers):  # else wait_closed() may wait for them
                writer.close()
            await self._server.wait_closed()

    async def wait_disconnected(self, timeout: float = 1.0) -> None:
        await asyncio.wait_for(self.disconnected.wait(), timeout=timeout)

    async def _handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.disconnected.clear()
        self._writers.add(writer)

        try:
            for line in self.lines:
                writer.write(f"{line}\r\n".encode())
            await writer.drain()

            while data := await reader.readline():
                self.rcvd.append(data)

                if data.startswith(b"q:"):
                    break
                if not data.startswith(b"s:"):
                    continue

                if self.behaviour == CubeBehaviour.CLOSE:
                    break
                if self.behaviour == CubeBehaviour.ACCEPT:
                    writer.write(ACK_ACCEPTED)
                elif self.behaviour == CubeBehaviour.REJECT:
                    writer.write(ACK_REJECTED)
                elif self.behaviour == CubeBehaviour.BAD_ACK:
                    writer.write(f"{self.lines[-1]}\r\n".encode())
                await writer.drain()

        except ConnectionError as err:
            _LOGGER.debug("Virtual cube: connection lost: %s", err)

        finally:
            writer.close()
            self._writers.discard(writer)
            self.disconnected.set()
