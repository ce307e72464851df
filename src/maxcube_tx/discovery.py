#!/usr/bin/env python3
"""MAX! Cube - discover cubes on the local network (via a UDP broadcast)."""

from __future__ import annotations

import asyncio
import logging
from typing import Final, NamedTuple

from . import exceptions as exc
from .const import (
    DEFAULT_DISCOVERY_TIMEOUT,
    DISCOVERY_ADDR,
    DISCOVERY_BYTES,
    DISCOVERY_PORT,
)

_MIN_REPLY_LEN: Final[int] = 18

_LOGGER = logging.getLogger(__name__)


class DiscoveredCube(NamedTuple):
    id: str  # the serial number of the cube
    host: str


def parse_discovery_reply(data: bytes, addr: tuple[str, int]) -> DiscoveredCube | None:
    """Return the cube that sent a reply, or None if it is not a reply.

    A reply is at least 18 bytes long, and the cube's serial is at bytes 8-17.
    Datagrams with a '*' are discovery requests (e.g. the echo of our own).
    """

    if b"*" in data or len(data) < _MIN_REPLY_LEN:
        return None
    return DiscoveredCube(data[8:18].decode("utf-8", errors="replace"), addr[0])


class DiscoveryProtocol(asyncio.DatagramProtocol):
    """Collect the replies to a discovery request."""

    def __init__(self) -> None:
        self._transport: asyncio.DatagramTransport | None = None
        self._cubes: dict[str, DiscoveredCube] = {}

    @property
    def cubes(self) -> list[DiscoveredCube]:
        return list(self._cubes.values())

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self._transport = transport  # type: ignore[assignment]

    def datagram_received(self, data: bytes, addr: tuple[str, int]) -> None:
        if (cube := parse_discovery_reply(data, addr)) is None:
            _LOGGER.debug("Ignoring datagram from %s: %r", addr[0], data)
            return

        if cube.id not in self._cubes:
            _LOGGER.info("Discovered a cube: %s at %s", cube.id, cube.host)
        self._cubes[cube.id] = cube

    def error_received(self, err: Exception) -> None:
        _LOGGER.warning("Error during discovery: %s", err)


async def discover(
    timeout: float = DEFAULT_DISCOVERY_TIMEOUT,
    *,
    port: int = DISCOVERY_PORT,
    local_addr: str = "0.0.0.0",
    broadcast_addr: str = DISCOVERY_ADDR,
) -> list[DiscoveredCube]:
    """Broadcast a discovery request, and return the cubes that reply in time.

    The local address can be used to select the network interface.
    """

    loop = asyncio.get_running_loop()

    try:
        transport, protocol = await loop.create_datagram_endpoint(
            DiscoveryProtocol, local_addr=(local_addr, port), allow_broadcast=True
        )
    except OSError as err:
        raise exc.TransportError(
            f"Unable to listen on {local_addr}:{port} for discovery: {err}"
        ) from err

    try:
        _LOGGER.debug("Sending discovery request to %s:%s", broadcast_addr, port)
        transport.sendto(DISCOVERY_BYTES, (broadcast_addr, port))
        await asyncio.sleep(timeout)  # now wait for any cubes to answer
    finally:
        transport.close()

    return protocol.cubes
