#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

The client: connect to a cube, read its topology, and send commands to its rooms.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime as dt
from types import SimpleNamespace, TracebackType
from typing import Any

from maxcube_tx import LINE_LOGGER, Command, CubeSession, Message, set_line_logging
from maxcube_tx.const import Mode
from maxcube_tx.helpers import round_to_half_hour
from maxcube_tx.schemas import SZ_LEGACY_QUIT_FRAME, SZ_LINE_LOG, SZ_SESSION

from . import exceptions as exc
from .builder import TopologyBuilder
from .dispatcher import process_msg
from .gateway import Gateway
from .room import Room
from .schemas import SCH_CLIENT_CONFIG, SZ_COMPAT

_LOGGER = logging.getLogger(__name__)


class Client:
    """The client class.

    A client has at most one session: its topology is read when it connects, and
    is updated only by the commands that it sends (that the cube accepts).
    """

    def __init__(
        self,
        host: str,
        *,
        config: dict[str, Any] | None = None,
        cc_console: bool = False,
    ) -> None:
        self.host = host

        config = SCH_CLIENT_CONFIG(config or {})
        self.config = SimpleNamespace(**config[SZ_SESSION])
        self.compat = SimpleNamespace(**config[SZ_COMPAT])

        set_line_logging(
            LINE_LOGGER, cc_console=cc_console, **(config[SZ_LINE_LOG] or {})
        )

        self._builder = TopologyBuilder()
        self._session: CubeSession | None = None

    def __repr__(self) -> str:
        return f"Client(host={self.host}, port={self.config.port})"

    async def __aenter__(self) -> Client:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def gateway(self) -> Gateway:
        """Return the topology, or raise a StateViolation if not connected."""

        if (gwy := self._builder.gateway) is None:
            raise exc.StateViolation(f"{self}: Not connected (no topology)")
        return gwy

    @property
    def session(self) -> CubeSession | None:
        return self._session

    def _handle_msg(self, msg: Message) -> None:
        process_msg(self._builder, msg, compat=self.compat)

    async def connect(self) -> Gateway:
        """Connect to the cube, and return its topology."""

        if self._session is not None:
            raise exc.ProtocolFsmError(f"{self}: Already connected")

        self._session = CubeSession(
            self.host,
            self.config.port,
            connect_timeout=self.config.connect_timeout,
            read_timeout=self.config.read_timeout,
            settle_delay=self.config.settle_delay,
            legacy_quit_frame=getattr(self.compat, SZ_LEGACY_QUIT_FRAME),
            msg_handler=self._handle_msg,
        )
        try:
            await self._session.connect()
        except BaseException:  # incl. CancelledError; a retry starts afresh
            self._session = None
            self._builder = TopologyBuilder()
            raise

        return self.gateway

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()

    async def _send_room_cmd(
        self,
        room: int | str,
        cmd_factory: Callable[[int, int], Command],
        on_accepted: Callable[[Room], None],
    ) -> bool:
        """Send a command to the thermostat of a room, and return True if accepted."""

        if self._session is None:
            raise exc.ProtocolFsmError(f"{self}: Not connected")

        this_room = self.gateway.find_room(room)
        thermostat = this_room.thermostat  # may raise NoThermostat

        cmd = cmd_factory(thermostat.rf_address, this_room.id)
        _LOGGER.info("%s: Sending %r to %s", self, cmd, this_room)

        if accepted := await self._session.send_cmd(cmd):
            on_accepted(this_room)
        return accepted

    async def boost(self, room: int | str) -> bool:
        """Put the room's thermostat into boost mode."""

        def on_accepted(this_room: Room) -> None:
            this_room.thermostat.mode = Mode.BOOST

        return await self._send_room_cmd(room, Command.set_boost, on_accepted)

    async def set_temperature(self, room: int | str, temperature: float) -> bool:
        """Set the room to a (permanent) manual setpoint."""

        def on_accepted(this_room: Room) -> None:
            this_room.configured_temp = temperature
            this_room.thermostat.mode = Mode.MANUAL
            this_room.thermostat.end_time = None

        return await self._send_room_cmd(
            room,
            lambda rf, rm: Command.set_temperature(rf, rm, temperature),
            on_accepted,
        )

    async def holiday(self, room: int | str, until: dt, temperature: float) -> bool:
        """Set the room to a setpoint until an end time (rounded up to a half hour)."""

        def on_accepted(this_room: Room) -> None:
            this_room.configured_temp = temperature
            this_room.thermostat.mode = Mode.VACATION
            this_room.thermostat.end_time = round_to_half_hour(until)

        return await self._send_room_cmd(
            room,
            lambda rf, rm: Command.set_holiday(rf, rm, until, temperature),
            on_accepted,
        )
