#!/usr/bin/env python3
"""MAX! Cube - a session with a cube (a single TCP connection).

A session consumes the cube's initial burst of lines (H:, M:, C:..., L:), after
which it can send one command at a time, each with a response (S:), until closed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any

from . import exceptions as exc
from .command import Command
from .const import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_SETTLE_DELAY,
    SZ_ACCEPTED,
    SessionState,
)
from .helpers import dt_now
from .message import LINE_LOGGER, Message
from .session_fsm import Inactive, SessionContext

MsgHandlerT = Callable[[Message], Any]

_LOGGER = logging.getLogger(__name__)


class CubeSession:
    """A session with a cube: connect, (optionally) send commands, then close."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        *,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        legacy_quit_frame: bool = False,
        msg_handler: MsgHandlerT | None = None,
    ) -> None:
        self.host = host
        self.port = port

        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.settle_delay = settle_delay
        self._legacy_quit_frame = legacy_quit_frame

        self._msg_handler = msg_handler

        self._context = SessionContext()

        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None

        self.header: Message | None = None

    def __repr__(self) -> str:
        return f"CubeSession({self.host}:{self.port}, state={self.state})"

    async def __aenter__(self) -> CubeSession:
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
    def state(self) -> SessionState:
        return self._context.state_name

    @property
    def is_ready(self) -> bool:
        return self._context.is_ready

    async def connect(self) -> Message:
        """Open the connection and consume the initial burst of lines.

        Each line is passed to the message handler (if any). Returns the header.
        """

        if not isinstance(self._context.state, Inactive):
            raise exc.ProtocolFsmError(f"Invalid state to connect: {self._context}")

        try:
            self._reader, self._writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.connect_timeout,
            )
        except TimeoutError as err:
            self._context.session_closed()
            raise exc.TransportTimeout(
                f"Unable to connect to {self.host}:{self.port} "
                f"within {self.connect_timeout} secs"
            ) from err
        except OSError as err:
            self._context.session_closed()
            raise exc.TransportError(
                f"Unable to connect to {self.host}:{self.port}: {err}"
            ) from err

        _LOGGER.info("Connected to the cube at %s:%s", self.host, self.port)
        self._context.connection_made()

        try:
            self.header = await self._read_status()
        except BaseException:  # incl. CancelledError
            await self._close_transport()
            raise

        return self.header

    async def _read_status(self) -> Message:
        """Read lines until the device list (L:) has been consumed."""

        header: Message | None = None

        while not self._context.is_ready:
            if (line := await self._readline()) is None:
                self._context.connection_lost()
                raise exc.TransportError(
                    f"Connection closed by the cube before the status was complete "
                    f"(state was: {self._context.state!r})"
                )

            msg = Message.from_line(line)
            self._context.line_rcvd(msg)  # may raise PacketInvalid, if not a header

            if header is None:
                header = msg
            if self._msg_handler:
                self._msg_handler(msg)

        assert header is not None  # mypy hint
        return header

    async def send_cmd(self, cmd: Command) -> bool:
        """Send a command and return True if the cube accepted it.

        Returns False if the cube closed the connection instead of responding (the
        session is then closed). A read timeout will also close the session.
        """

        self._context.cmd_sent(cmd)  # may raise ProtocolFsmError
        assert self._writer is not None  # mypy hint

        try:
            await self._write(cmd)
            await asyncio.sleep(self.settle_delay)  # for the cube to relay the cmd
            line = await self._readline()

        except exc.TransportError:
            await self._close_transport()
            raise

        if line is None:
            _LOGGER.warning("%s < Connection closed by the cube (no response)", cmd)
            await self._close_transport()
            return False

        try:
            msg = Message.from_line(line)
            self._context.line_rcvd(msg)
        except exc.MaxCubeException:
            await self._close_transport()
            raise

        assert msg.payload is not None  # mypy hint
        accepted: bool = msg.payload[SZ_ACCEPTED]
        if not accepted:
            _LOGGER.warning("%s < Command was not accepted by the cube", cmd)
        return accepted

    async def close(self) -> None:
        """Send the quit command, and close the connection. Will not raise."""

        if self._context.is_closed:
            return

        if self._writer is not None and not self._writer.is_closing():
            try:
                await self._write(Command.quit(legacy=self._legacy_quit_frame))
            except exc.TransportError as err:
                _LOGGER.debug("Unable to send the quit command: %s", err)

        await self._close_transport()

    async def _close_transport(self) -> None:
        """Release the connection; the session is then closed."""

        self._context.session_closed()

        if self._writer is None:
            return

        writer, self._writer, self._reader = self._writer, None, None
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as err:  # e.g. ConnectionResetError
            _LOGGER.debug("Error when closing the connection: %s", err)

        _LOGGER.info("Disconnected from the cube at %s:%s", self.host, self.port)

    async def _readline(self) -> str | None:
        """Return the next line (less its line ending), or None if EOF."""

        assert self._reader is not None  # mypy hint

        try:
            raw = await asyncio.wait_for(
                self._reader.readline(), timeout=self.read_timeout
            )
        except TimeoutError as err:
            raise exc.TransportTimeout(
                f"No line received within {self.read_timeout} secs: {self._context}"
            ) from err
        except (OSError, ValueError) as err:  # ValueError: line exceeds the limit
            raise exc.TransportError(f"Unable to read a line: {err}") from err

        if not raw:
            return None
        return raw.decode("utf-8", errors="replace").rstrip("\r\n")

    async def _write(self, cmd: Command) -> None:
        assert self._writer is not None  # mypy hint

        LINE_LOGGER.info(
            "", extra={"_line": str(cmd), "_dir": ">>", "dtm": dt_now()}
        )
        try:
            self._writer.write(cmd.to_bytes())
            await self._writer.drain()
        except OSError as err:
            raise exc.TransportError(f"Unable to write {cmd!r}: {err}") from err
