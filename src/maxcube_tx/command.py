#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Construct a command (a line that is to be sent).
"""

from __future__ import annotations

import base64
import logging
from datetime import datetime as dt

from . import exceptions as exc
from .const import (
    CRLF,
    GATEWAY_RF_ADDR,
    LEGACY_QUIT_FRAME,
    MAX_SETPOINT,
    MIN_SETPOINT,
    MODE_BITS_BOOST,
    MODE_BITS_MANUAL,
    MODE_BITS_VACATION,
    Q_,
    SET_TEMP_PREFIX,
    Mode,
    s_,
)
from .helpers import (
    date_until_to_bytes,
    rf_address_to_bytes,
    round_to_half_hour,
    temp_to_byte,
)

_LOGGER = logging.getLogger(__name__)


def _room_id_to_bytes(room_id: int) -> bytes:
    if not isinstance(room_id, int) or not 0 <= room_id <= 0xFF:
        raise exc.CommandInvalid(f"Invalid room id (not a byte): {room_id!r}")
    return bytes((room_id,))


def _check_setpoint(temperature: float) -> float:
    try:
        in_range = MIN_SETPOINT <= temperature <= MAX_SETPOINT
    except TypeError as err:  # e.g. a str, or None
        raise exc.CommandInvalid(f"Invalid temperature: {temperature!r}") from err

    if not in_range:
        raise exc.CommandInvalid(
            f"Invalid temperature: {temperature} "
            f"(should be between {MIN_SETPOINT} and {MAX_SETPOINT})"
        )
    return temperature


class Command:
    """The Command class (lines to be sent to the cube).

    A command is a tagged line: s: (send an RF frame, base64-encoded) or q: (quit).
    """

    def __init__(
        self,
        tag: str,
        payload: bytes = b"",
        *,
        mode: Mode | None = None,
        rf_address: int | None = None,
        room_id: int | None = None,
    ) -> None:
        """Create a command from its tag and its (unencoded) payload."""

        self.tag = tag
        self.payload = payload

        self.mode = mode
        self.rf_address = rf_address
        self.room_id = room_id

        self._frame = tag + base64.b64encode(payload).decode("ascii")
        self._eol = CRLF

    def __repr__(self) -> str:
        """Return an unambiguous string representation of this object."""
        # e.g.: s:AARAAAAAD9rtAaadCwQ= # vacation 0fdaed/1
        if self.rf_address is None:
            return self._frame
        return f"{self._frame} # {self.mode} {self.rf_address:06x}/{self.room_id}"

    def __str__(self) -> str:
        """Return the command as it is sent (less its line ending)."""
        return self._frame

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Command):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def to_bytes(self) -> bytes:
        """Return the command as it is written to the socket."""
        return f"{self._frame}{self._eol}".encode("ascii")

    @classmethod  # generic constructor for s: (set temperature)
    def _from_attrs(
        cls,
        rf_address: int | str,
        room_id: int,
        mode_temp: int,
        mode: Mode,
        *,
        until: bytes = b"",
    ) -> Command:
        """Create a set-temperature command.

        The frame is: 00 04 40, the from address (000000), the to address (the
        thermostat), the room id, then the mode/temperature byte, and optionally
        the end time (for vacation mode only).
        """

        payload = (
            SET_TEMP_PREFIX
            + GATEWAY_RF_ADDR.to_bytes(3, "big")
            + rf_address_to_bytes(rf_address)
            + _room_id_to_bytes(room_id)
            + bytes((mode_temp,))
            + until
        )

        return cls(
            s_, payload, mode=mode, rf_address=int(rf_address), room_id=room_id
        )

    @classmethod  # constructor for s: (boost)
    def set_boost(cls, rf_address: int | str, room_id: int) -> Command:
        """Constructor to put a thermostat into boost mode (its default duration)."""

        return cls._from_attrs(rf_address, room_id, MODE_BITS_BOOST, Mode.BOOST)

    @classmethod  # constructor for s: (manual)
    def set_temperature(
        cls, rf_address: int | str, room_id: int, temperature: float
    ) -> Command:
        """Constructor to set a thermostat to a (permanent) manual setpoint.

        The temperature must be a multiple of 0.5, from 0 to 31 (inclusive).
        """

        value = temp_to_byte(_check_setpoint(temperature))
        return cls._from_attrs(
            rf_address, room_id, MODE_BITS_MANUAL + value, Mode.MANUAL
        )

    @classmethod  # constructor for s: (vacation)
    def set_holiday(
        cls,
        rf_address: int | str,
        room_id: int,
        until: dt,
        temperature: float,
    ) -> Command:
        """Constructor to set a thermostat to a setpoint, until an end time.

        The end time is rounded up to the next half hour.
        """

        value = temp_to_byte(_check_setpoint(temperature))
        end_time = round_to_half_hour(until)

        _LOGGER.debug("Rounded the end time from %s to %s", until, end_time)

        return cls._from_attrs(
            rf_address,
            room_id,
            MODE_BITS_VACATION + value,
            Mode.VACATION,
            until=date_until_to_bytes(end_time),
        )

    @classmethod  # constructor for q:
    def quit(cls, legacy: bool = False) -> Command:
        """Constructor to end the session (the cube will then close the socket)."""

        cmd = cls(Q_)
        if legacy:  # the line ending is the literal text: /r/n
            cmd._frame = LEGACY_QUIT_FRAME.decode("ascii")
            cmd._eol = ""
        return cmd
