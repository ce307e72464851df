#!/usr/bin/env python3
"""MAX! Cube - Protocol/Transport layer - Helper functions."""

from __future__ import annotations

import re
from datetime import datetime as dt, timedelta as td
from typing import Final

from . import exceptions as exc
from .const import BASE_YEAR, MAX_HALF_HOURS, TEMP_OFFSET_BIAS, Mode

_RF_ADDR_MAX: Final[int] = 1 << 24

_DURATION_REGEX: Final = re.compile(r"^\s*(\d+)\s*([smhd])\s*$")
_DURATION_UNITS: Final[dict[str, str]] = {
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def dt_now() -> dt:
    """Return the current datetime as a local/naive datetime object."""
    return dt.now().replace(microsecond=0)


def hex_to_int(value: str, name: str = "field") -> int:
    """Return the integer of a hex string, or raise a PacketInvalid."""
    try:
        return int(value, 16)
    except (TypeError, ValueError) as err:
        raise exc.PacketInvalid(f"Invalid {name} (not hex): {value!r}") from err


def hex_to_firmware(value: str) -> str:
    """Convert a hex firmware code into a dotted string (e.g. 0113 -> 1.1.3).

    One leading zero is stripped, then each remaining hex digit becomes one
    (decimal) component of the version.
    """

    code = value[1:] if value.startswith("0") else value
    if not code:
        raise exc.PacketInvalid(f"Invalid firmware version: {value!r}")
    return ".".join(str(hex_to_int(c, "firmware version")) for c in code)


def hex_to_dtm(date_str: str, time_str: str) -> dt:
    """Convert the header's yymmdd/hhmm hex fields into a datetime."""

    if len(date_str) < 6 or len(time_str) < 4:
        raise exc.PacketInvalid(f"Invalid date/time: {date_str},{time_str}")

    try:
        return dt(
            year=BASE_YEAR + hex_to_int(date_str[:2], "year"),
            month=hex_to_int(date_str[2:4], "month"),
            day=hex_to_int(date_str[4:6], "day"),
            hour=hex_to_int(time_str[:2], "hour"),
            minute=hex_to_int(time_str[2:4], "minute"),
        )
    except ValueError as err:  # e.g. month == 0
        raise exc.PacketInvalid(f"Invalid date/time: {date_str},{time_str}") from err


def rf_address_to_bytes(value: int | str) -> bytes:
    """Convert an RF address (an int, or a decimal string) to 3 bytes."""

    try:
        rf_addr = int(value)
    except (TypeError, ValueError) as err:
        raise exc.CommandInvalid(f"Invalid RF address: {value!r}") from err

    if not 0 <= rf_addr < _RF_ADDR_MAX:
        raise exc.CommandInvalid(f"Invalid RF address (not 24-bit): {value!r}")
    return rf_addr.to_bytes(3, "big")


def rf_address_from_bytes(value: bytes) -> int:
    if len(value) != 3:
        raise exc.PacketInvalid(f"Invalid RF address (not 3 bytes): {value.hex()}")
    return int.from_bytes(value, "big")


def rf_address_to_hex(rf_addr: int) -> str:
    return f"{rf_addr:06x}"


def round_to_half_hour(dtm: dt | None) -> dt:
    """Round an end time up to the next half hour.

    A time of hh:30 or later becomes the next full hour, else it becomes hh:30.
    An exact hh:00 is moved on to hh:30 (the cube's resolution is 30 mins).
    """

    if dtm is None:
        raise exc.CommandInvalid("The end time must not be None")

    dtm = dtm.replace(second=0, microsecond=0)
    if dtm.minute >= 30:
        return dtm + td(minutes=60 - dtm.minute)
    return dtm + td(minutes=30 - dtm.minute)


def date_until_to_bytes(dtm: dt) -> bytes:
    """Pack a datetime into the 3-byte date-until format.

    byte0: month (bits 3-1) in bits 7-5, day in bits 4-0
    byte1: month (bit 0) in bit 7, year - 2000 in bits 4-0
    byte2: the number of half-hours since midnight
    """

    if not BASE_YEAR <= dtm.year < BASE_YEAR + 32:
        raise exc.CommandInvalid(f"Invalid end time (year out of range): {dtm}")
    if dtm.minute not in (0, 30) or dtm.second or dtm.microsecond:
        raise exc.CommandInvalid(f"Invalid end time (not a half hour): {dtm}")

    return bytes(
        (
            (dtm.month >> 1) << 5 | dtm.day,
            (dtm.month & 1) << 7 | (dtm.year - BASE_YEAR),
            dtm.hour * 2 + (dtm.minute == 30),
        )
    )


def date_until_from_bytes(value: bytes) -> dt:
    """Unpack the 3-byte date-until format into a datetime (see above)."""

    if len(value) != 3:
        raise exc.PacketInvalid(f"Invalid date-until (not 3 bytes): {value.hex()}")

    b0, b1, half_hours = value
    if half_hours > MAX_HALF_HOURS:
        raise exc.PacketInvalid(f"Invalid date-until (half hours): {value.hex()}")

    try:
        date = dt(
            year=(b1 & 0x1F) + BASE_YEAR,
            month=(b0 >> 5 << 1) + (b1 >> 7 & 1),
            day=b0 & 0x1F,
        )
    except ValueError as err:
        raise exc.PacketInvalid(f"Invalid date-until: {value.hex()}") from err

    # 48 half hours is midnight at the end of the day
    return date + td(minutes=half_hours * 30)


def temp_from_byte(value: int) -> float:  # NOTE: half degrees
    return value / 2


def temp_to_byte(value: float, name: str = "temperature") -> int:
    """Convert a temperature into half degrees; it must be a multiple of 0.5."""

    if (value * 2) % 1:
        raise exc.CommandInvalid(f"Invalid {name} (not a multiple of 0.5): {value}")
    return int(value * 2)


def temp_offset_from_byte(value: int) -> float:
    return value / 2 - TEMP_OFFSET_BIAS


def percent_from_byte(value: int) -> float:
    """Convert a byte (0-255) into a percentage (0-100)."""
    return value * 100 / 255


def current_temp_from_bytes(b0: int, b1: int, legacy: bool = True) -> float:
    """Return the measured temperature from its two status bytes.

    The first byte is (apparently) a high bit worth 25.5 degrees. In legacy
    mode, its presence replaces the low byte rather than adding to it.
    """

    if legacy:
        return 25.5 if b0 else b1 / 10
    return (25.5 if b0 else 0.0) + b1 / 10


def low_battery_from_flags(flags_one: int, legacy: bool = True) -> bool:
    if legacy:  # NOTE: (0x80 & x) can never equal 1, so this is always False
        return (flags_one & 0x80) == 1
    return (flags_one & 0x80) != 0


def window_open_from_flags(flags_one: int, legacy: bool = True) -> bool:
    """Return True if a shutter contact's flags say its window is open."""
    if legacy:
        return Mode.from_flags(flags_one) == Mode.VACATION
    return bool(flags_one & 0x02)


def parse_duration(value: str | None) -> td:
    """Convert a duration string, e.g. '90m', '2h', '3d', into a timedelta."""

    if value is None or not value.strip():
        raise ValueError("A duration is required, e.g. 30m, 2h or 3d")

    if not (match := _DURATION_REGEX.match(value)):
        raise ValueError(
            f"Invalid duration: {value!r} (should be <number><unit>, "
            "where the unit is one of s, m, h, d)"
        )
    return td(**{_DURATION_UNITS[match[2]]: int(match[1])})
