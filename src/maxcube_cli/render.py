#!/usr/bin/env python3
"""A CLI for the maxcube library - render a cube's topology as plain-text tables."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from maxcube import Gateway, Room
from maxcube.exceptions import NoThermostat
from maxcube_tx.const import Mode

CUBE_HEADERS: Final = ("id", "date", "firmware")
ROOM_HEADERS: Final = (
    "Id",
    "Room",
    "Temp",
    "Window open",
    "Valve %",
    "Low battery",
    "Mode",
)

NO_VALUE: Final = "-"


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Return a table, with a border around each cell.

    The output has two lines per row, plus three for the header.
    """

    widths = [len(h) for h in headers]
    for row in rows:
        widths = [max(w, len(c)) for w, c in zip(widths, row, strict=True)]

    def border(char: str = "-") -> str:
        return "+" + "+".join(char * (w + 2) for w in widths) + "+"

    def cells(values: Sequence[str]) -> str:
        return "|" + "|".join(f" {v:<{w}} " for v, w in zip(values, widths)) + "|"

    lines = [border(), cells(headers), border("=")]
    for row in rows:
        lines += [cells(row), border()]
    return "\n".join(lines)


def _fmt_temp(value: float | None) -> str:
    if value is None:
        return NO_VALUE
    return f"{value:.1f}".removesuffix(".0")


def _fmt_bool(value: bool) -> str:
    return str(value).lower()


def _fmt_mode(room: Room) -> str:
    try:
        thermostat = room.thermostat
    except NoThermostat:
        return NO_VALUE

    if thermostat.mode == Mode.VACATION:
        end_time = thermostat.end_time.isoformat() if thermostat.end_time else ""
        return f"{Mode.VACATION.upper()} {end_time}".rstrip()
    return thermostat.mode.upper()


def room_row(room: Room) -> list[str]:
    return [
        str(room.id),
        room.name,
        _fmt_temp(room.current_temp),
        _fmt_bool(room.window_open),
        NO_VALUE if room.valve_position is None else str(room.valve_position),
        _fmt_bool(room.low_battery),
        _fmt_mode(room),
    ]


def render_gateway(gwy: Gateway) -> str:
    """Return the cube's details (a one-row table), followed by its rooms."""

    cube = render_table(
        CUBE_HEADERS,
        [
            [
                gwy.serial,
                gwy.datetime.isoformat(timespec="minutes"),
                gwy.firmware_version,
            ]
        ],
    )
    rooms = render_table(ROOM_HEADERS, [room_row(r) for r in gwy.rooms])
    return f"{cube}\n{rooms}"
