#!/usr/bin/env python3
"""MAX! Cube - Test the construction of commands."""

from datetime import datetime as dt
from typing import Any

import pytest

from maxcube_tx import Command, Mode, exceptions as exc

RF_ADDR = 1039085  # 0fdaed
ROOM_ID = 1


def test_set_holiday() -> None:
    cmd = Command.set_holiday(RF_ADDR, ROOM_ID, dt(2011, 8, 29, 1, 59), 19)

    assert str(cmd) == "s:AARAAAAAD9rtAaadCwQ="
    assert cmd.to_bytes() == b"s:AARAAAAAD9rtAaadCwQ=\r\n"
    assert cmd.mode == Mode.VACATION
    assert repr(cmd) == "s:AARAAAAAD9rtAaadCwQ= # vacation 0fdaed/1"


def test_set_holiday_rounds_up() -> None:
    """An end time is rounded up to the next half hour before it is encoded."""

    cmd_0 = Command.set_holiday(RF_ADDR, ROOM_ID, dt(2011, 8, 29, 1, 31), 19)
    cmd_1 = Command.set_holiday(RF_ADDR, ROOM_ID, dt(2011, 8, 29, 2, 0), 19)

    assert cmd_0 == cmd_1
    assert cmd_0.payload[-3:] == bytes([0x9D, 0x0B, 0x04])


def test_set_boost() -> None:
    cmd = Command.set_boost(RF_ADDR, ROOM_ID)

    assert str(cmd) == "s:AARAAAAAD9rtAcA="
    assert cmd.payload[-1] == 0xC0
    assert cmd.mode == Mode.BOOST
    assert cmd.rf_address == RF_ADDR
    assert cmd.room_id == ROOM_ID


def test_set_temperature() -> None:
    cmd = Command.set_temperature(RF_ADDR, ROOM_ID, 21.5)

    assert str(cmd) == "s:AARAAAAAD9rtAWs="
    assert cmd.payload[-1] == 0x40 + 43
    assert cmd.mode == Mode.MANUAL


def test_payload_layout() -> None:
    cmd = Command.set_boost("759698", 3)

    assert cmd.payload[:3] == bytes([0x00, 0x04, 0x40])
    assert cmd.payload[3:6] == b"\x00\x00\x00"  # from: the cube
    assert cmd.payload[6:9] == bytes([0x0B, 0x97, 0x92])
    assert cmd.payload[9] == 3


@pytest.mark.parametrize("temp", [-0.5, 31.5, 40, 21.3])
def test_set_temperature_invalid(temp: float) -> None:
    with pytest.raises(exc.CommandInvalid):
        Command.set_temperature(RF_ADDR, ROOM_ID, temp)
    with pytest.raises(exc.CommandInvalid):
        Command.set_holiday(RF_ADDR, ROOM_ID, dt(2020, 1, 1), temp)


@pytest.mark.parametrize("temp", ["19", None, [19]])
def test_set_temperature_not_a_number(temp: Any) -> None:
    with pytest.raises(exc.CommandInvalid):
        Command.set_temperature(RF_ADDR, ROOM_ID, temp)
    with pytest.raises(exc.CommandInvalid):
        Command.set_holiday(RF_ADDR, ROOM_ID, dt(2020, 1, 1), temp)


def test_command_invalid_args() -> None:
    with pytest.raises(exc.CommandInvalid):
        Command.set_boost(1 << 24, ROOM_ID)
    with pytest.raises(exc.CommandInvalid):
        Command.set_boost(RF_ADDR, 256)
    with pytest.raises(exc.CommandInvalid):
        Command.set_holiday(RF_ADDR, ROOM_ID, None, 19)  # type: ignore[arg-type]
    with pytest.raises(exc.CommandInvalid):
        Command.set_holiday(RF_ADDR, ROOM_ID, dt(2040, 1, 1), 19)


def test_quit() -> None:
    assert Command.quit().to_bytes() == b"q:\r\n"
    assert Command.quit(legacy=True).to_bytes() == b"q:/r/n"

    assert Command.quit() != Command.quit(legacy=True)
    assert repr(Command.quit()) == "q:"
