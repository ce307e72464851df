#!/usr/bin/env python3
"""MAX! Cube - Route a decoded message to the topology."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any, Final

from maxcube_tx import Message
from maxcube_tx.const import (
    C_,
    H_,
    L_,
    M_,
    SZ_DEVICES,
    SZ_FLAGS_ONE,
    SZ_MODE,
    SZ_RF_ADDRESS,
    SZ_SETPOINT,
    SZ_UNTIL_OR_TEMP,
    SZ_VALVE_POSITION,
    DevType,
    Mode,
)
from maxcube_tx.helpers import (
    current_temp_from_bytes,
    date_until_from_bytes,
    low_battery_from_flags,
    window_open_from_flags,
)

from .schemas import SCH_COMPAT

if TYPE_CHECKING:
    from .builder import TopologyBuilder
    from .gateway import Gateway

#
# NOTE: All debug flags should be False for deployment to end-users
_DBG_FORCE_LOG_MESSAGES: Final[bool] = False  # useful for dev/test

_LOGGER = logging.getLogger(__name__)


__all__ = ["process_msg", "process_status"]


def process_msg(
    builder: TopologyBuilder, msg: Message, compat: SimpleNamespace | None = None
) -> None:
    """Apply a message from the cube's initial burst to the topology (builder).

    The device list (L:) is the last line of the burst: the topology is then built,
    and the status of each device is applied to it.

    Parse/lookup failures are raised, so that the caller can abandon the session.
    """

    if _DBG_FORCE_LOG_MESSAGES:
        _LOGGER.warning(msg)
    else:
        _LOGGER.debug(msg)

    if msg.tag == H_:
        builder.set_header(msg.payload)  # type: ignore[arg-type]

    elif msg.tag == M_:
        builder.set_topology(msg.payload)  # type: ignore[arg-type]

    elif msg.tag == C_:
        builder.add_configuration(msg.payload)  # type: ignore[arg-type]

    elif msg.tag == L_:
        gwy = builder.build()
        for status in msg.payload[SZ_DEVICES]:  # type: ignore[index]
            process_status(gwy, status, compat=compat)

    else:  # e.g. an unknown tag, or a stray S:
        _LOGGER.info("%r < Ignored (not a status line)", msg)


def process_status(
    gwy: Gateway, status: dict[str, Any], compat: SimpleNamespace | None = None
) -> None:
    """Apply the status of a device (an L: submessage) to it, and to its room."""

    if compat is None:
        compat = SimpleNamespace(**SCH_COMPAT({}))

    device = gwy.find_device_by_rf_address(status[SZ_RF_ADDRESS])
    room = gwy.find_room_for_device(device.rf_address)

    flags_one: int = status[SZ_FLAGS_ONE]
    mode: Mode = status[SZ_MODE]

    device.mode = mode
    device.low_battery = low_battery_from_flags(
        flags_one, legacy=compat.legacy_low_battery
    )

    if device.dev_type == DevType.SHUTTER_CONTACT:
        room.window_open = window_open_from_flags(
            flags_one, legacy=compat.legacy_window_open
        )

    if SZ_VALVE_POSITION not in status:  # e.g. a shutter contact (length is 6)
        return

    room.valve_position = status[SZ_VALVE_POSITION]
    room.configured_temp = status[SZ_SETPOINT]

    if not device.is_thermostat or SZ_UNTIL_OR_TEMP not in status:
        return

    b0, b1, _ = status[SZ_UNTIL_OR_TEMP]  # the last byte is (also) the half hours
    if mode == Mode.VACATION:
        device.end_time = date_until_from_bytes(status[SZ_UNTIL_OR_TEMP])
    else:
        room.current_temp = current_temp_from_bytes(
            b0, b1, legacy=compat.legacy_current_temp
        )
