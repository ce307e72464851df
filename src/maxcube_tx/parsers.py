#!/usr/bin/env python3
"""MAX! Cube - line payload processors.

Each parser converts the payload of one line (i.e. the text after its tag) into
a dict. The parsers are stateless: resolving RF addresses to devices/rooms, and
interpreting fields that depend upon the device type, is left to the dispatcher.

Lines have one of two forms:
  H:<csv of hex fields>         S:<csv of hex fields>
  M:<hex>,<hex>,<base64>        C:<rf addr>,<base64>      L:<base64>
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import TYPE_CHECKING, Any

from . import exceptions as exc
from .const import (
    SERIAL_LEN,
    SZ_ACCEPTED,
    SZ_BOOST_DURATION,
    SZ_COMFORT_TEMP,
    SZ_DATETIME,
    SZ_DECALCIFICATION,
    SZ_DEVICE_TYPE,
    SZ_DEVICES,
    SZ_DUTY_CYCLE,
    SZ_ECO_TEMP,
    SZ_FIRMWARE_VERSION,
    SZ_FLAGS_ONE,
    SZ_FLAGS_TWO,
    SZ_FREE_MEMORY_SLOTS,
    SZ_LENGTH,
    SZ_MAX_SETPOINT,
    SZ_MIN_SETPOINT,
    SZ_MODE,
    SZ_NAME,
    SZ_RF_ADDRESS,
    SZ_ROOM_ID,
    SZ_ROOMS,
    SZ_SERIAL,
    SZ_SETPOINT,
    SZ_TEMP_OFFSET,
    SZ_UNTIL_OR_TEMP,
    SZ_VALVE_MAXIMUM,
    SZ_VALVE_OFFSET,
    SZ_VALVE_POSITION,
    SZ_WINDOW_OPEN_DURATION,
    SZ_WINDOW_OPEN_TEMP,
    DevType,
    Mode,
)
from .helpers import (
    hex_to_dtm,
    hex_to_firmware,
    hex_to_int,
    percent_from_byte,
    temp_from_byte,
    temp_offset_from_byte,
)
from .reader import ByteReader

if TYPE_CHECKING:
    from .message import Message


_LOGGER = logging.getLogger(__name__)

_L_MIN_LENGTH = 6  # rf_address(3), unknown(1), flags_two(1), flags_one(1)


def b64_to_bytes(value: str) -> bytes:
    """Decode a base64 string (the padding is optional)."""

    value = value.strip()
    try:
        return base64.b64decode(value + "=" * (-len(value) % 4), validate=True)
    except (binascii.Error, ValueError) as err:
        raise exc.PacketInvalid(f"Invalid base64 payload: {value!r}") from err


def _dev_type(value: int) -> DevType:
    try:
        return DevType(value)
    except ValueError as err:
        raise exc.PacketInvalid(f"Unknown device type id: {value}") from err


def _read_serial(reader: ByteReader) -> str:
    return reader.read_str(SERIAL_LEN)


# header (hello), the first line sent by the cube after a connect
def parser_h(payload: str, msg: Message | None = None) -> dict[str, Any]:
    #  0          1      2    3        4        5  6  7      8    9  10
    # KEQ0537741,0b9792,0113,00000000,78c816bb,01,32,11010f,0d22,03,0000
    #  serial,    rf,    fw,  ?,       conn_id, dc,fm,date,  time,?, ntp

    fields = payload.split(",")
    if len(fields) < 9:
        raise exc.PacketInvalid(f"Invalid header (too few fields): {payload!r}")

    return {
        SZ_SERIAL: fields[0],
        SZ_RF_ADDRESS: hex_to_int(fields[1], "rf address"),
        SZ_FIRMWARE_VERSION: hex_to_firmware(fields[2]),
        SZ_DUTY_CYCLE: hex_to_int(fields[5], "duty cycle"),
        SZ_FREE_MEMORY_SLOTS: hex_to_int(fields[6], "free memory slots"),
        SZ_DATETIME: hex_to_dtm(fields[7], fields[8]),
    }


# metadata: rooms, devices (and which room each device is in)
def parser_m(payload: str, msg: Message | None = None) -> dict[str, Any]:
    reader = ByteReader(b64_to_bytes(payload.split(",")[-1]))
    reader.skip(2)  # unknown

    rooms = []
    for _ in range(reader.read_byte()):
        room_id = reader.read_byte()
        name = reader.read_str(reader.read_byte())
        rooms.append(
            {
                SZ_ROOM_ID: room_id,
                SZ_NAME: name,
                SZ_RF_ADDRESS: reader.read_rf_address(),
            }
        )

    devices = []
    for _ in range(reader.read_byte()):
        dev_type = _dev_type(reader.read_byte())
        rf_addr = reader.read_rf_address()
        serial = _read_serial(reader)
        name = reader.read_str(reader.read_byte())
        devices.append(
            {
                SZ_DEVICE_TYPE: dev_type,
                SZ_RF_ADDRESS: rf_addr,
                SZ_SERIAL: serial,
                SZ_NAME: name,
                SZ_ROOM_ID: reader.read_byte(),
            }
        )

    reader.skip(1)  # unknown
    return {SZ_ROOMS: rooms, SZ_DEVICES: devices}


# configuration, one per device (incl. the cube itself)
def parser_c(payload: str, msg: Message | None = None) -> dict[str, Any]:
    reader = ByteReader(b64_to_bytes(payload.split(",")[-1]))

    length = reader.read_byte()
    rf_addr = reader.read_rf_address()
    dev_type = _dev_type(reader.read_byte())
    reader.skip(3)  # unknown

    result: dict[str, Any] = {
        SZ_DEVICE_TYPE: dev_type,
        SZ_RF_ADDRESS: rf_addr,
        SZ_SERIAL: _read_serial(reader),
    }

    if dev_type.is_valve:
        result |= {
            SZ_COMFORT_TEMP: temp_from_byte(reader.read_byte()),
            SZ_ECO_TEMP: temp_from_byte(reader.read_byte()),
            SZ_MAX_SETPOINT: temp_from_byte(reader.read_byte()),
            SZ_MIN_SETPOINT: temp_from_byte(reader.read_byte()),
            SZ_TEMP_OFFSET: temp_offset_from_byte(reader.read_byte()),
            SZ_WINDOW_OPEN_TEMP: temp_from_byte(reader.read_byte()),
            SZ_WINDOW_OPEN_DURATION: reader.read_byte(),
            SZ_BOOST_DURATION: reader.read_byte(),
            SZ_DECALCIFICATION: reader.read_byte(),
            SZ_VALVE_MAXIMUM: percent_from_byte(reader.read_byte()),
            SZ_VALVE_OFFSET: percent_from_byte(reader.read_byte()),
        }
        reader.skip_rest()  # TODO: decode the weekly program (always 182 bytes)

    elif dev_type == DevType.GATEWAY:
        reader.skip_rest()  # TODO: decode the cube's own configuration

    if reader.remaining:
        raise exc.PacketInvalid(
            f"Device of type {dev_type.name} claims a length of {length} "
            f"and has {reader.remaining} unread bytes"
        )
    return result


# device list: the status of each device, as length-prefixed submessages
def parser_l(payload: str, msg: Message | None = None) -> dict[str, Any]:
    reader = ByteReader(b64_to_bytes(payload))

    devices = []
    while reader.remaining:
        length = reader.read_byte()
        if length < _L_MIN_LENGTH:
            raise exc.PacketInvalid(f"Invalid submessage length: {length}")
        devices.append(_parser_l_submessage(length, reader.sub_reader(length)))

    return {SZ_DEVICES: devices}


def _parser_l_submessage(length: int, reader: ByteReader) -> dict[str, Any]:
    #  0 1  2  3  4  5  6  7  8  9  10    (after the length byte)
    # 0e 5c bb 09 12 18 19 2a 00 d7 00
    # rf_addr  ?  f2 f1 vp sp date_or_temp

    rf_addr = reader.read_rf_address()
    reader.skip(1)  # unknown
    flags_two = reader.read_byte()
    flags_one = reader.read_byte()

    result: dict[str, Any] = {
        SZ_LENGTH: length,
        SZ_RF_ADDRESS: rf_addr,
        SZ_FLAGS_TWO: flags_two,
        SZ_FLAGS_ONE: flags_one,
        SZ_MODE: Mode.from_flags(flags_one),
    }

    if length <= _L_MIN_LENGTH:
        return result

    result[SZ_VALVE_POSITION] = reader.read_byte()
    result[SZ_SETPOINT] = temp_from_byte(reader.read_byte())

    if reader.remaining >= 3:  # the rest (e.g. a wall thermostat's temp) is ignored
        result[SZ_UNTIL_OR_TEMP] = reader.read_bytes(3)

    return result


# response to a s: command
def parser_s(payload: str, msg: Message | None = None) -> dict[str, Any]:
    # A2,0,34
    # duty_cycle, result (0 is success), free_memory_slots

    fields = payload.strip().split(",", 2)
    if len(fields) != 3:
        raise exc.PacketInvalid(f"Invalid response (expecting 3 fields): {payload!r}")

    return {
        SZ_DUTY_CYCLE: hex_to_int(fields[0], "duty cycle"),
        SZ_ACCEPTED: fields[1] == "0",
        SZ_FREE_MEMORY_SLOTS: hex_to_int(fields[2], "free memory slots"),
    }


_LINE_PARSERS = {
    f"{k[7:].upper()}:": v
    for k, v in locals().items()
    if callable(v) and k.startswith("parser_") and len(k) == 8
}


def parse_payload(tag: str, payload: str, msg: Message | None = None) -> dict | None:
    """Return the decoded payload of a line, or None if its tag is unknown."""

    if (parser := _LINE_PARSERS.get(tag)) is None:
        _LOGGER.debug("No parser for tag %s (will be ignored): %s", tag, payload)
        return None
    return parser(payload, msg)
