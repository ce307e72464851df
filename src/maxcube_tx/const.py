#!/usr/bin/env python3
"""MAX! Cube - constants of the line protocol, its timings and its enums."""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Final

# used by the session (TCP)...
DEFAULT_PORT: Final[int] = 62910
DEFAULT_CONNECT_TIMEOUT: Final[float] = 2.0  # seconds, to open the socket
DEFAULT_READ_TIMEOUT: Final[float] = 3.0  # seconds, for each line read
DEFAULT_SETTLE_DELAY: Final[float] = 1.0  # seconds, for the cube to relay an RF cmd

MAX_READ_TIMEOUT: Final[float] = 60.0  # e.g. when waiting for a pairing

# used by discovery (UDP)...
DISCOVERY_PORT: Final[int] = 23272
DISCOVERY_ADDR: Final = "255.255.255.255"
DISCOVERY_BYTES: Final[bytes] = b"eQ3Max*.**********I"
DEFAULT_DISCOVERY_TIMEOUT: Final[float] = 2.0

# the two-character line tags
H_: Final = "H:"  # header (hello), first line of the burst
M_: Final = "M:"  # metadata: rooms & devices
C_: Final = "C:"  # configuration, one line per device
L_: Final = "L:"  # device list (status), last line of the burst
S_: Final = "S:"  # response to a s: command
Q_: Final = "q:"  # quit (outbound)
s_: Final = "s:"  # send (outbound)

LINE_TAGS: Final[tuple[str, ...]] = (H_, M_, C_, L_, S_)

CRLF: Final = "\r\n"
QUIT_FRAME: Final[bytes] = b"q:\r\n"
LEGACY_QUIT_FRAME: Final[bytes] = b"q:/r/n"  # as sent by some older clients

# used by the codec...
SERIAL_LEN: Final[int] = 10
TEMP_OFFSET_BIAS: Final[float] = 3.5
MAX_SETPOINT: Final[float] = 31.0  # the temperature field has only 6 bits (x2)
MIN_SETPOINT: Final[float] = 0.0
MAX_HALF_HOURS: Final[int] = 48
BASE_YEAR: Final[int] = 2000

# the mode/temperature byte of a set-temperature frame (top 2 bits are the mode)
MODE_BITS_AUTO: Final[int] = 0x00
MODE_BITS_MANUAL: Final[int] = 0x40
MODE_BITS_VACATION: Final[int] = 0x80
MODE_BITS_BOOST: Final[int] = 0xC0

SET_TEMP_PREFIX: Final[bytes] = bytes((0x00, 0x04, 0x40))  # unknown, rf flags, cmd
GATEWAY_RF_ADDR: Final[int] = 0x000000  # the 'from' address of set-temperature

# keys of the dicts returned by the parsers
SZ_ACCEPTED: Final = "accepted"
SZ_CONFIGURED_TEMP: Final = "configured_temp"
SZ_DATETIME: Final = "datetime"
SZ_DEVICE_TYPE: Final = "device_type"
SZ_DEVICES: Final = "devices"
SZ_DUTY_CYCLE: Final = "duty_cycle"
SZ_FIRMWARE_VERSION: Final = "firmware_version"
SZ_FLAGS_ONE: Final = "flags_one"
SZ_FLAGS_TWO: Final = "flags_two"
SZ_FREE_MEMORY_SLOTS: Final = "free_memory_slots"
SZ_LENGTH: Final = "length"
SZ_MODE: Final = "mode"
SZ_NAME: Final = "name"
SZ_RF_ADDRESS: Final = "rf_address"
SZ_ROOM_ID: Final = "room_id"
SZ_ROOMS: Final = "rooms"
SZ_SERIAL: Final = "serial"
SZ_SETPOINT: Final = "setpoint"
SZ_UNTIL_OR_TEMP: Final = "until_or_temp"
SZ_VALVE_POSITION: Final = "valve_position"

SZ_COMFORT_TEMP: Final = "comfort_temp"
SZ_ECO_TEMP: Final = "eco_temp"
SZ_MAX_SETPOINT: Final = "max_setpoint"
SZ_MIN_SETPOINT: Final = "min_setpoint"
SZ_TEMP_OFFSET: Final = "temp_offset"
SZ_WINDOW_OPEN_TEMP: Final = "window_open_temp"
SZ_WINDOW_OPEN_DURATION: Final = "window_open_duration"
SZ_BOOST_DURATION: Final = "boost_duration"
SZ_DECALCIFICATION: Final = "decalcification"
SZ_VALVE_MAXIMUM: Final = "valve_maximum"
SZ_VALVE_OFFSET: Final = "valve_offset"


class DevType(IntEnum):
    """The device type ids, as used by the M: and C: messages."""

    GATEWAY = 0  # the cube itself
    THERMOSTAT = 1  # radiator thermostat
    THERMOSTAT_PLUS = 2  # radiator thermostat+
    WALL_THERMOSTAT = 3
    SHUTTER_CONTACT = 4  # window contact
    PUSH_BUTTON = 5  # eco button
    UNKNOWN = 99

    @property
    def is_thermostat(self) -> bool:
        return self in (
            DevType.THERMOSTAT,
            DevType.THERMOSTAT_PLUS,
            DevType.WALL_THERMOSTAT,
        )

    @property
    def is_valve(self) -> bool:
        """Return True if the device's configuration has a valve block."""
        return self in (DevType.THERMOSTAT, DevType.THERMOSTAT_PLUS)


class Mode(StrEnum):
    """The operating mode of a device, as per the lowest two status bits."""

    AUTO = "auto"  # weekly program
    MANUAL = "manual"
    VACATION = "vacation"  # aka holiday
    BOOST = "boost"

    @classmethod
    def from_flags(cls, flags: int) -> Mode:
        if (flags & 3) == 3:
            return cls.BOOST
        if (flags & 2) == 2:
            return cls.VACATION
        if (flags & 1) == 1:
            return cls.MANUAL
        return cls.AUTO


class ConfigKind(StrEnum):
    GENERIC = "generic"
    VALVE = "valve"


class SessionState(StrEnum):
    """The externally visible name of each state of the session FSM."""

    INACTIVE = "inactive"  # disconnected
    AWAITING_HEADER = "awaiting_header"  # connected
    STREAMING = "streaming_status"
    IDLE = "ready"
    WANT_ACK = "awaiting_ack"
    CLOSED = "closed"
