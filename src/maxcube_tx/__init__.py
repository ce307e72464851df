#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

The lower layer: the line codec, the session (TCP) and discovery (UDP).
"""

from __future__ import annotations

from .command import Command
from .const import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_SETTLE_DELAY,
    DISCOVERY_PORT,
    ConfigKind,
    DevType,
    Mode,
    SessionState,
)
from .discovery import DiscoveredCube, discover
from .helpers import parse_duration, round_to_half_hour
from .logger import set_line_logging
from .message import LINE_LOGGER, Message
from .reader import ByteReader
from .session import CubeSession
from .version import VERSION

__all__ = [
    "VERSION",
    #
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_PORT",
    "DEFAULT_READ_TIMEOUT",
    "DEFAULT_SETTLE_DELAY",
    "DISCOVERY_PORT",
    "LINE_LOGGER",
    #
    "ByteReader",
    "Command",
    "ConfigKind",
    "CubeSession",
    "DevType",
    "DiscoveredCube",
    "Message",
    "Mode",
    "SessionState",
    #
    "discover",
    "parse_duration",
    "round_to_half_hour",
    "set_line_logging",
]
