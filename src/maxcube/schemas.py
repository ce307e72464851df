#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Schema processor for the client (upper) layer.
"""

from __future__ import annotations

import logging
from typing import Final

import voluptuous as vol

from maxcube_tx.schemas import (
    SCH_SESSION_DICT,
    SZ_CONNECT_TIMEOUT as SZ_CONNECT_TIMEOUT,
    SZ_LEGACY_QUIT_FRAME,
    SZ_LINE_LOG as SZ_LINE_LOG,
    SZ_PORT as SZ_PORT,
    SZ_READ_TIMEOUT as SZ_READ_TIMEOUT,
    SZ_SESSION,
    SZ_SETTLE_DELAY as SZ_SETTLE_DELAY,
    sch_line_log_dict_factory,
)

_LOGGER = logging.getLogger(__name__)


#
# 1/2: Compatibility flags (the default is the observed behaviour of the cube)
SZ_COMPAT: Final = "compat"
SZ_LEGACY_CURRENT_TEMP: Final = "legacy_current_temp"
SZ_LEGACY_LOW_BATTERY: Final = "legacy_low_battery"
SZ_LEGACY_WINDOW_OPEN: Final = "legacy_window_open"


SCH_COMPAT = vol.Schema(
    {
        vol.Optional(SZ_LEGACY_LOW_BATTERY, default=True): bool,
        vol.Optional(SZ_LEGACY_CURRENT_TEMP, default=True): bool,
        vol.Optional(SZ_LEGACY_WINDOW_OPEN, default=True): bool,
        vol.Optional(SZ_LEGACY_QUIT_FRAME, default=False): bool,
    },
    extra=vol.PREVENT_EXTRA,
)


#
# 2/2: Client configuration
SCH_CLIENT_CONFIG = vol.Schema(
    {
        vol.Optional(SZ_SESSION, default={}): vol.Schema(
            SCH_SESSION_DICT, extra=vol.PREVENT_EXTRA
        ),
        vol.Optional(SZ_COMPAT, default={}): SCH_COMPAT,
        **sch_line_log_dict_factory(default_backups=0),
    },
    extra=vol.PREVENT_EXTRA,
)
