#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Schema processor for the session (lower) layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Final, TypedDict

import voluptuous as vol

from .const import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_SETTLE_DELAY,
    MAX_READ_TIMEOUT,
)

_LOGGER = logging.getLogger(__name__)


#
# 1/2: Session configuration
SZ_CONNECT_TIMEOUT: Final = "connect_timeout"
SZ_LEGACY_QUIT_FRAME: Final = "legacy_quit_frame"
SZ_PORT: Final = "port"
SZ_READ_TIMEOUT: Final = "read_timeout"
SZ_SESSION: Final = "session"
SZ_SETTLE_DELAY: Final = "settle_delay"


SCH_SESSION_DICT = {  # without the compat flag (see: SZ_LEGACY_QUIT_FRAME)
    vol.Optional(SZ_PORT, default=DEFAULT_PORT): vol.All(
        int, vol.Range(min=1, max=65535)
    ),
    vol.Optional(SZ_CONNECT_TIMEOUT, default=DEFAULT_CONNECT_TIMEOUT): vol.All(
        vol.Coerce(float), vol.Range(min=0.1, max=MAX_READ_TIMEOUT)
    ),
    vol.Optional(SZ_READ_TIMEOUT, default=DEFAULT_READ_TIMEOUT): vol.All(
        vol.Coerce(float), vol.Range(min=0.1, max=MAX_READ_TIMEOUT)
    ),
    vol.Optional(SZ_SETTLE_DELAY, default=DEFAULT_SETTLE_DELAY): vol.All(
        vol.Coerce(float), vol.Range(min=0, max=10)
    ),
}

SCH_SESSION_CONFIG = vol.Schema(
    {
        **SCH_SESSION_DICT,
        vol.Optional(SZ_LEGACY_QUIT_FRAME, default=False): bool,
    },
    extra=vol.PREVENT_EXTRA,
)


#
# 2/2: Line log configuration
SZ_FILE_NAME: Final = "file_name"
SZ_LINE_LOG: Final = "line_log"
SZ_ROTATE_BACKUPS: Final = "rotate_backups"
SZ_ROTATE_BYTES: Final = "rotate_bytes"


class LineLogConfigT(TypedDict):
    file_name: str
    rotate_backups: int
    rotate_bytes: int | None


def sch_line_log_dict_factory(
    default_backups: int = 0,
) -> dict[vol.Required, vol.Any]:
    """Return a line log dict with a configurable default rotation policy.

    usage:

    SCH_LINE_LOG_7 = vol.Schema(
        sch_line_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
    )
    """

    SCH_LINE_LOG_CONFIG = vol.Schema(
        {
            vol.Optional(SZ_ROTATE_BACKUPS, default=default_backups): vol.Any(
                None, int
            ),
            vol.Optional(SZ_ROTATE_BYTES, default=None): vol.Any(None, int),
        },
        extra=vol.PREVENT_EXTRA,
    )

    SCH_LINE_LOG_NAME = str

    def NormaliseLineLog(rotate_backups: int = 0) -> Callable[..., Any]:
        def normalise_line_log(node_value: str | LineLogConfigT) -> LineLogConfigT:
            if isinstance(node_value, str):
                return {
                    SZ_FILE_NAME: node_value,
                    SZ_ROTATE_BACKUPS: rotate_backups,
                    SZ_ROTATE_BYTES: None,
                }
            return node_value

        return normalise_line_log

    return {  # SCH_LINE_LOG_DICT
        vol.Required(SZ_LINE_LOG, default=None): vol.Any(
            None,
            vol.All(
                SCH_LINE_LOG_NAME,
                NormaliseLineLog(rotate_backups=default_backups),
            ),
            SCH_LINE_LOG_CONFIG.extend({vol.Required(SZ_FILE_NAME): SCH_LINE_LOG_NAME}),
        )
    }


SCH_LINE_LOG = vol.Schema(
    sch_line_log_dict_factory(default_backups=7), extra=vol.PREVENT_EXTRA
)
