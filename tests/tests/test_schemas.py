#!/usr/bin/env python3
"""MAX! Cube - Test the config schemas."""

import pytest
import voluptuous as vol

from maxcube.schemas import SCH_CLIENT_CONFIG, SCH_COMPAT, SZ_COMPAT
from maxcube_tx.const import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_SETTLE_DELAY,
)
from maxcube_tx.schemas import (
    SCH_LINE_LOG,
    SCH_SESSION_CONFIG,
    SZ_FILE_NAME,
    SZ_LINE_LOG,
    SZ_ROTATE_BACKUPS,
    SZ_ROTATE_BYTES,
    SZ_SESSION,
)


def test_session_config_defaults() -> None:
    assert SCH_SESSION_CONFIG({}) == {
        "port": DEFAULT_PORT,
        "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
        "read_timeout": DEFAULT_READ_TIMEOUT,
        "settle_delay": DEFAULT_SETTLE_DELAY,
        "legacy_quit_frame": False,
    }


def test_session_config() -> None:
    config = SCH_SESSION_CONFIG({"port": 1234, "read_timeout": 1, "settle_delay": 0})

    assert config["port"] == 1234
    assert config["read_timeout"] == 1.0
    assert config["settle_delay"] == 0.0


@pytest.mark.parametrize(
    "config",
    [
        {"port": 0},
        {"port": "abc"},
        {"read_timeout": 0},
        {"settle_delay": -1},
        {"rubbish": True},
    ],
)
def test_session_config_invalid(config: dict) -> None:
    with pytest.raises(vol.Invalid):
        SCH_SESSION_CONFIG(config)


def test_compat_defaults() -> None:
    """By default, the observed behaviour of the cube is kept."""

    assert SCH_COMPAT({}) == {
        "legacy_low_battery": True,
        "legacy_current_temp": True,
        "legacy_window_open": True,
        "legacy_quit_frame": False,
    }


def test_line_log() -> None:
    assert SCH_LINE_LOG({}) == {SZ_LINE_LOG: None}

    assert SCH_LINE_LOG({SZ_LINE_LOG: "cube.log"}) == {
        SZ_LINE_LOG: {
            SZ_FILE_NAME: "cube.log",
            SZ_ROTATE_BACKUPS: 7,
            SZ_ROTATE_BYTES: None,
        }
    }

    config = SCH_LINE_LOG(
        {SZ_LINE_LOG: {SZ_FILE_NAME: "cube.log", SZ_ROTATE_BYTES: 1_000_000}}
    )
    assert config[SZ_LINE_LOG][SZ_ROTATE_BACKUPS] == 7
    assert config[SZ_LINE_LOG][SZ_ROTATE_BYTES] == 1_000_000

    with pytest.raises(vol.Invalid):
        SCH_LINE_LOG({SZ_LINE_LOG: {SZ_ROTATE_BYTES: 1_000_000}})


def test_client_config() -> None:
    config = SCH_CLIENT_CONFIG({})

    assert config[SZ_SESSION]["port"] == DEFAULT_PORT
    assert "legacy_quit_frame" not in config[SZ_SESSION]
    assert config[SZ_COMPAT]["legacy_quit_frame"] is False
    assert config[SZ_LINE_LOG] is None

    config = SCH_CLIENT_CONFIG(
        {SZ_LINE_LOG: "cube.log", SZ_COMPAT: {"legacy_window_open": False}}
    )
    assert config[SZ_LINE_LOG][SZ_ROTATE_BACKUPS] == 0
    assert config[SZ_COMPAT]["legacy_window_open"] is False
    assert config[SZ_COMPAT]["legacy_low_battery"] is True

    with pytest.raises(vol.Invalid):  # this flag lives in compat
        SCH_CLIENT_CONFIG({SZ_SESSION: {"legacy_quit_frame": True}})
