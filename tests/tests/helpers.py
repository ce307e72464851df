#!/usr/bin/env python3
"""MAX! Cube - helpers for the (offline) tests."""

import logging
from collections.abc import Callable
from datetime import datetime as dt
from pathlib import Path
from typing import Any

from maxcube import Gateway, TopologyBuilder
from maxcube.dispatcher import process_msg
from maxcube_tx import Message

logging.disable(logging.WARNING)  # usu. WARNING


TEST_DIR = Path(__file__).resolve().parent  # TEST_DIR = f"{os.path.dirname(__file__)}"
FIXTURES_DIR = TEST_DIR.parent / "fixtures"

CUBE_SESSION = FIXTURES_DIR / "cube_session.txt"

CUBE_DTM = dt(2017, 1, 15, 13, 34)


def load_lines(file_name: Path = CUBE_SESSION) -> list[str]:
    """Return the lines of a captured session (blank lines are ignored)."""

    with open(file_name, encoding="utf-8") as f:
        return [ln.rstrip("\r\n") for ln in f if ln.strip()]


def load_lines_by_tag(tag: str, file_name: Path = CUBE_SESSION) -> list[str]:
    return [ln for ln in load_lines(file_name) if ln.startswith(tag)]


def load_test_gwy(lines: list[str] | None = None, **kwargs: Any) -> Gateway:
    """Create a topology from the lines of a captured session."""

    builder = TopologyBuilder()
    for line in lines or load_lines():
        process_msg(builder, Message.from_line(line), **kwargs)

    gwy = builder.gateway
    assert gwy is not None  # mypy hint
    return gwy


def assert_raises(exception: type[Exception], fnc: Callable, *args: Any) -> None:
    try:
        fnc(*args)
    except exception:  # as err:
        pass  # or: assert True
    else:
        assert False
