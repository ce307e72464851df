#!/usr/bin/env python3
"""MAX! Cube - Test the line log (every line received, with its timestamp)."""

import logging
from collections.abc import Generator
from datetime import datetime as dt
from pathlib import Path

import pytest

from maxcube_tx import (
    LINE_LOGGER,
    VERSION,
    Message,
    exceptions as exc,
    set_line_logging,
)

CUBE_DTM = dt(2017, 1, 15, 13, 34)


@pytest.fixture
def line_log(tmp_path: Path) -> Generator[Path, None, None]:
    disabled = logging.root.manager.disable
    logging.disable(logging.NOTSET)

    file_name = tmp_path / "cube.log"
    set_line_logging(LINE_LOGGER, file_name=str(file_name))

    try:
        yield file_name
    finally:
        for handler in LINE_LOGGER.handlers:
            handler.close()
        set_line_logging(LINE_LOGGER)  # i.e. no line log
        logging.disable(disabled)


def test_line_log(line_log: Path) -> None:
    Message.from_line("S:A2,0,34", dtm=CUBE_DTM)

    with pytest.raises(exc.PacketInvalid):
        Message.from_line("S:X2,1,34", dtm=CUBE_DTM)

    lines = line_log.read_text(encoding="utf-8").splitlines()

    assert lines[0].endswith(f" # maxcube_tx {VERSION}")  # the initial line
    assert lines[1] == "2017-01-15T13:34:00.000000 << S:A2,0,34"
    assert lines[2].startswith("2017-01-15T13:34:00.000000 << S:X2,1,34 < Invalid")
    assert len(lines) == 3


def test_no_line_log() -> None:
    set_line_logging(LINE_LOGGER)

    assert LINE_LOGGER.propagate is False
    assert LINE_LOGGER.level == logging.CRITICAL
    assert not LINE_LOGGER.handlers
