#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

The line log: every line received from (or sent to) the cube.

Its records are timestamped with the time the line was received, rather than the
time the record was created, so that a log can be replayed faithfully.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from datetime import datetime as dt
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Any

import colorlog

from .version import VERSION

_LOGGER = logging.getLogger(__name__)

DEFAULT_FMT = "%(asctime)s.%(msecs)03d %(message)s"  # for the app/debug logging
DEFAULT_DATEFMT = "%H:%M:%S"

LINE_LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S.%f"
CONSOLE_DATEFMT = "%H:%M:%S.%f"

LINE_LOG_FMT = "%(asctime)s%(line)s%(message)s%(error_text)s%(comment)s"
CONSOLE_FMT = (
    "%(log_color)s%(asctime)s%(line)s"
    "%(yellow)s%(message)s%(red)s%(error_text)s%(cyan)s%(comment)s"
)

LOG_COLOURS = {
    "DEBUG": "white",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red",
}


class _LineLogger(logging.Logger):
    """A logger whose records carry a line (and its direction), timestamped by dtm.

    Usage: logger.info("", extra={"_line": line, "_dir": "<<", "dtm": dtm})
    """

    def makeRecord(
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: Mapping[str, object] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        extra = dict(extra or {})  # work with a copy

        line = extra.pop("_line", "")
        direction = extra.pop("_dir", "<<")  # >> for a command, << for a line rcvd

        extra["line"] = f" {direction} {line}" if line else ""
        extra["error_text"] = f" * {err}" if (err := extra.get("error_text")) else ""
        extra["comment"] = f" # {cmt}" if (cmt := extra.get("comment")) else ""

        rv = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func, extra, sinfo
        )

        if isinstance(dtm := getattr(rv, "dtm", None), dt):
            rv.created = dtm.timestamp()
            rv.msecs = dtm.microsecond / 1000

        if rv.msg:
            rv.msg = f" < {rv.msg}"
        return rv


class _DtmFormatter:
    """Format asctime via a datetime (rather than a time.struct_time), for %f."""

    default_time_format = LINE_LOG_DATEFMT

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        return dt.fromtimestamp(record.created).strftime(
            datefmt or self.default_time_format
        )


class Formatter(_DtmFormatter, logging.Formatter):  # type: ignore[misc]
    pass


class ColoredFormatter(_DtmFormatter, colorlog.ColoredFormatter):  # type: ignore[misc]
    pass


class LevelFilter(logging.Filter):
    """Process only the records with a level within a range (inclusive)."""

    def __init__(
        self, min_level: int = logging.NOTSET, max_level: int = logging.CRITICAL
    ) -> None:
        super().__init__()
        self._min_level = min_level
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return self._min_level <= record.levelno <= self._max_level


def getLogger(  # permits a bespoke Logger class
    name: str | None = None, line_log: bool = False
) -> logging.Logger:
    """Return a logger with the specified name, creating it if necessary.

    A line logger timestamps its records with the line's dtm, not the current time.
    """

    if name is None or not line_log:
        return logging.getLogger(name)

    klass = logging.getLoggerClass()
    logging.setLoggerClass(_LineLogger)
    try:
        return logging.getLogger(name)
    finally:
        logging.setLoggerClass(klass)


def _file_handler(
    file_name: str, rotate_backups: int, rotate_bytes: int | None
) -> logging.Handler:
    if rotate_bytes:  # rotate by size
        return RotatingFileHandler(
            file_name, maxBytes=rotate_bytes, backupCount=rotate_backups or 2
        )
    if rotate_backups:  # rotate daily
        return TimedRotatingFileHandler(
            file_name, when="midnight", backupCount=rotate_backups
        )
    return logging.FileHandler(file_name)


def set_line_logging(
    logger: logging.Logger,
    cc_console: bool = False,
    file_name: str | None = None,
    rotate_backups: int = 0,
    rotate_bytes: int | None = None,
) -> None:
    """Create/configure the handlers of the line log.

    The lines go to a file (if file_name), and/or are copied to the console (if
    cc_console): warnings to stderr, everything else to stdout.
    """

    logger.propagate = False  # the line log is distinct from any app/debug logging
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):  # may be called more than once
        logger.removeHandler(handler)
        handler.close()

    if not file_name and not cc_console:
        logger.setLevel(logging.CRITICAL)
        return

    if file_name:
        handler = _file_handler(file_name, rotate_backups, rotate_bytes)
        handler.setFormatter(Formatter(fmt=LINE_LOG_FMT))
        handler.addFilter(LevelFilter(logging.INFO, logging.WARNING))
        logger.addHandler(handler)

    if cc_console:
        console_fmt = ColoredFormatter(
            fmt=CONSOLE_FMT,
            datefmt=CONSOLE_DATEFMT,
            reset=True,
            log_colors=LOG_COLOURS,
        )

        handler = logging.StreamHandler(stream=sys.stderr)
        handler.setFormatter(console_fmt)
        handler.addFilter(LevelFilter(min_level=logging.WARNING))
        logger.addHandler(handler)

        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(console_fmt)
        handler.addFilter(LevelFilter(max_level=logging.INFO))
        logger.addHandler(handler)

    _LOGGER.debug("Line log: file_name=%s, cc_console=%s", file_name, cc_console)
    logger.warning("", extra={"comment": f"maxcube_tx {VERSION}"})  # initial line
