#!/usr/bin/env python3
"""MAX! Cube - Decode/process a message (a line into a dict)."""

from __future__ import annotations

import logging
from datetime import datetime as dt
from typing import Any

from . import exceptions as exc
from .const import LINE_TAGS
from .helpers import dt_now
from .logger import getLogger  # overridden logger.getLogger
from .parsers import parse_payload

__all__ = ["Message"]


MSG_FORMAT = "|| {:2s} || {}"


LINE_LOGGER = getLogger(f"{__name__}_log", line_log=True)

_LOGGER = logging.getLogger(__name__)


class Message:
    """The Message class; will trap/log invalid lines.

    A message is a single line from the cube, tagged by its first two characters.
    Lines with an unknown tag are valid messages, but have no payload.
    """

    def __init__(self, dtm: dt, line: str) -> None:
        """Create a message from a line (as received, less its line ending).

        Will raise PacketInvalid if it is invalid.
        """

        self.dtm: dt = dtm
        self._line: str = line.rstrip("\r\n")

        if not self._line.strip():
            raise exc.PacketInvalid("Empty line")

        self.tag: str = self._line[:2]
        self._payload = self._validate(self._line[2:])

        LINE_LOGGER.info("", extra=self._log_extra())  # the line.log line

    @classmethod
    def from_line(cls, line: str | None, dtm: dt | None = None) -> Message:
        """Create a message from a line, with a timestamp (default is now)."""
        if line is None:
            raise exc.PacketInvalid("Empty line")
        return cls(dtm or dt_now(), line)

    def __repr__(self) -> str:
        """Return an unambiguous string representation of this object."""
        return self._line

    def __str__(self) -> str:
        """Return a brief readable string representation of this object."""
        return MSG_FORMAT.format(self.tag, self.payload)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self._line == other._line

    def __hash__(self) -> int:
        return hash(self._line)

    @property
    def payload(self) -> dict[str, Any] | None:
        """Return the decoded payload (None if the tag is not known)."""
        return self._payload

    @property
    def is_known(self) -> bool:
        return self.tag in LINE_TAGS

    def _log_extra(self) -> dict[str, Any]:
        return {"_line": self._line, "dtm": self.dtm}

    def _validate(self, raw_payload: str) -> dict[str, Any] | None:
        """Validate the line, and parse its payload if so.

        Raise an exception (PacketInvalid) if it is not valid.
        """

        try:
            return parse_payload(self.tag, raw_payload, self)

        except exc.PacketInvalid as err:
            LINE_LOGGER.warning("%s", err, extra=self._log_extra())
            raise

        except (LookupError, TypeError, ValueError) as err:
            _LOGGER.exception(
                "%s < Coding error: %s", self._line, f"{err.__class__.__name__}({err})"
            )
            raise exc.PacketInvalid(f"Unable to parse: {self._line}") from err
