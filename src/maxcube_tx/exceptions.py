#!/usr/bin/env python3
"""MAX! Cube - exceptions within the codec/session/transport layer."""

from __future__ import annotations


class _MaxCubeBaseException(Exception):
    """Base class for all maxcube exceptions."""

    pass


class MaxCubeException(_MaxCubeBaseException):
    """Base class for all maxcube exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = args[0] if args else None  # type: ignore[assignment]

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


class _MaxCubeLowerError(MaxCubeException):
    """A failure in the lower layer (parser, session, transport)."""


########################################################################################
# Errors at/below the session/transport layer


class ProtocolError(_MaxCubeLowerError):
    """An error occurred when sending, receiving or exchanging lines."""


class ProtocolFsmError(ProtocolError):
    """The session was asked to do something not valid in its current state."""

    HINT = "commands must be sent one at a time, after connect() and before close()"


class TransportError(ProtocolError):
    """An error when opening, reading from, or writing to the socket."""


class TransportTimeout(TransportError):
    """The socket could not be opened, or a line was not read, in time."""


########################################################################################
# Errors when decoding lines, or encoding commands


class ParserBaseError(_MaxCubeLowerError):
    """The line is corrupt/not internally consistent, or cannot be parsed."""


class PacketInvalid(ParserBaseError):
    """The line is corrupt/not internally consistent."""


class PayloadTruncated(PacketInvalid):
    """The (decoded) payload has fewer bytes than its fields require."""


class ParserError(ParserBaseError):
    """The command cannot be constructed without error."""


class CommandInvalid(ParserError):
    """The command's arguments are not valid."""
