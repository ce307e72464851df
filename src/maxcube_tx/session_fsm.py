#!/usr/bin/env python3
"""MAX! Cube - the (line-oriented) session finite state machine.

  Inactive -> AwaitingHeader -> StreamingStatus -> IsInIdle <-> WantAck
  (any state) -> Closed
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final, TypeAlias

from . import exceptions as exc
from .const import H_, L_, S_, SessionState

if TYPE_CHECKING:
    from .command import Command
    from .message import Message

#
# NOTE: All debug flags should be False for deployment to end-users
_DBG_MAINTAIN_STATE_CHAIN: Final[bool] = False  # maintain Context._prev_state

_LOGGER = logging.getLogger(__name__)


class SessionContext:
    """The context of the session's state machine.

    Every event is passed to the current state, which either effects a transition
    or raises a ProtocolFsmError (the event is not valid in that state).
    """

    def __init__(self) -> None:
        self._state: _SessionStateT = None  # type: ignore[assignment]
        self._cmd: Command | None = None

        self.set_state(Inactive)

    def __repr__(self) -> str:
        msg = f"<SessionContext state={self._state.__class__.__name__}"
        if self._cmd is None:
            return msg + ">"
        return msg + f", cmd={self._cmd!r}>"

    @property
    def state(self) -> _SessionStateT:
        return self._state

    @property
    def state_name(self) -> SessionState:
        return self._state.NAME

    @property
    def is_ready(self) -> bool:
        """Return True if a command can be sent."""
        return isinstance(self._state, IsInIdle)

    @property
    def is_closed(self) -> bool:
        return isinstance(self._state, Closed)

    def set_state(
        self, state_class: _SessionStateClassT, cmd: Command | None = None
    ) -> None:
        _LOGGER.debug("BEFORE = %s", self)

        prev_state = self._state

        self._state = state_class(self)
        self._cmd = cmd if isinstance(self._state, WantAck) else None

        if _DBG_MAINTAIN_STATE_CHAIN:  # for debugging
            setattr(self._state, "_prev_state", prev_state)  # noqa: B010

        _LOGGER.debug("AFTER. = %s", self)

    # the events...
    def connection_made(self) -> None:
        self._state.connection_made()

    def connection_lost(self) -> None:
        self._state.connection_lost()

    def line_rcvd(self, msg: Message) -> None:
        self._state.line_rcvd(msg)

    def cmd_sent(self, cmd: Command) -> None:
        self._state.cmd_sent(cmd)

    def session_closed(self) -> None:
        self._state.session_closed()


#######################################################################################


class SessionStateBase:
    NAME: SessionState

    def __init__(self, context: SessionContext) -> None:
        self._context = context

    def __repr__(self) -> str:
        return f"<SessionState state={self.__class__.__name__}>"

    def connection_made(self) -> None:  # For Inactive only
        raise exc.ProtocolFsmError(f"Invalid state to connect: {self._context}")

    def connection_lost(self) -> None:  # Same for all states
        """Transition to Closed, regardless of current state."""
        self._context.set_state(Closed)

    def line_rcvd(self, msg: Message) -> None:  # Different for each state
        raise exc.ProtocolFsmError(f"Invalid state to receive a line: {self._context}")

    def cmd_sent(self, cmd: Command) -> None:  # For IsInIdle only
        raise exc.ProtocolFsmError(f"Invalid state to send a command: {self._context}")

    def session_closed(self) -> None:  # Same for all states, except Closed
        self._context.set_state(Closed)


class Inactive(SessionStateBase):
    """The session is not yet connected to the cube."""

    NAME = SessionState.INACTIVE

    def connection_made(self) -> None:
        """Transition to AwaitingHeader."""
        self._context.set_state(AwaitingHeader)


class AwaitingHeader(SessionStateBase):
    """The session is connected, and waiting for the first line (the header)."""

    NAME = SessionState.AWAITING_HEADER

    def line_rcvd(self, msg: Message) -> None:
        """Transition to StreamingStatus, if the line is a header."""

        if msg.tag != H_:
            raise exc.PacketInvalid(f"Expecting a header line (H:), but got: {msg!r}")
        self._context.set_state(StreamingStatus)


class StreamingStatus(SessionStateBase):
    """The session is consuming the initial burst of lines (M:, C:, L:)."""

    NAME = SessionState.STREAMING

    def line_rcvd(self, msg: Message) -> None:
        """Transition to IsInIdle, if the line is the device list (the last line)."""

        if msg.tag == L_:
            self._context.set_state(IsInIdle)


class IsInIdle(SessionStateBase):
    """The session is ready to send a command."""

    NAME = SessionState.IDLE

    def line_rcvd(self, msg: Message) -> None:  # Do nothing
        _LOGGER.warning("%s: Unexpected line (will be ignored): %r", self._context, msg)

    def cmd_sent(self, cmd: Command) -> None:
        """Transition to WantAck."""
        self._context.set_state(WantAck, cmd=cmd)


class WantAck(SessionStateBase):
    """The session is waiting for the response to its command."""

    NAME = SessionState.WANT_ACK

    def line_rcvd(self, msg: Message) -> None:
        """Transition to IsInIdle, if the line is a response (S:)."""

        if msg.tag != S_:
            raise exc.PacketInvalid(f"Expecting a response line (S:), but got: {msg!r}")
        self._context.set_state(IsInIdle)


class Closed(SessionStateBase):
    """The session has ended (the cube no longer accepts commands)."""

    NAME = SessionState.CLOSED

    def connection_lost(self) -> None:  # Do nothing
        pass

    def session_closed(self) -> None:  # Do nothing
        pass


#######################################################################################


_SessionStateT: TypeAlias = (
    Inactive | AwaitingHeader | StreamingStatus | IsInIdle | WantAck | Closed
)

_SessionStateClassT: TypeAlias = (
    type[Inactive]
    | type[AwaitingHeader]
    | type[StreamingStatus]
    | type[IsInIdle]
    | type[WantAck]
    | type[Closed]
)
