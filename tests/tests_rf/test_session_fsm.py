#!/usr/bin/env python3
"""MAX! Cube - Test the session's finite state machine (without a connection)."""

import pytest

from maxcube_tx import Command, Message, SessionState, exceptions as exc
from maxcube_tx.session_fsm import (
    AwaitingHeader,
    Closed,
    Inactive,
    IsInIdle,
    SessionContext,
    StreamingStatus,
    WantAck,
)

from ..tests.helpers import load_lines

CMD = Command.set_boost(0x0B714E, 3)


def _ready_context() -> SessionContext:
    context = SessionContext()
    context.connection_made()
    for line in load_lines():
        context.line_rcvd(Message.from_line(line))
    return context


def test_happy_path() -> None:
    context = SessionContext()
    assert isinstance(context.state, Inactive)
    assert context.state_name == SessionState.INACTIVE

    context.connection_made()
    assert isinstance(context.state, AwaitingHeader)

    lines = load_lines()

    context.line_rcvd(Message.from_line(lines[0]))  # H:
    assert isinstance(context.state, StreamingStatus)

    for line in lines[1:-1]:  # M:, C:...
        context.line_rcvd(Message.from_line(line))
        assert isinstance(context.state, StreamingStatus)
    assert not context.is_ready

    context.line_rcvd(Message.from_line(lines[-1]))  # L:
    assert isinstance(context.state, IsInIdle)
    assert context.is_ready

    context.cmd_sent(CMD)
    assert isinstance(context.state, WantAck)
    assert context.state_name == SessionState.WANT_ACK
    assert not context.is_ready

    context.line_rcvd(Message.from_line("S:00,0,31"))
    assert isinstance(context.state, IsInIdle)

    context.session_closed()
    assert isinstance(context.state, Closed)
    assert context.is_closed


def test_header_must_be_first() -> None:
    context = SessionContext()
    context.connection_made()

    with pytest.raises(exc.PacketInvalid):
        context.line_rcvd(Message.from_line("S:00,0,31"))
    assert isinstance(context.state, AwaitingHeader)


def test_ack_must_be_a_response() -> None:
    context = _ready_context()
    context.cmd_sent(CMD)

    with pytest.raises(exc.PacketInvalid):
        context.line_rcvd(Message.from_line(load_lines()[-1]))  # L:
    assert isinstance(context.state, WantAck)


def test_one_command_at_a_time() -> None:
    context = _ready_context()
    context.cmd_sent(CMD)

    with pytest.raises(exc.ProtocolFsmError):
        context.cmd_sent(CMD)


def test_invalid_events() -> None:
    context = SessionContext()

    with pytest.raises(exc.ProtocolFsmError):
        context.cmd_sent(CMD)  # not yet connected
    with pytest.raises(exc.ProtocolFsmError):
        context.line_rcvd(Message.from_line("S:00,0,31"))

    context.connection_made()
    with pytest.raises(exc.ProtocolFsmError):
        context.connection_made()  # already connected
    with pytest.raises(exc.ProtocolFsmError):
        context.cmd_sent(CMD)  # no status yet


def test_unexpected_line_when_idle() -> None:
    """A stray line in the idle state is ignored."""

    context = _ready_context()
    context.line_rcvd(Message.from_line("S:00,0,31"))

    assert isinstance(context.state, IsInIdle)


@pytest.mark.parametrize("event", ["connection_lost", "session_closed"])
def test_closed_is_terminal(event: str) -> None:
    context = _ready_context()

    getattr(context, event)()
    assert isinstance(context.state, Closed)

    getattr(context, event)()  # again, is a no-op
    assert isinstance(context.state, Closed)

    with pytest.raises(exc.ProtocolFsmError):
        context.cmd_sent(CMD)
    with pytest.raises(exc.ProtocolFsmError):
        context.connection_made()
