#!/usr/bin/env python3
"""MAX! Cube - exceptions above the codec/session/transport layer."""

from __future__ import annotations

from maxcube_tx.exceptions import (
    CommandInvalid as CommandInvalid,
    MaxCubeException as MaxCubeException,
    PacketInvalid as PacketInvalid,
    PayloadTruncated as PayloadTruncated,
    ProtocolError as ProtocolError,
    ProtocolFsmError as ProtocolFsmError,
    TransportError as TransportError,
    TransportTimeout as TransportTimeout,
)


class _MaxCubeUpperError(MaxCubeException):
    """A failure in the upper layer (topology, client)."""


########################################################################################
# Errors when looking up entities in the topology


class LookupFailure(_MaxCubeUpperError, LookupError):
    """The room/device does not exist (or is ambiguous) in the topology."""


class RoomNotFound(LookupFailure):
    """There is no (unique) room with that id/name."""

    HINT = "room names are case-sensitive (use the info command to list them)"


class DeviceNotFound(LookupFailure):
    """There is no device with that serial/RF address."""


class NoThermostat(LookupFailure):
    """The room has no thermostat (so it cannot be sent a command)."""


########################################################################################
# Errors when building/updating the topology


class StateViolation(_MaxCubeUpperError):
    """The topology was/became inconsistent (this shouldn't happen)."""


class ConfigurationAlreadySet(StateViolation):
    """A device was sent a second configuration (C:) during the same session."""
