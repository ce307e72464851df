#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Rooms (each with a set of devices).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from . import exceptions as exc
from .device import Device

_LOGGER = logging.getLogger(__name__)


class Room:
    """The Room class - a group of devices that share a setpoint.

    A room's temperatures, valve position & window state are updated by the
    dispatcher (from its devices' status), or by a successful command.
    """

    def __init__(
        self,
        room_id: int,
        name: str,
        rf_address: int,
        devices: Iterable[Device] = (),
    ) -> None:
        self._id = room_id
        self._name = name
        self._rf_address = rf_address

        self._devices: list[Device] = list(devices)

        self.current_temp: float | None = None
        self.configured_temp: float | None = None
        self.valve_position: int | None = None  # %
        self.window_open: bool = False

    def __repr__(self) -> str:
        return f"Room(id={self._id}, name={self._name!r}, devices={len(self._devices)})"

    def __str__(self) -> str:
        return f"{self._name} ({self._id})"

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def rf_address(self) -> int:
        return self._rf_address

    @property
    def devices(self) -> list[Device]:
        return list(self._devices)

    @property
    def has_thermostat(self) -> bool:
        return any(d.is_thermostat for d in self._devices)

    @property
    def thermostat(self) -> Device:
        """Return the room's (first) thermostat, or raise NoThermostat."""

        for device in self._devices:
            if device.is_thermostat:
                return device
        raise exc.NoThermostat(f"Room has no thermostat: {self}")

    @property
    def low_battery(self) -> bool:
        """Return True if any of the room's devices has a low battery."""
        return any(d.low_battery for d in self._devices)

    @property
    def status(self) -> dict[str, Any]:
        return {
            "current_temp": self.current_temp,
            "configured_temp": self.configured_temp,
            "valve_position": self.valve_position,
            "window_open": self.window_open,
            "low_battery": self.low_battery,
        }
