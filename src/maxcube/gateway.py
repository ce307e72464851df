#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

The gateway (the cube) is the root of the topology: it has rooms, which have devices.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime as dt

from . import exceptions as exc
from .device import Device
from .room import Room

_LOGGER = logging.getLogger(__name__)


class Gateway:
    """The gateway class.

    The cube itself is also a device (of type GATEWAY), and so it has a device record
    (that may have a configuration), but it is not in any room.
    """

    def __init__(
        self,
        device: Device,
        firmware_version: str,
        dtm: dt,
        rooms: Iterable[Room] = (),
        *,
        duty_cycle: int | None = None,
        free_memory_slots: int | None = None,
    ) -> None:
        self._device = device
        self._firmware_version = firmware_version
        self._rooms: list[Room] = list(rooms)

        self.datetime = dtm
        self.duty_cycle = duty_cycle
        self.free_memory_slots = free_memory_slots

    def __repr__(self) -> str:
        return (
            f"Gateway(serial={self.serial}, rf_address={self.rf_address:06x}"
            f", firmware={self._firmware_version}, rooms={len(self._rooms)})"
        )

    def __str__(self) -> str:
        return f"Cube {self.serial}"

    @property
    def device(self) -> Device:
        """Return the cube's own device record."""
        return self._device

    @property
    def serial(self) -> str:
        return self._device.serial

    @property
    def rf_address(self) -> int:
        return self._device.rf_address

    @property
    def firmware_version(self) -> str:
        return self._firmware_version

    @property
    def rooms(self) -> list[Room]:
        return list(self._rooms)

    @property
    def devices(self) -> list[Device]:
        """Return all the devices in all the rooms (the cube is not included)."""
        return [d for r in self._rooms for d in r.devices]

    def find_room(self, room: int | str) -> Room:
        """Return the room with that id (an int), or that name (a str).

        Raise RoomNotFound if there is no such room, or if the name is ambiguous.
        """

        if isinstance(room, int):
            rooms = [r for r in self._rooms if r.id == room]
        else:
            rooms = [r for r in self._rooms if r.name == room]

        if not rooms:
            raise exc.RoomNotFound(f"No room found: {room!r}")
        if len(rooms) > 1:
            raise exc.RoomNotFound(f"More than one room found: {room!r}")
        return rooms[0]

    def find_room_for_device(self, rf_address: int) -> Room:
        """Return the room that has the device with that RF address."""

        for room in self._rooms:
            if any(d.rf_address == rf_address for d in room.devices):
                return room
        raise exc.RoomNotFound(f"No room found for device: {rf_address:06x}")

    def find_device_by_serial(self, serial: str) -> Device:
        if self._device.serial == serial:
            return self._device
        for device in self.devices:
            if device.serial == serial:
                return device
        raise exc.DeviceNotFound(f"No device found with serial: {serial}")

    def find_device_by_rf_address(self, rf_address: int) -> Device:
        if self._device.rf_address == rf_address:
            return self._device
        for device in self.devices:
            if device.rf_address == rf_address:
                return device
        raise exc.DeviceNotFound(f"No device found with RF address: {rf_address:06x}")
