#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Build the topology (a Gateway) from the cube's initial burst of lines.
"""

from __future__ import annotations

import logging
from typing import Any

from maxcube_tx.const import (
    SZ_DATETIME,
    SZ_DEVICE_TYPE,
    SZ_DEVICES,
    SZ_DUTY_CYCLE,
    SZ_FIRMWARE_VERSION,
    SZ_FREE_MEMORY_SLOTS,
    SZ_NAME,
    SZ_RF_ADDRESS,
    SZ_ROOM_ID,
    SZ_ROOMS,
    SZ_SERIAL,
    DevType,
)

from . import exceptions as exc
from .device import ConfigurationT, Device, configuration_from_payload
from .gateway import Gateway
from .room import Room

_LOGGER = logging.getLogger(__name__)


class TopologyBuilder:
    """Accumulate the header, the topology and the configurations of a cube.

    The lines arrive in order: H: (header), M: (rooms & devices), C: (one per
    device), L: (status). The Gateway is built once all but the status is known,
    so that each device can be created with its configuration.
    """

    def __init__(self) -> None:
        self._header: dict[str, Any] | None = None
        self._rooms: list[dict[str, Any]] = []
        self._devices: list[dict[str, Any]] = []
        self._configs: dict[str, ConfigurationT] = {}

        self._gateway: Gateway | None = None

    def __repr__(self) -> str:
        return (
            f"TopologyBuilder(rooms={len(self._rooms)}, devices={len(self._devices)}"
            f", configs={len(self._configs)}, built={self._gateway is not None})"
        )

    @property
    def gateway(self) -> Gateway | None:
        """Return the Gateway, if it has been built."""
        return self._gateway

    def _check_not_built(self) -> None:
        if self._gateway is not None:
            raise exc.StateViolation(f"The topology has already been built: {self}")

    def set_header(self, payload: dict[str, Any]) -> None:
        self._check_not_built()
        self._header = payload

    def set_topology(self, payload: dict[str, Any]) -> None:
        """Set the rooms, and the devices in each room (from an M: payload)."""

        self._check_not_built()

        room_ids = [r[SZ_ROOM_ID] for r in payload[SZ_ROOMS]]
        if len(set(room_ids)) != len(room_ids):
            raise exc.PacketInvalid(f"Room ids are not unique: {room_ids}")

        for device in payload[SZ_DEVICES]:
            if device[SZ_ROOM_ID] not in room_ids:
                raise exc.RoomNotFound(
                    f"Device {device[SZ_SERIAL]} is in an unknown room: "
                    f"{device[SZ_ROOM_ID]}"
                )

        self._rooms = list(payload[SZ_ROOMS])
        self._devices = list(payload[SZ_DEVICES])

    def add_configuration(self, payload: dict[str, Any]) -> None:
        """Add the configuration of a device (from a C: payload).

        Each device (including the cube) can be configured only once.
        """

        self._check_not_built()

        serial = payload[SZ_SERIAL]
        is_cube = self._header is not None and self._header[SZ_SERIAL] == serial
        if not is_cube and serial not in (d[SZ_SERIAL] for d in self._devices):
            raise exc.DeviceNotFound(f"No device found with serial: {serial}")

        if serial in self._configs:
            raise exc.ConfigurationAlreadySet(
                f"Device {serial} already has a configuration"
            )
        self._configs[serial] = configuration_from_payload(payload)

    def build(self) -> Gateway:
        """Return the Gateway (build it, if required).

        Raise a StateViolation if the header has not been received.
        """

        if self._gateway is not None:
            return self._gateway

        if self._header is None:
            raise exc.StateViolation("Unable to build the topology without a header")

        def create_device(record: dict[str, Any]) -> Device:
            return Device(
                record[SZ_DEVICE_TYPE],
                record[SZ_RF_ADDRESS],
                record[SZ_SERIAL],
                record.get(SZ_NAME, ""),
                configuration=self._configs.get(record[SZ_SERIAL]),
            )

        rooms = [
            Room(
                r[SZ_ROOM_ID],
                r[SZ_NAME],
                r[SZ_RF_ADDRESS],
                devices=[
                    create_device(d)
                    for d in self._devices
                    if d[SZ_ROOM_ID] == r[SZ_ROOM_ID]
                ],
            )
            for r in self._rooms
        ]

        cube = create_device(
            {
                SZ_DEVICE_TYPE: DevType.GATEWAY,
                SZ_RF_ADDRESS: self._header[SZ_RF_ADDRESS],
                SZ_SERIAL: self._header[SZ_SERIAL],
            }
        )

        self._gateway = Gateway(
            cube,
            self._header[SZ_FIRMWARE_VERSION],
            self._header[SZ_DATETIME],
            rooms,
            duty_cycle=self._header.get(SZ_DUTY_CYCLE),
            free_memory_slots=self._header.get(SZ_FREE_MEMORY_SLOTS),
        )

        _LOGGER.debug("Built the topology: %r", self._gateway)
        return self._gateway
