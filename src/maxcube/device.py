#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Devices, and their configurations.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime as dt
from typing import Any, TypeAlias

from maxcube_tx.const import (
    SZ_BOOST_DURATION,
    SZ_COMFORT_TEMP,
    SZ_DECALCIFICATION,
    SZ_DEVICE_TYPE,
    SZ_ECO_TEMP,
    SZ_MAX_SETPOINT,
    SZ_MIN_SETPOINT,
    SZ_MODE,
    SZ_RF_ADDRESS,
    SZ_SERIAL,
    SZ_TEMP_OFFSET,
    SZ_VALVE_MAXIMUM,
    SZ_VALVE_OFFSET,
    SZ_WINDOW_OPEN_DURATION,
    SZ_WINDOW_OPEN_TEMP,
    ConfigKind,
    DevType,
    Mode,
)

_LOGGER = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, kw_only=True)
class GenericConfiguration:
    """The configuration of a device that has no (decoded) settings."""

    kind: ConfigKind = dataclasses.field(default=ConfigKind.GENERIC, init=False)

    dev_type: DevType
    rf_address: int
    serial: str


@dataclasses.dataclass(frozen=True, kw_only=True)
class ValveConfiguration:
    """The configuration of a radiator thermostat (i.e. it has a valve)."""

    kind: ConfigKind = dataclasses.field(default=ConfigKind.VALVE, init=False)

    dev_type: DevType
    rf_address: int
    serial: str

    comfort_temp: float  # °C
    eco_temp: float  # °C
    max_setpoint: float  # °C
    min_setpoint: float  # °C
    temp_offset: float  # °C, -3.5 to +3.5
    window_open_temp: float  # °C
    window_open_duration: int  # raw value, units of 5 mins
    boost_duration: int  # raw value: duration & valve position
    decalcification: int  # raw value: day & hour
    valve_maximum: float  # %
    valve_offset: float  # %


ConfigurationT: TypeAlias = GenericConfiguration | ValveConfiguration


def configuration_from_payload(payload: dict[str, Any]) -> ConfigurationT:
    """Return the configuration of a device from a (parsed) C: payload."""

    if payload[SZ_DEVICE_TYPE].is_valve:
        return ValveConfiguration(
            dev_type=payload[SZ_DEVICE_TYPE],
            rf_address=payload[SZ_RF_ADDRESS],
            serial=payload[SZ_SERIAL],
            comfort_temp=payload[SZ_COMFORT_TEMP],
            eco_temp=payload[SZ_ECO_TEMP],
            max_setpoint=payload[SZ_MAX_SETPOINT],
            min_setpoint=payload[SZ_MIN_SETPOINT],
            temp_offset=payload[SZ_TEMP_OFFSET],
            window_open_temp=payload[SZ_WINDOW_OPEN_TEMP],
            window_open_duration=payload[SZ_WINDOW_OPEN_DURATION],
            boost_duration=payload[SZ_BOOST_DURATION],
            decalcification=payload[SZ_DECALCIFICATION],
            valve_maximum=payload[SZ_VALVE_MAXIMUM],
            valve_offset=payload[SZ_VALVE_OFFSET],
        )

    return GenericConfiguration(
        dev_type=payload[SZ_DEVICE_TYPE],
        rf_address=payload[SZ_RF_ADDRESS],
        serial=payload[SZ_SERIAL],
    )


class Device:
    """The Device class - a (paired) RF device, or the cube itself.

    The identity attrs are read-only, and the configuration (if any) is set only
    when the device is created. The status attrs are updated by the dispatcher.
    """

    def __init__(
        self,
        dev_type: DevType,
        rf_address: int,
        serial: str,
        name: str = "",
        *,
        configuration: ConfigurationT | None = None,
    ) -> None:
        self._dev_type = dev_type
        self._rf_address = rf_address
        self._serial = serial
        self._name = name

        self._configuration = configuration

        self.mode: Mode = Mode.AUTO
        self.low_battery: bool = False
        self.end_time: dt | None = None  # only when in vacation mode

    def __repr__(self) -> str:
        return (
            f"Device(dev_type={self._dev_type.name}, rf_address={self._rf_address:06x}"
            f", serial={self._serial}, name={self._name!r})"
        )

    def __str__(self) -> str:
        return f"{self._name or self._dev_type.name} ({self._serial})"

    @property
    def dev_type(self) -> DevType:
        return self._dev_type

    @property
    def rf_address(self) -> int:
        return self._rf_address

    @property
    def serial(self) -> str:
        return self._serial

    @property
    def name(self) -> str:
        return self._name

    @property
    def configuration(self) -> ConfigurationT | None:
        return self._configuration

    @property
    def is_thermostat(self) -> bool:
        return self._dev_type.is_thermostat

    @property
    def status(self) -> dict[str, Any]:
        return {
            SZ_MODE: self.mode,
            "low_battery": self.low_battery,
            "end_time": self.end_time,
        }
