#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway.

Works with (amongst others):
- radiator thermostats (basic & plus)
- wall thermostats
- window (shutter) contacts
- eco buttons
"""

from __future__ import annotations

import logging

from maxcube_tx import Command, Message  # noqa: F401
from maxcube_tx.version import VERSION  # noqa: F401

from .builder import TopologyBuilder  # noqa: F401
from .client import Client  # noqa: F401
from .device import Device, GenericConfiguration, ValveConfiguration  # noqa: F401
from .gateway import Gateway  # noqa: F401
from .room import Room  # noqa: F401

_LOGGER = logging.getLogger(__name__)
