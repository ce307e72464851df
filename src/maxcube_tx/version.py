#!/usr/bin/env python3
"""MAX! Cube - a client for the eQ-3 MAX! Cube LAN gateway."""

__version__ = "0.3.2"
VERSION = __version__
