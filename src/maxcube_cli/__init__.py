#!/usr/bin/env python3
"""A CLI for the maxcube library."""

from __future__ import annotations
