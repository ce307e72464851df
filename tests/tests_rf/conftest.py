#!/usr/bin/env python3
"""Fixtures for testing."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest

from maxcube import Client
from maxcube_tx import CubeSession

from ..tests.helpers import load_lines
from .virtual_cube import CubeBehaviour, VirtualCube

SESSION_CONFIG = {"settle_delay": 0, "read_timeout": 0.5, "connect_timeout": 0.5}


@pytest.fixture
def behaviour() -> CubeBehaviour:
    """Return the behaviour of the virtual cube (override by parametrizing)."""
    return CubeBehaviour.ACCEPT


@pytest.fixture
async def cube(behaviour: CubeBehaviour) -> AsyncGenerator[VirtualCube, None]:
    cube = VirtualCube(load_lines(), behaviour=behaviour)
    await cube.start()
    try:
        yield cube
    finally:
        await cube.stop()


@pytest.fixture
def session(cube: VirtualCube) -> CubeSession:
    """Return a session (not yet connected) with the virtual cube."""
    return CubeSession("127.0.0.1", cube.port, **SESSION_CONFIG)


@pytest.fixture
async def client(cube: VirtualCube) -> AsyncGenerator[Client, None]:
    """Return a client that is connected to the virtual cube."""

    config: dict[str, Any] = {"session": {"port": cube.port, **SESSION_CONFIG}}
    client = Client("127.0.0.1", config=config)

    await client.connect()
    try:
        yield client
    finally:
        await client.close()
