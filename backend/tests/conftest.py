"""Shared fixtures for randomizer tests."""

import pytest

from squad_randomizer.config import Settings


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def anyio_backend():
    return "asyncio"
