"""Pytest fixtures for all tests."""

import pytest
from httpx import AsyncClient, ASGITransport

from config import Config, GeneratorConfig
from identifier import Generator, IdentitySeed, MonotonicCounter
from service.app import create_app

FIXED_TIME = 1_600_000_000


@pytest.fixture
def seed():
    """Seed with a fixed host identity and pid."""
    return IdentitySeed(host_source=lambda: "test-host", pid_source=lambda: 0x0A0B)


@pytest.fixture
def counter():
    """Counter starting at zero, so the first value is 1."""
    return MonotonicCounter(seed=0)


@pytest.fixture
def generator(seed, counter):
    """Generator with a frozen clock."""
    return Generator(seed=seed, counter=counter, clock=lambda: FIXED_TIME)


@pytest.fixture
def config():
    return Config(generator=GeneratorConfig(max_batch=50))


@pytest.fixture
async def app(config, generator):
    """Create test FastAPI app."""
    return create_app(config=config, generator=generator)


@pytest.fixture
async def client(app):
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
