"""Pytest configuration and fixtures."""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["PAIRING_BACKEND"] = "dryrun"
os.environ["CUSTODY_BACKEND"] = "dryrun"
os.environ["STATIC_DIR"] = ""

from wcbridge.api.app import create_app
from wcbridge.runtime import build_runtime

from helpers import FakeClock, FakeCustodyClient, FakePairingClient, make_settings, settle


@pytest.fixture
def pairing() -> FakePairingClient:
    return FakePairingClient()


@pytest.fixture
def custody() -> FakeCustodyClient:
    return FakeCustodyClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings_overrides() -> dict:
    """Override in a test module or class to change settings."""
    return {}


@pytest_asyncio.fixture
async def runtime(pairing, custody, clock, settings_overrides):
    """Started runtime with fake collaborators and simulated time."""
    rt = build_runtime(
        make_settings(**settings_overrides),
        pairing=pairing,
        custody=custody,
        sleep=clock.sleep,
    )
    await rt.start()

    yield rt

    rt.scheduler.cancel_all()
    await settle()


@pytest_asyncio.fixture
async def client(runtime):
    """Async test client bound to the runtime."""
    app = create_app(runtime.settings, runtime=runtime)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
