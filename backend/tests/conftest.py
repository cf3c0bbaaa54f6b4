# =============================================================================
# ORDER CONSOLE - TEST CONFIGURATION
# =============================================================================
# Shared fixtures: settings, fake DM backend, client, console, TestClient
# =============================================================================

import httpx
import pytest
from fastapi.testclient import TestClient

from order_console.config import Settings
from order_console.core.dm_client import DmApiClient
from order_console.main import create_app
from order_console.services.console_service import OrderConsole
from tests.fake_dm import PLANT, FakeDm


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        DM_API_BASE_URL="http://dm.test",
        DEFAULT_PLANT=PLANT,
        ENRICHMENT_CONCURRENCY=4,
    )


@pytest.fixture
def fake_dm() -> FakeDm:
    return FakeDm()


@pytest.fixture
def dm_client(settings: Settings, fake_dm: FakeDm) -> DmApiClient:
    http = httpx.AsyncClient(base_url=settings.DM_API_BASE_URL, transport=fake_dm.transport)
    return DmApiClient(http)


@pytest.fixture
def console(dm_client: DmApiClient, settings: Settings) -> OrderConsole:
    return OrderConsole(dm_client, settings)


@pytest.fixture
def client(settings: Settings, fake_dm: FakeDm):
    """TestClient over the full app; the lifespan builds the console on the fake DM."""
    app = create_app(settings, transport=fake_dm.transport)
    with TestClient(app) as c:
        yield c
