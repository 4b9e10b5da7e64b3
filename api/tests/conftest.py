"""Shared test fixtures."""

from datetime import date, datetime

import pytest
from httpx import ASGITransport, AsyncClient

from venuebook.core.dependencies import get_clock
from venuebook.main import app
from venuebook.services.clock import FixedClock

# Wednesday 6 August 2025, 14:20 in Tashkent
NOW = datetime(2025, 8, 6, 14, 20)
TODAY = date(2025, 8, 6)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
async def client(clock):
    """API client whose business clock is frozen at NOW."""
    app.dependency_overrides[get_clock] = lambda: clock
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
