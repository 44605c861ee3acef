# tests/conftest.py
import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.config import Settings, get_settings
from app.api.dependencies import get_cleanads_client
from app.connectors.cleanads.client import CleanAdsClient


class FakeUpstream:
    """Stands in for the CleanAds API; records every request it receives."""

    def __init__(self):
        self.status_code = 200
        self.json_body = []
        self.text_body = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def test_settings():
    return Settings(
        _env_file=None,
        cleanads_base_url="https://cleanads.test",
        proxy_api_key=None,
        environment="production",
    )


# --- Point the app at our settings and the fake upstream ---
@pytest.fixture(autouse=True)
def override_dependencies(test_settings, upstream):
    async def _get_client():
        client = CleanAdsClient(
            test_settings, transport=httpx.MockTransport(upstream.handler)
        )
        try:
            yield client
        finally:
            await client.close()

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_cleanads_client] = _get_client
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_row(short_date, campaign="Campaign", adset="Adset", **stats):
    row = {
        "ShortDate": short_date,
        "CampaignName": campaign,
        "AdsetName": adset,
        "statImpressions": "100",
        "statClicks": "5",
        "statCost": "2.50",
        "statConversions": "1",
    }
    row.update(stats)
    return row


@pytest.fixture
def row_factory():
    """Builds well-formed raw CleanAds rows; keyword args override stats."""
    return make_row


@pytest.fixture
def january_rows():
    """One row per day, 01/01/2024 through 01/10/2024, shuffled."""
    rows = [make_row(f"01/{day:02d}/2024", adset=f"Set {day}") for day in range(1, 11)]
    return rows[5:] + rows[:5]
