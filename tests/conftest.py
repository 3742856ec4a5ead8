"""Pytest configuration and fixtures."""

import time
from collections.abc import Callable, Generator
from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from quotecraft_api.config import Settings, StorageBackend, SubscriptionTier
from quotecraft_api.main import create_app
from quotecraft_api.models.quote import QuoteCreate
from quotecraft_api.models.user import User
from quotecraft_api.storage.memory import MemoryQuoteStore


@pytest.fixture
def settings():
    """Settings for an in-memory app with the default quota."""
    return Settings(storage_backend=StorageBackend.MEMORY, monthly_quote_limit=50)


@pytest.fixture
def app(settings):
    """Create FastAPI app for testing."""
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create test client; entering it runs the lifespan and builds the store."""
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def register(client) -> Callable[..., dict[str, str]]:
    """Register a user through the API and return auth headers for them."""

    def _register(email: str = "owner@example.com", **fields) -> dict[str, str]:
        response = client.post("/v1/auth/register", json={"email": email, **fields})
        assert response.status_code == 201, response.text
        return {"X-API-Key": response.json()["api_key"]}

    return _register


@pytest.fixture
def user_headers(register):
    """Headers for the main test user."""
    return register("owner@example.com", business_name="Owner Studio")


@pytest.fixture
def other_user_headers(register):
    """Headers for a second user."""
    return register("someone.else@example.com")


@pytest.fixture
def invalid_user_headers():
    """Headers with invalid API key."""
    return {"X-API-Key": "invalid_key"}


# Store fixtures for unit tests
@pytest.fixture
def store():
    """Fresh in-memory store."""
    return MemoryQuoteStore()


def _make_user(user_id: str, email: str) -> User:
    now = datetime.now(UTC)
    return User(
        id=user_id,
        email=email,
        api_key=f"key_{user_id}",
        subscription_tier=SubscriptionTier.FREE,
        subscription_end_date=now + timedelta(days=14),
        created_at=now,
    )


@pytest_asyncio.fixture
async def user(store):
    """A registered user in the store."""
    return await store.create_user(_make_user("user_001", "owner@example.com"))


@pytest_asyncio.fixture
async def other_user(store):
    """A second registered user in the store."""
    return await store.create_user(_make_user("user_002", "other@example.com"))


@pytest.fixture
def make_user():
    """Factory for users that are not yet stored."""
    return _make_user


# Sample data fixtures
@pytest.fixture
def sample_quote_request():
    """Sample quote creation request body."""
    return {
        "client_name": "Acme Ltd",
        "client_email": "buyer@acme.example",
        "project_description": "Landing page redesign",
        "estimated_hours": 12,
        "price": 3600,
        "template_style": "modern",
    }


@pytest.fixture
def quote_data():
    """Minimal quote creation data."""
    return QuoteCreate(client_name="Acme Ltd", price=500)


@pytest.fixture
def new_york_local_time(monkeypatch) -> Generator[ZoneInfo, None, None]:
    """Run the test with America/New_York as the server's local timezone."""
    if not hasattr(time, "tzset"):
        pytest.skip("changing the process timezone needs time.tzset")
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    yield ZoneInfo("America/New_York")
    monkeypatch.undo()
    time.tzset()
