"""
Shared fixtures for the test suite.

The environment is set before the application is imported so that settings
pick up the test secret, the test database and the disabled rate limits.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-vibelytics")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_vibelytics.db"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["LOG_DIR"] = os.path.join(os.path.dirname(__file__), ".logs")

from typing import List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from vibelytics.core.exceptions import InvalidCredentials
from vibelytics.database import Base, get_db
from vibelytics.main import app
from vibelytics.services.identity import FederatedIdentity, get_identity_verifier
from vibelytics.services.nws import ForecastReading, get_weather_provider

import vibelytics.models  # noqa: F401

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test_vibelytics.db"

# NullPool: TestClient runs the app on its own event loop, so connections
# must not outlive the loop that opened them.
engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestingSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

# Sync engine on the same file, used for schema setup and direct inspection.
sync_engine = create_engine("sqlite:///./test_vibelytics.db", poolclass=NullPool)


async def override_get_db():
    async with TestingSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class FakeWeatherProvider:
    """Stands in for NWSClient; records every lookup."""

    def __init__(self, reading: Optional[ForecastReading] = None, error: Optional[Exception] = None):
        self.reading = reading or ForecastReading(
            city="New York",
            country="US",
            temperature=18,
            feels_like=18,
            description="Partly cloudy, with a high near 65.",
            main="Clouds",
            icon="03d",
            humidity=None,
            wind_speed=4.4704,
        )
        self.error = error
        self.calls: List[Tuple[float, float]] = []

    async def get_current_reading(self, latitude: float, longitude: float) -> ForecastReading:
        self.calls.append((latitude, longitude))
        if self.error is not None:
            raise self.error
        return self.reading


class FakeIdentityVerifier:
    """Accepts the tokens it was given; rejects everything else."""

    def __init__(self, identities=None):
        self.identities = dict(identities or {})

    async def verify(self, token: str) -> FederatedIdentity:
        identity = self.identities.get(token)
        if identity is None:
            raise InvalidCredentials("Invalid federated token")
        return identity


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test."""
    Base.metadata.drop_all(sync_engine)
    Base.metadata.create_all(sync_engine)
    yield
    Base.metadata.drop_all(sync_engine)


@pytest.fixture
def sync_db():
    """Sync session on the test database for seeding and assertions."""
    with Session(sync_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def db_session():
    """Async session on the test database."""
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def weather_provider():
    provider = FakeWeatherProvider()
    app.dependency_overrides[get_weather_provider] = lambda: provider
    yield provider
    app.dependency_overrides.pop(get_weather_provider, None)


@pytest.fixture
def identity_verifier():
    verifier = FakeIdentityVerifier(
        {
            "google-token-alice": FederatedIdentity(
                subject="google-sub-alice", email="alice@example.com", name="Alice"
            ),
        }
    )
    app.dependency_overrides[get_identity_verifier] = lambda: verifier
    yield verifier
    app.dependency_overrides.pop(get_identity_verifier, None)


@pytest.fixture
def client():
    """Test client fixture."""
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def registered_user(client):
    """Sign up a user and return the signup response body."""
    response = client.post(
        "/api/signup",
        json={"name": "Test User", "email": "test@example.com", "password": "testpassword123"},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['token']}"}
