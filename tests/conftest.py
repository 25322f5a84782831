"""
tests/conftest.py -- Shared test fixtures for WeatherGate.

This module provides:
  - store / hasher / issuer / service: the auth components wired to a
    throwaway SQLite file under tmp_path
  - api_client: TestClient whose lifespan is replaced by one that wires the
    same components into app.state, with a MagicMock weather client so no
    test ever reaches the real geolocation or weather services

File databases (not :memory:) are used because store calls run on worker
threads via asyncio.to_thread and TestClient's threadpool. A plain
:memory: database is per-connection and would look empty from those threads.

JWT_SECRET must be set before any api/ import: api/main.py loads settings at
import time and refuses to start without it.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

# CRITICAL: set before importing api.main, which calls get_settings().
os.environ.setdefault("JWT_SECRET", "test-secret-for-weathergate-0123456789abcdef")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from api.main import app
from auth.passwords import CredentialHasher
from auth.service import AccountService
from auth.store import AccountStore
from auth.tokens import TokenIssuer
from core.config import get_settings
from core.fetcher import WeatherClient

TEST_SECRET = os.environ["JWT_SECRET"]


@pytest.fixture
def store(tmp_path) -> Generator[AccountStore, None, None]:
    s = AccountStore(db_url=f"sqlite:///{tmp_path / 'accounts.db'}")
    yield s
    s.close()


@pytest.fixture
def account_rows(store: AccountStore) -> Callable[[], list]:
    """Return a callable listing every stored account row, ordered by id.

    Tests inspect the table directly; the store itself only exposes the
    insert and lookup the auth flows use.
    """

    def rows() -> list:
        with store.engine.connect() as conn:
            return list(conn.execute(text("SELECT id, username, email, password_hash, created_at FROM accounts ORDER BY id")))

    return rows


@pytest.fixture
def hasher() -> Generator[CredentialHasher, None, None]:
    h = CredentialHasher(max_workers=2)
    yield h
    h.close()


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def service(store: AccountStore, hasher: CredentialHasher, issuer: TokenIssuer) -> AccountService:
    return AccountService(store, hasher, issuer)


@pytest.fixture
def weather_client() -> MagicMock:
    """Stand-in for WeatherClient. Tests set resolve_coordinates / fetch_weather return values."""
    return MagicMock(spec=WeatherClient)


def _patch_lifespan(service: AccountService, weather_client: MagicMock):
    """Return an async context manager that replaces the real lifespan.

    Wires pre-created test components into app.state so TestClient routes see
    an isolated database and a mocked weather client.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = get_settings()
        app.state.store = service.store
        app.state.hasher = service.hasher
        app.state.issuer = service.issuer
        app.state.accounts = service
        app.state.weather_client = weather_client
        yield

    return test_lifespan


@pytest.fixture
def api_client(
    service: AccountService, weather_client: MagicMock
) -> Generator[tuple[TestClient, MagicMock], None, None]:
    """Yield (client, weather_client) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers, real hashing and a real database, but
    never the network.
    """
    original = app.router.lifespan_context
    app.router.lifespan_context = _patch_lifespan(service, weather_client)
    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, weather_client
    app.router.lifespan_context = original
