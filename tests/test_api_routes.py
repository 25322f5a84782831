"""
tests/test_api_routes.py -- Integration tests for the v1 REST routes.

These tests exercise the full stack: FastAPI routing -> AccountService ->
real Argon2 hashing -> AccountStore (SQLite file) -> response serialization.
Only the weather client is mocked.

Coverage:
  - POST /register: 201, 400 invalid credentials, 409 duplicate
  - POST /login: 200 via username and email, 404 wrong password / unknown user,
    identical error bodies for both, Cache-Control: no-store
  - GET /weather: 401 without / with bad token, 200 with the mocked snapshot,
    502 with distinct codes per failing upstream stage

Fixtures used (from conftest.py):
  - api_client: (client, weather_client) -- TestClient plus the MagicMock
    standing in for WeatherClient
"""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from core.models import Coordinate, WeatherSnapshot

_USER = {"username": "jane_doe", "email": "jane@example.com", "password": "Secur3!pass"}
_SNAPSHOT = WeatherSnapshot(temperature=12.5, feels_like=10.1, condition="Light rain", last_updated="2026-10-19 09:15")


def _register(client: TestClient, **overrides):
    body = {**_USER, **overrides}
    return client.post("/api/v1/register", json=body)


def _token(client: TestClient) -> str:
    _register(client)
    resp = client.post("/api/v1/login", json={"identifier": _USER["username"], "password": _USER["password"]})
    assert resp.status_code == 200
    return resp.json()["token"]


class TestRegisterRoute:
    def test_register_created(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        resp = _register(client)
        assert resp.status_code == 201
        assert resp.json() == {"user_id": 1}

    def test_invalid_credentials_400(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        resp = _register(client, username="bad")
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "invalid_credentials"
        assert "at least 6" in error["message"]

    def test_invalid_email_400(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        resp = _register(client, email="not-an-email")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_credentials"

    def test_duplicate_409(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        assert _register(client).status_code == 201
        resp = _register(client, email="other@example.com")
        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "already_registered"

    def test_missing_field_422(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        resp = client.post("/api/v1/register", json={"username": "jane_doe"})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "validation_error"


class TestLoginRoute:
    def test_login_with_username(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        _register(client)
        resp = client.post("/api/v1/login", json={"identifier": "jane_doe", "password": "Secur3!pass"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 86400
        assert resp.headers["cache-control"] == "no-store"

    def test_login_with_email(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        _register(client)
        resp = client.post("/api/v1/login", json={"identifier": "jane@example.com", "password": "Secur3!pass"})
        assert resp.status_code == 200

    def test_login_with_mixed_case_email_domain(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, _ = api_client
        assert _register(client, email="jane@EXAMPLE.com").status_code == 201
        for identifier in ("jane@EXAMPLE.com", "jane@example.com"):
            resp = client.post("/api/v1/login", json={"identifier": identifier, "password": "Secur3!pass"})
            assert resp.status_code == 200, identifier
        duplicate = _register(client, username="someone_else", email="jane@example.com")
        assert duplicate.status_code == 409

    def test_wrong_password_and_unknown_user_look_identical(self, api_client: tuple[TestClient, MagicMock]) -> None:
        """No error path may reveal whether an account exists."""
        client, _ = api_client
        _register(client)
        wrong = client.post("/api/v1/login", json={"identifier": "jane_doe", "password": "wrongpass1"})
        unknown = client.post("/api/v1/login", json={"identifier": "nobody_here", "password": "wrongpass1"})
        assert wrong.status_code == unknown.status_code == 404
        assert wrong.json() == unknown.json()
        assert wrong.json()["error"]["code"] == "wrong_credentials"
        assert wrong.headers["cache-control"] == "no-store"


class TestWeatherRoute:
    def test_no_token_401(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, weather_client = api_client
        resp = client.get("/api/v1/weather")
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "unauthorized"
        assert resp.headers["www-authenticate"] == "Bearer"
        weather_client.resolve_coordinates.assert_not_called()

    def test_bad_token_401(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, weather_client = api_client
        resp = client.get("/api/v1/weather", headers={"Authorization": "Bearer not.a.token"})
        assert resp.status_code == 401
        weather_client.resolve_coordinates.assert_not_called()

    def test_success_returns_mocked_fields(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, weather_client = api_client
        weather_client.resolve_coordinates.return_value = Coordinate(51.5, -0.12)
        weather_client.fetch_weather.return_value = _SNAPSHOT

        resp = client.get("/api/v1/weather", headers={"Authorization": f"Bearer {_token(client)}"})

        assert resp.status_code == 200
        assert resp.json() == {
            "temperature": 12.5,
            "feels_like": 10.1,
            "condition": "Light rain",
            "last_updated": "2026-10-19 09:15",
        }
        weather_client.fetch_weather.assert_called_once_with(Coordinate(51.5, -0.12))

    def test_geolocation_failure_502(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, weather_client = api_client
        weather_client.resolve_coordinates.return_value = None

        resp = client.get("/api/v1/weather", headers={"Authorization": f"Bearer {_token(client)}"})

        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "geolocation_query_failed"
        weather_client.fetch_weather.assert_not_called()

    def test_weather_failure_502(self, api_client: tuple[TestClient, MagicMock]) -> None:
        client, weather_client = api_client
        weather_client.resolve_coordinates.return_value = Coordinate(51.5, -0.12)
        weather_client.fetch_weather.return_value = None

        resp = client.get("/api/v1/weather", headers={"Authorization": f"Bearer {_token(client)}"})

        assert resp.status_code == 502
        assert resp.json()["error"]["code"] == "weather_query_failed"
