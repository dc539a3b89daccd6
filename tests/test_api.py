from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import RecordingTransport
from weatherdash import app
from weatherdash.api.deps import get_weather_service
from weatherdash.services.openweather import OpenWeatherClient
from weatherdash.services.weather import WeatherService


@pytest.fixture
def make_client():
    def _make(routes=None) -> TestClient:
        service = WeatherService(OpenWeatherClient(api_key="test-key", transport=RecordingTransport(routes)))
        app.dependency_overrides[get_weather_service] = lambda: service
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


def test_health(make_client) -> None:
    response = make_client().get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "openweather_configured" in response.json()


def test_weather_report_json(make_client) -> None:
    response = make_client().get("/api/weather", params={"lat": 51.5, "lon": -0.12})

    assert response.status_code == 200
    body = response.json()
    assert body["current"]["description"] == "broken clouds"
    assert body["location_label"] == "London, GB"
    assert len(body["hourly"]) == 8
    assert [day["max_temperature"] for day in body["daily"]] == [7.0, 15.0, 23.0, 31.0, 39.0]
    assert body["air_quality"]["aqi_index"] == 2


def test_weather_report_upstream_failure(make_client) -> None:
    client = make_client({"/data/2.5/air_pollution": httpx.Response(500, json={"message": "boom"})})

    response = client.get("/api/weather", params={"lat": 51.5, "lon": -0.12})

    assert response.status_code == 502
    assert "boom" in response.json()["detail"]


def test_weather_report_timeout(make_client) -> None:
    def slow(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    response = make_client({"/data/2.5/weather": slow}).get("/api/weather", params={"lat": 1, "lon": 2})

    assert response.status_code == 504


def test_weather_report_validates_coordinates(make_client) -> None:
    response = make_client().get("/api/weather", params={"lat": 91, "lon": 0})

    assert response.status_code == 422


def test_location_search(make_client) -> None:
    response = make_client().get("/api/locations", params={"q": "London"})

    assert response.status_code == 200
    assert [place["country"] for place in response.json()] == ["GB", "CA"]


def test_location_search_requires_query(make_client) -> None:
    response = make_client().get("/api/locations", params={"q": ""})

    assert response.status_code == 422


def test_reverse_lookup(make_client) -> None:
    response = make_client().get("/api/locations/reverse", params={"lat": 51.5, "lon": -0.12})

    assert response.status_code == 200
    assert response.json()[0]["name"] == "London"


def test_logs_endpoint(make_client) -> None:
    client = make_client()
    client.get("/api/weather", params={"lat": 51.5, "lon": -0.12})

    response = client.get("/api/logs", params={"limit": 5})

    assert response.status_code == 200
    logs = response.json()["logs"]
    assert isinstance(logs, list)
    assert len(logs) <= 5


def test_missing_api_key_is_service_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    from weatherdash.core.config import settings

    monkeypatch.setattr(settings, "openweather_api_key", "")
    client = TestClient(app)

    response = client.get("/api/weather", params={"lat": 51.5, "lon": -0.12})

    assert response.status_code == 503
    assert "OPENWEATHER_API_KEY" in response.json()["detail"]
    assert client.get("/api/health").json()["openweather_configured"] is False
