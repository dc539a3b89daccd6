from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from conftest import RecordingTransport
from weatherdash import app
from weatherdash.api.deps import get_weather_service
from weatherdash.core.config import settings
from weatherdash.core.logging_config import log_context, recent_logs, setup_logging
from weatherdash.dashboard import VIEWS
from weatherdash.services.openweather import OpenWeatherClient
from weatherdash.services.weather import WeatherService

logger = logging.getLogger("weatherdash.tests.logging")


def test_records_carry_bound_view_context() -> None:
    setup_logging()

    with log_context(view_id="view-ctx", path="/weather"):
        logger.warning("stage landed", extra={"stage": "forecast", "lat": 1.5})
    logger.warning("outside any request")

    entry = recent_logs(1, view_id="view-ctx")[0]
    assert entry["message"] == "stage landed"
    assert entry["path"] == "/weather"
    assert entry["stage"] == "forecast"
    assert entry["lat"] == "1.5"
    assert entry["level"] == "WARNING"
    assert "view_id" not in recent_logs(1)[0]


def test_nested_context_merges_fields() -> None:
    setup_logging()

    with log_context(view_id="outer-view"):
        with log_context(path="/current-location"):
            logger.warning("nested")

    entry = recent_logs(1, view_id="outer-view")[0]
    assert entry["path"] == "/current-location"


def test_min_level_filter() -> None:
    setup_logging()

    with log_context(view_id="level-view"):
        logger.info("chatty")
        logger.error("loud")

    assert [e["message"] for e in recent_logs(10, view_id="level-view", min_level="warning")] == ["loud"]
    with pytest.raises(ValueError):
        recent_logs(10, min_level="LOUDEST")


@pytest.fixture
def client() -> TestClient:
    VIEWS.clear()
    service = WeatherService(OpenWeatherClient(api_key="test-key", transport=RecordingTransport()))
    app.dependency_overrides[get_weather_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
    VIEWS.clear()


def test_chain_stages_are_logged_per_view(client: TestClient) -> None:
    client.get("/dashboard/partials/weather", params={"lat": 51.5, "lon": -0.12})
    view_id = client.cookies.get(settings.view_cookie_name)

    response = client.get("/api/logs", params={"view_id": view_id, "limit": 50})

    assert response.status_code == 200
    stages = [entry.get("stage") for entry in response.json()["logs"]]
    assert {"current", "forecast", "air_quality", "location"} <= set(stages)
    assert all(entry["view_id"] == view_id for entry in response.json()["logs"])


def test_logs_endpoint_rejects_unknown_level(client: TestClient) -> None:
    response = client.get("/api/logs", params={"level": "LOUDEST"})

    assert response.status_code == 422
