from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from weatherdash.services.openweather import OpenWeatherClient
from weatherdash.services.weather import WeatherService

BASE_DT = 1704412800  # 2024-01-05 00:00:00 UTC


def current_payload(description: str = "broken clouds", icon: str = "01d") -> dict[str, Any]:
    return {
        "weather": [{"description": description, "icon": icon}],
        "main": {"temp": 7.8, "feels_like": 4.2, "pressure": 1012, "humidity": 81},
        "visibility": 10000,
        "sys": {"sunrise": 1704441900, "sunset": 1704470400},
        "timezone": 0,
        "dt": BASE_DT,
    }


def forecast_item(index: int, description: str = "clear sky", icon: str = "01d") -> dict[str, Any]:
    dt = BASE_DT + index * 10800
    return {
        "dt": dt,
        "dt_txt": datetime.fromtimestamp(dt, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        "main": {"temp": 5.5 + index, "temp_max": float(index)},
        "weather": [{"description": description, "icon": icon}],
        "wind": {"deg": 270, "speed": 5.0},
    }


def forecast_payload(count: int = 40) -> dict[str, Any]:
    return {"list": [forecast_item(i) for i in range(count)], "city": {"timezone": 0}}


def air_payload(aqi: int = 2) -> dict[str, Any]:
    return {
        "list": [
            {
                "main": {"aqi": aqi},
                "components": {"no2": 12.34, "o3": 56.78, "so2": 0.5, "pm2_5": 3.456},
            }
        ]
    }


def geo_payload() -> list[dict[str, Any]]:
    return [
        {"name": "London", "country": "GB", "state": "England", "lat": 51.5073219, "lon": -0.1276474},
        {"name": "London", "country": "CA", "state": "Ontario", "lat": 42.9832406, "lon": -81.243372},
    ]


DEFAULT_ROUTES: dict[str, Any] = {
    "/data/2.5/weather": current_payload(),
    "/data/2.5/forecast": forecast_payload(),
    "/data/2.5/air_pollution": air_payload(),
    "/geo/1.0/reverse": [geo_payload()[0]],
    "/geo/1.0/direct": geo_payload(),
}


class RecordingTransport(httpx.MockTransport):
    """Serves canned OpenWeather payloads by path and remembers every request."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes = dict(DEFAULT_ROUTES)
        self.routes.update(routes or {})
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"cod": "404", "message": "not found"})
        if callable(route):
            result = route(request)
            if not isinstance(result, httpx.Response):
                result = await result
            return result
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def make_service() -> Callable[..., tuple[WeatherService, RecordingTransport]]:
    def _make(routes: dict[str, Any] | None = None) -> tuple[WeatherService, RecordingTransport]:
        transport = RecordingTransport(routes)
        client = OpenWeatherClient(api_key="test-key", transport=transport)
        return WeatherService(client), transport

    return _make


@pytest.fixture
def service(transport: RecordingTransport) -> WeatherService:
    return WeatherService(OpenWeatherClient(api_key="test-key", transport=transport))
