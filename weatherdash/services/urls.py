"""OpenWeatherMap endpoint URLs."""

from __future__ import annotations

from enum import Enum
from typing import Any
from urllib.parse import urlencode

from weatherdash.core.config import settings


class OpenWeatherEndpoint(str, Enum):
    CURRENT = "/data/2.5/weather"
    FORECAST = "/data/2.5/forecast"
    AIR_POLLUTION = "/data/2.5/air_pollution"
    REVERSE_GEO = "/geo/1.0/reverse"
    GEO = "/geo/1.0/direct"


def openweather_url(endpoint: OpenWeatherEndpoint, params: dict[str, Any], *, base: str | None = None) -> str:
    """
    Build a full endpoint URL without the API key.

    ex) openweather_url(OpenWeatherEndpoint.GEO, {"q": "Paris", "limit": 5})
        -> "https://api.openweathermap.org/geo/1.0/direct?q=Paris&limit=5"
    """
    root = (base or settings.openweather_base).rstrip("/")
    return f"{root}{endpoint.value}?{urlencode(params)}"


def current_weather(lat: float, lon: float, *, base: str | None = None) -> str:
    return openweather_url(
        OpenWeatherEndpoint.CURRENT,
        {"lat": lat, "lon": lon, "units": settings.openweather_units},
        base=base,
    )


def forecast(lat: float, lon: float, *, base: str | None = None) -> str:
    return openweather_url(
        OpenWeatherEndpoint.FORECAST,
        {"lat": lat, "lon": lon, "units": settings.openweather_units},
        base=base,
    )


def air_pollution(lat: float, lon: float, *, base: str | None = None) -> str:
    return openweather_url(OpenWeatherEndpoint.AIR_POLLUTION, {"lat": lat, "lon": lon}, base=base)


def reverse_geo(lat: float, lon: float, *, base: str | None = None) -> str:
    return openweather_url(
        OpenWeatherEndpoint.REVERSE_GEO,
        {"lat": lat, "lon": lon, "limit": settings.openweather_geo_limit},
        base=base,
    )


def geo(query: str, *, base: str | None = None) -> str:
    return openweather_url(
        OpenWeatherEndpoint.GEO,
        {"q": query, "limit": settings.openweather_geo_limit},
        base=base,
    )


__all__ = [
    "OpenWeatherEndpoint",
    "air_pollution",
    "current_weather",
    "forecast",
    "geo",
    "openweather_url",
    "reverse_geo",
]
