"""API dependencies."""

from __future__ import annotations

from weatherdash.services.openweather import OpenWeatherClient
from weatherdash.services.weather import WeatherService


def get_weather_service() -> WeatherService:
    return WeatherService(OpenWeatherClient())
