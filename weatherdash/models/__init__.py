"""Weather data models."""

from .weather import (
    AirQuality,
    CurrentWeather,
    DailyForecastEntry,
    HourlyForecastEntry,
    Location,
    WeatherReport,
)

__all__ = [
    "AirQuality",
    "CurrentWeather",
    "DailyForecastEntry",
    "HourlyForecastEntry",
    "Location",
    "WeatherReport",
]
