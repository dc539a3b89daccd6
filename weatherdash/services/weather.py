"""Sequential weather chain: current conditions, forecast, then air quality."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, TypeVar

from weatherdash.models import AirQuality, CurrentWeather, Location, WeatherReport
from weatherdash.services.forecast import daily_entries, hourly_entries
from weatherdash.services.openweather import MalformedPayloadError, OpenWeatherClient, WeatherAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")

StageCallback = Callable[[str, WeatherReport], None]

STAGES = ("current", "forecast", "air_quality", "location")


def _parse(parser: Callable[[Any], T], payload: Any, what: str) -> T:
    try:
        return parser(payload)
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        logger.error("Unexpected %s payload shape: %r", what, exc)
        raise MalformedPayloadError(f"Weather service returned incomplete {what} data") from exc


def _locations(payload: Any, what: str) -> list[Location]:
    if not isinstance(payload, list):
        raise MalformedPayloadError(f"Weather service returned incomplete {what} data")
    return [_parse(Location.from_payload, item, what) for item in payload]


class WeatherService:
    """Assemble a :class:`WeatherReport` for one coordinate pair."""

    def __init__(self, client: OpenWeatherClient) -> None:
        self.client = client

    async def report(self, lat: float, lon: float, on_stage: StageCallback | None = None) -> WeatherReport:
        """
        Fetch current weather, forecast and air quality strictly in that order.

        ``on_stage`` is called after each stage with the partially filled
        report. The place-name lookup starts once current weather is in and
        runs alongside the rest of the chain; it is the only stage allowed to
        fail quietly.
        """

        report = WeatherReport(latitude=lat, longitude=lon)
        label_task: asyncio.Task[str | None] | None = None

        def notify(stage: str) -> None:
            if on_stage is not None:
                on_stage(stage, report)

        try:
            payload = await self.client.current_weather(lat, lon)
            report.current = _parse(CurrentWeather.from_payload, payload, "current weather")
            notify("current")
            label_task = asyncio.create_task(self.location_label(lat, lon))

            payload = await self.client.forecast(lat, lon)
            slots = _parse(lambda p: p["list"], payload, "forecast")
            report.forecast_timezone_offset = _parse(lambda p: p["city"]["timezone"], payload, "forecast")
            report.hourly = _parse(hourly_entries, slots, "forecast")
            report.daily = _parse(daily_entries, slots, "forecast")
            notify("forecast")

            payload = await self.client.air_pollution(lat, lon)
            report.air_quality = _parse(AirQuality.from_payload, payload, "air pollution")
            notify("air_quality")

            report.location_label = await label_task
            notify("location")
        finally:
            if label_task is not None and not label_task.done():
                label_task.cancel()

        logger.info("Weather report ready for lat=%s, lon=%s", lat, lon)
        return report

    async def location_label(self, lat: float, lon: float) -> str | None:
        try:
            places = await self.reverse(lat, lon)
        except WeatherAPIError as exc:
            logger.warning("Reverse geocoding failed for lat=%s, lon=%s: %s", lat, lon, exc)
            return None
        if not places:
            logger.info("No place name found for lat=%s, lon=%s", lat, lon)
            return None
        return places[0].label

    async def search(self, query: str) -> list[Location]:
        payload = await self.client.geo(query)
        return _locations(payload, "location search")

    async def reverse(self, lat: float, lon: float) -> list[Location]:
        payload = await self.client.reverse_geo(lat, lon)
        return _locations(payload, "reverse geocoding")


__all__ = ["STAGES", "StageCallback", "WeatherService"]
