"""OpenWeatherMap HTTP access."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from weatherdash.core.config import settings
from weatherdash.services import urls

logger = logging.getLogger(__name__)


class WeatherAPIError(Exception):
    """Raised when the upstream provider cannot produce a usable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UpstreamUnavailableError(WeatherAPIError):
    """Connection failures and timeouts."""

    def __init__(self, message: str, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


class UpstreamStatusError(WeatherAPIError):
    """The provider answered with a non-2xx status."""


class MalformedPayloadError(WeatherAPIError):
    """The body is not JSON or lacks a field we rely on."""


class MissingAPIKeyError(WeatherAPIError):
    """No OpenWeather key is configured, so nothing can be fetched."""


def _provider_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def _redact(url: httpx.URL) -> str:
    return str(url.copy_remove_param("appid"))


async def fetch_data(
    url: str,
    *,
    api_key: str,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """GET ``url`` with the API key appended and return the decoded JSON body."""

    async with httpx.AsyncClient(transport=transport, timeout=timeout or settings.weather_api_timeout) as client:
        try:
            logger.debug("Fetching OpenWeather endpoint: %s", url)
            response = await client.get(httpx.URL(url).copy_merge_params({"appid": api_key}))
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.warning("OpenWeather request timed out (%s): %s", url, exc)
            raise UpstreamUnavailableError(f"Weather service timed out: {exc}", timed_out=True) from exc
        except httpx.HTTPStatusError as exc:
            message = _provider_message(exc.response)
            logger.warning(
                "OpenWeather error response: %s %s (%s)",
                exc.response.status_code,
                message,
                _redact(exc.request.url),
            )
            raise UpstreamStatusError(
                f"Weather service error: {message}", status_code=exc.response.status_code
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("Failed to reach OpenWeather (%s): %s", url, exc, exc_info=True)
            raise UpstreamUnavailableError(f"Failed to reach weather service: {exc}") from exc

    try:
        return response.json()
    except ValueError as exc:
        logger.error("OpenWeather returned a non-JSON body for %s: %s", url, response.text[:500])
        raise MalformedPayloadError("Weather service returned an unreadable response") from exc


class OpenWeatherClient:
    """Thin wrapper around the OpenWeatherMap endpoints used by the dashboard."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key or settings.openweather_api_key
        self.base_url = base_url or settings.openweather_base
        self.timeout = timeout or settings.weather_api_timeout
        self.transport = transport

    async def _get(self, url: str) -> Any:
        if not self.api_key:
            logger.error("OPENWEATHER_API_KEY is not set; refusing to call %s", url)
            raise MissingAPIKeyError("Weather service is not configured: OPENWEATHER_API_KEY is missing")
        return await fetch_data(url, api_key=self.api_key, timeout=self.timeout, transport=self.transport)

    async def current_weather(self, lat: float, lon: float) -> dict[str, Any]:
        return await self._get(urls.current_weather(lat, lon, base=self.base_url))

    async def forecast(self, lat: float, lon: float) -> dict[str, Any]:
        return await self._get(urls.forecast(lat, lon, base=self.base_url))

    async def air_pollution(self, lat: float, lon: float) -> dict[str, Any]:
        return await self._get(urls.air_pollution(lat, lon, base=self.base_url))

    async def reverse_geo(self, lat: float, lon: float) -> list[dict[str, Any]]:
        return await self._get(urls.reverse_geo(lat, lon, base=self.base_url))

    async def geo(self, query: str) -> list[dict[str, Any]]:
        return await self._get(urls.geo(query, base=self.base_url))


__all__ = [
    "MalformedPayloadError",
    "MissingAPIKeyError",
    "OpenWeatherClient",
    "UpstreamStatusError",
    "UpstreamUnavailableError",
    "WeatherAPIError",
    "fetch_data",
]
