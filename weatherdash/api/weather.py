"""JSON access to weather reports and geocoding."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from weatherdash.api.deps import get_weather_service
from weatherdash.models import Location, WeatherReport
from weatherdash.services.openweather import MissingAPIKeyError, UpstreamUnavailableError, WeatherAPIError
from weatherdash.services.weather import WeatherService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weather"])


def _upstream_error(exc: WeatherAPIError) -> HTTPException:
    if isinstance(exc, MissingAPIKeyError):
        return HTTPException(status_code=503, detail=exc.message)
    if isinstance(exc, UpstreamUnavailableError) and exc.timed_out:
        return HTTPException(status_code=504, detail=exc.message)
    return HTTPException(status_code=502, detail=exc.message)


@router.get("/weather", response_model=WeatherReport)
async def weather_report(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
) -> WeatherReport:
    """Current conditions, hourly and daily forecast and air quality for one point."""
    try:
        return await service.report(lat, lon)
    except WeatherAPIError as exc:
        raise _upstream_error(exc) from exc


@router.get("/locations", response_model=List[Location])
async def search_locations(
    q: str = Query(..., min_length=1),
    service: WeatherService = Depends(get_weather_service),
) -> List[Location]:
    try:
        return await service.search(q)
    except WeatherAPIError as exc:
        raise _upstream_error(exc) from exc


@router.get("/locations/reverse", response_model=List[Location])
async def reverse_locations(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    service: WeatherService = Depends(get_weather_service),
) -> List[Location]:
    try:
        return await service.reverse(lat, lon)
    except WeatherAPIError as exc:
        raise _upstream_error(exc) from exc


__all__ = ["router"]
