"""Per-browser dashboard state and the weather update orchestration."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass, field, replace
from typing import Callable
from urllib.parse import urlencode

from weatherdash.models import AirQuality, CurrentWeather, DailyForecastEntry, HourlyForecastEntry, WeatherReport
from weatherdash.services.openweather import UpstreamUnavailableError, WeatherAPIError
from weatherdash.services.search import LocationSearch
from weatherdash.services.tabs import TabState
from weatherdash.services.weather import WeatherService

logger = logging.getLogger(__name__)

CURRENT_LOCATION_ROUTE = "/current-location"
WEATHER_ROUTE = "/weather"


@dataclass(frozen=True)
class FetchFailure:
    message: str
    retry_path: str
    status_code: int | None = None
    timed_out: bool = False


@dataclass(frozen=True)
class Highlights:
    current: CurrentWeather
    air_quality: AirQuality


@dataclass(frozen=True)
class ViewState:
    route: str = WEATHER_ROUTE
    loading: bool = False
    error_visible: bool = False
    current_location_disabled: bool = False
    failure: FetchFailure | None = None
    report: WeatherReport | None = None
    tabs: TabState = field(default_factory=TabState)

    @property
    def now(self) -> CurrentWeather | None:
        return self.report.current if self.report else None

    @property
    def hourly(self) -> list[HourlyForecastEntry]:
        return self.report.hourly if self.report else []

    @property
    def daily(self) -> list[DailyForecastEntry]:
        return self.report.daily if self.report else []

    @property
    def highlights(self) -> Highlights | None:
        if not self.report or not self.report.current or not self.report.air_quality:
            return None
        return Highlights(current=self.report.current, air_quality=self.report.air_quality)

    @property
    def revealed(self) -> bool:
        return not self.loading and self.failure is None and self.report is not None


class CancellationToken:
    """Marks one update chain; once cancelled the chain may no longer write view state."""

    def __init__(self, generation: int) -> None:
        self.generation = generation
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def active(self) -> bool:
        return not self._cancelled


def weather_partial_path(lat: float, lon: float, route: str) -> str:
    return "/dashboard/partials/weather?" + urlencode({"lat": lat, "lon": lon, "route": route})


class WeatherView:
    """Everything one browser tab sees; the newest update always wins."""

    def __init__(self, service: WeatherService, search_delay: float | None = None) -> None:
        self.service = service
        self.state = ViewState()
        self.search = LocationSearch(service, delay_seconds=search_delay)
        self._token: CancellationToken | None = None
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

    def _supersede(self) -> CancellationToken:
        if self._token is not None:
            self._token.cancel()
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        self._generation += 1
        self._token = CancellationToken(self._generation)
        return self._token

    async def update_weather(self, lat: float, lon: float, *, route: str = WEATHER_ROUTE) -> ViewState | None:
        """
        Rebuild the view for ``(lat, lon)``.

        Any chain still running for this view is cancelled first. Returns the
        final state, or ``None`` when a newer update took over meanwhile.
        """

        token = self._supersede()
        self.state = ViewState(
            route=route,
            loading=True,
            current_location_disabled=route == CURRENT_LOCATION_ROUTE,
            report=WeatherReport(latitude=lat, longitude=lon),
            tabs=self.state.tabs,
        )
        task = asyncio.create_task(self._run(token, lat, lon, route))
        self._task = task
        try:
            await task
        except asyncio.CancelledError:
            if not token.active:
                logger.info("Weather update for lat=%s, lon=%s superseded", lat, lon)
                return None
            task.cancel()
            raise
        return self.state if token.active else None

    async def _run(self, token: CancellationToken, lat: float, lon: float, route: str) -> None:
        def commit(stage: str, report: WeatherReport) -> None:
            if token.active:
                logger.info("Weather stage %s committed", stage, extra={"stage": stage, "lat": lat, "lon": lon})
                self.state = replace(self.state, report=report)

        try:
            await self.service.report(lat, lon, on_stage=commit)
        except WeatherAPIError as exc:
            logger.warning(
                "Weather update failed: %s", exc, extra={"stage": "failed", "lat": lat, "lon": lon}
            )
            if token.active:
                failure = FetchFailure(
                    message=exc.message,
                    retry_path=weather_partial_path(lat, lon, route),
                    status_code=exc.status_code,
                    timed_out=isinstance(exc, UpstreamUnavailableError) and exc.timed_out,
                )
                self.state = replace(self.state, loading=False, failure=failure)
            return

        if token.active:
            self.state = replace(self.state, loading=False)

    def error404(self) -> ViewState:
        """Show the not-found panel and drop the loading indicator."""
        self._supersede()
        self.state = replace(self.state, error_visible=True, loading=False)
        return self.state

    def switch_tab(self, target: str) -> ViewState:
        self.state = replace(self.state, tabs=self.state.tabs.switch(target))
        return self.state

    def close(self) -> None:
        self._supersede()
        self.search.close()


class ViewRegistry:
    """Bounded map of view id to :class:`WeatherView`, least recently used first out."""

    def __init__(self, max_views: int = 256) -> None:
        self.max_views = max(1, max_views)
        self._views: OrderedDict[str, WeatherView] = OrderedDict()

    def get(self, view_id: str, factory: Callable[[], WeatherView]) -> WeatherView:
        view = self._views.get(view_id)
        if view is not None:
            self._views.move_to_end(view_id)
            return view
        view = factory()
        self._views[view_id] = view
        while len(self._views) > self.max_views:
            _, evicted = self._views.popitem(last=False)
            evicted.close()
        return view

    def __contains__(self, view_id: object) -> bool:
        return view_id in self._views

    def __len__(self) -> int:
        return len(self._views)

    def clear(self) -> None:
        for view in self._views.values():
            view.close()
        self._views.clear()


__all__ = [
    "CURRENT_LOCATION_ROUTE",
    "CancellationToken",
    "FetchFailure",
    "Highlights",
    "ViewRegistry",
    "ViewState",
    "WEATHER_ROUTE",
    "WeatherView",
    "weather_partial_path",
]
