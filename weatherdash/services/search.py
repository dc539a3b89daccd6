"""Debounced location search behind the search box."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace

from weatherdash.core.config import settings
from weatherdash.models import Location
from weatherdash.services.openweather import WeatherAPIError
from weatherdash.services.weather import WeatherService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchState:
    query: str = ""
    searching: bool = False
    active: bool = False
    results: list[Location] = field(default_factory=list)
    failure: str | None = None


class LocationSearch:
    """
    Per-view search box state.

    Every keystroke supersedes the previous one; only input left untouched
    for the debounce delay reaches the geocoding endpoint.
    """

    def __init__(self, service: WeatherService, delay_seconds: float | None = None) -> None:
        self.service = service
        self.delay = settings.search_debounce_seconds if delay_seconds is None else delay_seconds
        self.state = SearchState()
        self._pending: asyncio.Task[SearchState] | None = None
        self._generation = 0

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def on_input(self, value: str) -> SearchState | None:
        """Handle one input event. Returns ``None`` if newer input superseded it."""

        self._cancel_pending()
        self._generation += 1
        generation = self._generation

        if not value:
            self.state = SearchState()
            return self.state

        self.state = replace(self.state, query=value, searching=True)
        task = asyncio.create_task(self._search_after_delay(value, generation))
        self._pending = task
        try:
            return await task
        except asyncio.CancelledError:
            if generation != self._generation:
                logger.debug("Search for %r superseded by newer input", value)
                return None
            task.cancel()
            raise

    async def _search_after_delay(self, value: str, generation: int) -> SearchState:
        await asyncio.sleep(self.delay)
        try:
            results = await self.service.search(value)
        except WeatherAPIError as exc:
            logger.warning("Location search failed for %r: %s", value, exc)
            state = SearchState(query=value, active=True, failure=exc.message)
        else:
            state = SearchState(query=value, active=True, results=results)
        if generation == self._generation:
            self.state = state
        return state

    def close(self) -> SearchState:
        """A result was picked: hide the result panel."""
        self._generation += 1
        self._cancel_pending()
        self.state = replace(self.state, active=False, searching=False)
        return self.state


__all__ = ["LocationSearch", "SearchState"]
