"""Hourly and daily views over the 5-day/3-hour forecast list."""

from __future__ import annotations

from typing import Any, Sequence

from weatherdash.core.config import settings
from weatherdash.models import DailyForecastEntry, HourlyForecastEntry


def hourly_entries(forecast_list: Sequence[dict[str, Any]], limit: int | None = None) -> list[HourlyForecastEntry]:
    """The first ``limit`` 3-hour slots (24 hours by default)."""
    limit = settings.hourly_forecast_limit if limit is None else limit
    return [HourlyForecastEntry.from_payload(item) for item in forecast_list[:limit]]


def daily_entries(
    forecast_list: Sequence[dict[str, Any]],
    offset: int | None = None,
    step: int | None = None,
) -> list[DailyForecastEntry]:
    """
    One slot per day: indices ``offset, offset + step, ...``.

    With 3-hour slots a step of 8 lands on the same hour every day.
    """
    offset = settings.daily_forecast_offset if offset is None else offset
    step = settings.daily_forecast_step if step is None else step
    if step < 1:
        raise ValueError("step must be positive")
    return [DailyForecastEntry.from_payload(forecast_list[i]) for i in range(offset, len(forecast_list), step)]


__all__ = ["daily_entries", "hourly_entries"]
