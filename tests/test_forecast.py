from __future__ import annotations

import pytest
from conftest import forecast_payload

from weatherdash.services.forecast import daily_entries, hourly_entries


@pytest.mark.parametrize("count", [0, 3, 8, 40])
def test_hourly_is_first_eight_slots(count: int) -> None:
    slots = forecast_payload(count)["list"]

    entries = hourly_entries(slots)

    assert len(entries) == min(8, count)
    assert [e.timestamp_unix for e in entries] == [s["dt"] for s in slots[:8]]


def test_daily_samples_every_eighth_slot_from_index_seven() -> None:
    slots = forecast_payload(40)["list"]

    entries = daily_entries(slots)

    # temp_max in the fixture equals the slot index
    assert [e.max_temperature for e in entries] == [7.0, 15.0, 23.0, 31.0, 39.0]
    assert len({e.date_text[:10] for e in entries}) == len(entries)


def test_daily_short_lists() -> None:
    assert daily_entries(forecast_payload(7)["list"]) == []
    assert [e.max_temperature for e in daily_entries(forecast_payload(8)["list"])] == [7.0]


def test_daily_rejects_zero_step() -> None:
    with pytest.raises(ValueError):
        daily_entries(forecast_payload(8)["list"], step=0)
