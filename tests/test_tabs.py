from __future__ import annotations

import pytest

from weatherdash.services.tabs import DEFAULT_TABS, TabState
from weatherdash.services.view import WeatherView


def test_default_tab_is_today() -> None:
    tabs = TabState()

    assert tabs.active == "today"
    assert tabs.tab_ids == ["today", "hourly", "forecast"]
    assert tabs.panel_visible("today")
    assert not tabs.panel_visible("forecast")
    assert not tabs.animate


def test_switch_marks_one_active() -> None:
    tabs = TabState().switch("forecast")

    assert [tab_id for tab_id, _ in DEFAULT_TABS if tabs.is_active(tab_id)] == ["forecast"]
    assert tabs.animate


def test_unknown_tab_rejected() -> None:
    with pytest.raises(ValueError):
        TabState().switch("radar")


@pytest.mark.asyncio
async def test_view_switch_keeps_report(service, transport) -> None:
    view = WeatherView(service)
    await view.update_weather(51.5, -0.12)
    requests_before = len(transport.requests)

    state = view.switch_tab("hourly")

    assert state.tabs.active == "hourly"
    assert len(state.hourly) == 8
    assert len(transport.requests) == requests_before


@pytest.mark.asyncio
async def test_new_update_keeps_selected_tab(service) -> None:
    view = WeatherView(service)
    view.switch_tab("forecast")

    state = await view.update_weather(51.5, -0.12)

    assert state.tabs.active == "forecast"
