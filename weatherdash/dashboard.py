"""Dashboard page routes and partials."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Any, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from weatherdash.api.deps import get_weather_service
from weatherdash.core.config import settings
from weatherdash.core.logging_config import log_context
from weatherdash.services import formatting
from weatherdash.services.tabs import ANIMATION_DELAY_MS
from weatherdash.services.view import (
    CURRENT_LOCATION_ROUTE,
    WEATHER_ROUTE,
    ViewRegistry,
    ViewState,
    WeatherView,
    weather_partial_path,
)
from weatherdash.services.weather import WeatherService

PACKAGE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))
templates.env.filters["date_label"] = formatting.get_date
templates.env.filters["time_label"] = formatting.get_time
templates.env.filters["hour_label"] = formatting.get_hours
templates.env.filters["kmh"] = formatting.mps_to_kmh
templates.env.filters["km"] = formatting.meters_to_km
templates.env.filters["precision"] = formatting.to_precision
templates.env.filters["daily_label"] = formatting.daily_label
templates.env.globals["aqi_text"] = formatting.aqi_text
templates.env.globals["weather_icon"] = formatting.weather_icon
templates.env.globals["icon_url"] = formatting.icon_url
templates.env.globals["animation_delay_ms"] = ANIMATION_DELAY_MS

router = APIRouter()
logger = logging.getLogger(__name__)

VIEWS = ViewRegistry(settings.max_views)


def get_view_id(request: Request) -> str:
    view_id = getattr(request.state, "view_id", None)
    return view_id or request.cookies.get(settings.view_cookie_name) or uuid.uuid4().hex


def get_view(request: Request, service: WeatherService = Depends(get_weather_service)) -> WeatherView:
    return VIEWS.get(get_view_id(request), lambda: WeatherView(service))


async def ensure_view_cookie(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Give every browser a stable view id so its dashboard state survives requests."""

    issued = None
    view_id = request.cookies.get(settings.view_cookie_name)
    if not view_id:
        view_id = issued = uuid.uuid4().hex
        request.state.view_id = issued
    with log_context(view_id=view_id, path=request.url.path):
        response = await call_next(request)
    if issued:
        response.set_cookie(settings.view_cookie_name, issued, httponly=True, samesite="lax")
    return response


def _default_path() -> str:
    return f"{WEATHER_ROUTE}?lat={settings.default_latitude}&lon={settings.default_longitude}"


def _parse_coordinates(lat: str | None, lon: str | None) -> tuple[float, float] | None:
    try:
        latitude, longitude = float(lat), float(lon)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return None
    return latitude, longitude


def _render_shell(
    request: Request,
    route: str,
    view: WeatherView,
    partial_path: str | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "dashboard/index.html",
        {
            "state": view.state,
            "search": view.search.state,
            "route": route,
            "partial_path": partial_path,
            "default_path": _default_path(),
            "current_location_route": CURRENT_LOCATION_ROUTE,
            "app_name": settings.app_name,
        },
        status_code=status_code,
    )


def _render_weather(request: Request, state: ViewState) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "dashboard/partials/weather.html",
        {"state": state, "report": state.report, "tabs": state.tabs},
    )


def _render_search(request: Request, view: WeatherView) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "dashboard/partials/search.html",
        {"search": view.search.state},
    )


@router.get("/", include_in_schema=False)
def index() -> RedirectResponse:
    return RedirectResponse(CURRENT_LOCATION_ROUTE)


@router.get(CURRENT_LOCATION_ROUTE, response_class=HTMLResponse)
def current_location_page(request: Request, view: WeatherView = Depends(get_view)) -> Any:
    """Shell page; the browser supplies coordinates via geolocation."""
    return _render_shell(request, CURRENT_LOCATION_ROUTE, view)


@router.get(WEATHER_ROUTE, response_class=HTMLResponse)
def weather_page(
    request: Request,
    lat: str | None = None,
    lon: str | None = None,
    view: WeatherView = Depends(get_view),
) -> Any:
    """Shell page for a searched location."""
    coords = _parse_coordinates(lat, lon)
    if coords is None:
        logger.info("Weather route without usable coordinates: %s", request.url.query)
        view.error404()
        return _render_shell(request, WEATHER_ROUTE, view, status_code=404)
    # Arriving here from a search result closes the result panel
    view.search.close()
    return _render_shell(
        request,
        WEATHER_ROUTE,
        view,
        partial_path=weather_partial_path(coords[0], coords[1], WEATHER_ROUTE),
    )


@router.get("/dashboard/partials/weather", response_class=HTMLResponse)
async def weather_partial(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    route: str = Query(WEATHER_ROUTE),
    view: WeatherView = Depends(get_view),
) -> Any:
    """Run the weather chain for this view and render every section."""
    state = await view.update_weather(lat, lon, route=route)
    if state is None:
        # A newer request for this view owns the page now
        return Response(status_code=204)
    return _render_weather(request, state)


@router.get("/dashboard/partials/search", response_class=HTMLResponse)
async def search_partial(request: Request, q: str = "", view: WeatherView = Depends(get_view)) -> Any:
    """Debounced location search; superseded keystrokes answer 204."""
    state = await view.search.on_input(q)
    if state is None:
        return Response(status_code=204)
    return _render_search(request, view)


@router.post("/dashboard/search/close", response_class=HTMLResponse)
def search_close(request: Request, view: WeatherView = Depends(get_view)) -> Any:
    view.search.close()
    return _render_search(request, view)


@router.post("/dashboard/tabs/{tab_id}", response_class=HTMLResponse)
def switch_tab(request: Request, tab_id: str, view: WeatherView = Depends(get_view)) -> Any:
    """Swap the visible panel without refetching anything."""
    try:
        state = view.switch_tab(tab_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _render_weather(request, state)


async def not_found_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """Unmatched dashboard paths get the 404 panel; the JSON API keeps JSON errors."""

    if (
        exc.status_code != 404
        or request.url.path.startswith(settings.api_prefix)
        or request.headers.get("HX-Request")
    ):
        return await http_exception_handler(request, exc)
    service_factory = request.app.dependency_overrides.get(get_weather_service, get_weather_service)
    view = VIEWS.get(get_view_id(request), lambda: WeatherView(service_factory()))
    logger.info("No dashboard route for %s", request.url.path)
    view.error404()
    return _render_shell(request, request.url.path, view, status_code=404)


__all__ = [
    "VIEWS",
    "ensure_view_cookie",
    "get_view",
    "not_found_handler",
    "router",
    "templates",
]
