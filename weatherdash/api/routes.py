"""Root API routers."""

from fastapi import APIRouter

from weatherdash.core.config import settings

health_router = APIRouter(tags=["system"])


@health_router.get("/health", summary="Service health probe")
async def healthcheck() -> dict[str, str | bool]:
    """Heartbeat plus whether an OpenWeather key is configured."""

    return {"status": "ok", "openweather_configured": bool(settings.openweather_api_key)}
