"""Weatherdash FastAPI application package."""

import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import api_router
from .core.config import settings
from .core.logging_config import setup_logging
from .dashboard import PACKAGE_DIR, VIEWS, ensure_view_cookie, not_found_handler
from .dashboard import router as dashboard_router


def create_app() -> FastAPI:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Initializing %s %s", settings.app_name, settings.app_version)
    if not settings.openweather_api_key:
        logger.warning("OPENWEATHER_API_KEY is not set; weather requests will fail")

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    app.include_router(api_router, prefix=settings.api_prefix)
    app.include_router(dashboard_router)
    app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")
    app.middleware("http")(ensure_view_cookie)
    app.add_exception_handler(StarletteHTTPException, not_found_handler)

    @app.on_event("shutdown")
    def _close_views() -> None:
        VIEWS.clear()

    return app


app = create_app()
