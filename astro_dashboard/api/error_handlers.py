"""Translate dashboard errors into ``{error, details, message}`` JSON responses."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from astro_dashboard.errors import DashboardError

logger = logging.getLogger("stats_api")

# Every response must reflect the current database state.
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DashboardError)
    async def _handle_dashboard_error(request: Request, exc: DashboardError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{exc.error} on {request.url.path}: {exc.details}")
        else:
            logger.warning(f"{exc.error} on {request.url.path}: {exc.details}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=NO_CACHE_HEADERS)

__all__ = ["NO_CACHE_HEADERS", "register_error_handlers"]
