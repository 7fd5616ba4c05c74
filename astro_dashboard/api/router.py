"""Unified API router aggregator.

Adds all individual feature routers here to keep `app.py` clean.
"""
from fastapi import APIRouter

from astro_dashboard.api.routes.stats import router as stats_router
from astro_dashboard.api.routes.system import router as system_router

api_router = APIRouter()
api_router.include_router(system_router)
api_router.include_router(stats_router)

__all__ = ["api_router"]
