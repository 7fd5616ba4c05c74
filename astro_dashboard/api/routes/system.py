"""System & metadata routes (root, health, databases, startup log, metrics)."""
import asyncio

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from astro_dashboard.api.dependencies.services import get_pools, get_settings
from astro_dashboard.api.state.startup import get_startup_events
from astro_dashboard.config import Settings
from astro_dashboard.persistence.db import DatabasePools
from astro_dashboard.utils.time_utils import utc_now

router = APIRouter()

@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    return {
        "name": "Astro Dashboard",
        "version": "1.0.0",
        "description": "Read-only monitoring API for the Astro trading bot",
        "databases": settings.allowed_databases(),
        "default_database": settings.default_database(),
        "endpoints": {
            "stats": "/stats?database={name}",
            "health": "/health",
            "databases": "/databases",
            "startup_events": "/startup/log",
            "metrics": "/metrics",
            "docs": "/docs",
        },
    }

@router.get("/health")
async def health(settings: Settings = Depends(get_settings), pools: DatabasePools = Depends(get_pools)):
    names = settings.allowed_databases()
    missing = settings.missing_database_settings()
    if missing:
        return {
            "status": "unconfigured",
            "missing": missing,
            "databases": {name: False for name in names},
            "timestamp": utc_now().isoformat(),
        }
    results = await asyncio.gather(*(pools.health_check(name) for name in names))
    databases = dict(zip(names, results))
    return {
        "status": "healthy" if all(results) else "degraded",
        "databases": databases,
        "timestamp": utc_now().isoformat(),
    }

@router.get("/databases")
async def databases(settings: Settings = Depends(get_settings)):
    return {"databases": settings.allowed_databases(), "default": settings.default_database()}

@router.get("/startup/log")
async def startup_log(limit: int = 100):
    return {"events": get_startup_events(limit)}

@router.get("/metrics")
async def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

__all__ = ["router"]
