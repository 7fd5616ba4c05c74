"""Dashboard snapshot route."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from astro_dashboard.api.dependencies.services import (get_pools,
                                                       get_settings,
                                                       get_stats_service)
from astro_dashboard.api.error_handlers import NO_CACHE_HEADERS
from astro_dashboard.config import Settings
from astro_dashboard.errors import (AggregationError, ConfigurationError,
                                    DashboardError, DatabaseConnectionError,
                                    InvalidRequestError)
from astro_dashboard.persistence.db import DatabasePools
from astro_dashboard.services.dashboard_stats import DashboardStatsService

logger = logging.getLogger("stats_api")

router = APIRouter(tags=["dashboard"])


def resolve_database(
    database: Optional[str] = Query(None, description="Logical database to read from"),
    settings: Settings = Depends(get_settings),
) -> str:
    """Validate the ``database`` selector before anything touches the database."""
    if database is None or database == "":
        return settings.default_database()
    allowed = settings.allowed_databases()
    if database not in allowed:
        raise InvalidRequestError(database, allowed)
    return database


@router.get("/stats")
@router.get("/api/stats", include_in_schema=False)
async def get_stats(
    database: str = Depends(resolve_database),
    settings: Settings = Depends(get_settings),
    pools: DatabasePools = Depends(get_pools),
    service: DashboardStatsService = Depends(get_stats_service),
):
    missing = settings.missing_database_settings()
    if missing:
        raise ConfigurationError(missing)

    if not await pools.health_check(database):
        raise DatabaseConnectionError(f"Could not connect to PostgreSQL database '{database}'")

    try:
        snapshot = await service.get_dashboard_stats(database)
    except DashboardError:
        raise
    except Exception as e:
        logger.error(f"Error fetching dashboard stats for {database}: {e}")
        raise AggregationError(str(e)) from e

    return JSONResponse(content=snapshot.to_dict(), headers=NO_CACHE_HEADERS)

__all__ = ["router", "resolve_database"]
