import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from astro_dashboard.api.error_handlers import register_error_handlers
from astro_dashboard.api.router import api_router
from astro_dashboard.api.state.startup import record_startup_event
from astro_dashboard.config import Settings, settings
from astro_dashboard.persistence.db import DatabasePools
from astro_dashboard.persistence.queries import StatsQueries
from astro_dashboard.services.dashboard_stats import DashboardStatsService
from astro_dashboard.utils.logging_config import configure_logging

logger = logging.getLogger("app")


def attach_services(app: FastAPI, config: Settings, pools: DatabasePools) -> None:
    """Wire the pool registry and the stats service onto ``app.state``."""
    app.state.pools = pools
    app.state.stats_service = DashboardStatsService(StatsQueries(pools), config)


async def warm_up_pools(pools: DatabasePools, config: Settings) -> bool:
    """Check the default database once at startup; failures are logged, not fatal."""
    missing = config.missing_database_settings()
    if missing:
        logger.warning(f"Missing database settings: {', '.join(missing)}")
        record_startup_event("config_missing", "database_settings_missing", missing=missing)
        return False
    database = config.default_database()
    ok = await pools.health_check(database)
    if ok:
        record_startup_event("db_ready", "database_connected", database=database)
    else:
        logger.warning(f"Database {database} unreachable at startup, continuing...")
        record_startup_event("db_error", "database_unreachable", database=database)
    return ok


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    configure_logging(settings.LOG_LEVEL)
    logger.info("Starting Astro Dashboard API...")

    pools = DatabasePools(settings)
    attach_services(app, settings, pools)
    await warm_up_pools(pools, settings)

    try:
        yield
    finally:
        logger.info("Shutting down, disposing connection pools...")
        pools.dispose()


app = FastAPI(
    title="Astro Dashboard",
    description="Read-only monitoring API for the Astro trading bot",
    version="1.0.0",
    lifespan=lifespan,
)

register_error_handlers(app)
app.include_router(api_router)
