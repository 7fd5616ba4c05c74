"""Dependency providers for FastAPI routes.

The pool registry and stats service are built in the application lifespan and
kept on ``app.state``; routes reach them through these providers so tests can
swap them via ``app.dependency_overrides``.
"""
from __future__ import annotations

from fastapi import Request

from astro_dashboard.config import Settings, settings
from astro_dashboard.errors import DashboardError
from astro_dashboard.persistence.db import DatabasePools
from astro_dashboard.services.dashboard_stats import DashboardStatsService


def get_settings() -> Settings:
    return settings


def get_pools(request: Request) -> DatabasePools:
    pools = getattr(request.app.state, "pools", None)
    if pools is None:
        raise DashboardError("Database pools not initialized")
    return pools


def get_stats_service(request: Request) -> DashboardStatsService:
    service = getattr(request.app.state, "stats_service", None)
    if service is None:
        raise DashboardError("Dashboard statistics service not initialized")
    return service

__all__ = ["get_settings", "get_pools", "get_stats_service"]
