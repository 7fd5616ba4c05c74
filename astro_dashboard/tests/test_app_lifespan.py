import pytest
from fastapi import FastAPI

import astro_dashboard.app as app_module
from astro_dashboard.api.state.startup import (clear_startup_events,
                                               get_startup_events,
                                               record_startup_event)
from astro_dashboard.tests.fakes import make_settings


class DisposablePools:
    instances = []

    def __init__(self, settings):
        self.settings = settings
        self.disposed = False
        DisposablePools.instances.append(self)

    async def health_check(self, database=None):
        return True

    def dispose(self):
        self.disposed = True


@pytest.fixture
def patched_app(monkeypatch):
    DisposablePools.instances.clear()
    monkeypatch.setattr(app_module, "DatabasePools", DisposablePools)
    monkeypatch.setattr(app_module, "settings", make_settings())
    monkeypatch.setattr(app_module, "configure_logging", lambda level: None)
    yield FastAPI()
    clear_startup_events()


@pytest.mark.asyncio
async def test_lifespan_disposes_pools_on_clean_shutdown(patched_app):
    async with app_module.lifespan(patched_app):
        assert patched_app.state.pools is DisposablePools.instances[0]
    assert DisposablePools.instances[0].disposed is True


@pytest.mark.asyncio
async def test_lifespan_disposes_pools_when_app_fails(patched_app):
    with pytest.raises(RuntimeError):
        async with app_module.lifespan(patched_app):
            raise RuntimeError("server crashed")
    assert DisposablePools.instances[0].disposed is True


def test_startup_events_limit_zero_returns_nothing():
    clear_startup_events()
    record_startup_event("db_ready", "database_connected", database="ichigo")
    record_startup_event("db_error", "database_unreachable", database="asterdex")
    try:
        assert get_startup_events(0) == []
        assert get_startup_events(-1) == []
        assert [e["kind"] for e in get_startup_events(1)] == ["db_error"]
        assert len(get_startup_events(10)) == 2
    finally:
        clear_startup_events()
