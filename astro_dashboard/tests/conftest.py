import pytest

from astro_dashboard.app import app
from astro_dashboard.models.dashboard_models import (BotStats,
                                                     CurrentPosition,
                                                     OpenOrder, PriceRange,
                                                     RecentTrade)
from astro_dashboard.tests.fakes import (ApiHarness, FakeQueries,
                                         bot_stats_row, make_settings,
                                         open_order_row, position_row,
                                         trade_row)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def populated_queries():
    return FakeQueries(
        position=CurrentPosition.from_row(position_row()),
        trades=[RecentTrade.from_row(trade_row("1.5")), RecentTrade.from_row(trade_row("-0.25"))],
        bot_stats=BotStats.from_row(bot_stats_row()),
        price_range=PriceRange(highest_price=1.8, lowest_price=1.1),
        open_orders=[OpenOrder.from_row(open_order_row())],
    )


@pytest.fixture
def api(settings):
    harness = ApiHarness(settings)
    harness.install()
    yield harness
    app.dependency_overrides.clear()
