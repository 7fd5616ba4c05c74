import pytest

from astro_dashboard.persistence.queries import CANCELED_STATUSES, StatsQueries
from astro_dashboard.tests.fakes import T0, bot_stats_row, open_order_row


class RecordingPools:
    """Returns canned rows for whichever view or table a query reads."""

    def __init__(self, rows_by_source):
        self.rows_by_source = rows_by_source
        self.executed = []

    async def execute(self, sql, params=None, database=None):
        self.executed.append((sql, params, database))
        for source, rows in self.rows_by_source.items():
            if source in sql:
                return rows
        return []


@pytest.mark.asyncio
async def test_open_orders_query_and_mapping():
    pools = RecordingPools({"open_tp_orders_enhanced_v": [open_order_row()]})
    orders = await StatsQueries(pools).get_open_orders("ichigo", limit=50)
    sql, params, database = pools.executed[0]
    assert "ORDER BY price ASC" in sql
    assert params == {"limit": 50}
    assert database == "ichigo"
    assert orders[0].value == 150.0


@pytest.mark.asyncio
async def test_canceled_orders_match_every_spelling():
    pools = RecordingPools({})
    await StatsQueries(pools).get_canceled_orders("asterdex", limit=50)
    sql = pools.executed[0][0]
    for status in CANCELED_STATUSES:
        assert f"'{status}'" in sql
    assert "'CANCELLED'" in sql and "'CANCELED'" in sql


@pytest.mark.asyncio
async def test_position_absent_returns_none():
    pools = RecordingPools({})
    assert await StatsQueries(pools).get_current_position("ichigo") is None
    assert await StatsQueries(pools).get_commissions("ichigo") is None


@pytest.mark.asyncio
async def test_window_queries_bind_hours():
    pools = RecordingPools({"date_trunc": [{
        "hour_timestamp": T0,
        "account_value": "400",
        "usdt_balance": "250",
        "aster_qty": "100",
        "aster_price": "1.5",
    }]})
    q = StatsQueries(pools)
    history = await q.get_historical_data("ichigo", hours=72)
    price_range = await q.get_price_high_low("ichigo", hours=72)
    assert [p for _, p, _ in pools.executed] == [{"hours": 72}, {"hours": 72}]
    assert history[0].account_value == 400.0
    assert price_range.highest_price == 0.0


@pytest.mark.asyncio
async def test_bot_stats_mapping():
    pools = RecordingPools({"COUNT(*) AS total_decisions": [bot_stats_row()]})
    stats = await StatsQueries(pools).get_bot_stats("ichigo")
    assert stats.total_decisions == 10
    assert stats.last_price == 1.5
    assert stats.base_qty == 100.0
