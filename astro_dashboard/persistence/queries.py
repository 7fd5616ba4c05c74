"""
Read queries behind the dashboard snapshot.

All tables and views belong to the trading bot; nothing here writes.
"""
from typing import List, Optional

from astro_dashboard.models.dashboard_models import (BotStats, CanceledOrder,
                                                     CommissionSummary,
                                                     CurrentPosition,
                                                     FilledOrder,
                                                     HistoricalDataPoint,
                                                     OpenOrder, PriceRange,
                                                     RecentDecision,
                                                     RecentTrade)
from astro_dashboard.persistence.db import DatabasePools


CURRENT_POSITION_SQL = """
    SELECT
      base_free,
      quote_free,
      mark_price,
      total_value_usdt,
      last_update,
      open_count,
      qty_in_tp_orders,
      open_order_ids,
      entry_at,
      entry_decision_uid,
      entry_price,
      unrealized_pnl_pct
    FROM ichigo.current_position_v
    LIMIT 1
"""

RECENT_TRADES_SQL = """
    SELECT
      entry_order_id,
      exit_order_id,
      entry_decision_uid,
      exit_decision_uid,
      order_group_uid,
      entry_time,
      entry_price,
      entry_quantity,
      entry_cost_usdt,
      exit_time,
      exit_price,
      exit_quantity,
      exit_proceeds_usdt,
      pnl_pct,
      pnl_usdt,
      hold_time_minutes,
      regime_key
    FROM ichigo.recent_trades_pnl_v
    WHERE pnl_usdt IS NOT NULL
    ORDER BY exit_time DESC
    LIMIT :limit
"""

COMMISSIONS_SQL = """
    SELECT
      date,
      usdt_fees,
      aster_fees,
      executions
    FROM ichigo.commission_summary_v
    ORDER BY date DESC
    LIMIT 1
"""

# Anything that is not a buy or a sell counts as a hold, so the three counters
# always add up to the total.
BOT_STATS_SQL = """
    WITH latest AS (
      SELECT action, last_close, has_position, base_qty, usdt_free
      FROM ichigo.decisions
      ORDER BY decided_at DESC
      LIMIT 1
    )
    SELECT
      COUNT(*) AS total_decisions,
      MIN(decided_at) AS first_decision,
      MAX(decided_at) AS last_decision,
      COUNT(*) FILTER (WHERE LOWER(action) = 'buy') AS buy_count,
      COUNT(*) FILTER (WHERE LOWER(action) = 'sell') AS sell_count,
      COUNT(*) FILTER (WHERE action IS NULL OR LOWER(action) NOT IN ('buy', 'sell')) AS hold_count,
      (SELECT action FROM latest) AS last_action,
      (SELECT last_close FROM latest) AS last_price,
      (SELECT has_position FROM latest) AS has_position,
      (SELECT base_qty FROM latest) AS base_qty,
      (SELECT usdt_free FROM latest) AS usdt_free
    FROM ichigo.decisions
"""

OPEN_ORDERS_SQL = """
    SELECT
      order_id,
      exchange_order_id,
      client_order_id,
      symbol,
      side,
      type,
      price,
      quantity,
      status,
      created_at,
      age_minutes
    FROM ichigo.open_tp_orders_enhanced_v
    ORDER BY price ASC
    LIMIT :limit
"""

FILLED_ORDERS_SQL = """
    SELECT
      order_id,
      exchange_order_id,
      client_order_id,
      symbol,
      side,
      type,
      price,
      quantity,
      executed_qty,
      cumulative_quote_qty,
      status,
      created_at,
      updated_at
    FROM ichigo.orders
    WHERE UPPER(status) = 'FILLED'
    ORDER BY updated_at DESC
    LIMIT :limit
"""

# The bot has written both spellings of the canceled state over time.
CANCELED_STATUSES = ("CANCELED", "CANCELLED", "EXPIRED", "REJECTED")

CANCELED_ORDERS_SQL = """
    SELECT
      order_id,
      exchange_order_id,
      client_order_id,
      symbol,
      side,
      type,
      price,
      quantity,
      status,
      created_at,
      updated_at
    FROM ichigo.orders
    WHERE UPPER(status) IN ({statuses})
    ORDER BY updated_at DESC
    LIMIT :limit
""".format(statuses=", ".join(f"'{s}'" for s in CANCELED_STATUSES))

RECENT_DECISIONS_SQL = """
    SELECT
      decision_uid,
      decided_at,
      action,
      note,
      regime_key,
      last_close,
      rsi14_3m,
      adx14_3m,
      has_position
    FROM ichigo.decisions
    ORDER BY decided_at DESC
    LIMIT :limit
"""

PRICE_HIGH_LOW_SQL = """
    SELECT
      MAX(last_close) AS max_price,
      MIN(last_close) AS min_price
    FROM ichigo.decisions
    WHERE decided_at >= NOW() - make_interval(hours => :hours)
"""

HISTORICAL_DATA_SQL = """
    SELECT
      date_trunc('hour', decided_at) AS hour_timestamp,
      AVG((base_qty * last_close) + usdt_free) AS account_value,
      AVG(usdt_free) AS usdt_balance,
      AVG(base_qty) AS aster_qty,
      AVG(last_close) AS aster_price
    FROM ichigo.decisions
    WHERE decided_at >= NOW() - make_interval(hours => :hours)
    GROUP BY date_trunc('hour', decided_at)
    ORDER BY hour_timestamp ASC
"""


class StatsQueries:
    """Typed read access to the bot's tables for one logical database at a time."""

    def __init__(self, pools: DatabasePools):
        self.pools = pools

    async def get_current_position(self, database: str) -> Optional[CurrentPosition]:
        rows = await self.pools.execute(CURRENT_POSITION_SQL, database=database)
        return CurrentPosition.from_row(rows[0]) if rows else None

    async def get_recent_trades(self, database: str, limit: int = 10) -> List[RecentTrade]:
        rows = await self.pools.execute(RECENT_TRADES_SQL, {"limit": limit}, database)
        return [RecentTrade.from_row(r) for r in rows]

    async def get_commissions(self, database: str) -> Optional[CommissionSummary]:
        rows = await self.pools.execute(COMMISSIONS_SQL, database=database)
        return CommissionSummary.from_row(rows[0]) if rows else None

    async def get_bot_stats(self, database: str) -> BotStats:
        rows = await self.pools.execute(BOT_STATS_SQL, database=database)
        return BotStats.from_row(rows[0] if rows else None)

    async def get_open_orders(self, database: str, limit: int = 50) -> List[OpenOrder]:
        rows = await self.pools.execute(OPEN_ORDERS_SQL, {"limit": limit}, database)
        return [OpenOrder.from_row(r) for r in rows]

    async def get_filled_orders(self, database: str, limit: int = 50) -> List[FilledOrder]:
        rows = await self.pools.execute(FILLED_ORDERS_SQL, {"limit": limit}, database)
        return [FilledOrder.from_row(r) for r in rows]

    async def get_canceled_orders(self, database: str, limit: int = 50) -> List[CanceledOrder]:
        rows = await self.pools.execute(CANCELED_ORDERS_SQL, {"limit": limit}, database)
        return [CanceledOrder.from_row(r) for r in rows]

    async def get_recent_decisions(self, database: str, limit: int = 20) -> List[RecentDecision]:
        rows = await self.pools.execute(RECENT_DECISIONS_SQL, {"limit": limit}, database)
        return [RecentDecision.from_row(r) for r in rows]

    async def get_price_high_low(self, database: str, hours: int = 72) -> PriceRange:
        """Highest and lowest decision price in the last ``hours`` hours."""
        rows = await self.pools.execute(PRICE_HIGH_LOW_SQL, {"hours": hours}, database)
        return PriceRange.from_row(rows[0] if rows else None)

    async def get_historical_data(self, database: str, hours: int = 72) -> List[HistoricalDataPoint]:
        rows = await self.pools.execute(HISTORICAL_DATA_SQL, {"hours": hours}, database)
        return [HistoricalDataPoint.from_row(r) for r in rows]


__all__ = ["StatsQueries", "CANCELED_STATUSES"]
