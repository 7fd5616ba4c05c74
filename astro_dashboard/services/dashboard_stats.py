"""
Dashboard statistics aggregation.

``DashboardStatsService`` fans the snapshot reads out concurrently, waits for
all of them, and hands the results to ``build_snapshot`` which does the
arithmetic. A failure in any read fails the whole snapshot.
"""
import asyncio
import logging
import time
from typing import Optional, Sequence

from astro_dashboard.config import Settings
from astro_dashboard.errors import AggregationError
from astro_dashboard.models.dashboard_models import (BotStats, CanceledOrder,
                                                     CommissionSummary,
                                                     CurrentPosition,
                                                     DashboardSnapshot,
                                                     FilledOrder,
                                                     HistoricalDataPoint,
                                                     LastDecision, OpenOrder,
                                                     PositionSummary,
                                                     PriceRange,
                                                     RecentDecision,
                                                     RecentTrade, Runtime)
from astro_dashboard.persistence.queries import StatsQueries
from astro_dashboard.services.metrics import (snapshot_latency,
                                              snapshot_requests_counter)
from astro_dashboard.utils.time_utils import format_runtime, runtime_between

logger = logging.getLogger("dashboard_stats")


def decision_rate(count: int, total: int) -> float:
    """Percentage of ``total``; 0.0 when there are no decisions yet."""
    if total <= 0:
        return 0.0
    return count / total * 100


def build_snapshot(
    position: Optional[CurrentPosition],
    trades: Sequence[RecentTrade],
    bot_stats: BotStats,
    price_range: PriceRange,
    historical_data: Sequence[HistoricalDataPoint] = (),
    recent_decisions: Sequence[RecentDecision] = (),
    open_orders: Sequence[OpenOrder] = (),
    filled_orders: Sequence[FilledOrder] = (),
    canceled_orders: Sequence[CanceledOrder] = (),
    commissions: Optional[CommissionSummary] = None,
) -> DashboardSnapshot:
    realized_pnl = sum(t.pnl_usdt for t in trades)

    # Latest decision first; the position view only fills values it lacks.
    if bot_stats.last_price is not None:
        current_price = bot_stats.last_price
    else:
        current_price = position.mark_price if position else 0.0

    if bot_stats.base_qty is not None:
        aster_balance = max(bot_stats.base_qty, 0.0)
    else:
        aster_balance = position.total_base if position else 0.0

    if bot_stats.usdt_free is not None:
        usdt_balance = max(bot_stats.usdt_free, 0.0)
    else:
        usdt_balance = position.quote_free if position else 0.0

    account_value = aster_balance * current_price + usdt_balance

    has_position = aster_balance > 0
    entry_price = position.entry_price if position and position.entry_price else 0.0
    if has_position and entry_price > 0:
        unrealized_pnl = (current_price - entry_price) * aster_balance
        unrealized_pnl_percent = (current_price - entry_price) / entry_price * 100
    else:
        unrealized_pnl = 0.0
        unrealized_pnl_percent = 0.0

    days, hours = runtime_between(bot_stats.first_decision, bot_stats.last_decision)
    total = bot_stats.total_decisions

    return DashboardSnapshot(
        account_value=account_value,
        aster_balance=aster_balance,
        usdt_balance=usdt_balance,
        current_price=current_price,
        highest_price=price_range.highest_price,
        lowest_price=price_range.lowest_price,
        unrealized_pnl=unrealized_pnl,
        unrealized_pnl_percent=unrealized_pnl_percent,
        realized_pnl=realized_pnl,
        total_decisions=total,
        buy_count=bot_stats.buy_count,
        sell_count=bot_stats.sell_count,
        hold_count=bot_stats.hold_count,
        buy_percent=decision_rate(bot_stats.buy_count, total),
        sell_percent=decision_rate(bot_stats.sell_count, total),
        hold_percent=decision_rate(bot_stats.hold_count, total),
        open_tp_orders=position.open_count if position else 0,
        qty_in_tp_orders=position.qty_in_tp_orders if position else 0.0,
        last_decision=LastDecision(
            timestamp=bot_stats.last_decision,
            action=bot_stats.last_action,
        ),
        runtime=Runtime(
            first_decision=bot_stats.first_decision,
            last_decision=bot_stats.last_decision,
            days_since_start=days,
            total_runtime=format_runtime(days, hours),
        ),
        position=PositionSummary(
            has_position=has_position,
            entry_price=entry_price if has_position else 0.0,
            entry_time=position.entry_at if position and has_position else None,
            current_qty=aster_balance,
        ),
        commissions=commissions,
        recent_trades=tuple(trades),
        historical_data=tuple(historical_data),
        recent_decisions=tuple(recent_decisions),
        open_orders=tuple(open_orders),
        filled_orders=tuple(filled_orders),
        canceled_orders=tuple(canceled_orders),
    )


class DashboardStatsService:
    def __init__(self, queries: StatsQueries, settings: Settings):
        self.queries = queries
        self.settings = settings

    async def get_dashboard_stats(self, database: str) -> DashboardSnapshot:
        limit = self.settings.STATS_LIST_LIMIT
        hours = self.settings.STATS_HISTORY_HOURS
        q = self.queries
        started = time.perf_counter()

        try:
            (
                position,
                trades,
                bot_stats,
                historical_data,
                recent_decisions,
                price_range,
                open_orders,
                filled_orders,
                canceled_orders,
                commissions,
            ) = await asyncio.gather(
                q.get_current_position(database),
                q.get_recent_trades(database, limit),
                q.get_bot_stats(database),
                q.get_historical_data(database, hours),
                q.get_recent_decisions(database, limit),
                q.get_price_high_low(database, hours),
                q.get_open_orders(database, limit),
                q.get_filled_orders(database, limit),
                q.get_canceled_orders(database, limit),
                q.get_commissions(database),
            )
            snapshot = build_snapshot(
                position,
                trades,
                bot_stats,
                price_range,
                historical_data=historical_data,
                recent_decisions=recent_decisions,
                open_orders=open_orders,
                filled_orders=filled_orders,
                canceled_orders=canceled_orders,
                commissions=commissions,
            )
        except Exception as e:
            snapshot_requests_counter.labels(database=database, outcome="error").inc()
            logger.error(f"Dashboard aggregation failed for {database}: {e}")
            raise AggregationError(str(e)) from e

        elapsed = time.perf_counter() - started
        snapshot_latency.labels(database=database).observe(elapsed)
        snapshot_requests_counter.labels(database=database, outcome="ok").inc()
        logger.info(
            f"Snapshot for {database}: {snapshot.total_decisions} decisions, "
            f"account value {snapshot.account_value:.2f} ({elapsed * 1000:.0f} ms)"
        )
        return snapshot


__all__ = ["DashboardStatsService", "build_snapshot", "decision_rate"]
