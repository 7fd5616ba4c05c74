"""
Typed records for the dashboard snapshot.

Every query result is mapped once, in ``from_row``, from the raw database row
into one of these records. ``to_dict`` produces the camelCase JSON shape the
dashboard client reads.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from astro_dashboard.utils.parsing import (to_bool, to_float, to_int,
                                           to_optional_float,
                                           to_positive_or_none)
from astro_dashboard.utils.time_utils import isoformat, parse_timestamp

Row = Mapping[str, Any]


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


@dataclass
class CurrentPosition:
    """Row of ``current_position_v``: balances and the open lot, if any."""
    base_free: float
    quote_free: float
    mark_price: float
    total_value_usdt: float
    last_update: Optional[datetime]
    open_count: int
    qty_in_tp_orders: float
    open_order_ids: List[str] = field(default_factory=list)
    entry_at: Optional[datetime] = None
    entry_decision_uid: Optional[str] = None
    entry_price: Optional[float] = None
    unrealized_pnl_pct: float = 0.0

    @classmethod
    def from_row(cls, row: Row) -> "CurrentPosition":
        return cls(
            base_free=max(to_float(row.get("base_free")), 0.0),
            quote_free=max(to_float(row.get("quote_free")), 0.0),
            mark_price=to_float(row.get("mark_price")),
            total_value_usdt=to_float(row.get("total_value_usdt")),
            last_update=parse_timestamp(row.get("last_update")),
            open_count=max(to_int(row.get("open_count")), 0),
            qty_in_tp_orders=max(to_float(row.get("qty_in_tp_orders")), 0.0),
            open_order_ids=[str(i) for i in (row.get("open_order_ids") or [])],
            entry_at=parse_timestamp(row.get("entry_at")),
            entry_decision_uid=_text(row.get("entry_decision_uid")),
            entry_price=to_positive_or_none(row.get("entry_price")),
            unrealized_pnl_pct=to_float(row.get("unrealized_pnl_pct")),
        )

    @property
    def total_base(self) -> float:
        # qty_in_tp_orders is locked, disjoint from base_free
        return self.base_free + self.qty_in_tp_orders


@dataclass
class RecentTrade:
    """A closed round trip from ``recent_trades_pnl_v``."""
    entry_order_id: Optional[int]
    exit_order_id: Optional[int]
    entry_decision_uid: Optional[str]
    exit_decision_uid: Optional[str]
    order_group_uid: Optional[str]
    entry_time: Optional[datetime]
    entry_price: float
    entry_quantity: float
    entry_cost_usdt: float
    exit_time: Optional[datetime]
    exit_price: float
    exit_quantity: float
    exit_proceeds_usdt: float
    pnl_pct: float
    pnl_usdt: float
    hold_time_minutes: float
    regime_key: Optional[str]

    @classmethod
    def from_row(cls, row: Row) -> "RecentTrade":
        return cls(
            entry_order_id=row.get("entry_order_id"),
            exit_order_id=row.get("exit_order_id"),
            entry_decision_uid=_text(row.get("entry_decision_uid")),
            exit_decision_uid=_text(row.get("exit_decision_uid")),
            order_group_uid=_text(row.get("order_group_uid")),
            entry_time=parse_timestamp(row.get("entry_time")),
            entry_price=to_float(row.get("entry_price")),
            entry_quantity=to_float(row.get("entry_quantity")),
            entry_cost_usdt=to_float(row.get("entry_cost_usdt")),
            exit_time=parse_timestamp(row.get("exit_time")),
            exit_price=to_float(row.get("exit_price")),
            exit_quantity=to_float(row.get("exit_quantity")),
            exit_proceeds_usdt=to_float(row.get("exit_proceeds_usdt")),
            pnl_pct=to_float(row.get("pnl_pct")),
            pnl_usdt=to_float(row.get("pnl_usdt")),
            hold_time_minutes=to_float(row.get("hold_time_minutes")),
            regime_key=_text(row.get("regime_key")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entryOrderId": self.entry_order_id,
            "exitOrderId": self.exit_order_id,
            "entryDecisionUid": self.entry_decision_uid,
            "exitDecisionUid": self.exit_decision_uid,
            "orderGroupUid": self.order_group_uid,
            "entryTime": isoformat(self.entry_time),
            "entryPrice": self.entry_price,
            "entryQuantity": self.entry_quantity,
            "entryCostUsdt": self.entry_cost_usdt,
            "exitTime": isoformat(self.exit_time),
            "exitPrice": self.exit_price,
            "exitQuantity": self.exit_quantity,
            "exitProceedsUsdt": self.exit_proceeds_usdt,
            "pnlPct": self.pnl_pct,
            "pnlUsdt": self.pnl_usdt,
            "holdTimeMinutes": self.hold_time_minutes,
            "regimeKey": self.regime_key,
        }


@dataclass
class CommissionSummary:
    date: Optional[datetime]
    usdt_fees: float
    aster_fees: float
    executions: int

    @classmethod
    def from_row(cls, row: Row) -> "CommissionSummary":
        return cls(
            date=parse_timestamp(row.get("date")),
            usdt_fees=to_float(row.get("usdt_fees")),
            aster_fees=to_float(row.get("aster_fees")),
            executions=to_int(row.get("executions")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": isoformat(self.date),
            "usdtFees": self.usdt_fees,
            "asterFees": self.aster_fees,
            "executions": self.executions,
        }


@dataclass
class BotStats:
    """Decision counters plus the state recorded on the latest decision.

    ``last_price``, ``base_qty`` and ``usdt_free`` stay None when there is no
    decision (or the latest one left them NULL), so callers can tell "unknown"
    from zero.
    """
    total_decisions: int
    buy_count: int
    sell_count: int
    hold_count: int
    first_decision: Optional[datetime] = None
    last_decision: Optional[datetime] = None
    last_action: Optional[str] = None
    last_price: Optional[float] = None
    has_position: bool = False
    base_qty: Optional[float] = None
    usdt_free: Optional[float] = None

    @classmethod
    def from_row(cls, row: Optional[Row]) -> "BotStats":
        if not row:
            return cls(total_decisions=0, buy_count=0, sell_count=0, hold_count=0)
        return cls(
            total_decisions=to_int(row.get("total_decisions")),
            buy_count=to_int(row.get("buy_count")),
            sell_count=to_int(row.get("sell_count")),
            hold_count=to_int(row.get("hold_count")),
            first_decision=parse_timestamp(row.get("first_decision")),
            last_decision=parse_timestamp(row.get("last_decision")),
            last_action=_text(row.get("last_action")),
            last_price=to_optional_float(row.get("last_price")),
            has_position=to_bool(row.get("has_position")),
            base_qty=to_optional_float(row.get("base_qty")),
            usdt_free=to_optional_float(row.get("usdt_free")),
        )


@dataclass
class HistoricalDataPoint:
    """One hourly bucket averaged over the decisions recorded in that hour."""
    timestamp: Optional[datetime]
    account_value: float
    usdt_balance: float
    aster_qty: float
    aster_price: float

    @classmethod
    def from_row(cls, row: Row) -> "HistoricalDataPoint":
        return cls(
            timestamp=parse_timestamp(row.get("hour_timestamp")),
            account_value=to_float(row.get("account_value")),
            usdt_balance=to_float(row.get("usdt_balance")),
            aster_qty=to_float(row.get("aster_qty")),
            aster_price=to_float(row.get("aster_price")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": isoformat(self.timestamp),
            "accountValue": self.account_value,
            "usdtBalance": self.usdt_balance,
            "asterQty": self.aster_qty,
            "asterPrice": self.aster_price,
        }


@dataclass
class RecentDecision:
    decision_uid: Optional[str]
    decided_at: Optional[datetime]
    action: Optional[str]
    note: Optional[str]
    regime_key: Optional[str]
    last_close: float
    rsi14_3m: Optional[float]
    adx14_3m: Optional[float]
    has_position: bool

    @classmethod
    def from_row(cls, row: Row) -> "RecentDecision":
        return cls(
            decision_uid=_text(row.get("decision_uid")),
            decided_at=parse_timestamp(row.get("decided_at")),
            action=_text(row.get("action")),
            note=_text(row.get("note")),
            regime_key=_text(row.get("regime_key")),
            last_close=to_float(row.get("last_close")),
            rsi14_3m=to_optional_float(row.get("rsi14_3m")),
            adx14_3m=to_optional_float(row.get("adx14_3m")),
            has_position=to_bool(row.get("has_position")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "decisionUid": self.decision_uid,
            "decidedAt": isoformat(self.decided_at),
            "action": self.action,
            "note": self.note,
            "regimeKey": self.regime_key,
            "lastClose": self.last_close,
            "rsi14_3m": self.rsi14_3m,
            "adx14_3m": self.adx14_3m,
            "hasPosition": self.has_position,
        }


@dataclass
class OpenOrder:
    """Open take-profit order from ``open_tp_orders_enhanced_v``."""
    order_id: Optional[int]
    exchange_order_id: Optional[str]
    client_order_id: Optional[str]
    symbol: Optional[str]
    side: Optional[str]
    order_type: Optional[str]
    price: Optional[float]
    quantity: Optional[float]
    status: Optional[str]
    created_at: Optional[datetime]
    age_minutes: float

    @classmethod
    def from_row(cls, row: Row) -> "OpenOrder":
        return cls(
            order_id=row.get("order_id"),
            exchange_order_id=_text(row.get("exchange_order_id")),
            client_order_id=_text(row.get("client_order_id")),
            symbol=_text(row.get("symbol")),
            side=_text(row.get("side")),
            order_type=_text(row.get("type")),
            price=to_optional_float(row.get("price")),
            quantity=to_optional_float(row.get("quantity")),
            status=_text(row.get("status")),
            created_at=parse_timestamp(row.get("created_at")),
            # clock skew between bot and database can make fresh orders look negative
            age_minutes=max(to_float(row.get("age_minutes")), 0.0),
        )

    @property
    def value(self) -> Optional[float]:
        if self.price is None or self.quantity is None:
            return None
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "exchangeOrderId": self.exchange_order_id,
            "clientOrderId": self.client_order_id,
            "symbol": self.symbol,
            "side": self.side,
            "type": self.order_type,
            "price": self.price,
            "quantity": self.quantity,
            "value": self.value,
            "status": self.status,
            "createdAt": isoformat(self.created_at),
            "ageMinutes": self.age_minutes,
        }


@dataclass
class ClosedOrder:
    """An order that left the book. Price and quantity are None when unknown."""
    order_id: Optional[int]
    exchange_order_id: Optional[str]
    client_order_id: Optional[str]
    symbol: Optional[str]
    side: Optional[str]
    order_type: Optional[str]
    price: Optional[float]
    quantity: Optional[float]
    status: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @staticmethod
    def _common(row: Row) -> Dict[str, Any]:
        return dict(
            order_id=row.get("order_id"),
            exchange_order_id=_text(row.get("exchange_order_id")),
            client_order_id=_text(row.get("client_order_id")),
            symbol=_text(row.get("symbol")),
            side=_text(row.get("side")),
            order_type=_text(row.get("type")),
            status=_text(row.get("status")),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orderId": self.order_id,
            "exchangeOrderId": self.exchange_order_id,
            "clientOrderId": self.client_order_id,
            "symbol": self.symbol,
            "side": self.side,
            "type": self.order_type,
            "price": self.price,
            "quantity": self.quantity,
            "status": self.status,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass
class FilledOrder(ClosedOrder):

    @classmethod
    def from_row(cls, row: Row) -> "FilledOrder":
        executed_qty = to_optional_float(row.get("executed_qty"))
        quote_qty = to_optional_float(row.get("cumulative_quote_qty"))
        # average fill price; requested price is irrelevant once filled
        price = None
        if executed_qty and executed_qty > 0 and quote_qty is not None:
            price = quote_qty / executed_qty
        return cls(price=price, quantity=executed_qty, **cls._common(row))


@dataclass
class CanceledOrder(ClosedOrder):

    @classmethod
    def from_row(cls, row: Row) -> "CanceledOrder":
        return cls(
            price=to_positive_or_none(row.get("price")),
            quantity=to_positive_or_none(row.get("quantity")),
            **cls._common(row),
        )


@dataclass
class PriceRange:
    highest_price: float = 0.0
    lowest_price: float = 0.0

    @classmethod
    def from_row(cls, row: Optional[Row]) -> "PriceRange":
        if not row:
            return cls()
        return cls(
            highest_price=to_float(row.get("max_price")),
            lowest_price=to_float(row.get("min_price")),
        )


@dataclass(frozen=True)
class LastDecision:
    timestamp: Optional[datetime]
    action: Optional[str]


@dataclass(frozen=True)
class Runtime:
    first_decision: Optional[datetime]
    last_decision: Optional[datetime]
    days_since_start: int
    total_runtime: str


@dataclass(frozen=True)
class PositionSummary:
    has_position: bool
    entry_price: float
    entry_time: Optional[datetime]
    current_qty: float


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything the dashboard shows, assembled fresh for one request."""
    account_value: float
    aster_balance: float
    usdt_balance: float
    current_price: float
    highest_price: float
    lowest_price: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    realized_pnl: float
    total_decisions: int
    buy_count: int
    sell_count: int
    hold_count: int
    buy_percent: float
    sell_percent: float
    hold_percent: float
    open_tp_orders: int
    qty_in_tp_orders: float
    last_decision: LastDecision
    runtime: Runtime
    position: PositionSummary
    commissions: Optional[CommissionSummary] = None
    recent_trades: Tuple[RecentTrade, ...] = ()
    historical_data: Tuple[HistoricalDataPoint, ...] = ()
    recent_decisions: Tuple[RecentDecision, ...] = ()
    open_orders: Tuple[OpenOrder, ...] = ()
    filled_orders: Tuple[FilledOrder, ...] = ()
    canceled_orders: Tuple[CanceledOrder, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "accountValue": self.account_value,
            "asterBalance": self.aster_balance,
            "usdtBalance": self.usdt_balance,
            "currentPrice": self.current_price,
            "highestPrice": self.highest_price,
            "lowestPrice": self.lowest_price,
            "unrealizedPnL": self.unrealized_pnl,
            "unrealizedPnLPercent": self.unrealized_pnl_percent,
            "realizedPnL": self.realized_pnl,
            "totalDecisions": self.total_decisions,
            "buyCount": self.buy_count,
            "sellCount": self.sell_count,
            "holdCount": self.hold_count,
            "buyPercent": self.buy_percent,
            "sellPercent": self.sell_percent,
            "holdPercent": self.hold_percent,
            "openTPOrders": self.open_tp_orders,
            "qtyInTpOrders": self.qty_in_tp_orders,
            "lastDecision": {
                "timestamp": isoformat(self.last_decision.timestamp),
                "action": self.last_decision.action,
            },
            "runtime": {
                "firstDecision": isoformat(self.runtime.first_decision),
                "lastDecision": isoformat(self.runtime.last_decision),
                "daysSinceStart": self.runtime.days_since_start,
                "totalRuntime": self.runtime.total_runtime,
            },
            "position": {
                "hasPosition": self.position.has_position,
                "entryPrice": self.position.entry_price,
                "entryTime": isoformat(self.position.entry_time),
                "currentQty": self.position.current_qty,
            },
            "commissions": self.commissions.to_dict() if self.commissions else None,
            "recentTrades": [t.to_dict() for t in self.recent_trades],
            "historicalData": [p.to_dict() for p in self.historical_data],
            "recentDecisions": [d.to_dict() for d in self.recent_decisions],
            "openOrders": [o.to_dict() for o in self.open_orders],
            "filledOrders": [o.to_dict() for o in self.filled_orders],
            "canceledOrders": [o.to_dict() for o in self.canceled_orders],
        }
