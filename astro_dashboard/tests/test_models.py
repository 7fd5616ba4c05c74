from decimal import Decimal

from astro_dashboard.models.dashboard_models import (BotStats, CanceledOrder,
                                                     CurrentPosition,
                                                     FilledOrder,
                                                     HistoricalDataPoint,
                                                     OpenOrder, PriceRange,
                                                     RecentDecision)
from astro_dashboard.tests.fakes import T0, open_order_row, position_row


def _closed_row(**overrides):
    row = {
        "order_id": 3,
        "exchange_order_id": "ex-3",
        "client_order_id": "cl-3",
        "symbol": "ASTERUSDT",
        "side": "BUY",
        "type": "LIMIT",
        "price": "1.2",
        "quantity": "10",
        "executed_qty": "10",
        "cumulative_quote_qty": "12.5",
        "status": "FILLED",
        "created_at": T0,
        "updated_at": T0,
    }
    row.update(overrides)
    return row


def test_open_order_value_and_age():
    order = OpenOrder.from_row(open_order_row(price=Decimal("1.50000"), quantity=Decimal("100")))
    assert order.value == 150.0
    assert f"{order.value:.2f}" == "150.00"
    assert order.age_minutes >= 0
    body = order.to_dict()
    assert body["type"] == "LIMIT"
    assert body["value"] == 150.0
    assert body["createdAt"] == T0.isoformat()


def test_open_order_missing_price_or_quantity_stays_null():
    order = OpenOrder.from_row(open_order_row(price=None, quantity=None))
    assert order.price is None
    assert order.quantity is None
    assert order.value is None
    body = order.to_dict()
    assert body["price"] is None
    assert body["quantity"] is None
    assert body["value"] is None

    half = OpenOrder.from_row(open_order_row(quantity="not-a-number"))
    assert half.price == 1.5
    assert half.value is None


def test_open_order_negative_age_clamped():
    order = OpenOrder.from_row(open_order_row(age_minutes="-3.2"))
    assert order.age_minutes == 0.0


def test_filled_order_average_price():
    order = FilledOrder.from_row(_closed_row())
    assert order.price == 1.25
    assert order.quantity == 10.0


def test_filled_order_zero_executed_qty_has_no_price():
    order = FilledOrder.from_row(_closed_row(executed_qty="0", cumulative_quote_qty="0"))
    assert order.price is None
    assert order.quantity == 0.0


def test_filled_order_null_quantities():
    order = FilledOrder.from_row(_closed_row(executed_qty=None, cumulative_quote_qty=None))
    assert order.price is None
    assert order.quantity is None
    assert order.to_dict()["price"] is None


def test_canceled_order_unknown_price_and_quantity_are_null():
    order = CanceledOrder.from_row(_closed_row(status="CANCELLED", price="0", quantity=None))
    assert order.price is None
    assert order.quantity is None
    assert order.status == "CANCELLED"


def test_canceled_order_keeps_positive_values():
    order = CanceledOrder.from_row(_closed_row(status="EXPIRED", price="1.3", quantity="5"))
    assert order.price == 1.3
    assert order.quantity == 5.0


def test_position_mapping():
    position = CurrentPosition.from_row(position_row(open_count=-1, open_order_ids=None))
    assert position.open_count == 0
    assert position.open_order_ids == []
    assert position.total_base == 100.0
    assert position.entry_price == 1.2


def test_position_malformed_numbers_default_instead_of_nan():
    position = CurrentPosition.from_row(position_row(base_free="abc", mark_price="NaN", entry_price="0"))
    assert position.base_free == 0.0
    assert position.mark_price == 0.0
    assert position.entry_price is None


def test_bot_stats_empty_table():
    stats = BotStats.from_row({
        "total_decisions": 0,
        "first_decision": None,
        "last_decision": None,
        "buy_count": 0,
        "sell_count": 0,
        "hold_count": 0,
        "last_action": None,
        "last_price": None,
        "has_position": None,
        "base_qty": None,
        "usdt_free": None,
    })
    assert stats.total_decisions == 0
    assert stats.last_price is None
    assert stats.has_position is False


def test_recent_decision_missing_indicators():
    decision = RecentDecision.from_row({
        "decision_uid": "d-9",
        "decided_at": "2025-01-01T03:00:00Z",
        "action": "hold",
        "note": "waiting",
        "regime_key": "ranging",
        "last_close": "1.234",
        "rsi14_3m": None,
        "adx14_3m": "22.5",
        "has_position": False,
    })
    body = decision.to_dict()
    assert body["rsi14_3m"] is None
    assert body["adx14_3m"] == 22.5
    assert body["decidedAt"] == "2025-01-01T03:00:00+00:00"


def test_historical_point_and_price_range():
    point = HistoricalDataPoint.from_row({
        "hour_timestamp": T0,
        "account_value": Decimal("400.5"),
        "usdt_balance": Decimal("250"),
        "aster_qty": Decimal("100"),
        "aster_price": Decimal("1.505"),
    })
    assert point.to_dict() == {
        "timestamp": T0.isoformat(),
        "accountValue": 400.5,
        "usdtBalance": 250.0,
        "asterQty": 100.0,
        "asterPrice": 1.505,
    }
    assert PriceRange.from_row({"max_price": None, "min_price": None}) == PriceRange(0.0, 0.0)
