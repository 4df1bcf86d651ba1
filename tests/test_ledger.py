from __future__ import annotations

from datetime import date

import pytest

from wms.services.errors import UnknownItemError
from wms.services.ledger import StockLedger, balance_as_of
from wms.services.snapshot import DateRange, Item, StockInEvent, StockOutEvent

ITEMS = (
    Item(sku="A", warehouse="Sabah", starting_stock=10),
    Item(sku="A", warehouse="Sarawak", starting_stock=3),
)

STOCK_INS = (
    StockInEvent(sku="A", warehouse="Sabah", arrival_date=date(2024, 5, 2), arrived_qty=20),
    StockInEvent(sku="A", warehouse="Sabah", arrival_date=date(2024, 5, 10), arrived_qty=5),
    StockInEvent(sku="A", warehouse="Sarawak", arrival_date=date(2024, 5, 3), arrived_qty=100),
)

STOCK_OUTS = (
    StockOutEvent(sku="A", warehouse="Sabah", order_date=date(2024, 5, 4), ordered_qty=7, fulfillment_status="Pending"),
    StockOutEvent(sku="A", warehouse="Sabah", order_date=date(2024, 5, 10), ordered_qty=8, fulfillment_status="Delivered"),
)


def _balance(day: date, warehouse: str = "Sabah") -> int:
    return balance_as_of("A", warehouse, day, ITEMS, STOCK_INS, STOCK_OUTS)


def test_balance_before_any_history_is_starting_stock():
    assert _balance(date(2024, 5, 1)) == 10


def test_balance_counts_events_on_the_cutoff_day():
    # 10 + 20 + 5 - 7 - 8
    assert _balance(date(2024, 5, 10)) == 20


def test_pending_orders_reduce_stock_on_order_date():
    assert _balance(date(2024, 5, 4)) == 23


def test_balance_is_scoped_to_warehouse():
    assert _balance(date(2024, 5, 31), "Sarawak") == 103


def test_unknown_item_raises():
    with pytest.raises(UnknownItemError):
        balance_as_of("B", "Sabah", date(2024, 5, 1), ITEMS, STOCK_INS, STOCK_OUTS)


@pytest.mark.parametrize(
    "d1,d2",
    [
        (date(2024, 5, 1), date(2024, 5, 31)),
        (date(2024, 5, 2), date(2024, 5, 9)),
        (date(2024, 5, 4), date(2024, 5, 10)),
    ],
)
def test_balance_difference_equals_events_between(d1, d2):
    arrived = sum(ev.arrived_qty for ev in STOCK_INS if ev.warehouse == "Sabah" and d1 < ev.arrival_date <= d2)
    ordered = sum(ev.ordered_qty for ev in STOCK_OUTS if ev.warehouse == "Sabah" and d1 < ev.order_date <= d2)
    assert _balance(d2) - _balance(d1) == arrived - ordered


def test_daily_balances_match_point_in_time_balance():
    ledger = StockLedger(ITEMS, STOCK_INS, STOCK_OUTS)
    for day, balances in ledger.iter_daily_balances(DateRange(date(2024, 4, 30), date(2024, 5, 12))):
        assert balances[("A", "Sabah")] == _balance(day)
        assert balances[("A", "Sarawak")] == _balance(day, "Sarawak")


def test_movement_within_range():
    ledger = StockLedger(ITEMS, STOCK_INS, STOCK_OUTS)
    assert ledger.movement_within(("A", "Sabah"), DateRange(date(2024, 5, 3), date(2024, 5, 10))) == (5, 15)


def test_validate_reports_event_for_unknown_item():
    stock_outs = STOCK_OUTS + (
        StockOutEvent(sku="ZZZ", warehouse="Sabah", order_date=date(2024, 5, 5), ordered_qty=1, do_no="DO-9"),
    )
    ledger = StockLedger(ITEMS, STOCK_INS, stock_outs)

    with pytest.raises(UnknownItemError) as exc_info:
        ledger.validate()

    assert exc_info.value.sku == "ZZZ"
    assert exc_info.value.ref_no == "DO-9"


def test_validate_passes_for_clean_ledger():
    StockLedger(ITEMS, STOCK_INS, STOCK_OUTS).validate()
