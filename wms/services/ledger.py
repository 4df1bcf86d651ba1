"""
Point-in-time stock balances.

balance(sku, warehouse, day) = starting_stock
                               + sum(arrived_qty,  arrival_date <= day)
                               - sum(ordered_qty,  order_date   <= day)

Stock-outs reduce the balance on their order date whatever their fulfillment
status is. Negative balances are not rejected here; the ledger is trusted as given.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Iterator, Sequence

from wms.services.errors import UnknownItemError
from wms.services.snapshot import DateRange, Item, ItemKey, StockInEvent, StockOutEvent

logger = logging.getLogger(__name__)


def find_item(items: Iterable[Item], sku: str, warehouse: str) -> Item:
    for item in items:
        if item.sku == sku and item.warehouse == warehouse:
            return item
    raise UnknownItemError(sku, warehouse)


def balance_as_of(
    sku: str,
    warehouse: str,
    as_of: date,
    items: Sequence[Item],
    stock_ins: Iterable[StockInEvent],
    stock_outs: Iterable[StockOutEvent],
) -> int:
    """End-of-day on-hand balance of one item on ``as_of`` (inclusive)."""
    balance = find_item(items, sku, warehouse).starting_stock

    for ev in stock_ins:
        if ev.sku == sku and ev.warehouse == warehouse and ev.arrival_date <= as_of:
            balance += ev.arrived_qty

    for ev in stock_outs:
        if ev.sku == sku and ev.warehouse == warehouse and ev.order_date <= as_of:
            balance -= ev.ordered_qty

    return balance


def _sum_until(qty_by_day: dict[date, int], as_of: date) -> int:
    return sum(qty for day, qty in qty_by_day.items() if day <= as_of)


def _sum_within(qty_by_day: dict[date, int], date_range: DateRange) -> int:
    return sum(qty for day, qty in qty_by_day.items() if date_range.contains(day))


class StockLedger:
    """
    Per-item movement index over one organization's full history.

    Events are bucketed by (item, day) once, so stepping through a date range
    only applies each day's deltas instead of rescanning the history per day.
    """

    def __init__(
        self,
        items: Iterable[Item],
        stock_ins: Iterable[StockInEvent],
        stock_outs: Iterable[StockOutEvent],
    ) -> None:
        self._items: dict[ItemKey, Item] = {}
        for item in items:
            self._items.setdefault(item.key, item)

        self._ins: dict[ItemKey, dict[date, int]] = defaultdict(lambda: defaultdict(int))
        self._outs: dict[ItemKey, dict[date, int]] = defaultdict(lambda: defaultdict(int))
        self._unknown: list[tuple[ItemKey, str]] = []

        for ev in stock_ins:
            self._record(self._ins, ev.key, ev.arrival_date, ev.arrived_qty, ev.do_no)
        for ev in stock_outs:
            self._record(self._outs, ev.key, ev.order_date, ev.ordered_qty, ev.do_no)

    def _record(self, bucket, key: ItemKey, day: date, qty: int, ref_no: str) -> None:
        if key not in self._items:
            self._unknown.append((key, ref_no))
            return
        bucket[key][day] += qty

    def _require(self, key: ItemKey) -> Item:
        item = self._items.get(key)
        if item is None:
            raise UnknownItemError(*key)
        return item

    @property
    def items(self) -> tuple[Item, ...]:
        return tuple(self._items.values())

    def validate(self) -> None:
        """Raise UnknownItemError for the first event that references no item."""
        if not self._unknown:
            return
        (sku, warehouse), ref_no = self._unknown[0]
        logger.warning(
            "ledger integrity: %d stock event(s) reference unknown items, first sku=%s warehouse=%s ref=%s",
            len(self._unknown),
            sku,
            warehouse,
            ref_no or "-",
        )
        raise UnknownItemError(sku, warehouse, ref_no=ref_no or None)

    def balance_as_of(self, key: ItemKey, as_of: date) -> int:
        item = self._require(key)
        return (
            item.starting_stock
            + _sum_until(self._ins.get(key, {}), as_of)
            - _sum_until(self._outs.get(key, {}), as_of)
        )

    def movement_within(self, key: ItemKey, date_range: DateRange) -> tuple[int, int]:
        """(total in, total out) for events dated inside ``date_range``."""
        self._require(key)
        return (
            _sum_within(self._ins.get(key, {}), date_range),
            _sum_within(self._outs.get(key, {}), date_range),
        )

    def iter_daily_balances(self, date_range: DateRange) -> Iterator[tuple[date, dict[ItemKey, int]]]:
        """Yield (day, {item key: end-of-day balance}) for every day of the range."""
        day_before = date_range.date_from - timedelta(days=1)
        balances = {key: self.balance_as_of(key, day_before) for key in self._items}

        for day in date_range.days():
            for key, qty_by_day in self._ins.items():
                balances[key] += qty_by_day.get(day, 0)
            for key, qty_by_day in self._outs.items():
                balances[key] -= qty_by_day.get(day, 0)
            yield day, dict(balances)
