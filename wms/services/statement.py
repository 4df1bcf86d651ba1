"""
Billing statements.

One aggregator serves both the custom date-range statement and the calendar
month statement; a month is only a DateRange built with DateRange.for_month.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from wms.services.charges import (
    ChargeLine,
    ConsumableCharge,
    FulfillmentCharge,
    HandlingCharge,
    StorageCharge,
    TransportCharge,
    consumable_charge,
    fulfillment_charge,
    handling_charge,
    storage_charge,
    transport_charge,
)
from wms.services.ledger import StockLedger
from wms.services.snapshot import AdHocCharge, DateRange, OrganizationData

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class CategoryTotals:
    fulfillment: Decimal = _ZERO
    storage: Decimal = _ZERO
    transport: Decimal = _ZERO
    handling: Decimal = _ZERO
    consumable: Decimal = _ZERO

    @property
    def grand_total(self) -> Decimal:
        return self.fulfillment + self.storage + self.transport + self.handling + self.consumable

    def __add__(self, other: "CategoryTotals") -> "CategoryTotals":
        return CategoryTotals(
            fulfillment=self.fulfillment + other.fulfillment,
            storage=self.storage + other.storage,
            transport=self.transport + other.transport,
            handling=self.handling + other.handling,
            consumable=self.consumable + other.consumable,
        )


@dataclass(frozen=True)
class Statement:
    date_range: DateRange
    fulfillment: FulfillmentCharge
    storage: StorageCharge
    transport: TransportCharge
    handling: HandlingCharge
    consumable: ConsumableCharge
    ad_hoc: tuple[AdHocCharge, ...]

    @property
    def totals(self) -> CategoryTotals:
        return CategoryTotals(
            fulfillment=self.fulfillment.total,
            storage=self.storage.total,
            transport=self.transport.total,
            handling=self.handling.total,
            consumable=self.consumable.total,
        )

    @property
    def grand_total(self) -> Decimal:
        return self.totals.grand_total

    @property
    def ad_hoc_lines(self) -> tuple[ChargeLine, ...]:
        return tuple(
            ChargeLine(
                day=c.charge_date,
                category=c.charge_type,
                quantity=Decimal(1),
                unit_cost=c.amount,
                amount=c.amount,
                description=c.description,
            )
            for c in self.ad_hoc
        )

    def lines(self) -> list[ChargeLine]:
        """All itemized rows, grouped by category, ad-hoc charges last."""
        rows: list[ChargeLine] = []
        rows.extend(self.fulfillment.lines)
        rows.extend(self.storage.lines)
        rows.extend(self.transport.lines)
        rows.extend(self.handling.lines)
        rows.extend(self.consumable.lines)
        rows.extend(self.ad_hoc_lines)
        return rows


def build_statement(date_range: DateRange, data: OrganizationData) -> Statement:
    """
    Compute every charge category over ``date_range`` (inclusive).

    Raises UnknownItemError when any stock event in the history points at an
    item that does not exist; there is no partial statement.
    """
    ledger = StockLedger(data.items, data.stock_ins, data.stock_outs)
    ledger.validate()

    pricing = data.pricing

    stock_ins = [ev for ev in data.stock_ins if date_range.contains(ev.arrival_date)]
    stock_outs = [ev for ev in data.stock_outs if date_range.contains(ev.order_date)]
    ad_hoc = tuple(c for c in data.ad_hoc_charges if date_range.contains(c.charge_date))

    fulfillment = fulfillment_charge(stock_outs, pricing.fulfillment_tiers)

    statement = Statement(
        date_range=date_range,
        fulfillment=fulfillment,
        storage=storage_charge(
            date_range,
            data.items,
            data.stock_ins,
            data.stock_outs,
            pricing.storage,
            ledger=ledger,
        ),
        transport=transport_charge(stock_outs, pricing.transport.courier),
        handling=handling_charge(stock_ins, stock_outs, ad_hoc, pricing.handling.inbound_outbound),
        consumable=consumable_charge(
            fulfillment.shipment_count,
            pricing.consumable_items,
            ad_hoc,
            period_end=date_range.date_to,
        ),
        ad_hoc=ad_hoc,
    )

    logger.debug(
        "statement %s..%s: %d stock-in, %d stock-out, %d ad-hoc, grand_total=%s",
        date_range.date_from,
        date_range.date_to,
        len(stock_ins),
        len(stock_outs),
        len(ad_hoc),
        statement.grand_total,
    )
    return statement


def build_monthly_statement(year: int, month: int, data: OrganizationData) -> Statement:
    return build_statement(DateRange.for_month(year, month), data)


# ============================================================
# Annual summary
# ============================================================

@dataclass(frozen=True)
class AnnualSummary:
    year: int
    months: tuple[Statement, ...]

    @property
    def totals(self) -> CategoryTotals:
        totals = CategoryTotals()
        for statement in self.months:
            totals = totals + statement.totals
        return totals


def build_annual_summary(year: int, data: OrganizationData) -> AnnualSummary:
    # months are independent of each other; sequential is fast enough per organization
    return AnnualSummary(
        year=year,
        months=tuple(build_monthly_statement(year, month, data) for month in range(1, 13)),
    )


def available_years(data: OrganizationData, *, fallback_year: int) -> list[int]:
    """Years that have any billable history, or [fallback_year] when there is none."""
    years = {ev.arrival_date.year for ev in data.stock_ins}
    years |= {ev.order_date.year for ev in data.stock_outs}
    years |= {c.charge_date.year for c in data.ad_hoc_charges}
    return sorted(years) or [fallback_year]
