from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from pydantic import BaseModel, Field

from wms.services.charges import ChargeLine
from wms.services.movement import MovementRow
from wms.services.statement import AnnualSummary, CategoryTotals, Statement

_CENT = Decimal("0.01")
_FOUR_PLACES = Decimal("0.0001")

ChargeCategory = Literal["Fulfillment", "Storage", "Transport", "Handling", "Consumable"]


def money(v: Decimal) -> Decimal:
    return v.quantize(_CENT, rounding=ROUND_HALF_UP)


def _four(v: Decimal) -> Decimal:
    return v.quantize(_FOUR_PLACES, rounding=ROUND_HALF_UP)


# ============================================================
# Lines
# ============================================================

class ChargeLineOut(BaseModel):
    day: date
    category: ChargeCategory
    ref_no: str = ""
    sku: str = ""
    description: str = ""
    quantity: Decimal
    unit_cost: Decimal
    amount: Decimal

    @classmethod
    def from_line(cls, ln: ChargeLine) -> "ChargeLineOut":
        return cls(
            day=ln.day,
            category=ln.category,
            ref_no=ln.ref_no,
            sku=ln.sku,
            description=ln.description,
            quantity=_four(ln.quantity),
            unit_cost=_four(ln.unit_cost),
            amount=money(ln.amount),
        )


# ============================================================
# Categories
# ============================================================

class FulfillmentOut(BaseModel):
    shipment_count: int = Field(ge=0)
    applied_rate: Decimal
    total: Decimal
    lines: list[ChargeLineOut]


class StorageOut(BaseModel):
    daily_rate: Decimal
    total: Decimal
    # one row per day of the period: quantity is pallets, unit_cost the daily pallet rate
    lines: list[ChargeLineOut]


class TransportOut(BaseModel):
    total: Decimal
    lines: list[ChargeLineOut]


class HandlingOut(BaseModel):
    ad_hoc_total: Decimal
    total: Decimal
    lines: list[ChargeLineOut]


class ConsumableOut(BaseModel):
    per_shipment_cost: Decimal
    rate_based_total: Decimal
    ad_hoc_total: Decimal
    total: Decimal
    lines: list[ChargeLineOut]


class CategoryTotalsOut(BaseModel):
    fulfillment: Decimal
    storage: Decimal
    transport: Decimal
    handling: Decimal
    consumable: Decimal
    grand_total: Decimal

    @classmethod
    def from_totals(cls, t: CategoryTotals) -> "CategoryTotalsOut":
        return cls(
            fulfillment=money(t.fulfillment),
            storage=money(t.storage),
            transport=money(t.transport),
            handling=money(t.handling),
            consumable=money(t.consumable),
            grand_total=money(t.grand_total),
        )


# ============================================================
# Statement
# ============================================================

class StatementOut(BaseModel):
    date_from: date
    date_to: date
    fulfillment: FulfillmentOut
    storage: StorageOut
    transport: TransportOut
    handling: HandlingOut
    consumable: ConsumableOut
    ad_hoc: list[ChargeLineOut]
    # every itemized row above, flattened in category order
    lines: list[ChargeLineOut]
    totals: CategoryTotalsOut
    grand_total: Decimal

    @classmethod
    def from_statement(cls, s: Statement) -> "StatementOut":
        lines = ChargeLineOut.from_line
        return cls(
            date_from=s.date_range.date_from,
            date_to=s.date_range.date_to,
            fulfillment=FulfillmentOut(
                shipment_count=s.fulfillment.shipment_count,
                applied_rate=money(s.fulfillment.applied_rate),
                total=money(s.fulfillment.total),
                lines=[lines(ln) for ln in s.fulfillment.lines],
            ),
            storage=StorageOut(
                daily_rate=_four(s.storage.daily_rate),
                total=money(s.storage.total),
                lines=[lines(ln) for ln in s.storage.lines],
            ),
            transport=TransportOut(
                total=money(s.transport.total),
                lines=[lines(ln) for ln in s.transport.lines],
            ),
            handling=HandlingOut(
                ad_hoc_total=money(s.handling.ad_hoc_total),
                total=money(s.handling.total),
                lines=[lines(ln) for ln in s.handling.lines],
            ),
            consumable=ConsumableOut(
                per_shipment_cost=money(s.consumable.per_shipment_cost),
                rate_based_total=money(s.consumable.rate_based_total),
                ad_hoc_total=money(s.consumable.ad_hoc_total),
                total=money(s.consumable.total),
                lines=[lines(ln) for ln in s.consumable.lines],
            ),
            ad_hoc=[lines(ln) for ln in s.ad_hoc_lines],
            lines=[lines(ln) for ln in s.lines()],
            totals=CategoryTotalsOut.from_totals(s.totals),
            grand_total=money(s.grand_total),
        )


# ============================================================
# Annual summary
# ============================================================

class MonthRowOut(BaseModel):
    month: date  # first day of the month (e.g. 2024-05-01)
    totals: CategoryTotalsOut


class AnnualSummaryOut(BaseModel):
    year: int
    available_years: list[int]
    rows: list[MonthRowOut]
    totals: CategoryTotalsOut

    @classmethod
    def from_summary(cls, summary: AnnualSummary, available_years: list[int]) -> "AnnualSummaryOut":
        return cls(
            year=summary.year,
            available_years=available_years,
            rows=[
                MonthRowOut(month=s.date_range.date_from, totals=CategoryTotalsOut.from_totals(s.totals))
                for s in summary.months
            ],
            totals=CategoryTotalsOut.from_totals(summary.totals),
        )


# ============================================================
# Item movement
# ============================================================

class MovementRowOut(BaseModel):
    sku: str
    description: str = ""
    opening: int
    total_in: int = Field(ge=0)
    total_out: int = Field(ge=0)
    closing: int

    @classmethod
    def from_row(cls, r: MovementRow) -> "MovementRowOut":
        return cls(
            sku=r.sku,
            description=r.description,
            opening=r.opening,
            total_in=r.total_in,
            total_out=r.total_out,
            closing=r.closing,
        )


class ItemMovementOut(BaseModel):
    warehouse: str
    date_from: date
    date_to: date
    rows: list[MovementRowOut]
