"""
Charge calculators.

Each function takes the events already narrowed to the billing period (storage
is the exception: it walks the full ledger day by day) and returns a frozen
result with its itemized lines. Amounts are never rounded here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import Iterable, Literal, Optional, Sequence

from wms.schemas.pricing import (
    ConsumableItem,
    CourierRates,
    FulfillmentTier,
    InboundOutboundRates,
    StorageRates,
)
from wms.services.ledger import StockLedger
from wms.services.snapshot import (
    AdHocCharge,
    DateRange,
    Item,
    StockInEvent,
    StockOutEvent,
)

ChargeCategory = Literal["Fulfillment", "Storage", "Transport", "Handling", "Consumable"]

# Storage is prorated over a fixed 30-day month whatever the calendar month length is.
STORAGE_DAYS_PER_MONTH = Decimal("30")

_ZERO = Decimal("0")
_FIRST_KG_BAND = Decimal("3")
_CAP_BAND_MIN = Decimal("25")
_CAP_BAND_MAX = Decimal("50")


@dataclass(frozen=True)
class ChargeLine:
    """One itemized row of a statement."""

    day: date
    category: ChargeCategory
    quantity: Decimal
    unit_cost: Decimal
    amount: Decimal
    ref_no: str = ""
    sku: str = ""
    description: str = ""


def _ad_hoc_total(charges: Iterable[AdHocCharge], charge_type: str) -> Decimal:
    return sum((c.amount for c in charges if c.charge_type == charge_type), _ZERO)


# ============================================================
# Fulfillment
# ============================================================

@dataclass(frozen=True)
class FulfillmentCharge:
    shipment_count: int
    applied_rate: Decimal
    total: Decimal
    lines: tuple[ChargeLine, ...] = ()


def select_fulfillment_rate(shipment_count: int, tiers: Sequence[FulfillmentTier]) -> Decimal:
    """
    Highest tier whose minimum volume the count reaches; the rate applies to
    every shipment of the period. Equal minimums keep their configured order.
    """
    for tier in sorted(tiers, key=lambda t: t.minimum_monthly_volume, reverse=True):
        if tier.minimum_monthly_volume <= shipment_count:
            return tier.price_per_shipment
    return _ZERO


def fulfillment_charge(
    stock_outs_in_period: Sequence[StockOutEvent],
    tiers: Sequence[FulfillmentTier],
) -> FulfillmentCharge:
    shipment_count = len(stock_outs_in_period)
    rate = select_fulfillment_rate(shipment_count, tiers)

    lines = tuple(
        ChargeLine(
            day=ev.order_date,
            category="Fulfillment",
            quantity=Decimal(1),
            unit_cost=rate,
            amount=rate,
            ref_no=ev.do_no,
            sku=ev.sku,
            description=f"{ev.consignee_name} ({ev.ordered_qty} {ev.uom})".strip(),
        )
        for ev in stock_outs_in_period
    )

    return FulfillmentCharge(
        shipment_count=shipment_count,
        applied_rate=rate,
        total=rate * shipment_count,
        lines=lines,
    )


# ============================================================
# Storage
# ============================================================

@dataclass(frozen=True)
class StorageDay:
    day: date
    total_cbm: Decimal
    pallets: Decimal
    cost: Decimal


@dataclass(frozen=True)
class StorageCharge:
    days: tuple[StorageDay, ...]
    daily_rate: Decimal
    total: Decimal

    @property
    def lines(self) -> tuple[ChargeLine, ...]:
        return tuple(
            ChargeLine(
                day=d.day,
                category="Storage",
                quantity=d.pallets,
                unit_cost=self.daily_rate,
                amount=d.cost,
                description=f"{d.total_cbm:.4f} CBM",
            )
            for d in self.days
        )


def storage_charge(
    date_range: DateRange,
    items: Sequence[Item],
    stock_ins: Iterable[StockInEvent],
    stock_outs: Iterable[StockOutEvent],
    storage: StorageRates,
    *,
    ledger: Optional[StockLedger] = None,
) -> StorageCharge:
    """
    Daily pallet usage x (monthly rate / 30).

    ``stock_ins``/``stock_outs`` are the full history, not the period subset:
    the opening balance of the first day depends on everything before it.
    """
    if ledger is None:
        ledger = StockLedger(items, stock_ins, stock_outs)

    volume_by_key = {item.key: item.volume_cbm for item in ledger.items}
    daily_rate = storage.rate_per_pallet_per_month / STORAGE_DAYS_PER_MONTH
    pallet_cbm = storage.pallet_volume_cbm

    days: list[StorageDay] = []
    for day, balances in ledger.iter_daily_balances(date_range):
        total_cbm = sum(
            (volume_by_key[key] * balance for key, balance in balances.items() if balance > 0),
            _ZERO,
        )
        pallets = total_cbm / pallet_cbm if pallet_cbm > 0 else _ZERO
        days.append(StorageDay(day=day, total_cbm=total_cbm, pallets=pallets, cost=pallets * daily_rate))

    return StorageCharge(
        days=tuple(days),
        daily_rate=daily_rate,
        total=sum((d.cost for d in days), _ZERO),
    )


# ============================================================
# Transport
# ============================================================

@dataclass(frozen=True)
class TransportCharge:
    lines: tuple[ChargeLine, ...]
    total: Decimal


def courier_cost(weight_kg: Decimal, courier: CourierRates) -> Decimal:
    if weight_kg <= 0:
        return _ZERO

    if weight_kg < _FIRST_KG_BAND:
        cost = courier.first_3kg
    else:
        extra_kg = (weight_kg - _FIRST_KG_BAND).to_integral_value(rounding=ROUND_CEILING)
        cost = courier.first_3kg + extra_kg * courier.per_additional_kg

    # within-state flat rate caps the formula, it does not replace it
    if _CAP_BAND_MIN <= weight_kg <= _CAP_BAND_MAX:
        cost = min(cost, courier.flat_rate_25_to_50kg_within_state)

    return cost


def transport_charge(
    stock_outs_in_period: Iterable[StockOutEvent],
    courier: CourierRates,
) -> TransportCharge:
    """Courier charges for Delivered shipments; Pending and Self collect are free."""
    lines: list[ChargeLine] = []
    for ev in stock_outs_in_period:
        if ev.fulfillment_status != "Delivered":
            continue
        cost = courier_cost(ev.total_weight_kg, courier)
        if cost <= 0:
            continue
        lines.append(
            ChargeLine(
                day=ev.delivered_date or ev.order_date,
                category="Transport",
                quantity=Decimal(1),
                unit_cost=cost,
                amount=cost,
                ref_no=ev.do_no,
                sku=ev.sku,
                description=f"{ev.consignee_name} {ev.total_weight_kg} kg".strip(),
            )
        )

    return TransportCharge(lines=tuple(lines), total=sum((ln.amount for ln in lines), _ZERO))


# ============================================================
# Handling
# ============================================================

@dataclass(frozen=True)
class HandlingCharge:
    lines: tuple[ChargeLine, ...]
    ad_hoc_total: Decimal
    total: Decimal


def _handling_rate(uom: str, rates: InboundOutboundRates) -> Decimal:
    return rates.per_carton if uom == "Ctn" else rates.per_unit


def handling_charge(
    stock_ins_in_period: Iterable[StockInEvent],
    stock_outs_in_period: Iterable[StockOutEvent],
    ad_hoc_in_period: Iterable[AdHocCharge],
    rates: InboundOutboundRates,
) -> HandlingCharge:
    lines: list[ChargeLine] = []

    for ev in stock_ins_in_period:
        rate = _handling_rate(ev.uom, rates)
        cost = ev.arrived_qty * rate
        if cost:
            lines.append(
                ChargeLine(
                    day=ev.arrival_date,
                    category="Handling",
                    quantity=Decimal(ev.arrived_qty),
                    unit_cost=rate,
                    amount=cost,
                    ref_no=ev.do_no,
                    sku=ev.sku,
                    description="Inbound",
                )
            )

    # every order is handled, delivered or not
    for ev in stock_outs_in_period:
        rate = _handling_rate(ev.uom, rates)
        cost = ev.ordered_qty * rate
        if cost:
            lines.append(
                ChargeLine(
                    day=ev.order_date,
                    category="Handling",
                    quantity=Decimal(ev.ordered_qty),
                    unit_cost=rate,
                    amount=cost,
                    ref_no=ev.do_no,
                    sku=ev.sku,
                    description="Outbound",
                )
            )

    ad_hoc_total = _ad_hoc_total(ad_hoc_in_period, "Handling")
    return HandlingCharge(
        lines=tuple(lines),
        ad_hoc_total=ad_hoc_total,
        total=sum((ln.amount for ln in lines), _ZERO) + ad_hoc_total,
    )


# ============================================================
# Consumables
# ============================================================

@dataclass(frozen=True)
class ConsumableCharge:
    per_shipment_cost: Decimal
    rate_based_total: Decimal
    ad_hoc_total: Decimal
    total: Decimal
    lines: tuple[ChargeLine, ...] = ()


def consumable_charge(
    shipment_count: int,
    consumable_items: Sequence[ConsumableItem],
    ad_hoc_in_period: Iterable[AdHocCharge],
    *,
    period_end: Optional[date] = None,
) -> ConsumableCharge:
    """
    Every shipment uses one of each configured consumable.

    ``period_end`` only dates the itemized per-consumable lines.
    """
    per_shipment_cost = sum((c.price_per_shipment for c in consumable_items), _ZERO)
    rate_based_total = per_shipment_cost * shipment_count
    ad_hoc_total = _ad_hoc_total(ad_hoc_in_period, "Consumable")

    lines: tuple[ChargeLine, ...] = ()
    if period_end is not None:
        lines = tuple(
            ChargeLine(
                day=period_end,
                category="Consumable",
                quantity=Decimal(shipment_count),
                unit_cost=c.price_per_shipment,
                amount=c.price_per_shipment * shipment_count,
                description=f"{c.name} ({c.unit})",
            )
            for c in consumable_items
        )

    return ConsumableCharge(
        per_shipment_cost=per_shipment_cost,
        rate_based_total=rate_based_total,
        ad_hoc_total=ad_hoc_total,
        total=rate_based_total + ad_hoc_total,
        lines=lines,
    )
