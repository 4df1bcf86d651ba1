"""
Immutable inputs of the billing core.

The persistence layer (wms.services.loader) builds these from ORM rows;
everything downstream only reads them.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, Literal, Optional, get_args

from wms.schemas.pricing import DEFAULT_PRICING, PricingConfig
from wms.services.errors import InvalidDateRangeError, InvalidLedgerEntryError

FulfillmentStatus = Literal["Pending", "Delivered", "Self collect"]
AdHocChargeType = Literal["Handling", "Consumable"]

FULFILLMENT_STATUSES: tuple[str, ...] = get_args(FulfillmentStatus)
AD_HOC_CHARGE_TYPES: tuple[str, ...] = get_args(AdHocChargeType)

ItemKey = tuple[str, str]  # (sku, warehouse)

_CM3_PER_M3 = Decimal("1000000")


@dataclass(frozen=True)
class Item:
    sku: str
    warehouse: str
    starting_stock: int
    length_cm: Decimal = Decimal("0")
    width_cm: Decimal = Decimal("0")
    height_cm: Decimal = Decimal("0")
    weight_kg: Decimal = Decimal("0")
    uom: str = "Ctn"
    description: str = ""

    @property
    def key(self) -> ItemKey:
        return (self.sku, self.warehouse)

    @property
    def volume_cbm(self) -> Decimal:
        return (self.length_cm * self.width_cm * self.height_cm) / _CM3_PER_M3


@dataclass(frozen=True)
class StockInEvent:
    sku: str
    warehouse: str
    arrival_date: date
    arrived_qty: int
    uom: str = "Ctn"
    do_no: str = ""

    @property
    def key(self) -> ItemKey:
        return (self.sku, self.warehouse)


@dataclass(frozen=True)
class StockOutEvent:
    sku: str
    warehouse: str
    order_date: date
    ordered_qty: int
    fulfillment_status: FulfillmentStatus = "Pending"
    # snapshot taken when the order was recorded; never recomputed from the item
    total_weight_kg: Decimal = Decimal("0")
    delivered_date: Optional[date] = None
    uom: str = "Ctn"
    do_no: str = ""
    consignee_name: str = ""

    def __post_init__(self) -> None:
        if self.fulfillment_status not in FULFILLMENT_STATUSES:
            raise InvalidLedgerEntryError(
                f"Unknown fulfillment_status {self.fulfillment_status!r} on stock-out {self.do_no or self.sku}"
            )

    @property
    def key(self) -> ItemKey:
        return (self.sku, self.warehouse)


@dataclass(frozen=True)
class AdHocCharge:
    charge_date: date
    charge_type: AdHocChargeType
    amount: Decimal
    description: str = ""

    def __post_init__(self) -> None:
        if self.charge_type not in AD_HOC_CHARGE_TYPES:
            raise InvalidLedgerEntryError(
                f"Unknown ad-hoc charge_type {self.charge_type!r} on {self.charge_date.isoformat()}"
            )
        if self.amount < 0:
            raise InvalidLedgerEntryError(
                f"Negative ad-hoc amount {self.amount} on {self.charge_date.isoformat()}"
            )


@dataclass(frozen=True)
class OrganizationData:
    """Everything needed to bill one organization, as of the moment it was loaded."""

    items: tuple[Item, ...] = ()
    stock_ins: tuple[StockInEvent, ...] = ()
    stock_outs: tuple[StockOutEvent, ...] = ()
    ad_hoc_charges: tuple[AdHocCharge, ...] = ()
    pricing: PricingConfig = field(default=DEFAULT_PRICING)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range."""

    date_from: date
    date_to: date

    def __post_init__(self) -> None:
        if self.date_to < self.date_from:
            raise InvalidDateRangeError(
                f"date_to ({self.date_to.isoformat()}) must be >= date_from ({self.date_from.isoformat()})"
            )

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateRange":
        if not 1 <= month <= 12:
            raise InvalidDateRangeError(f"month must be 1..12, got {month}")
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    def contains(self, day: date) -> bool:
        return self.date_from <= day <= self.date_to

    def days(self) -> Iterator[date]:
        day = self.date_from
        while day <= self.date_to:
            yield day
            day += timedelta(days=1)
