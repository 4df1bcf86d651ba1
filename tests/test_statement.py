from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from wms.schemas.pricing import FulfillmentTier, StorageRates
from wms.services.errors import InvalidDateRangeError, InvalidLedgerEntryError, UnknownItemError
from wms.services.ledger import balance_as_of
from wms.services.movement import item_movement
from wms.services.snapshot import AdHocCharge, DateRange, Item, StockInEvent, StockOutEvent
from wms.services.statement import (
    available_years,
    build_annual_summary,
    build_monthly_statement,
    build_statement,
)

MAY = DateRange(date(2024, 5, 1), date(2024, 5, 31))


def test_date_range_rejects_end_before_start():
    with pytest.raises(InvalidDateRangeError):
        DateRange(date(2024, 5, 2), date(2024, 5, 1))


def test_single_day_range_is_valid():
    assert list(DateRange(date(2024, 5, 2), date(2024, 5, 2)).days()) == [date(2024, 5, 2)]


def test_month_range_covers_calendar_month():
    assert DateRange.for_month(2024, 2) == DateRange(date(2024, 2, 1), date(2024, 2, 29))
    assert len(list(DateRange.for_month(2023, 12).days())) == 31


@pytest.mark.parametrize("charge_type", ["handling", "Freight", ""])
def test_ad_hoc_charge_rejects_unknown_type(charge_type):
    with pytest.raises(InvalidLedgerEntryError):
        AdHocCharge(charge_date=date(2024, 5, 3), charge_type=charge_type, amount=Decimal("10"))


def test_ad_hoc_charge_rejects_negative_amount():
    with pytest.raises(InvalidLedgerEntryError):
        AdHocCharge(charge_date=date(2024, 5, 3), charge_type="Handling", amount=Decimal("-0.01"))


def test_ad_hoc_charge_allows_zero_amount():
    assert AdHocCharge(charge_date=date(2024, 5, 3), charge_type="Consumable", amount=Decimal("0")).amount == 0


@pytest.mark.parametrize("status", ["delivered", "Shipped", ""])
def test_stock_out_rejects_unknown_fulfillment_status(status):
    with pytest.raises(InvalidLedgerEntryError):
        StockOutEvent(sku="PCH-001", warehouse="Sabah", order_date=date(2024, 5, 5), ordered_qty=1, fulfillment_status=status)


def test_end_to_end_may_statement(may_data):
    data = replace(
        may_data,
        pricing=may_data.pricing.model_copy(
            update={
                "fulfillment_tiers": [FulfillmentTier(minimum_monthly_volume=0, price_per_shipment=Decimal("5.00"))],
            }
        ),
    )

    statement = build_statement(MAY, data)

    assert balance_as_of("PCH-001", "Sabah", date(2024, 5, 31), data.items, data.stock_ins, data.stock_outs) == 465

    assert statement.fulfillment.shipment_count == 1
    assert statement.fulfillment.total == Decimal("5.00")

    assert len(statement.transport.lines) == 1
    assert statement.transport.total == Decimal("303.50")

    # 565 cartons in + 100 cartons out at 1.00/carton
    assert statement.handling.total == Decimal("665.00")

    # 1 shipment x (1.50 + 0.30)
    assert statement.consumable.total == Decimal("1.80")

    # 0.1 CBM cartons, 1 CBM pallets, 30/month -> 1.00 per pallet-day
    # May 20-24: 56.5 pallets x 5 days, May 25-31: 46.5 pallets x 7 days
    assert statement.storage.total == Decimal("608.0")
    assert len(statement.storage.days) == 31
    assert statement.storage.days[18].pallets == Decimal("0")

    assert statement.grand_total == Decimal("5.00") + Decimal("608.0") + Decimal("303.50") + Decimal("665.00") + Decimal("1.80")


def test_statement_is_idempotent(may_data):
    assert build_statement(MAY, may_data) == build_statement(MAY, may_data)


def test_monthly_statement_equals_range_statement(may_data):
    assert build_monthly_statement(2024, 5, may_data) == build_statement(MAY, may_data)


def test_events_outside_range_are_not_billed_but_still_move_stock(may_data):
    statement = build_statement(DateRange(date(2024, 6, 1), date(2024, 6, 30)), may_data)

    assert statement.fulfillment.shipment_count == 0
    assert statement.transport.total == 0
    assert statement.handling.total == 0
    # 465 cartons x 0.1 CBM = 46.5 pallets x 1.00 x 30 days
    assert statement.storage.total == Decimal("1395.0")


def test_ad_hoc_charges_land_in_their_category(may_data):
    data = replace(
        may_data,
        ad_hoc_charges=(
            AdHocCharge(charge_date=date(2024, 5, 3), charge_type="Handling", amount=Decimal("600"), description="Unload 40ft"),
            AdHocCharge(charge_date=date(2024, 5, 4), charge_type="Consumable", amount=Decimal("25.50"), description="Pallet wrap"),
            AdHocCharge(charge_date=date(2024, 6, 1), charge_type="Handling", amount=Decimal("999")),
        ),
    )

    statement = build_statement(MAY, data)

    assert statement.handling.ad_hoc_total == Decimal("600")
    assert statement.consumable.ad_hoc_total == Decimal("25.50")
    assert len(statement.ad_hoc) == 2

    ad_hoc_lines = [ln for ln in statement.lines() if ln.description in ("Unload 40ft", "Pallet wrap")]
    assert [ln.category for ln in ad_hoc_lines] == ["Handling", "Consumable"]
    assert [ln.category for ln in statement.ad_hoc_lines] == ["Handling", "Consumable"]
    assert all(ln.quantity == 1 and ln.unit_cost == ln.amount for ln in statement.ad_hoc_lines)


def test_statement_lines_carry_reference_and_cost(may_data):
    lines = build_statement(MAY, may_data).lines()

    categories = {ln.category for ln in lines}
    assert categories == {"Fulfillment", "Storage", "Transport", "Handling", "Consumable"}

    transport = [ln for ln in lines if ln.category == "Transport"]
    assert transport[0].ref_no == "DO-OUT-001"
    assert transport[0].day == date(2024, 5, 27)
    assert transport[0].amount == Decimal("303.50")


def test_unknown_item_in_history_fails_the_statement(may_data):
    data = replace(
        may_data,
        stock_ins=may_data.stock_ins
        + (StockInEvent(sku="GHOST", warehouse="Sabah", arrival_date=date(2023, 1, 1), arrived_qty=1),),
    )

    with pytest.raises(UnknownItemError):
        build_statement(MAY, data)


def test_sku_in_another_warehouse_is_unknown(may_data):
    data = replace(
        may_data,
        stock_outs=may_data.stock_outs
        + (StockOutEvent(sku="PCH-001", warehouse="Sarawak", order_date=date(2024, 5, 5), ordered_qty=1),),
    )

    with pytest.raises(UnknownItemError):
        build_statement(MAY, data)


def test_zero_pallet_volume_gives_zero_storage(may_data):
    data = replace(
        may_data,
        pricing=may_data.pricing.model_copy(
            update={"storage": StorageRates(rate_per_pallet_per_month=Decimal("50"), pallet_volume_cbm=Decimal("0"))}
        ),
    )

    assert build_statement(MAY, data).storage.total == Decimal("0")


# ============================================================
# Annual summary
# ============================================================

def test_annual_summary_sums_the_twelve_months(may_data):
    summary = build_annual_summary(2024, may_data)

    assert len(summary.months) == 12
    assert summary.months[4].date_range == MAY

    expected = sum((s.grand_total for s in summary.months), Decimal("0"))
    assert summary.totals.grand_total == expected
    assert summary.totals.fulfillment == Decimal("5.00")


def test_available_years(may_data):
    assert available_years(may_data, fallback_year=2030) == [2024]

    empty = replace(may_data, stock_ins=(), stock_outs=(), ad_hoc_charges=())
    assert available_years(empty, fallback_year=2030) == [2030]


# ============================================================
# Item movement
# ============================================================

def test_item_movement_opening_and_closing(may_data):
    data = replace(
        may_data,
        items=may_data.items + (Item(sku="PEA-001", warehouse="Sabah", starting_stock=40, description="Pear Juice"),),
    )

    rows = item_movement(data, "Sabah", DateRange(date(2024, 5, 21), date(2024, 5, 31)))
    by_sku = {r.sku: r for r in rows}

    assert by_sku["PCH-001"].opening == 565
    assert by_sku["PCH-001"].total_in == 0
    assert by_sku["PCH-001"].total_out == 100
    assert by_sku["PCH-001"].closing == 465
    assert by_sku["PEA-001"].closing == 40


def test_item_movement_filters_by_warehouse_and_query(may_data):
    data = replace(
        may_data,
        items=may_data.items + (Item(sku="PEA-001", warehouse="Sabah", starting_stock=40, description="Pear Juice"),),
    )

    assert [r.sku for r in item_movement(data, "Sabah", MAY, "pear")] == ["PEA-001"]
    assert [r.sku for r in item_movement(data, "Sabah", MAY, "pch")] == ["PCH-001"]
    assert item_movement(data, "Sarawak", MAY) == []
