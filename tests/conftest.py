from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wms import models  # noqa: F401
from wms.db.session import get_db
from wms.main import app
from wms.models.base import Base
from wms.schemas.pricing import (
    ConsumableItem,
    CourierRates,
    FulfillmentTier,
    HandlingRates,
    InboundOutboundRates,
    PricingConfig,
    StorageRates,
    TransportRates,
)
from wms.services.snapshot import Item, OrganizationData, StockInEvent, StockOutEvent


@pytest.fixture()
def pricing() -> PricingConfig:
    return PricingConfig(
        fulfillment_tiers=[
            FulfillmentTier(minimum_monthly_volume=0, price_per_shipment=Decimal("5.00")),
            FulfillmentTier(minimum_monthly_volume=500, price_per_shipment=Decimal("4.50")),
            FulfillmentTier(minimum_monthly_volume=1000, price_per_shipment=Decimal("4.00")),
        ],
        consumable_items=[
            ConsumableItem(name="Bubble Wrap", price_per_shipment=Decimal("1.50")),
            ConsumableItem(name="Flyer (S)", price_per_shipment=Decimal("0.30")),
        ],
        storage=StorageRates(rate_per_pallet_per_month=Decimal("30"), pallet_volume_cbm=Decimal("1")),
        transport=TransportRates(
            courier=CourierRates(
                first_3kg=Decimal("8.00"),
                per_additional_kg=Decimal("1.50"),
                flat_rate_25_to_50kg_within_state=Decimal("50.00"),
            )
        ),
        handling=HandlingRates(
            inbound_outbound=InboundOutboundRates(
                per_carton=Decimal("1.00"),
                per_unit=Decimal("0.50"),
                per_pallet=Decimal("5.00"),
            )
        ),
    )


@pytest.fixture()
def may_data(pricing) -> OrganizationData:
    """One 0.1 CBM carton item: 565 in on 2024-05-20, 100 out (Delivered, 200 kg) on 2024-05-25."""
    return OrganizationData(
        items=(
            Item(
                sku="PCH-001",
                warehouse="Sabah",
                starting_stock=0,
                length_cm=Decimal("50"),
                width_cm=Decimal("40"),
                height_cm=Decimal("50"),
                weight_kg=Decimal("2"),
                description="Peach Juice 1L",
            ),
        ),
        stock_ins=(
            StockInEvent(
                sku="PCH-001",
                warehouse="Sabah",
                arrival_date=date(2024, 5, 20),
                arrived_qty=565,
                do_no="DO-PCH-001",
            ),
        ),
        stock_outs=(
            StockOutEvent(
                sku="PCH-001",
                warehouse="Sabah",
                order_date=date(2024, 5, 25),
                ordered_qty=100,
                fulfillment_status="Delivered",
                total_weight_kg=Decimal("200"),
                delivered_date=date(2024, 5, 27),
                do_no="DO-OUT-001",
                consignee_name="Kedai Runcit Ali",
            ),
        ),
        pricing=pricing,
    )


# ============================================================
# DB / API
# ============================================================

@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

    db = TestingSession()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(db_session):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)
