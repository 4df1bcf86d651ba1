# wms/models/inventory.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from wms.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemORM(Base):
    """
    Item master, one row per (sku, warehouse)

    - starting_stock: balance before any stock-in/stock-out history
    - length_cm / width_cm / height_cm: carton dimensions used for storage CBM
    - weight_kg: copied into stock_outs.total_weight_kg when an order is recorded
    - uom: Ctn / Pack
    """

    __tablename__ = "items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    sku = Column(String(64), nullable=False, index=True)
    warehouse = Column(String(128), nullable=False)

    brand = Column(String(255), nullable=True)
    description = Column(String(512), nullable=True)
    net_weight_volume = Column(String(64), nullable=True)
    uom = Column(String(16), nullable=False, default="Ctn")

    length_cm = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    width_cm = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    height_cm = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    weight_kg = Column(Numeric(10, 3), nullable=False, default=Decimal("0"))

    starting_stock = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    organization = relationship("OrganizationORM", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("organization_id", "warehouse", "sku", name="uq_items_org_warehouse_sku"),
    )


class StockInORM(Base):
    """Inbound receipt (append-only). Increases the balance as of arrival_date."""

    __tablename__ = "stock_ins"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    arrival_date = Column(Date, nullable=False, index=True)
    do_no = Column(String(64), nullable=True)

    sku = Column(String(64), nullable=False)
    warehouse = Column(String(128), nullable=False)
    uom = Column(String(16), nullable=False, default="Ctn")

    arrived_qty = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_stock_ins_org_sku_wh", "organization_id", "sku", "warehouse"),
    )


class StockOutORM(Base):
    """
    Outbound order (append-only)

    The balance drops as of order_date whatever fulfillment_status says.
    total_weight_kg is a snapshot (ordered_qty * item weight at creation time).

    fulfillment_status:
      - Pending
      - Delivered     : billed for transport
      - Self collect
    """

    __tablename__ = "stock_outs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    order_date = Column(Date, nullable=False, index=True)
    do_no = Column(String(64), nullable=True)
    consignee_name = Column(String(255), nullable=True)

    sku = Column(String(64), nullable=False)
    warehouse = Column(String(128), nullable=False)
    uom = Column(String(16), nullable=False, default="Ctn")

    ordered_qty = Column(Integer, nullable=False)
    total_weight_kg = Column(Numeric(12, 3), nullable=False, default=Decimal("0"))

    fulfillment_status = Column(String(16), nullable=False, default="Pending")
    delivered_date = Column(Date, nullable=True)
    delivered_by = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_stock_outs_org_sku_wh", "organization_id", "sku", "warehouse"),
        CheckConstraint(
            "fulfillment_status IN ('Pending', 'Delivered', 'Self collect')",
            name="ck_stock_outs_fulfillment_status",
        ),
    )
