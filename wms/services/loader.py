from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.models.charge import AdHocChargeORM
from wms.models.inventory import ItemORM, StockInORM, StockOutORM
from wms.models.organization import OrganizationORM
from wms.schemas.pricing import DEFAULT_PRICING, PricingConfig
from wms.services.errors import InvalidLedgerEntryError, OrganizationNotFoundError, PricingConfigError
from wms.services.snapshot import (
    AdHocCharge,
    Item,
    OrganizationData,
    StockInEvent,
    StockOutEvent,
)

logger = logging.getLogger(__name__)


def _dec(v) -> Decimal:
    return Decimal(str(v if v is not None else 0))


def get_organization(db: Session, organization_id: UUID) -> OrganizationORM:
    org = db.get(OrganizationORM, organization_id)
    if org is None:
        raise OrganizationNotFoundError(f"Organization not found: {organization_id}")
    return org


def parse_pricing(raw: dict | None) -> PricingConfig:
    """Stored JSON -> PricingConfig. NULL means the default rate card."""
    if raw is None:
        return DEFAULT_PRICING
    try:
        return PricingConfig.model_validate(raw)
    except ValidationError as e:
        raise PricingConfigError(f"Invalid pricing configuration: {e.error_count()} error(s)") from e


def load_organization_data(db: Session, organization_id: UUID) -> OrganizationData:
    """Read one organization's full history into an immutable snapshot."""
    org = get_organization(db, organization_id)
    pricing = parse_pricing(org.pricing)

    items = db.execute(
        select(ItemORM)
        .where(ItemORM.organization_id == organization_id)
        .order_by(ItemORM.warehouse, ItemORM.sku)
    ).scalars().all()

    stock_ins = db.execute(
        select(StockInORM)
        .where(StockInORM.organization_id == organization_id)
        .order_by(StockInORM.arrival_date, StockInORM.created_at)
    ).scalars().all()

    stock_outs = db.execute(
        select(StockOutORM)
        .where(StockOutORM.organization_id == organization_id)
        .order_by(StockOutORM.order_date, StockOutORM.created_at)
    ).scalars().all()

    charges = db.execute(
        select(AdHocChargeORM)
        .where(AdHocChargeORM.organization_id == organization_id)
        .order_by(AdHocChargeORM.charge_date, AdHocChargeORM.created_at)
    ).scalars().all()

    try:
        data = _build_snapshot(items, stock_ins, stock_outs, charges, pricing)
    except InvalidLedgerEntryError as e:
        logger.warning("organization %s has a corrupt ledger entry: %s", organization_id, e)
        raise

    logger.debug(
        "loaded organization %s: %d items, %d stock-in, %d stock-out, %d ad-hoc",
        organization_id,
        len(data.items),
        len(data.stock_ins),
        len(data.stock_outs),
        len(data.ad_hoc_charges),
    )
    return data


def _build_snapshot(items, stock_ins, stock_outs, charges, pricing: PricingConfig) -> OrganizationData:
    """ORM rows -> snapshot. Raises InvalidLedgerEntryError on a stored value the billing rules reject."""
    return OrganizationData(
        items=tuple(
            Item(
                sku=r.sku,
                warehouse=r.warehouse,
                starting_stock=int(r.starting_stock or 0),
                length_cm=_dec(r.length_cm),
                width_cm=_dec(r.width_cm),
                height_cm=_dec(r.height_cm),
                weight_kg=_dec(r.weight_kg),
                uom=r.uom or "Ctn",
                description=r.description or "",
            )
            for r in items
        ),
        stock_ins=tuple(
            StockInEvent(
                sku=r.sku,
                warehouse=r.warehouse,
                arrival_date=r.arrival_date,
                arrived_qty=int(r.arrived_qty),
                uom=r.uom or "Ctn",
                do_no=r.do_no or "",
            )
            for r in stock_ins
        ),
        stock_outs=tuple(
            StockOutEvent(
                sku=r.sku,
                warehouse=r.warehouse,
                order_date=r.order_date,
                ordered_qty=int(r.ordered_qty),
                fulfillment_status=r.fulfillment_status,
                total_weight_kg=_dec(r.total_weight_kg),
                delivered_date=r.delivered_date,
                uom=r.uom or "Ctn",
                do_no=r.do_no or "",
                consignee_name=r.consignee_name or "",
            )
            for r in stock_outs
        ),
        ad_hoc_charges=tuple(
            AdHocCharge(
                charge_date=r.charge_date,
                charge_type=r.charge_type,
                amount=_dec(r.amount),
                description=r.description or "",
            )
            for r in charges
        ),
        pricing=pricing,
    )
