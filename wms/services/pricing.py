from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from wms.schemas.pricing import PricingConfig
from wms.services.loader import get_organization, parse_pricing

logger = logging.getLogger(__name__)


def get_pricing(db: Session, organization_id: UUID) -> PricingConfig:
    org = get_organization(db, organization_id)
    return parse_pricing(org.pricing)


def update_pricing(db: Session, organization_id: UUID, pricing: PricingConfig) -> PricingConfig:
    """Replace the organization's rate card (whole document, no partial patch)."""
    org = get_organization(db, organization_id)

    # Decimals are stored as strings so no precision is lost in JSON
    org.pricing = pricing.model_dump(mode="json")

    db.add(org)
    db.commit()
    db.refresh(org)

    logger.info("pricing updated for organization %s", organization_id)
    return parse_pricing(org.pricing)
