from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from wms.db.session import get_db
from wms.dependencies.scope import assert_organization_scope, http_error
from wms.schemas.pricing import PricingConfig
from wms.services.errors import BillingError
from wms.services.pricing import get_pricing, update_pricing

router = APIRouter(tags=["pricing"])


@router.get("/organizations/{organization_id}/pricing", response_model=PricingConfig)
def read_pricing(
    request: Request,
    organization_id: UUID,
    db: Session = Depends(get_db),
) -> PricingConfig:
    assert_organization_scope(request, organization_id)
    try:
        return get_pricing(db, organization_id)
    except BillingError as e:
        raise http_error(e) from e


@router.put("/organizations/{organization_id}/pricing", response_model=PricingConfig)
def replace_pricing(
    request: Request,
    organization_id: UUID,
    body: PricingConfig,
    db: Session = Depends(get_db),
) -> PricingConfig:
    assert_organization_scope(request, organization_id)
    try:
        return update_pricing(db, organization_id, body)
    except BillingError as e:
        raise http_error(e) from e
