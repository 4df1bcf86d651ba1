from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wms.db.session import get_db
from wms.dependencies.scope import assert_organization_scope, http_error
from wms.schemas.statement import ItemMovementOut, MovementRowOut
from wms.services.errors import BillingError
from wms.services.loader import load_organization_data
from wms.services.movement import item_movement
from wms.services.snapshot import DateRange

router = APIRouter(tags=["reports"])


@router.get("/organizations/{organization_id}/reports/item-movement", response_model=ItemMovementOut)
def get_item_movement(
    request: Request,
    organization_id: UUID,
    warehouse: str,
    date_from: date,
    date_to: date,
    q: Optional[str] = Query(default=None, max_length=255),
    db: Session = Depends(get_db),
) -> ItemMovementOut:
    assert_organization_scope(request, organization_id)

    try:
        date_range = DateRange(date_from, date_to)
        data = load_organization_data(db, organization_id)
        rows = item_movement(data, warehouse, date_range, q)
    except BillingError as e:
        raise http_error(e) from e

    return ItemMovementOut(
        warehouse=warehouse,
        date_from=date_from,
        date_to=date_to,
        rows=[MovementRowOut.from_row(r) for r in rows],
    )
