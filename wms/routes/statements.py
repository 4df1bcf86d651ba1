from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from wms.db.session import get_db
from wms.dependencies.scope import assert_organization_scope, http_error
from wms.schemas.statement import AnnualSummaryOut, StatementOut
from wms.services.errors import BillingError
from wms.services.loader import load_organization_data
from wms.services.snapshot import DateRange
from wms.services.statement import (
    available_years,
    build_annual_summary,
    build_monthly_statement,
    build_statement,
)

router = APIRouter(tags=["statements"])


# ============================================================
# Custom range statement
# ============================================================

@router.get("/organizations/{organization_id}/statements", response_model=StatementOut)
def get_statement(
    request: Request,
    organization_id: UUID,
    date_from: date,
    date_to: date,
    db: Session = Depends(get_db),
) -> StatementOut:
    assert_organization_scope(request, organization_id)

    try:
        date_range = DateRange(date_from, date_to)
        data = load_organization_data(db, organization_id)
        statement = build_statement(date_range, data)
    except BillingError as e:
        raise http_error(e) from e

    return StatementOut.from_statement(statement)


# ============================================================
# Monthly statement
# ============================================================

@router.get("/organizations/{organization_id}/statements/monthly", response_model=StatementOut)
def get_monthly_statement(
    request: Request,
    organization_id: UUID,
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
) -> StatementOut:
    assert_organization_scope(request, organization_id)

    try:
        data = load_organization_data(db, organization_id)
        statement = build_monthly_statement(year, month, data)
    except BillingError as e:
        raise http_error(e) from e

    return StatementOut.from_statement(statement)


# ============================================================
# Annual summary (12 monthly statements + annual total)
# ============================================================

@router.get("/organizations/{organization_id}/statements/annual", response_model=AnnualSummaryOut)
def get_annual_summary(
    request: Request,
    organization_id: UUID,
    year: int = Query(..., ge=1900, le=9999),
    db: Session = Depends(get_db),
) -> AnnualSummaryOut:
    assert_organization_scope(request, organization_id)

    try:
        data = load_organization_data(db, organization_id)
        summary = build_annual_summary(year, data)
    except BillingError as e:
        raise http_error(e) from e

    return AnnualSummaryOut.from_summary(summary, available_years(data, fallback_year=year))
