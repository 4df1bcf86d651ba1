from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import HTTPException, Request, status

from wms.services.errors import (
    BillingError,
    InvalidDateRangeError,
    InvalidLedgerEntryError,
    OrganizationNotFoundError,
    PricingConfigError,
    UnknownItemError,
)


def _get_actor_organization_id(request: Request) -> Optional[UUID]:
    # set by the auth layer when present; anonymous requests are not scoped here
    user = getattr(request.state, "user", None)
    organization_id = getattr(user, "organization_id", None)

    if isinstance(organization_id, UUID):
        return organization_id

    if isinstance(organization_id, str):
        try:
            return UUID(organization_id)
        except ValueError:
            return None

    return None


def assert_organization_scope(request: Request, organization_id: UUID) -> None:
    actor_organization_id = _get_actor_organization_id(request)
    if actor_organization_id and actor_organization_id != organization_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")


_STATUS_BY_ERROR: tuple[tuple[type[BillingError], int], ...] = (
    (InvalidDateRangeError, status.HTTP_400_BAD_REQUEST),
    (OrganizationNotFoundError, status.HTTP_404_NOT_FOUND),
    (UnknownItemError, status.HTTP_409_CONFLICT),
    (InvalidLedgerEntryError, status.HTTP_409_CONFLICT),
    (PricingConfigError, 422),
)


def http_error(exc: BillingError) -> HTTPException:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
