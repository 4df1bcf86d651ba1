from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, Date, DateTime, String, Uuid

from wms.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrganizationORM(Base):
    """
    A billed client of the warehouse.

    pricing holds the organization's rate card as JSON
    (see wms.schemas.pricing.PricingConfig). NULL means "use the default rate card".
    """

    __tablename__ = "organizations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    name = Column(String(255), nullable=False)

    billing_address = Column(String(512), nullable=True)
    contact_person = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(32), nullable=True)
    company_reg_no = Column(String(64), nullable=True)

    date_joined = Column(Date, nullable=True)

    pricing = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
