from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid

from wms.models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdHocChargeORM(Base):
    """
    Manually entered charge added straight into a category total.

    charge_type: Handling / Consumable
    """

    __tablename__ = "ad_hoc_charges"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)

    organization_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    charge_date = Column(Date, nullable=False, index=True)
    charge_type = Column(String(16), nullable=False)
    description = Column(Text, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint("charge_type IN ('Handling', 'Consumable')", name="ck_ad_hoc_charges_charge_type"),
        CheckConstraint("amount >= 0", name="ck_ad_hoc_charges_amount"),
    )
