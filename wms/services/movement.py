from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from wms.services.ledger import StockLedger
from wms.services.snapshot import DateRange, OrganizationData


@dataclass(frozen=True)
class MovementRow:
    sku: str
    description: str
    opening: int
    total_in: int
    total_out: int

    @property
    def closing(self) -> int:
        return self.opening + self.total_in - self.total_out


def item_movement(
    data: OrganizationData,
    warehouse: str,
    date_range: DateRange,
    query: Optional[str] = None,
) -> list[MovementRow]:
    """
    Opening / in / out / closing stock per item of one warehouse.

    ``query`` filters on sku or description, case-insensitive substring.
    """
    ledger = StockLedger(data.items, data.stock_ins, data.stock_outs)
    ledger.validate()

    needle = (query or "").strip().lower()
    day_before = date_range.date_from - timedelta(days=1)

    rows: list[MovementRow] = []
    for item in data.items:
        if item.warehouse != warehouse:
            continue
        if needle and needle not in item.sku.lower() and needle not in item.description.lower():
            continue

        total_in, total_out = ledger.movement_within(item.key, date_range)
        rows.append(
            MovementRow(
                sku=item.sku,
                description=item.description,
                opening=ledger.balance_as_of(item.key, day_before),
                total_in=total_in,
                total_out=total_out,
            )
        )
    return rows
