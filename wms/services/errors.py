from __future__ import annotations


class BillingError(Exception):
    """Base class for everything the billing core raises."""


class InvalidDateRangeError(BillingError, ValueError):
    pass


class UnknownItemError(BillingError, LookupError):
    """A stock event points at a (sku, warehouse) with no item record."""

    def __init__(self, sku: str, warehouse: str, *, ref_no: str | None = None) -> None:
        self.sku = sku
        self.warehouse = warehouse
        self.ref_no = ref_no
        detail = f"Unknown item sku={sku!r} warehouse={warehouse!r}"
        if ref_no:
            detail += f" (referenced by {ref_no})"
        super().__init__(detail)


class PricingConfigError(BillingError):
    pass


class OrganizationNotFoundError(BillingError, LookupError):
    pass


class InvalidLedgerEntryError(BillingError, ValueError):
    """A stored stock-out or ad-hoc charge holds a value the billing rules do not know."""
