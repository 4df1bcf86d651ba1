# wms/schemas/pricing.py
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

Money = Decimal


class _Rates(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


# ============================================================
# Fulfillment / Consumables
# ============================================================

class FulfillmentTier(_Rates):
    """Per-shipment price that applies once monthly volume reaches minimum_monthly_volume."""

    minimum_monthly_volume: int = Field(ge=0)
    price_per_shipment: Money = Field(ge=0)


class ConsumableItem(_Rates):
    name: str = Field(..., max_length=255)
    price_per_shipment: Money = Field(ge=0)
    unit: str = Field(default="Per Item", max_length=32)


# ============================================================
# Storage
# ============================================================

class StorageRates(_Rates):
    rate_per_pallet_per_month: Money = Field(default=Decimal("0"), ge=0)
    # 0 means "no storage billing", not an error
    pallet_volume_cbm: Decimal = Field(default=Decimal("0"), ge=0)


# ============================================================
# Transport
# ============================================================

class CourierRates(_Rates):
    first_3kg: Money = Field(default=Decimal("0"), ge=0)
    per_additional_kg: Money = Field(default=Decimal("0"), ge=0)
    # cap for shipments weighing 25-50 kg (inclusive)
    flat_rate_25_to_50kg_within_state: Money = Field(default=Decimal("0"), ge=0)


class OceanFreightRates(_Rates):
    """Quoted per CBM. Stored with the rate card, never billed automatically."""

    klg_sbw_per_cbm: Money = Field(default=Decimal("0"), ge=0)
    klg_bki_per_cbm: Money = Field(default=Decimal("0"), ge=0)


class TransportRates(_Rates):
    courier: CourierRates = Field(default_factory=CourierRates)
    ocean_freight: OceanFreightRates = Field(default_factory=OceanFreightRates)


# ============================================================
# Handling
# ============================================================

class InboundOutboundRates(_Rates):
    per_carton: Money = Field(default=Decimal("0"), ge=0)
    per_unit: Money = Field(default=Decimal("0"), ge=0)
    per_pallet: Money = Field(default=Decimal("0"), ge=0)


class ManpowerRates(_Rates):
    """Container / lorry unloading labour. Billed through ad-hoc charges."""

    palletize_40ft: Money = Field(default=Decimal("0"), ge=0)
    palletize_20ft: Money = Field(default=Decimal("0"), ge=0)
    palletize_5_to_10ton: Money = Field(default=Decimal("0"), ge=0)
    palletize_1_to_3ton: Money = Field(default=Decimal("0"), ge=0)
    loose_40ft: Money = Field(default=Decimal("0"), ge=0)
    loose_20ft: Money = Field(default=Decimal("0"), ge=0)
    loose_5_to_10ton: Money = Field(default=Decimal("0"), ge=0)
    loose_1_to_3ton: Money = Field(default=Decimal("0"), ge=0)


class HandlingRates(_Rates):
    inbound_outbound: InboundOutboundRates = Field(default_factory=InboundOutboundRates)
    manpower: ManpowerRates = Field(default_factory=ManpowerRates)


# ============================================================
# PricingConfig
# ============================================================

class PricingConfig(_Rates):
    """
    Per-organization rate card.

    fulfillment_tiers is unordered; the billing engine picks the highest
    tier whose minimum the period's shipment count reaches.
    """

    fulfillment_tiers: list[FulfillmentTier] = Field(default_factory=list)
    consumable_items: list[ConsumableItem] = Field(default_factory=list)
    storage: StorageRates = Field(default_factory=StorageRates)
    transport: TransportRates = Field(default_factory=TransportRates)
    handling: HandlingRates = Field(default_factory=HandlingRates)


DEFAULT_PRICING = PricingConfig(
    fulfillment_tiers=[
        FulfillmentTier(minimum_monthly_volume=0, price_per_shipment=Decimal("5.00")),
        FulfillmentTier(minimum_monthly_volume=500, price_per_shipment=Decimal("4.50")),
        FulfillmentTier(minimum_monthly_volume=1000, price_per_shipment=Decimal("4.00")),
    ],
    consumable_items=[
        ConsumableItem(name="Bubble Wrap", price_per_shipment=Decimal("1.50"), unit="Per Item"),
        ConsumableItem(name="Flyer (S)", price_per_shipment=Decimal("0.30"), unit="Per Item"),
    ],
    storage=StorageRates(
        rate_per_pallet_per_month=Decimal("50.00"),
        pallet_volume_cbm=Decimal("1.2"),
    ),
    transport=TransportRates(
        courier=CourierRates(
            first_3kg=Decimal("8.00"),
            per_additional_kg=Decimal("1.50"),
            flat_rate_25_to_50kg_within_state=Decimal("50.00"),
        ),
        ocean_freight=OceanFreightRates(
            klg_sbw_per_cbm=Decimal("350.00"),
            klg_bki_per_cbm=Decimal("300.00"),
        ),
    ),
    handling=HandlingRates(
        inbound_outbound=InboundOutboundRates(
            per_carton=Decimal("1.00"),
            per_unit=Decimal("0.50"),
            per_pallet=Decimal("5.00"),
        ),
        manpower=ManpowerRates(
            palletize_40ft=Decimal("600"),
            palletize_20ft=Decimal("350"),
            palletize_5_to_10ton=Decimal("300"),
            palletize_1_to_3ton=Decimal("150"),
            loose_40ft=Decimal("1000"),
            loose_20ft=Decimal("500"),
            loose_5_to_10ton=Decimal("400"),
            loose_1_to_3ton=Decimal("200"),
        ),
    ),
)
