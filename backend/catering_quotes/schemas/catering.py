from __future__ import annotations

import enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class AppetiteLevel(str, enum.Enum):
    NORMAL = "normal"
    PRETTY_HUNGRY = "prettyHungry"
    REALLY_HUNGRY = "reallyHungry"


class RuleConfiguration(BaseModel):
    """Tenant business rules; read-only to the pricing engine."""

    appetite_multipliers: Dict[str, float]
    tax_rate: float
    deposit_rate: float
    delivery_radius_miles: float
    # Counts and minor-unit amounts accept floats so the pricing validator,
    # not pydantic, reports non-integers with a pricing error code.
    fee_per_mile: Union[int, float]
    minimum_order_minor_units: Union[int, float]
    minimum_per_guest_minor_units: Union[int, float] = 1000
    base_currency: str = "usd"

    model_config = {"frozen": True}


# ─── Catalog snapshot ───────────────────────────────────────────────────────


class CatalogPrice(BaseModel):
    amount: int
    currency_code: Optional[str] = None

    model_config = {"frozen": True}


class CatalogVariant(BaseModel):
    id: Optional[str] = None
    title: Optional[str] = None
    prices: List[CatalogPrice] = Field(default_factory=list)

    model_config = {"frozen": True}


class CatalogMenuItem(BaseModel):
    id: str
    name: str = ""
    category: Optional[str] = None  # protein | side
    variants: List[CatalogVariant] = Field(default_factory=list)

    model_config = {"frozen": True}


class CatalogAddOn(BaseModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    price_minor_units: int
    is_active: bool = True
    category: Optional[str] = None

    model_config = {"frozen": True}


class CatalogSnapshot(BaseModel):
    """Priced menu items and add-ons valid for one calculation."""

    menu_items: List[CatalogMenuItem] = Field(default_factory=list)
    add_ons: List[CatalogAddOn] = Field(default_factory=list)

    model_config = {"frozen": True}

    def menu_item(self, ref: str) -> Optional[CatalogMenuItem]:
        return next((item for item in self.menu_items if item.id == ref), None)

    def add_on(self, ref: str) -> Optional[CatalogAddOn]:
        return next((a for a in self.add_ons if a.id == ref), None)


# ─── Request ────────────────────────────────────────────────────────────────


class MenuSelection(BaseModel):
    protein_ref: str
    side_ref: str
    quantity: Union[int, float]

    model_config = {"frozen": True}


class AddOnSelection(BaseModel):
    add_on_ref: str
    quantity: Union[int, float]

    model_config = {"frozen": True}


class PricingRequest(BaseModel):
    guest_count: Union[int, float]
    appetite_level: str = AppetiteLevel.NORMAL.value
    address: Optional[str] = None
    # Pre-resolved distance; takes precedence over estimating from ``address``.
    distance_miles: Optional[float] = None
    menu_selections: List[MenuSelection] = Field(default_factory=list)
    add_on_selections: List[AddOnSelection] = Field(default_factory=list)

    model_config = {"frozen": True}


# ─── Results ────────────────────────────────────────────────────────────────


class Coordinates(BaseModel):
    lat: float
    lng: float

    model_config = {"frozen": True}


class DistanceResult(BaseModel):
    distance_miles: float
    is_within_radius: bool
    max_radius: float
    estimated_travel_minutes: int

    model_config = {"frozen": True}


class PricingBreakdown(BaseModel):
    """All amounts are integer minor currency units."""

    subtotal: int
    tax: int
    delivery_fee: int
    total: int
    deposit: int
    balance: int
    currency: str = "usd"

    model_config = {"frozen": True}


class AddOnLine(BaseModel):
    add_on_id: str
    name: str
    quantity: int
    unit_price: int
    total: int

    model_config = {"frozen": True}


class DeliveryDetails(BaseModel):
    distance_miles: float
    fee_per_mile: int
    within_radius: bool
    max_radius: float

    model_config = {"frozen": True}


class DetailedPricingBreakdown(PricingBreakdown):
    protein_cost: int
    side_cost: int
    menu_cost: int
    adjusted_menu_cost: int
    appetite_level: str
    appetite_multiplier: float
    add_on_cost: int
    add_on_lines: List[AddOnLine] = Field(default_factory=list)
    delivery: DeliveryDetails
    tax_rate: float
    taxable_amount: int
    deposit_rate: float

    def summary(self) -> PricingBreakdown:
        return PricingBreakdown(
            subtotal=self.subtotal,
            tax=self.tax,
            delivery_fee=self.delivery_fee,
            total=self.total,
            deposit=self.deposit,
            balance=self.balance,
            currency=self.currency,
        )


class PricingDisplay(BaseModel):
    subtotal: str
    tax: str
    delivery: str
    total: str
    deposit: str
    balance: str


class CostPerGuest(BaseModel):
    cost_per_guest: int
    formatted: str


class DeliveryAvailability(BaseModel):
    available: bool
    reason: Optional[str] = None
    max_distance: float


class AddressValidation(BaseModel):
    is_valid: bool
    distance: float
    error: Optional[str] = None
