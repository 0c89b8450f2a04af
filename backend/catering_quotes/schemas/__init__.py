from .catering import (
    AppetiteLevel,
    RuleConfiguration,
    CatalogPrice,
    CatalogVariant,
    CatalogMenuItem,
    CatalogAddOn,
    CatalogSnapshot,
    MenuSelection,
    AddOnSelection,
    PricingRequest,
    Coordinates,
    DistanceResult,
    PricingBreakdown,
    AddOnLine,
    DeliveryDetails,
    DetailedPricingBreakdown,
    PricingDisplay,
    CostPerGuest,
    DeliveryAvailability,
    AddressValidation,
)
from .api import QuotePriceIn, QuotePriceOut, AddOnListIn
