from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .catering import (
    CatalogSnapshot,
    CostPerGuest,
    DetailedPricingBreakdown,
    PricingDisplay,
    PricingRequest,
    RuleConfiguration,
)


class QuotePriceIn(BaseModel):
    """Body for ``POST /catering/quotes/price``.

    ``config`` is the tenant's rule set; when omitted the defaults from
    settings are used.
    """

    request: PricingRequest
    catalog: CatalogSnapshot
    config: Optional[RuleConfiguration] = None


class QuotePriceOut(BaseModel):
    breakdown: DetailedPricingBreakdown
    display: PricingDisplay
    cost_per_guest: CostPerGuest


class AddOnListIn(BaseModel):
    catalog: CatalogSnapshot
    active_only: bool = True
    category: Optional[str] = None
