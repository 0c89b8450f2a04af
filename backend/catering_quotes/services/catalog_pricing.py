from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..schemas.catering import CatalogAddOn, CatalogMenuItem, CatalogPrice, CatalogSnapshot
from ..utils.errors import PricingError, PricingErrorCode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedPrice:
    amount: int
    currency: str


def _currency_of(price: CatalogPrice, base_currency: str) -> str:
    return (price.currency_code or base_currency).lower()


def _usable_prices(item: CatalogMenuItem) -> List[CatalogPrice]:
    """Return the prices of the first variant that has any usable price."""
    for variant in item.variants:
        usable = [p for p in variant.prices if p.amount >= 0]
        if usable:
            return usable
    return []


def has_pricing(item: CatalogMenuItem) -> bool:
    return bool(_usable_prices(item))


def price_of(item: CatalogMenuItem, base_currency: str = "usd") -> ResolvedPrice:
    """Return the unit price of a menu item in minor units.

    The base-currency price is preferred; otherwise the first listed price is
    taken as is. No conversion ever happens here.
    """
    prices = _usable_prices(item)
    if not prices:
        raise PricingError(
            f"No pricing found for product: {item.id}", PricingErrorCode.NO_PRODUCT_PRICING
        )
    base = base_currency.lower()
    chosen = next((p for p in prices if _currency_of(p, base) == base), prices[0])
    return ResolvedPrice(amount=int(chosen.amount), currency=_currency_of(chosen, base))


def resolve_menu_price(ref: str, catalog: CatalogSnapshot, base_currency: str = "usd") -> ResolvedPrice:
    item = catalog.menu_item(ref)
    if item is None:
        raise PricingError(
            f"Menu product not found: {ref}", PricingErrorCode.NO_PRODUCT_PRICING
        )
    return price_of(item, base_currency)


def resolve_add_on(ref: str, catalog: CatalogSnapshot) -> CatalogAddOn:
    add_on = catalog.add_on(ref)
    if add_on is None:
        raise PricingError(f"Add-on not found: {ref}", PricingErrorCode.ADDON_NOT_FOUND)
    if not add_on.is_active:
        raise PricingError(f"Add-on is not active: {ref}", PricingErrorCode.ADDON_INACTIVE)
    if add_on.price_minor_units < 0:
        raise PricingError(
            f"Add-on has no valid pricing: {ref}", PricingErrorCode.NO_PRODUCT_PRICING
        )
    return add_on


def list_add_ons(
    catalog: CatalogSnapshot,
    *,
    active_only: bool = True,
    category: Optional[str] = None,
) -> List[CatalogAddOn]:
    """Filter the snapshot's add-ons the way the add-on listing does."""
    wanted = (category or "").strip().lower()
    out: List[CatalogAddOn] = []
    for add_on in catalog.add_ons:
        if active_only and not add_on.is_active:
            continue
        if wanted and (add_on.category or "").lower() != wanted:
            continue
        out.append(add_on)
    logger.debug(
        "Add-ons listed",
        extra={"active_only": active_only, "category": wanted or None, "count": len(out)},
    )
    return out
