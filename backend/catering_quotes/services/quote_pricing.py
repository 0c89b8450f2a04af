"""Catering quote pricing.

:func:`calculate_pricing_breakdown` is the single entry point: it validates
the request, resolves the delivery distance, prices the menu and add-ons and
returns a fully itemized :class:`DetailedPricingBreakdown`, or raises a
:class:`PricingError` carrying one of the documented codes.

The steps run in a fixed order and every amount that crosses a step boundary
is an ``int`` of minor currency units:

1. menu cost            sum((protein + side) * quantity)
2. adjusted menu cost   round(menu cost * appetite multiplier)
3. add-on cost          sum(unit price * quantity), no multiplier
4. delivery fee         round(miles * fee per mile), after the radius check
5. subtotal             adjusted menu + add-ons + delivery
6. tax                  round(subtotal * tax rate)
7. total                subtotal + tax
8. minimum-order guard  absolute floor and per-guest floor
9. deposit / balance    round(total * deposit rate) / total - deposit

Nothing here reads settings, caches, or touches I/O; identical inputs give
identical breakdowns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..schemas.catering import (
    AddOnLine,
    AddOnSelection,
    CatalogSnapshot,
    DeliveryAvailability,
    DeliveryDetails,
    DetailedPricingBreakdown,
    MenuSelection,
    PricingBreakdown,
    PricingRequest,
    RuleConfiguration,
)
from ..utils.errors import ErrorCategory, PricingError, PricingErrorCode
from ..utils.money import round_minor_units, to_decimal
from .catalog_pricing import resolve_add_on, resolve_menu_price
from .distance_estimator import (
    DistanceStrategy,
    check_address,
    outside_radius_message,
)
from .quote_display import format_minor_units
from .quote_validator import validate_pricing_request

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuCosts:
    protein_cost: int
    side_cost: int
    currency: str

    @property
    def total(self) -> int:
        return self.protein_cost + self.side_cost


@dataclass(frozen=True)
class AddOnCosts:
    lines: List[AddOnLine]
    total: int


@dataclass(frozen=True)
class DeliveryFee:
    fee: int
    distance_miles: float


@dataclass(frozen=True)
class ResolvedDistance:
    miles: float
    within_radius: Optional[bool] = None


@dataclass(frozen=True)
class DepositSplit:
    deposit: int
    balance: int


def calculate_menu_costs(
    selections: List[MenuSelection],
    catalog: CatalogSnapshot,
    base_currency: str = "usd",
) -> MenuCosts:
    protein_cost = 0
    side_cost = 0
    currencies = set()
    for selection in selections:
        protein = resolve_menu_price(selection.protein_ref, catalog, base_currency)
        side = resolve_menu_price(selection.side_ref, catalog, base_currency)
        currencies.update((protein.currency, side.currency))
        protein_cost += protein.amount * selection.quantity
        side_cost += side.amount * selection.quantity

    if len(currencies) > 1:
        raise PricingError(
            f"Menu prices resolve to more than one currency: {', '.join(sorted(currencies))}",
            PricingErrorCode.MIXED_CURRENCY,
        )
    currency = currencies.pop() if currencies else base_currency.lower()
    return MenuCosts(protein_cost=protein_cost, side_cost=side_cost, currency=currency)


def apply_appetite_multiplier(menu_cost: int, multiplier: float) -> int:
    return round_minor_units(to_decimal(menu_cost) * to_decimal(multiplier))


def calculate_add_on_costs(selections: List[AddOnSelection], catalog: CatalogSnapshot) -> AddOnCosts:
    lines: List[AddOnLine] = []
    total = 0
    for selection in selections:
        add_on = resolve_add_on(selection.add_on_ref, catalog)
        line_total = add_on.price_minor_units * selection.quantity
        lines.append(
            AddOnLine(
                add_on_id=add_on.id,
                name=add_on.name,
                quantity=selection.quantity,
                unit_price=add_on.price_minor_units,
                total=line_total,
            )
        )
        total += line_total
    return AddOnCosts(lines=lines, total=total)


def calculate_delivery_fee(
    distance_miles: float,
    config: RuleConfiguration,
    within_radius: Optional[bool] = None,
) -> DeliveryFee:
    """Return the delivery fee, refusing distances beyond the radius.

    A distance exactly on the radius is still delivered. ``within_radius``
    carries a radius check already made on the unrounded estimate.
    """
    if within_radius is None:
        within_radius = to_decimal(distance_miles) <= to_decimal(config.delivery_radius_miles)
    if not within_radius:
        raise PricingError(
            outside_radius_message(distance_miles, config.delivery_radius_miles),
            PricingErrorCode.OUTSIDE_DELIVERY_RADIUS,
        )
    fee = round_minor_units(to_decimal(distance_miles) * config.fee_per_mile)
    return DeliveryFee(fee=fee, distance_miles=distance_miles)


def is_delivery_available(distance_miles: float, config: RuleConfiguration) -> DeliveryAvailability:
    available = to_decimal(distance_miles) <= to_decimal(config.delivery_radius_miles)
    reason = None
    if not available:
        reason = (
            f"Location is {distance_miles} miles away, maximum delivery distance is "
            f"{config.delivery_radius_miles} miles"
        )
    return DeliveryAvailability(
        available=available, reason=reason, max_distance=config.delivery_radius_miles
    )


def calculate_tax(subtotal: int, tax_rate: float) -> int:
    return round_minor_units(to_decimal(subtotal) * to_decimal(tax_rate))


def calculate_deposit(total: int, deposit_rate: float) -> DepositSplit:
    deposit = round_minor_units(to_decimal(total) * to_decimal(deposit_rate))
    # Balance is derived, never rounded on its own, so deposit + balance == total.
    return DepositSplit(deposit=deposit, balance=total - deposit)


def enforce_minimum_order(
    total: int,
    guest_count: int,
    config: RuleConfiguration,
    currency: str = "usd",
) -> None:
    """Reject totals below the tenant minimum or below the per-guest floor."""
    if total < config.minimum_order_minor_units:
        raise PricingError(
            f"Order total {format_minor_units(total, currency)} is below minimum of "
            f"{format_minor_units(config.minimum_order_minor_units, currency)}",
            PricingErrorCode.BELOW_MINIMUM_ORDER,
        )

    floor = config.minimum_per_guest_minor_units
    if total < floor * guest_count:
        per_guest = round_minor_units(to_decimal(total) / guest_count)
        raise PricingError(
            f"Cost per guest {format_minor_units(per_guest, currency)} is below minimum of "
            f"{format_minor_units(floor, currency)}",
            PricingErrorCode.BELOW_MINIMUM_PER_GUEST,
        )


def resolve_distance(
    request: PricingRequest,
    config: RuleConfiguration,
    estimate_distance: Optional[DistanceStrategy] = None,
) -> ResolvedDistance:
    """Pick the distance to price: pre-resolved, estimated from the address, or 0.

    An estimate is priced at its rounded value but keeps the radius verdict
    of the unrounded one.
    """
    if request.distance_miles is not None:
        return ResolvedDistance(miles=float(request.distance_miles))
    if request.address is not None:
        result = check_address(
            request.address,
            config.delivery_radius_miles,
            estimate_distance=estimate_distance,
        )
        return ResolvedDistance(miles=result.distance_miles, within_radius=result.is_within_radius)
    return ResolvedDistance(miles=0.0)


def _price(
    request: PricingRequest,
    config: RuleConfiguration,
    catalog: CatalogSnapshot,
    estimate_distance: Optional[DistanceStrategy],
) -> DetailedPricingBreakdown:
    validate_pricing_request(request, config, catalog)
    distance = resolve_distance(request, config, estimate_distance)

    menu = calculate_menu_costs(request.menu_selections, catalog, config.base_currency)
    multiplier = config.appetite_multipliers[request.appetite_level]
    adjusted_menu_cost = apply_appetite_multiplier(menu.total, multiplier)
    add_ons = calculate_add_on_costs(request.add_on_selections, catalog)
    delivery = calculate_delivery_fee(distance.miles, config, distance.within_radius)

    subtotal = adjusted_menu_cost + add_ons.total + delivery.fee
    tax = calculate_tax(subtotal, config.tax_rate)
    total = subtotal + tax

    enforce_minimum_order(total, request.guest_count, config, menu.currency)
    split = calculate_deposit(total, config.deposit_rate)

    return DetailedPricingBreakdown(
        subtotal=subtotal,
        tax=tax,
        delivery_fee=delivery.fee,
        total=total,
        deposit=split.deposit,
        balance=split.balance,
        currency=menu.currency,
        protein_cost=menu.protein_cost,
        side_cost=menu.side_cost,
        menu_cost=menu.total,
        adjusted_menu_cost=adjusted_menu_cost,
        appetite_level=request.appetite_level,
        appetite_multiplier=multiplier,
        add_on_cost=add_ons.total,
        add_on_lines=add_ons.lines,
        delivery=DeliveryDetails(
            distance_miles=delivery.distance_miles,
            fee_per_mile=config.fee_per_mile,
            within_radius=True,
            max_radius=config.delivery_radius_miles,
        ),
        tax_rate=config.tax_rate,
        taxable_amount=subtotal,
        deposit_rate=config.deposit_rate,
    )


def calculate_pricing_breakdown(
    request: PricingRequest,
    config: RuleConfiguration,
    catalog: CatalogSnapshot,
    *,
    estimate_distance: Optional[DistanceStrategy] = None,
) -> DetailedPricingBreakdown:
    """Price a catering quote or raise :class:`PricingError`.

    ``estimate_distance`` replaces the address heuristic when given.
    Unexpected failures are re-raised as ``CALCULATION_ERROR`` so callers only
    ever branch on the documented codes.
    """
    try:
        breakdown = _price(request, config, catalog, estimate_distance)
    except PricingError as exc:
        if exc.category == ErrorCategory.CONFIGURATION:
            logger.error("Tenant pricing configuration rejected: %s (%s)", exc.message, exc.code.value)
        else:
            logger.info("Quote rejected: %s (%s)", exc.message, exc.code.value)
        raise
    except Exception as exc:
        logger.exception("Unexpected error during pricing calculation")
        raise PricingError(
            f"Unexpected error during pricing calculation: {exc}",
            PricingErrorCode.CALCULATION_ERROR,
        ) from exc

    logger.debug(
        "Quote priced",
        extra={
            "subtotal": breakdown.subtotal,
            "tax": breakdown.tax,
            "delivery_fee": breakdown.delivery_fee,
            "total": breakdown.total,
            "deposit": breakdown.deposit,
        },
    )
    return breakdown


def calculate_simple_pricing(
    request: PricingRequest,
    config: RuleConfiguration,
    catalog: CatalogSnapshot,
    *,
    estimate_distance: Optional[DistanceStrategy] = None,
) -> PricingBreakdown:
    """Return only the six headline amounts."""
    detailed = calculate_pricing_breakdown(
        request, config, catalog, estimate_distance=estimate_distance
    )
    return detailed.summary()
