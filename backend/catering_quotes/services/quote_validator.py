"""Preconditions checked before any money math runs.

Checks run in a fixed order and the first violation raises a
:class:`PricingError`; nothing is collected or clamped.
"""

from __future__ import annotations

import logging
import math

from ..schemas.catering import (
    AppetiteLevel,
    CatalogSnapshot,
    MenuSelection,
    PricingRequest,
    RuleConfiguration,
)
from ..utils.errors import PricingError, PricingErrorCode
from .catalog_pricing import has_pricing
from .distance_estimator import MIN_ADDRESS_LENGTH

logger = logging.getLogger(__name__)

_APPETITE_TAGS = frozenset(level.value for level in AppetiteLevel)


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_menu_selection(selection: MenuSelection, catalog: CatalogSnapshot) -> None:
    protein = catalog.menu_item(selection.protein_ref)
    if protein is None:
        raise PricingError(
            f"Protein product not found: {selection.protein_ref}",
            PricingErrorCode.PROTEIN_NOT_FOUND,
        )
    side = catalog.menu_item(selection.side_ref)
    if side is None:
        raise PricingError(
            f"Side product not found: {selection.side_ref}", PricingErrorCode.SIDE_NOT_FOUND
        )
    if not has_pricing(protein):
        raise PricingError(
            f"Protein product has no valid pricing: {selection.protein_ref}",
            PricingErrorCode.PROTEIN_NO_PRICING,
        )
    if not has_pricing(side):
        raise PricingError(
            f"Side product has no valid pricing: {selection.side_ref}",
            PricingErrorCode.SIDE_NO_PRICING,
        )


def validate_request_shape(request: PricingRequest, catalog: CatalogSnapshot) -> None:
    if not _is_int(request.guest_count) or request.guest_count <= 0:
        raise PricingError(
            "Guest count must be greater than 0", PricingErrorCode.INVALID_GUEST_COUNT
        )

    if request.distance_miles is not None:
        if not math.isfinite(request.distance_miles) or request.distance_miles < 0:
            raise PricingError("Distance cannot be negative", PricingErrorCode.INVALID_DISTANCE)
    elif request.address is not None and len(request.address.strip()) < MIN_ADDRESS_LENGTH:
        raise PricingError(
            f"Address must be at least {MIN_ADDRESS_LENGTH} characters long",
            PricingErrorCode.INVALID_ADDRESS,
        )

    if not request.menu_selections:
        raise PricingError(
            "At least one menu selection is required", PricingErrorCode.NO_MENU_SELECTIONS
        )

    for selection in request.menu_selections:
        if not _is_int(selection.quantity) or selection.quantity <= 0:
            raise PricingError(
                f"Invalid quantity for menu selection: {selection.quantity}",
                PricingErrorCode.INVALID_MENU_QUANTITY,
            )
        _check_menu_selection(selection, catalog)

    for selection in request.add_on_selections:
        if not _is_int(selection.quantity) or selection.quantity <= 0:
            raise PricingError(
                f"Invalid quantity for add-on: {selection.quantity}",
                PricingErrorCode.INVALID_ADDON_QUANTITY,
            )
        add_on = catalog.add_on(selection.add_on_ref)
        if add_on is None:
            raise PricingError(
                f"Add-on not found: {selection.add_on_ref}", PricingErrorCode.ADDON_NOT_FOUND
            )
        if not add_on.is_active:
            raise PricingError(
                f"Add-on is not active: {selection.add_on_ref}", PricingErrorCode.ADDON_INACTIVE
            )


def _valid_rate(value: float) -> bool:
    return math.isfinite(value) and 0 <= value <= 1


def validate_rule_configuration(config: RuleConfiguration, appetite_level: str) -> None:
    """Reject a tenant configuration the engine cannot price with."""
    multiplier = None
    if appetite_level in _APPETITE_TAGS:
        multiplier = config.appetite_multipliers.get(appetite_level)
    if multiplier is None or not math.isfinite(multiplier) or multiplier <= 0:
        raise PricingError(
            f"Invalid hunger level: {appetite_level}", PricingErrorCode.INVALID_HUNGER_LEVEL
        )

    if not _valid_rate(config.tax_rate):
        raise PricingError("Tax rate must be between 0 and 1", PricingErrorCode.INVALID_TAX_RATE)

    if not _valid_rate(config.deposit_rate):
        raise PricingError(
            "Deposit percentage must be between 0 and 1",
            PricingErrorCode.INVALID_DEPOSIT_PERCENTAGE,
        )

    for level in AppetiteLevel:
        value = config.appetite_multipliers.get(level.value)
        if value is None or not math.isfinite(value) or value <= 0:
            raise PricingError(
                f"Appetite multiplier for {level.value!r} must be a positive number",
                PricingErrorCode.INVALID_HUNGER_MULTIPLIERS,
            )

    radius = config.delivery_radius_miles
    if not math.isfinite(radius) or radius <= 0:
        raise PricingError(
            "Delivery radius must be a positive number of miles",
            PricingErrorCode.INVALID_DELIVERY_RADIUS,
        )

    if not _is_int(config.fee_per_mile) or config.fee_per_mile < 0:
        raise PricingError(
            "Fee per mile must be a non-negative integer", PricingErrorCode.INVALID_FEE_PER_MILE
        )

    if (
        not _is_int(config.minimum_order_minor_units)
        or config.minimum_order_minor_units < 0
        or not _is_int(config.minimum_per_guest_minor_units)
        or config.minimum_per_guest_minor_units < 0
    ):
        raise PricingError(
            "Minimum order amounts must be non-negative integers",
            PricingErrorCode.INVALID_MINIMUM_ORDER,
        )


def validate_pricing_request(
    request: PricingRequest,
    config: RuleConfiguration,
    catalog: CatalogSnapshot,
) -> None:
    """Raise :class:`PricingError` for the first violated rule, else return None."""
    validate_request_shape(request, catalog)
    validate_rule_configuration(config, request.appetite_level)
    logger.debug(
        "Pricing request validated",
        extra={
            "guest_count": request.guest_count,
            "menu_selections": len(request.menu_selections),
            "add_on_selections": len(request.add_on_selections),
        },
    )
