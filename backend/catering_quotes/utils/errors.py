from __future__ import annotations

import enum
import logging
from typing import Dict, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


class ErrorCategory(str, enum.Enum):
    REQUEST = "request"
    CONFIGURATION = "configuration"
    GEOGRAPHIC = "geographic"
    BUSINESS_FLOOR = "business_floor"
    INTERNAL = "internal"


class PricingErrorCode(str, enum.Enum):
    # Request shape and catalog references
    INVALID_GUEST_COUNT = "INVALID_GUEST_COUNT"
    INVALID_DISTANCE = "INVALID_DISTANCE"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    NO_MENU_SELECTIONS = "NO_MENU_SELECTIONS"
    INVALID_MENU_QUANTITY = "INVALID_MENU_QUANTITY"
    INVALID_ADDON_QUANTITY = "INVALID_ADDON_QUANTITY"
    PROTEIN_NOT_FOUND = "PROTEIN_NOT_FOUND"
    SIDE_NOT_FOUND = "SIDE_NOT_FOUND"
    ADDON_NOT_FOUND = "ADDON_NOT_FOUND"
    PROTEIN_NO_PRICING = "PROTEIN_NO_PRICING"
    SIDE_NO_PRICING = "SIDE_NO_PRICING"
    NO_PRODUCT_PRICING = "NO_PRODUCT_PRICING"
    ADDON_INACTIVE = "ADDON_INACTIVE"
    INVALID_HUNGER_LEVEL = "INVALID_HUNGER_LEVEL"
    MIXED_CURRENCY = "MIXED_CURRENCY"
    # Tenant configuration
    INVALID_TAX_RATE = "INVALID_TAX_RATE"
    INVALID_DEPOSIT_PERCENTAGE = "INVALID_DEPOSIT_PERCENTAGE"
    INVALID_DELIVERY_RADIUS = "INVALID_DELIVERY_RADIUS"
    INVALID_FEE_PER_MILE = "INVALID_FEE_PER_MILE"
    INVALID_MINIMUM_ORDER = "INVALID_MINIMUM_ORDER"
    INVALID_HUNGER_MULTIPLIERS = "INVALID_HUNGER_MULTIPLIERS"
    # Business outcomes
    OUTSIDE_DELIVERY_RADIUS = "OUTSIDE_DELIVERY_RADIUS"
    BELOW_MINIMUM_ORDER = "BELOW_MINIMUM_ORDER"
    BELOW_MINIMUM_PER_GUEST = "BELOW_MINIMUM_PER_GUEST"
    # Anything else
    CALCULATION_ERROR = "CALCULATION_ERROR"


_CONFIGURATION_CODES = frozenset(
    {
        PricingErrorCode.INVALID_TAX_RATE,
        PricingErrorCode.INVALID_DEPOSIT_PERCENTAGE,
        PricingErrorCode.INVALID_DELIVERY_RADIUS,
        PricingErrorCode.INVALID_FEE_PER_MILE,
        PricingErrorCode.INVALID_MINIMUM_ORDER,
        PricingErrorCode.INVALID_HUNGER_MULTIPLIERS,
    }
)

_BUSINESS_FLOOR_CODES = frozenset(
    {PricingErrorCode.BELOW_MINIMUM_ORDER, PricingErrorCode.BELOW_MINIMUM_PER_GUEST}
)


def category_for(code: PricingErrorCode) -> ErrorCategory:
    """Return the taxonomy bucket a pricing error code belongs to."""
    if code in _CONFIGURATION_CODES:
        return ErrorCategory.CONFIGURATION
    if code in _BUSINESS_FLOOR_CODES:
        return ErrorCategory.BUSINESS_FLOOR
    if code == PricingErrorCode.OUTSIDE_DELIVERY_RADIUS:
        return ErrorCategory.GEOGRAPHIC
    if code == PricingErrorCode.CALCULATION_ERROR:
        return ErrorCategory.INTERNAL
    return ErrorCategory.REQUEST


class PricingError(Exception):
    """A quote could not be priced; ``code`` is stable and machine-readable."""

    def __init__(self, message: str, code: PricingErrorCode):
        super().__init__(message)
        self.message = message
        self.code = PricingErrorCode(code)

    @property
    def category(self) -> ErrorCategory:
        return category_for(self.code)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}

    def __repr__(self) -> str:
        return f"PricingError(code={self.code.value!r}, message={self.message!r})"


def error_response(
    message: str,
    field_errors: Dict[str, str],
    code: int = status.HTTP_422_UNPROCESSABLE_ENTITY,
    error_code: Optional[str] = None,
) -> HTTPException:
    """Return an HTTPException with a consistent structure and log details."""
    logger.error("%s %s", message, field_errors)
    detail: dict = {"message": message, "field_errors": field_errors}
    if error_code:
        detail["code"] = error_code
    return HTTPException(status_code=code, detail=detail)
