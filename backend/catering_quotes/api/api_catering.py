import logging
from typing import List, Optional

from fastapi import APIRouter, Query, status

from ..core.config import default_rule_configuration, settings
from ..schemas import (
    AddOnListIn,
    CatalogAddOn,
    DistanceResult,
    QuotePriceIn,
    QuotePriceOut,
)
from ..services.catalog_pricing import list_add_ons
from ..services.distance_estimator import MIN_ADDRESS_LENGTH, check_address, suggest_addresses
from ..services.quote_display import cost_per_guest, format_pricing_display
from ..services.quote_pricing import calculate_pricing_breakdown
from ..utils import ErrorCategory, PricingError, PricingErrorCode, error_response

router = APIRouter(tags=["catering"])
logger = logging.getLogger(__name__)


def _pricing_error_response(exc: PricingError, field: str):
    code = (
        status.HTTP_500_INTERNAL_SERVER_ERROR
        if exc.category == ErrorCategory.INTERNAL
        else status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    return error_response(
        exc.message,
        {field: exc.code.value.lower()},
        code,
        error_code=exc.code.value,
    )


@router.post("/quotes/price", response_model=QuotePriceOut)
def price_quote(body: QuotePriceIn):
    """Price a catering quote against the supplied catalog snapshot."""
    config = body.config or default_rule_configuration()
    try:
        breakdown = calculate_pricing_breakdown(body.request, config, body.catalog)
    except PricingError as exc:
        raise _pricing_error_response(exc, "request")
    return QuotePriceOut(
        breakdown=breakdown,
        display=format_pricing_display(breakdown),
        cost_per_guest=cost_per_guest(
            breakdown.total, body.request.guest_count, breakdown.currency
        ),
    )


@router.get("/distance", response_model=DistanceResult)
def estimate_distance(address: str, radius: Optional[float] = Query(None, gt=0)):
    """Estimate delivery miles for an address and check them against the radius."""
    if len(address.strip()) < MIN_ADDRESS_LENGTH:
        raise error_response(
            f"Address must be at least {MIN_ADDRESS_LENGTH} characters long",
            {"address": "too_short"},
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=PricingErrorCode.INVALID_ADDRESS.value,
        )
    radius_miles = radius if radius is not None else settings.DEFAULT_DELIVERY_RADIUS_MILES
    try:
        return check_address(address, radius_miles)
    except PricingError as exc:
        raise _pricing_error_response(exc, "address")


@router.post("/addons/list", response_model=List[CatalogAddOn])
def list_catalog_add_ons(body: AddOnListIn):
    return list_add_ons(body.catalog, active_only=body.active_only, category=body.category)


@router.get("/addresses/suggest", response_model=List[str])
def suggest_delivery_addresses(q: str = ""):
    """Autocomplete for the address field; short queries return nothing."""
    return suggest_addresses(q)
