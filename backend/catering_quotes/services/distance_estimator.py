"""Estimate delivery distance from a free-text address.

The default strategy is a deterministic heuristic, not a geocoder: the
address is matched against known place names and ZIP codes around the
kitchen in Troy, NY, each mapped to a mileage band, and the position inside
the band comes from a digest of the normalized address. The same address
therefore always yields the same distance, in every process.

Any callable ``str -> float`` can stand in for :func:`estimate_distance_miles`
(e.g. a routing provider); callers pass it as ``estimate_distance=`` and the
pricing calculator never needs to change.
"""

from __future__ import annotations

import hashlib
import logging
import math
import re
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from ..schemas.catering import AddressValidation, Coordinates, DistanceResult
from ..utils.errors import PricingError, PricingErrorCode
from ..utils.money import round_minor_units, round_tenths, to_decimal

logger = logging.getLogger(__name__)

DistanceStrategy = Callable[[str], float]

# Rough driving pace used for the advisory travel time; never priced.
MINUTES_PER_MILE = Decimal("2.5")
MIN_ADDRESS_LENGTH = 5
MIN_SUGGESTION_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 5

EARTH_RADIUS_MILES = 3959
# Approximate city center of Troy, NY, where deliveries start
KITCHEN_COORDINATES = Coordinates(lat=42.7284, lng=-73.6918)

_SUGGESTED_ADDRESSES = (
    "123 Main Street, Troy, NY 12180",
    "456 Broadway, Troy, NY 12180",
    "789 Hoosick Street, Troy, NY 12180",
    "321 Congress Street, Troy, NY 12180",
    "654 15th Street, Troy, NY 12180",
    "987 Pawling Avenue, Troy, NY 12180",
    "100 Federal Street, Troy, NY 12180",
    "200 River Street, Troy, NY 12180",
)

_LOCAL_MARKERS = ("troy", "12180", "12181", "12182")
_NEARBY_CITIES = (
    "albany",
    "watervliet",
    "cohoes",
    "green island",
    "menands",
    "latham",
    "colonie",
    "wynantskill",
)
_REGIONAL_CITIES = (
    "schenectady",
    "saratoga",
    "guilderland",
    "clifton park",
    "halfmoon",
    "mechanicville",
    "hoosick",
    "berlin",
)
# (zip codes, base miles, band width)
_ZIP_BANDS: Tuple[Tuple[frozenset, float, float], ...] = (
    (frozenset(f"122{n:02d}" for n in range(1, 11)), 10.0, 5.0),  # Albany County
    (frozenset(f"1230{n}" for n in range(1, 10)), 22.0, 8.0),  # Schenectady County
    (frozenset({"12020", "12065", "12866", "12871", "12872"}), 25.0, 10.0),  # Saratoga County
)
_ZIP_RE = re.compile(r"\b\d{5}\b")


def normalize_address(address: str) -> str:
    return (address or "").strip().lower()


def _unit_hash(text: str) -> float:
    """Map ``text`` onto [0, 1) stably across processes."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return (int.from_bytes(digest[:4], "big") % 1000) / 1000


def estimate_distance_miles(address: str) -> float:
    """Return the estimated straight-line miles from the kitchen to ``address``."""
    normalized = normalize_address(address)
    offset = _unit_hash(normalized)

    if any(marker in normalized for marker in _LOCAL_MARKERS):
        return 2 + offset * 3
    if any(city in normalized for city in _NEARBY_CITIES):
        return 8 + offset * 7
    if any(city in normalized for city in _REGIONAL_CITIES):
        return 18 + offset * 12

    match = _ZIP_RE.search(address or "")
    if match:
        zip_code = match.group(0)
        for zips, base, width in _ZIP_BANDS:
            if zip_code in zips:
                return base + _unit_hash(zip_code) * width

    return 30 + offset * 10


def estimated_travel_minutes(distance_miles: float) -> int:
    return round_minor_units(to_decimal(distance_miles) * MINUTES_PER_MILE)


def check_radius(distance_miles: float, radius_miles: float) -> DistanceResult:
    """Compare the distance to the radius and report it rounded to a tenth of a mile.

    The comparison uses the unrounded distance; a distance equal to the
    radius is deliverable.
    """
    rounded = round_tenths(distance_miles)
    within = to_decimal(distance_miles) <= to_decimal(radius_miles)
    return DistanceResult(
        distance_miles=float(rounded),
        is_within_radius=within,
        max_radius=float(radius_miles),
        estimated_travel_minutes=estimated_travel_minutes(distance_miles),
    )


def resolve_estimated_distance(address: str, estimate_distance: Optional[DistanceStrategy] = None) -> float:
    """Run the estimator strategy and reject values no strategy may return."""
    strategy = estimate_distance or estimate_distance_miles
    miles = strategy(address)
    try:
        miles = float(miles)
    except (TypeError, ValueError) as exc:
        raise PricingError(
            f"Distance estimate is not a number: {miles!r}", PricingErrorCode.INVALID_DISTANCE
        ) from exc
    if not math.isfinite(miles) or miles < 0:
        raise PricingError(
            f"Distance estimate must be a non-negative number of miles, got {miles}",
            PricingErrorCode.INVALID_DISTANCE,
        )
    return miles


def check_address(
    address: str,
    radius_miles: float,
    *,
    estimate_distance: Optional[DistanceStrategy] = None,
) -> DistanceResult:
    """Estimate the distance for ``address`` and check it against the radius."""
    miles = resolve_estimated_distance(address, estimate_distance)
    result = check_radius(miles, radius_miles)
    logger.debug(
        "Distance estimated",
        extra={
            "distance_miles": result.distance_miles,
            "radius_miles": float(radius_miles),
            "within_radius": result.is_within_radius,
        },
    )
    return result


def outside_radius_message(distance_miles: float, radius_miles: float) -> str:
    return (
        f"Delivery distance {distance_miles} miles exceeds maximum radius "
        f"of {radius_miles} miles"
    )


def validate_delivery_address(
    address: str,
    radius_miles: float,
    *,
    estimate_distance: Optional[DistanceStrategy] = None,
) -> AddressValidation:
    """Validate that an address is long enough and inside the delivery radius."""
    if not address or len(address.strip()) < MIN_ADDRESS_LENGTH:
        return AddressValidation(
            is_valid=False,
            distance=0.0,
            error=f"Address must be at least {MIN_ADDRESS_LENGTH} characters long",
        )

    result = check_address(address, radius_miles, estimate_distance=estimate_distance)
    if not result.is_within_radius:
        return AddressValidation(
            is_valid=False,
            distance=result.distance_miles,
            error=(
                f"Address is {result.distance_miles} miles away, which exceeds our "
                f"{radius_miles} mile delivery radius"
            ),
        )
    return AddressValidation(is_valid=True, distance=result.distance_miles)


def format_distance(distance_miles: float) -> str:
    if distance_miles < 0.1:
        return "Less than 0.1 miles"
    return f"{round_tenths(distance_miles)} miles"


def haversine_distance_miles(origin: Coordinates, destination: Coordinates) -> float:
    """Great-circle miles between two points; straight-line, not driving distance."""
    d_lat = math.radians(destination.lat - origin.lat)
    d_lng = math.radians(destination.lng - origin.lng)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(origin.lat))
        * math.cos(math.radians(destination.lat))
        * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def coordinate_distance_strategy(
    geocode: Callable[[str], Coordinates],
    origin: Coordinates = KITCHEN_COORDINATES,
) -> DistanceStrategy:
    """Build an ``estimate_distance`` strategy from a geocoder.

    The returned callable geocodes the address and measures the haversine
    miles from ``origin``.
    """

    def _estimate(address: str) -> float:
        return haversine_distance_miles(origin, geocode(address))

    return _estimate


def suggest_addresses(query: str, limit: int = MAX_SUGGESTIONS) -> List[str]:
    """Return known delivery addresses containing ``query`` (case-insensitive)."""
    needle = (query or "").strip().lower()
    if len(needle) < MIN_SUGGESTION_QUERY_LENGTH:
        return []
    return [a for a in _SUGGESTED_ADDRESSES if needle in a.lower()][:limit]
