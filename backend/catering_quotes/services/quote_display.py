from __future__ import annotations

from decimal import Decimal

from ..schemas.catering import CostPerGuest, PricingBreakdown, PricingDisplay
from ..utils.errors import PricingError, PricingErrorCode
from ..utils.money import round_minor_units, to_decimal

_SYMBOLS = {"usd": "$", "eur": "€", "gbp": "£", "zar": "R"}
_HUNDRED = Decimal("100")


def format_minor_units(amount: int, currency: str = "usd") -> str:
    """Render minor units as a display string, e.g. ``1234`` -> ``"$12.34"``.

    Currencies without a known symbol fall back to ``"CHF 12.34"``.
    """
    code = (currency or "usd").lower()
    major = abs(to_decimal(amount)) / _HUNDRED
    sign = "-" if amount < 0 else ""
    symbol = _SYMBOLS.get(code)
    if symbol is not None:
        return f"{sign}{symbol}{major:,.2f}"
    return f"{sign}{code.upper()} {major:,.2f}"


def format_pricing_display(pricing: PricingBreakdown) -> PricingDisplay:
    currency = pricing.currency
    return PricingDisplay(
        subtotal=format_minor_units(pricing.subtotal, currency),
        tax=format_minor_units(pricing.tax, currency),
        delivery=format_minor_units(pricing.delivery_fee, currency),
        total=format_minor_units(pricing.total, currency),
        deposit=format_minor_units(pricing.deposit, currency),
        balance=format_minor_units(pricing.balance, currency),
    )


def cost_per_guest(total: int, guest_count: int, currency: str = "usd") -> CostPerGuest:
    if guest_count <= 0:
        raise PricingError(
            "Guest count must be greater than 0", PricingErrorCode.INVALID_GUEST_COUNT
        )
    per_guest = round_minor_units(to_decimal(total) / guest_count)
    return CostPerGuest(cost_per_guest=per_guest, formatted=format_minor_units(per_guest, currency))
