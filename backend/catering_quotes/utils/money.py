from __future__ import annotations

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

_UNIT = Decimal("1")
_TENTH = Decimal("0.1")


def to_decimal(value: Any) -> Decimal:
    """Convert an int/float/str to Decimal through its string form.

    Going through ``str`` keeps ``0.08`` as ``Decimal("0.08")`` instead of the
    binary expansion of the float.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"non-finite amount: {value!r}")
    return Decimal(str(value))


def round_minor_units(value: Any) -> int:
    """Round to a whole number of minor units, halves away from zero."""
    return int(to_decimal(value).quantize(_UNIT, rounding=ROUND_HALF_UP))


def round_tenths(value: Any) -> Decimal:
    return to_decimal(value).quantize(_TENTH, rounding=ROUND_HALF_UP)
