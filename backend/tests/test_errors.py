import logging
import pytest
from fastapi import HTTPException

from catering_quotes.utils.errors import (
    ErrorCategory,
    PricingError,
    PricingErrorCode,
    category_for,
    error_response,
)


def test_error_response_logs(caplog):
    caplog.set_level(logging.ERROR, logger="catering_quotes.utils.errors")
    with pytest.raises(HTTPException):
        raise error_response("Invalid", {"field": "bad"})
    assert any(
        "Invalid" in r.getMessage() and "'field': 'bad'" in r.getMessage()
        for r in caplog.records
    )


def test_error_response_carries_code():
    exc = error_response("Too far", {"request": "outside"}, 422, error_code="OUTSIDE_DELIVERY_RADIUS")
    assert exc.status_code == 422
    assert exc.detail == {
        "message": "Too far",
        "field_errors": {"request": "outside"},
        "code": "OUTSIDE_DELIVERY_RADIUS",
    }


def test_pricing_error_fields():
    err = PricingError("Guest count must be greater than 0", "INVALID_GUEST_COUNT")
    assert err.code is PricingErrorCode.INVALID_GUEST_COUNT
    assert str(err) == "Guest count must be greater than 0"
    assert err.to_dict() == {
        "code": "INVALID_GUEST_COUNT",
        "message": "Guest count must be greater than 0",
    }
    assert "INVALID_GUEST_COUNT" in repr(err)


def test_unknown_code_rejected():
    with pytest.raises(ValueError):
        PricingError("nope", "NOT_A_CODE")


@pytest.mark.parametrize(
    "code, category",
    [
        (PricingErrorCode.PROTEIN_NOT_FOUND, ErrorCategory.REQUEST),
        (PricingErrorCode.INVALID_HUNGER_LEVEL, ErrorCategory.REQUEST),
        (PricingErrorCode.MIXED_CURRENCY, ErrorCategory.REQUEST),
        (PricingErrorCode.INVALID_TAX_RATE, ErrorCategory.CONFIGURATION),
        (PricingErrorCode.INVALID_HUNGER_MULTIPLIERS, ErrorCategory.CONFIGURATION),
        (PricingErrorCode.OUTSIDE_DELIVERY_RADIUS, ErrorCategory.GEOGRAPHIC),
        (PricingErrorCode.BELOW_MINIMUM_PER_GUEST, ErrorCategory.BUSINESS_FLOOR),
        (PricingErrorCode.CALCULATION_ERROR, ErrorCategory.INTERNAL),
    ],
)
def test_categories(code, category):
    assert category_for(code) == category
