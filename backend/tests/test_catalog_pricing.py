import pytest

from catering_quotes.schemas import (
    CatalogAddOn,
    CatalogMenuItem,
    CatalogPrice,
    CatalogSnapshot,
    CatalogVariant,
)
from catering_quotes.services.catalog_pricing import (
    has_pricing,
    list_add_ons,
    price_of,
    resolve_add_on,
    resolve_menu_price,
)
from catering_quotes.utils import PricingError, PricingErrorCode


def _item(*variants):
    return CatalogMenuItem(
        id="pulled-pork",
        name="Pulled Pork",
        variants=[
            CatalogVariant(prices=[CatalogPrice(amount=a, currency_code=c) for a, c in prices])
            for prices in variants
        ],
    )


def test_base_currency_preferred():
    item = _item([(1500, "eur"), (1800, "usd")])
    resolved = price_of(item, "usd")
    assert (resolved.amount, resolved.currency) == (1800, "usd")


def test_first_price_when_base_missing():
    item = _item([(1500, "eur"), (1300, "gbp")])
    resolved = price_of(item, "usd")
    assert (resolved.amount, resolved.currency) == (1500, "eur")


def test_missing_currency_counts_as_base():
    item = _item([(1500, "eur"), (1700, None)])
    resolved = price_of(item, "USD")
    assert (resolved.amount, resolved.currency) == (1700, "usd")


def test_first_priced_variant_is_used():
    item = _item([], [(-1, "usd")], [(2100, "usd")], [(9999, "usd")])
    assert price_of(item).amount == 2100


def test_no_pricing():
    item = _item([], [(-5, "usd")])
    assert has_pricing(item) is False
    with pytest.raises(PricingError) as exc:
        price_of(item)
    assert exc.value.code == PricingErrorCode.NO_PRODUCT_PRICING


def test_unknown_menu_ref():
    with pytest.raises(PricingError) as exc:
        resolve_menu_price("nope", CatalogSnapshot())
    assert exc.value.code == PricingErrorCode.NO_PRODUCT_PRICING


def test_resolve_add_on(catalog):
    assert resolve_add_on("sweet-tea", catalog).price_minor_units == 1200

    with pytest.raises(PricingError) as exc:
        resolve_add_on("retired-tent", catalog)
    assert exc.value.code == PricingErrorCode.ADDON_INACTIVE

    with pytest.raises(PricingError) as exc:
        resolve_add_on("ice-sculpture", catalog)
    assert exc.value.code == PricingErrorCode.ADDON_NOT_FOUND


def test_negative_add_on_price():
    catalog = CatalogSnapshot(add_ons=[CatalogAddOn(id="broken", price_minor_units=-100)])
    with pytest.raises(PricingError) as exc:
        resolve_add_on("broken", catalog)
    assert exc.value.code == PricingErrorCode.NO_PRODUCT_PRICING


def test_list_add_ons_active_only(catalog):
    ids = [a.id for a in list_add_ons(catalog)]
    assert ids == ["chafing-dish", "sweet-tea"]


def test_list_add_ons_including_inactive(catalog):
    ids = [a.id for a in list_add_ons(catalog, active_only=False)]
    assert ids == ["chafing-dish", "sweet-tea", "retired-tent"]


def test_list_add_ons_category_case_insensitive(catalog):
    ids = [a.id for a in list_add_ons(catalog, active_only=False, category=" Equipment ")]
    assert ids == ["chafing-dish", "retired-tent"]
    assert list_add_ons(catalog, category="linens") == []
