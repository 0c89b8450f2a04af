from pathlib import Path
from dotenv import load_dotenv
import pytest

# Load environment variables for tests
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from catering_quotes.schemas import (  # noqa: E402
    AddOnSelection,
    CatalogAddOn,
    CatalogMenuItem,
    CatalogPrice,
    CatalogSnapshot,
    CatalogVariant,
    MenuSelection,
    PricingRequest,
    RuleConfiguration,
)


def menu_item(item_id, *prices, category="protein"):
    """Build a one-variant menu item; ``prices`` are ints or (amount, currency) pairs."""
    catalog_prices = []
    for price in prices:
        if isinstance(price, tuple):
            catalog_prices.append(CatalogPrice(amount=price[0], currency_code=price[1]))
        else:
            catalog_prices.append(CatalogPrice(amount=price, currency_code="usd"))
    return CatalogMenuItem(
        id=item_id,
        name=item_id.replace("-", " ").title(),
        category=category,
        variants=[CatalogVariant(id=f"{item_id}-default", title="Default", prices=catalog_prices)],
    )


@pytest.fixture
def rule_config():
    return RuleConfiguration(
        appetite_multipliers={"normal": 1.0, "prettyHungry": 1.25, "reallyHungry": 1.5},
        tax_rate=0.08,
        deposit_rate=0.5,
        delivery_radius_miles=30,
        fee_per_mile=200,
        minimum_order_minor_units=5000,
        minimum_per_guest_minor_units=1000,
    )


@pytest.fixture
def catalog():
    return CatalogSnapshot(
        menu_items=[
            menu_item("brisket", 1800),
            menu_item("mac-and-cheese", 600, category="side"),
            menu_item("unpriced-ribs"),
            menu_item("unpriced-slaw", category="side"),
        ],
        add_ons=[
            CatalogAddOn(id="chafing-dish", name="Chafing Dish", price_minor_units=2500, category="equipment"),
            CatalogAddOn(id="sweet-tea", name="Sweet Tea Gallon", price_minor_units=1200, category="drinks"),
            CatalogAddOn(
                id="retired-tent",
                name="Tent Rental",
                price_minor_units=15000,
                is_active=False,
                category="equipment",
            ),
        ],
    )


@pytest.fixture
def make_request():
    def _make(
        guest_count=25,
        quantity=25,
        appetite_level="normal",
        distance_miles=10,
        address=None,
        protein_ref="brisket",
        side_ref="mac-and-cheese",
        add_ons=(),
        menu_selections=None,
    ):
        if menu_selections is None:
            menu_selections = [MenuSelection(protein_ref=protein_ref, side_ref=side_ref, quantity=quantity)]
        return PricingRequest(
            guest_count=guest_count,
            appetite_level=appetite_level,
            address=address,
            distance_miles=distance_miles,
            menu_selections=menu_selections,
            add_on_selections=[AddOnSelection(add_on_ref=ref, quantity=qty) for ref, qty in add_ons],
        )

    return _make


@pytest.fixture
def build_menu_item():
    return menu_item
