from fastapi.testclient import TestClient

from catering_quotes.api import api_catering
from catering_quotes.main import app
from catering_quotes.utils import PricingError, PricingErrorCode

client = TestClient(app)


def _body(rule_config, catalog, **request):
    payload = {
        "guest_count": 25,
        "appetite_level": "normal",
        "distance_miles": 10,
        "menu_selections": [
            {"protein_ref": "brisket", "side_ref": "mac-and-cheese", "quantity": 25}
        ],
        "add_on_selections": [],
    }
    payload.update(request)
    body = {"request": payload, "catalog": catalog.model_dump()}
    if rule_config is not None:
        body["config"] = rule_config.model_dump()
    return body


def test_price_quote(rule_config, catalog):
    res = client.post("/api/v1/catering/quotes/price", json=_body(rule_config, catalog))
    assert res.status_code == 200
    data = res.json()
    assert data["breakdown"]["total"] == 66960
    assert data["breakdown"]["deposit"] == 33480
    assert data["breakdown"]["balance"] == 33480
    assert data["display"]["total"] == "$669.60"
    assert data["cost_per_guest"] == {"cost_per_guest": 2678, "formatted": "$26.78"}


def test_price_quote_uses_default_rules(catalog):
    res = client.post("/api/v1/catering/quotes/price", json=_body(None, catalog))
    assert res.status_code == 200
    breakdown = res.json()["breakdown"]
    # 25 mile radius, 150/mile, 8% tax, 30% deposit
    assert breakdown["delivery_fee"] == 1500
    assert breakdown["subtotal"] == 61500
    assert breakdown["tax"] == 4920
    assert breakdown["total"] == 66420
    assert breakdown["deposit"] == 19926
    assert breakdown["balance"] == 46494


def test_price_quote_outside_radius(rule_config, catalog):
    res = client.post(
        "/api/v1/catering/quotes/price", json=_body(rule_config, catalog, distance_miles=50)
    )
    assert res.status_code == 422
    detail = res.json()["detail"]
    assert detail["code"] == "OUTSIDE_DELIVERY_RADIUS"
    assert detail["field_errors"] == {"request": "outside_delivery_radius"}
    assert "50" in detail["message"]


def test_price_quote_inactive_add_on(rule_config, catalog):
    res = client.post(
        "/api/v1/catering/quotes/price",
        json=_body(rule_config, catalog, add_on_selections=[{"add_on_ref": "retired-tent", "quantity": 1}]),
    )
    assert res.status_code == 422
    assert res.json()["detail"]["code"] == "ADDON_INACTIVE"


def test_price_quote_fractional_quantity_gets_pricing_code(rule_config, catalog):
    res = client.post(
        "/api/v1/catering/quotes/price",
        json=_body(
            rule_config,
            catalog,
            menu_selections=[{"protein_ref": "brisket", "side_ref": "mac-and-cheese", "quantity": 2.5}],
        ),
    )
    assert res.status_code == 422
    assert res.json()["detail"]["code"] == "INVALID_MENU_QUANTITY"


def test_price_quote_internal_error(rule_config, catalog, monkeypatch):
    def fail(*args, **kwargs):
        raise PricingError("Unexpected error during pricing calculation: boom", PricingErrorCode.CALCULATION_ERROR)

    monkeypatch.setattr(api_catering, "calculate_pricing_breakdown", fail)
    res = client.post("/api/v1/catering/quotes/price", json=_body(rule_config, catalog))
    assert res.status_code == 500
    assert res.json()["detail"]["code"] == "CALCULATION_ERROR"


def test_price_quote_malformed_body(catalog):
    res = client.post("/api/v1/catering/quotes/price", json={"catalog": catalog.model_dump()})
    assert res.status_code == 422
    assert isinstance(res.json()["detail"], list)


def test_distance_lookup():
    res = client.get("/api/v1/catering/distance", params={"address": "215 River St, Troy NY 12180"})
    assert res.status_code == 200
    data = res.json()
    assert 2 <= data["distance_miles"] <= 5
    assert data["is_within_radius"] is True
    assert data["max_radius"] == 25


def test_distance_lookup_custom_radius():
    res = client.get(
        "/api/v1/catering/distance",
        params={"address": "1 Beacon St, Boston MA", "radius": 10},
    )
    assert res.status_code == 200
    data = res.json()
    assert data["is_within_radius"] is False
    assert data["max_radius"] == 10


def test_distance_lookup_short_address():
    res = client.get("/api/v1/catering/distance", params={"address": "NY"})
    assert res.status_code == 422
    assert res.json()["detail"]["code"] == "INVALID_ADDRESS"


def test_list_add_ons(catalog):
    res = client.post("/api/v1/catering/addons/list", json={"catalog": catalog.model_dump()})
    assert res.status_code == 200
    assert [a["id"] for a in res.json()] == ["chafing-dish", "sweet-tea"]

    res = client.post(
        "/api/v1/catering/addons/list",
        json={"catalog": catalog.model_dump(), "active_only": False, "category": "equipment"},
    )
    assert [a["id"] for a in res.json()] == ["chafing-dish", "retired-tent"]


def test_health_live():
    res = client.get("/healthz/live")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_suggest_addresses():
    res = client.get("/api/v1/catering/addresses/suggest", params={"q": "pawling"})
    assert res.status_code == 200
    assert res.json() == ["987 Pawling Avenue, Troy, NY 12180"]

    res = client.get("/api/v1/catering/addresses/suggest", params={"q": "t"})
    assert res.json() == []


def test_openapi_metadata():
    schema = client.get("/openapi.json").json()
    assert schema["info"]["title"] == "Catering Quote API"
    assert "contact" not in schema["info"]
    assert {tag["name"] for tag in schema["tags"]} == {"catering", "health"}
    assert "/api/v1/catering/quotes/price" in schema["paths"]
