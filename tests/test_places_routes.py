from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest

from main import create_app
from teleka.api.config import PricingConfig
from teleka.api.maps import MapsConfigurationError, MapsRequestError
from teleka.api.services.price_service import PriceService

SUNDAY_NOON = datetime(2024, 6, 2, 12, 0)


def matrix(distance_m=65000, base_s=3600, traffic_s=3700, status="OK", element_status="OK"):
    return {
        "status": status,
        "rows": [{
            "elements": [{
                "status": element_status,
                "distance": {"text": f"{distance_m / 1000:.1f} km", "value": distance_m},
                "duration": {"text": "1 hour", "value": base_s},
                "duration_in_traffic": {"text": "1 hour 2 mins", "value": traffic_s},
            }]
        }],
    }


@pytest.fixture
def maps():
    return MagicMock()


@pytest.fixture
def client(maps):
    service = PriceService(maps, PricingConfig(rate_per_km=2680, minimum_fare=12000))
    app, _ = create_app(maps=maps, price_service=service)
    app.testing = True
    return app.test_client()


def test_autocomplete_relays_provider_body(client, maps):
    body = {"status": "OK", "predictions": [{"place_id": "p1", "description": "Kampala"}]}
    maps.autocomplete.return_value = body

    resp = client.get("/api/places/autocomplete?input=Kamp&sessiontoken=tok&types=geocode")

    assert resp.status_code == 200
    assert resp.get_json() == body
    maps.autocomplete.assert_called_once_with("Kamp", session_token="tok", types="geocode")


def test_autocomplete_requires_input(client, maps):
    resp = client.get("/api/places/autocomplete?sessiontoken=tok")
    assert resp.status_code == 400
    assert "input" in resp.get_json()["error_message"]
    maps.autocomplete.assert_not_called()


def test_provider_failure_is_normalised(client, maps):
    maps.nearby.side_effect = MapsRequestError("Maps request failed: timeout")
    resp = client.get("/api/places/nearby?location=0.3,32.5&sessiontoken=tok")
    assert resp.status_code == 500
    assert resp.get_json()["status"] == "UNKNOWN_ERROR"


def test_missing_key_reports_request_denied(client, maps):
    maps.details.side_effect = MapsConfigurationError("Maps API key is not configured")
    resp = client.get("/api/places/details?place_id=p1")
    assert resp.status_code == 500
    assert resp.get_json()["status"] == "REQUEST_DENIED"


def test_details_requires_place_id(client):
    assert client.get("/api/places/details").status_code == 400


def test_nearby_requires_location(client):
    assert client.get("/api/places/nearby?sessiontoken=tok").status_code == 400


@patch("teleka.api.pricing.current_time", return_value=SUNDAY_NOON)
def test_calculate_price(_clock, client, maps):
    maps.distance_matrix.return_value = matrix()

    resp = client.get("/api/calculate-price?origin=Kampala&destination=Entebbe")

    assert resp.status_code == 200
    data = resp.get_json()
    assert data["price"] == 174000
    assert data["traffic_level"] == "Low"
    assert data["distance"]["text"] == "65.0 km"
    assert data["duration"]["text"] == "1 hour 2 mins"
    maps.distance_matrix.assert_called_once_with("Kampala", "Entebbe")


@patch("teleka.api.pricing.current_time", return_value=SUNDAY_NOON)
def test_calculate_price_high_traffic(_clock, client, maps):
    maps.distance_matrix.return_value = matrix(distance_m=10000, base_s=600, traffic_s=1000)
    data = client.get("/api/calculate-price?origin=A&destination=B").get_json()
    assert data["traffic_level"] == "High"
    assert data["price"] == 35000  # 10 * 2680 * 1.3 = 34840


def test_calculate_price_requires_both_ends(client):
    resp = client.get("/api/calculate-price?origin=Kampala")
    assert resp.status_code == 400
    assert "error" in resp.get_json()


@pytest.mark.parametrize("body", [
    matrix(status="REQUEST_DENIED"),
    matrix(element_status="NOT_FOUND"),
    {"status": "OK", "rows": []},
])
def test_calculate_price_fails_fast_on_bad_status(client, maps, body):
    maps.distance_matrix.return_value = body
    resp = client.get("/api/calculate-price?origin=A&destination=B")
    assert resp.status_code == 500
    assert resp.get_json()["error"]


@patch("teleka.api.pricing.current_time", return_value=SUNDAY_NOON)
def test_price_from_distance(_clock, client):
    data = client.get("/api/price-from-distance?km=65&traffic=low").get_json()
    assert data["raw_price"] == pytest.approx(174200)
    assert data["rounded_price"] == 174000
    assert data["price"] == 174000
    assert data["traffic_multiplier"] == 1.0

    floor = client.get("/api/price-from-distance?km=0.1&traffic=low").get_json()
    assert floor["price"] == 12000


@pytest.mark.parametrize("query", [
    "km=abc&traffic=low",
    "km=5&traffic=gridlock",
    "traffic=low",
    "km=inf&traffic=low",
    "km=nan&traffic=low",
    "km=1e308&traffic=low",
])
def test_price_from_distance_rejects_bad_input(client, query):
    assert client.get(f"/api/price-from-distance?{query}").status_code == 400


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok", "service": "teleka"}
