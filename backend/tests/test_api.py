import os
import sys

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from maid_service.main import app
from maid_service.services.marketplace import build_marketplace, get_marketplace


@pytest.fixture
def client():
    market = build_marketplace()
    app.dependency_overrides[get_marketplace] = lambda: market
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create_offer(client, listing_id="l-1", price=1200):
    response = client.post(
        "/api/offers",
        json={"listingId": listing_id, "customerId": "u-cust-1", "scope": "Deep clean 2BHK", "price": price},
    )
    return response


def test_health_ok(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_catalog_lists_seed_data(client):
    services = client.get("/api/services").json()
    assert [s["id"] for s in services] == ["svc-clean", "svc-cook", "svc-baby", "svc-elder", "svc-patient"]
    assert services[2]["categories"] == ["Care"]

    providers = client.get("/api/providers").json()
    assert providers[0]["fullName"] == "Asha Devi"
    assert providers[0]["ratingAvg"] == 4.7
    assert providers[0]["ratingCount"] == 12

    listings = client.get("/api/listings").json()
    assert listings[0]["basePrice"] == 1500
    assert listings[0]["providerId"] == "p-1"


def test_create_listing(client):
    response = client.post(
        "/api/listings",
        json={"providerId": "p-1", "serviceId": "svc-cook", "title": "Daily lunch", "basePrice": 400},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["title"] == "Daily lunch"
    assert payload["details"] == ""
    assert any(item["id"] == payload["id"] for item in client.get("/api/listings").json())


def test_create_listing_accepts_snake_case(client):
    response = client.post(
        "/api/listings",
        json={"provider_id": "p-1", "service_id": "svc-baby", "title": "Evening sitter", "base_price": 250},
    )
    assert response.status_code == 200
    assert response.json()["serviceId"] == "svc-baby"


@pytest.mark.parametrize(
    "body",
    [
        {"serviceId": "svc-cook", "title": "Lunch", "basePrice": 400},
        {"providerId": "p-1", "serviceId": "svc-cook", "title": "", "basePrice": 400},
        {"providerId": "p-1", "serviceId": "svc-cook", "title": "Lunch", "basePrice": 0},
        {"providerId": "p-1", "serviceId": "svc-cook", "title": "Lunch", "basePrice": "cheap"},
    ],
)
def test_create_listing_rejects_missing_fields(client, body):
    before = len(client.get("/api/listings").json())
    response = client.post("/api/listings", json=body)
    assert response.status_code == 400
    assert len(client.get("/api/listings").json()) == before


def test_bargain_accept_book_and_review_scenario(client):
    listing = client.post(
        "/api/listings",
        json={"providerId": "p-1", "serviceId": "svc-clean", "title": "3BHK deep clean", "basePrice": 1500},
    ).json()

    offer = _create_offer(client, listing_id=listing["id"], price=1200)
    assert offer.status_code == 200
    offer_payload = offer.json()
    assert offer_payload["status"] == "open"
    assert offer_payload["providerId"] == "p-1"
    assert offer_payload["messages"][0]["by"] == "system"

    countered = client.post(
        f"/api/offers/{offer_payload['id']}/message",
        json={"by": "helper", "text": "1000 and I bring supplies", "price": 1000},
    )
    assert countered.status_code == 200
    assert countered.json()["price"] == 1000
    assert countered.json()["messages"][-1]["by"] == "helper"

    accepted = client.post(f"/api/offers/{offer_payload['id']}/accept")
    assert accepted.status_code == 200
    accepted_payload = accepted.json()
    assert accepted_payload["offer"]["status"] == "accepted"
    booking = accepted_payload["booking"]
    assert booking["price"] == 1000
    assert booking["status"] == "confirmed"
    assert booking["offerId"] == offer_payload["id"]

    bookings = client.get("/api/bookings").json()
    assert [b["id"] for b in bookings] == [booking["id"]]

    for rating in (5, 3):
        review = client.post(
            "/api/reviews",
            json={"bookingId": booking["id"], "customerId": "u-cust-1", "providerId": "p-1", "rating": rating},
        )
        assert review.status_code == 200

    provider = next(p for p in client.get("/api/providers").json() if p["id"] == "p-1")
    assert provider["ratingAvg"] == 4.0
    assert provider["ratingCount"] == 2

    reviews = client.get("/api/reviews/p-1").json()
    assert [r["rating"] for r in reviews] == [5, 3]
    assert reviews[0]["text"] == ""


def test_offer_on_missing_listing_is_404(client):
    response = _create_offer(client, listing_id="l-nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Listing not found"
    assert client.get("/api/offers").json() == []


def test_offer_missing_price_is_400(client):
    response = client.post("/api/offers", json={"listingId": "l-1", "customerId": "u-cust-1", "scope": "Clean"})
    assert response.status_code == 400


def test_decline_then_accept_is_conflict(client):
    offer_id = _create_offer(client).json()["id"]
    declined = client.post(f"/api/offers/{offer_id}/decline")
    assert declined.status_code == 200
    assert declined.json()["status"] == "declined"

    accepted = client.post(f"/api/offers/{offer_id}/accept")
    assert accepted.status_code == 409
    assert client.get("/api/bookings").json() == []

    message = client.post(f"/api/offers/{offer_id}/message", json={"by": "customer", "text": "wait", "price": 1})
    assert message.status_code == 409
    stored = next(o for o in client.get("/api/offers").json() if o["id"] == offer_id)
    assert stored["price"] == 1200
    assert len(stored["messages"]) == 1


def test_double_accept_is_conflict(client):
    offer_id = _create_offer(client).json()["id"]
    assert client.post(f"/api/offers/{offer_id}/accept").status_code == 200
    assert client.post(f"/api/offers/{offer_id}/accept").status_code == 409
    assert client.post(f"/api/offers/{offer_id}/decline").status_code == 409
    assert len(client.get("/api/bookings").json()) == 1


def test_unknown_offer_is_404(client):
    assert client.post("/api/offers/ofr_missing/accept").status_code == 404
    assert client.post("/api/offers/ofr_missing/decline").status_code == 404
    response = client.post("/api/offers/ofr_missing/message", json={"by": "customer", "text": "hi"})
    assert response.status_code == 404


def test_message_requires_author_and_text(client):
    offer_id = _create_offer(client).json()["id"]
    response = client.post(f"/api/offers/{offer_id}/message", json={"text": "hello"})
    assert response.status_code == 400
    assert response.json()["detail"] == "by, text required"


def test_out_of_range_rating_is_400_and_keeps_provider(client):
    response = client.post(
        "/api/reviews",
        json={"bookingId": "bkg_1", "customerId": "u-cust-1", "providerId": "p-1", "rating": 6},
    )
    assert response.status_code == 400
    provider = next(p for p in client.get("/api/providers").json() if p["id"] == "p-1")
    assert (provider["ratingAvg"], provider["ratingCount"]) == (4.7, 12)
    assert client.get("/api/reviews/p-1").json() == []


def test_reviews_for_unknown_provider_is_empty_list(client):
    response = client.get("/api/reviews/p-unknown")
    assert response.status_code == 200
    assert response.json() == []


def test_register_login_and_me(client):
    registered = client.post("/api/auth/register", json={"name": "Priya", "phone": "9000000099", "role": "customer"})
    assert registered.status_code == 200
    payload = registered.json()
    assert payload["user"]["role"] == "customer"
    assert payload["token"]

    duplicate = client.post("/api/auth/register", json={"name": "Other", "phone": "9000000099", "role": "helper"})
    assert duplicate.status_code == 409

    login = client.post("/api/auth/login", json={"phone": "9000000099"})
    assert login.status_code == 200
    token = login.json()["token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == payload["user"]["id"]


def test_login_seed_user_and_unknown_phone(client):
    seeded = client.post("/api/auth/login", json={"phone": "9000000002"})
    assert seeded.status_code == 200
    assert seeded.json()["user"]["id"] == "u-help-1"

    missing = client.post("/api/auth/login", json={"phone": "0000000000"})
    assert missing.status_code == 404


def test_register_rejects_unknown_role(client):
    response = client.post("/api/auth/register", json={"name": "Ravi", "phone": "9111111111", "role": "admin"})
    assert response.status_code == 400


def test_me_requires_valid_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer not.a-token"}).status_code == 401


@pytest.mark.parametrize("price", ["1200", True, False])
def test_offer_price_must_be_a_json_number(client, price):
    response = _create_offer(client, price=price)
    assert response.status_code == 400
    assert client.get("/api/offers").json() == []


@pytest.mark.parametrize("price", ["1000", True])
def test_counter_price_must_be_a_json_number(client, price):
    offer_id = _create_offer(client).json()["id"]
    response = client.post(f"/api/offers/{offer_id}/message", json={"by": "helper", "text": "1000?", "price": price})
    assert response.status_code == 400
    stored = next(o for o in client.get("/api/offers").json() if o["id"] == offer_id)
    assert stored["price"] == 1200
    assert len(stored["messages"]) == 1


@pytest.mark.parametrize("base_price", ["400", True])
def test_listing_base_price_must_be_a_json_number(client, base_price):
    before = client.get("/api/listings").json()
    response = client.post(
        "/api/listings",
        json={"providerId": "p-1", "serviceId": "svc-cook", "title": "Lunch", "basePrice": base_price},
    )
    assert response.status_code == 400
    assert client.get("/api/listings").json() == before


@pytest.mark.parametrize("rating", [True, "5", 4.5])
def test_review_rating_must_be_an_integral_json_number(client, rating):
    response = client.post(
        "/api/reviews",
        json={"bookingId": "bkg_1", "customerId": "u-cust-1", "providerId": "p-1", "rating": rating},
    )
    assert response.status_code == 400
    provider = next(p for p in client.get("/api/providers").json() if p["id"] == "p-1")
    assert (provider["ratingAvg"], provider["ratingCount"]) == (4.7, 12)
    assert client.get("/api/reviews/p-1").json() == []


def test_me_rejects_token_with_wrong_role(client):
    from maid_service.auth import create_access_token
    from maid_service.models import User, UserRole

    impostor = User(id="u-cust-1", name="Rahul Customer", phone="9000000001", role=UserRole.HELPER)
    token, _ = create_access_token(impostor)
    response = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
