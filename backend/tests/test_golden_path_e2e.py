import os
import sys
from uuid import uuid4

from fastapi.testclient import TestClient

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from maid_service.main import app

client = TestClient(app)


def _register(role: str) -> dict:
    response = client.post(
        "/api/auth/register",
        json={"name": f"golden {role}", "phone": f"9{uuid4().int % 10**9:09d}", "role": role},
    )
    assert response.status_code == 200
    return response.json()


def test_golden_path_register_list_bargain_book_review():
    helper = _register("helper")
    customer = _register("customer")

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {customer['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["role"] == "customer"

    listing = client.post(
        "/api/listings",
        json={
            "providerId": "p-1",
            "serviceId": "svc-elder",
            "title": f"Night care {uuid4().hex[:6]}",
            "basePrice": 900,
            "details": "Overnight stay, medication reminders.",
        },
    )
    assert listing.status_code == 200
    listing_id = listing.json()["id"]

    offer = client.post(
        "/api/offers",
        json={"listingId": listing_id, "customerId": customer["user"]["id"], "scope": "Two nights", "price": 1500},
    )
    assert offer.status_code == 200
    offer_id = offer.json()["id"]

    counter = client.post(
        f"/api/offers/{offer_id}/message",
        json={"by": "helper", "text": f"{helper['user']['name']}: 1700 for two nights", "price": 1700},
    )
    assert counter.status_code == 200
    settle = client.post(
        f"/api/offers/{offer_id}/message",
        json={"by": "customer", "text": "Meet at 1600?", "price": 1600},
    )
    assert settle.status_code == 200
    assert [m["by"] for m in settle.json()["messages"]] == ["system", "helper", "customer"]

    accepted = client.post(f"/api/offers/{offer_id}/accept")
    assert accepted.status_code == 200
    booking = accepted.json()["booking"]
    assert booking["price"] == 1600

    review = client.post(
        "/api/reviews",
        json={
            "bookingId": booking["id"],
            "customerId": customer["user"]["id"],
            "providerId": booking["providerId"],
            "rating": 5,
            "text": "Kind and punctual.",
        },
    )
    assert review.status_code == 200

    reviews = client.get(f"/api/reviews/{booking['providerId']}").json()
    assert any(item["id"] == review.json()["id"] for item in reviews)
    provider = next(p for p in client.get("/api/providers").json() if p["id"] == booking["providerId"])
    assert provider["ratingCount"] == len(reviews)
