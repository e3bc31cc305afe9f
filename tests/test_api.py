import json

import pytest

from conftest import fenced
from travelling_trip.core.security import create_access_token
from travelling_trip.utils.itinerary_board import DragPayload


PLAN_REQUEST = {
    "destination": "  Lisbon ",
    "startDate": "2025-09-12",
    "duration": 3,
    "interests": ["Food", "History"],
    "language": "en",
}


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ----------------------------------------------------------
# Planning
# ----------------------------------------------------------
def test_generate_plan(client, fake_llm, lisbon_plan):
    fake_llm.queue(fenced(lisbon_plan))

    resp = client.post("/plan", json=PLAN_REQUEST)

    assert resp.status_code == 200
    body = resp.json()
    assert body["destination"]["name"] == "Lisbon"
    assert len(body["mustSeeAttractions"]) == 4
    assert [d["day"] for d in body["itinerary"]] == [1, 2, 3]
    assert "Create a travel plan for Lisbon." in fake_llm.calls[0]["prompt"]


def test_generate_plan_failure_is_an_error_notification(client, fake_llm):
    fake_llm.queue("I cannot help with that.")

    resp = client.post("/plan", json=PLAN_REQUEST)

    assert resp.status_code == 502
    error = resp.json()["error"]
    assert error["code"] == "generation_failed"
    assert resp.json()["success"] is False


def test_generate_plan_rejects_bad_duration(client, fake_llm):
    resp = client.post("/plan", json=dict(PLAN_REQUEST, duration=30))
    assert resp.status_code == 422
    assert fake_llm.calls == []


def test_more_ideas(client, fake_llm, lisbon_plan):
    fake_llm.queue(json.dumps(lisbon_plan["hiddenGems"]))

    resp = client.post("/plan/more", json={
        "destination": "Lisbon",
        "category": "hiddenGems",
        "existing": lisbon_plan["hiddenGems"][:1],
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["category"] == "hiddenGems"
    assert [loc["title"] for loc in body["locations"]] == [g["title"] for g in lisbon_plan["hiddenGems"][1:]]


def test_precise_itinerary(client, fake_llm, lisbon_plan):
    fake_llm.queue(json.dumps({
        "itinerary": [
            {"day": 1, "activities": [{"time": "Morning: 09:00 AM", "activity": "Tower", "place": "Belém Tower"}]},
        ]
    }))

    resp = client.post("/plan/precise", json={
        "suggestions": lisbon_plan,
        "currentItinerary": {"1": ["Morning: 09:00 AM - Visit Belém Tower"]},
    })

    assert resp.status_code == 200
    assert resp.json()["itinerary"] == [
        {"day": 1, "activities": ["Morning: 09:00 AM - Tower (<b>Belém Tower</b>)"]}
    ]


def test_precise_itinerary_keeps_an_emptied_edit(client, fake_llm, lisbon_plan):
    response = json.dumps({"itinerary": [{"day": 1, "activities": []}]})
    fake_llm.queue(response)
    fake_llm.queue(response)

    client.post("/plan/precise", json={"suggestions": lisbon_plan, "currentItinerary": {}})
    client.post("/plan/precise", json={"suggestions": lisbon_plan})

    emptied, absent = (call["prompt"] for call in fake_llm.calls)
    assert "Current modified itinerary with user additions:\n[]" in emptied
    assert "Current modified itinerary with user additions:\n[]" not in absent
    assert "Walk through Alfama" in absent.split("Current modified itinerary with user additions:")[1]


# ----------------------------------------------------------
# Itinerary board
# ----------------------------------------------------------
def test_append_and_delete(client, lisbon_plan):
    itinerary = lisbon_plan["itinerary"]

    resp = client.post("/itinerary/append", json={
        "itinerary": itinerary, "day": 2, "activity": "Evening: 10:00 PM - Bairro Alto",
    })
    assert resp.status_code == 200
    day2 = resp.json()["itinerary"][1]["activities"]
    assert day2[-1] == "Evening: 10:00 PM - Bairro Alto"

    resp = client.post("/itinerary/delete", json={"itinerary": itinerary, "day": 3, "index": 0})
    assert resp.status_code == 200
    assert resp.json()["removed"] == "Morning: 10:00 AM - LX Factory"
    assert len(resp.json()["itinerary"][2]["activities"]) == 2


def test_reorder_swaps_entries(client, lisbon_plan):
    resp = client.post("/itinerary/reorder", json={
        "itinerary": lisbon_plan["itinerary"], "day": 1, "sourceIndex": 0, "targetIndex": 2,
    })

    day1 = resp.json()["itinerary"][0]["activities"]
    assert day1[0].endswith("Dinner at Time Out Market")
    assert day1[2].endswith("Visit Belém Tower")


def test_drop_across_days(client, lisbon_plan):
    payload = DragPayload(day=1, index=0).encode()

    resp = client.post("/itinerary/drop", json={
        "itinerary": lisbon_plan["itinerary"], "payload": payload, "targetDay": 2, "targetIndex": 1,
    })

    days = resp.json()["itinerary"]
    assert len(days[0]["activities"]) == 2
    assert days[1]["activities"][1] == "Morning: 09:00 AM - Visit Belém Tower"


@pytest.mark.parametrize(
    "path, extra",
    [
        ("/itinerary/delete", {"day": 1, "index": 9}),
        ("/itinerary/reorder", {"day": 7, "sourceIndex": 0, "targetIndex": 1}),
        ("/itinerary/drop", {"payload": "not json", "targetDay": 1, "targetIndex": 0}),
    ],
)
def test_invalid_board_operations(client, lisbon_plan, path, extra):
    resp = client.post(path, json=dict(extra, itinerary=lisbon_plan["itinerary"]))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_itinerary"


def test_map_views(client, lisbon_plan):
    resp = client.post("/itinerary/map", json={"suggestions": lisbon_plan})
    assert resp.status_code == 200
    overview = resp.json()
    assert len(overview["points"]) == 9
    assert len(overview["trajectory"]) == 9

    resp = client.post("/itinerary/map", json={"suggestions": lisbon_plan, "view": "itinerary"})
    itinerary = resp.json()
    assert itinerary["points"]
    assert len(itinerary["trajectory"]) == len(itinerary["points"])


# ----------------------------------------------------------
# Trips
# ----------------------------------------------------------
def test_saving_requires_a_token_and_premium(client, auth_headers, lisbon_plan):
    body = {"tripTitle": "Lisbon", "data": lisbon_plan}

    assert client.post("/trips", json=body).status_code == 401
    resp = client.post("/trips", json=body, headers=auth_headers)
    assert resp.status_code == 402


def test_invalid_token(client):
    resp = client.get("/trips", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_trip_lifecycle(client, premium_headers, lisbon_plan):
    resp = client.post("/trips", json={"tripTitle": "Lisbon weekend", "data": lisbon_plan}, headers=premium_headers)
    assert resp.status_code == 200
    trip = resp.json()
    assert trip["destination"] == "Lisbon"
    assert trip["data"]["mustSeeAttractions"] == lisbon_plan["mustSeeAttractions"]

    listed = client.get("/trips", headers=premium_headers).json()
    assert [t["id"] for t in listed] == [trip["id"]]

    resp = client.put(f"/trips/{trip['id']}", json={"tripTitle": "Lisbon, revised"}, headers=premium_headers)
    assert resp.json()["trip_title"] == "Lisbon, revised"

    shared = client.get(f"/trips/shared/{trip['public_url_id']}")
    assert shared.status_code == 200
    assert shared.json()["trip_title"] == "Lisbon, revised"
    assert "user_id" not in shared.json()

    assert client.delete(f"/trips/{trip['id']}", headers=premium_headers).json() == {"success": True}
    assert client.get(f"/trips/{trip['id']}", headers=premium_headers).status_code == 404


def test_other_users_trip_is_not_found(client, services, lisbon_plan):
    trip = services.store.save_trip("user-2", "Porto", "Porto", lisbon_plan)
    headers = {"Authorization": f"Bearer {create_access_token('user-1')}"}

    resp = client.get(f"/trips/{trip['id']}", headers=headers)

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "trip_not_found"
    assert client.delete(f"/trips/{trip['id']}", headers=headers).status_code == 404


def test_unknown_shared_trip(client):
    assert client.get("/trips/shared/missing").status_code == 404


def test_share_text(client, premium_headers, lisbon_plan):
    resp = client.post("/share/text", json={"suggestions": lisbon_plan, "language": "fr"}, headers=premium_headers)

    assert resp.status_code == 200
    assert resp.json()["text"].startswith("Plan de Voyage pour Lisbon")


# ----------------------------------------------------------
# Payments
# ----------------------------------------------------------
def test_checkout_links_signed_in_user(client, services, auth_headers):
    resp = client.post("/payments/checkout", json={
        "successUrl": "https://app.test/success",
        "cancelUrl": "https://app.test/cancel",
    }, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == "cs_test_123"
    assert services.payments.checkouts[0] == {
        "price_id": "price_default",
        "customer_email": None,
        "client_reference_id": "user-1",
    }


def test_checkout_without_price(client, services):
    services.settings.STRIPE_PRICE_ID = ""

    resp = client.post("/payments/checkout", json={"successUrl": "https://a", "cancelUrl": "https://b"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "missing_parameter"


def test_verify_activates_signed_in_user(client, auth_headers):
    resp = client.get("/payments/verify", params={"session_id": "cs_paid"}, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["premium"] is True
    status = client.get("/payments/subscription", headers=auth_headers).json()
    assert status["active"] is True
    assert status["subscription"]["stripe_subscription_id"] == "sub_123"


def test_verify_session_owned_by_another_user(client, auth_headers):
    client.get("/payments/verify", params={"session_id": "cs_test_shared"}, headers=auth_headers)
    other = {"Authorization": f"Bearer {create_access_token('user-b')}"}

    resp = client.get("/payments/verify", params={"session_id": "cs_test_shared"}, headers=other)

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "session_already_used"
    assert client.get("/payments/subscription", headers=other).json()["active"] is False
    assert client.get("/payments/subscription", headers=auth_headers).json()["active"] is True


def test_anonymous_verify_then_claim(client, auth_headers):
    resp = client.get("/payments/verify", params={"session_id": "cs_anon"})
    assert resp.json()["data"]["premium"] is False

    resp = client.post("/payments/claim", json={"sessionId": "cs_anon"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["user_id"] == "user-1"

    resp = client.post("/payments/claim", json={"sessionId": "cs_anon"}, headers=auth_headers)
    assert resp.status_code == 404


def test_verify_unpaid_session(client, auth_headers):
    resp = client.get("/payments/verify", params={"session_id": "cs_unpaid"}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "payment_incomplete"
    assert client.get("/payments/subscription", headers=auth_headers).json()["active"] is False


def test_webhook(client, auth_headers):
    event = {
        "type": "checkout.session.completed",
        "data": {"object": {"id": "cs_hook", "client_reference_id": "user-1", "subscription": "sub_hook"}},
    }

    bad = client.post("/payments/webhook", content=json.dumps(event), headers={"Stripe-Signature": "forged"})
    assert bad.status_code == 400

    resp = client.post("/payments/webhook", content=json.dumps(event), headers={"Stripe-Signature": "valid-signature"})
    assert resp.json() == {"received": True, "outcome": "activated"}
    assert client.get("/payments/subscription", headers=auth_headers).json()["active"] is True


# ----------------------------------------------------------
# Lookups
# ----------------------------------------------------------
def test_autocomplete(client):
    assert client.get("/places/autocomplete", params={"q": "L"}).json() == {"results": []}
    results = client.get("/places/autocomplete", params={"q": "Lisb"}).json()["results"]
    assert results[0]["display_name"] == "Lisbon, Portugal"


def test_photos(client, services, lisbon_plan):
    resp = client.get("/places/photos", params={"lat": 38.69, "lng": -9.21, "title": "Belém Tower"})
    assert resp.json() == {"photos": ["https://upload.wikimedia.org/Belém Tower.jpg"]}

    resp = client.get("/places/photos", params={"location": "Sintra"})
    assert resp.json() == {"photos": ["https://upload.wikimedia.org/Sintra.jpg"]}

    assert client.get("/places/photos").status_code == 422

    resp = client.post("/places/photos", json={"items": lisbon_plan["mustSeeAttractions"][:2]})
    assert [r["title"] for r in resp.json()["results"]] == [
        a["title"] for a in lisbon_plan["mustSeeAttractions"][:2]
    ]


def test_fetch_page(client):
    resp = client.post("/fetch", json={"url": "https://www.booking.com/hotel/pt/x.html"})
    assert resp.status_code == 200
    assert resp.json()["data"].startswith("<html>")
