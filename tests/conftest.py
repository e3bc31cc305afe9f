import copy
import json
from typing import Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from travelling_trip.agents.travel_agent import TravelPlanAgent
from travelling_trip.core.config_loader import Settings
from travelling_trip.core.errors import PaymentError
from travelling_trip.core.security import create_access_token
from travelling_trip.core.services import ServiceContainer
from travelling_trip.db.trip_store import SQLiteStore
from travelling_trip.main import create_app
from travelling_trip.services.subscription_service import SubscriptionService


def _location(title: str, lat: float, lng: float, description: str = "") -> dict:
    return {
        "title": title,
        "description": description or f"About {title}",
        "location": f"{title}, Lisbon",
        "coordinates": {"lat": lat, "lng": lng},
    }


LISBON_PLAN = {
    "destination": {"name": "Lisbon", "coordinates": {"lat": 38.7223, "lng": -9.1393}},
    "mustSeeAttractions": [
        _location("Belém Tower", 38.6916, -9.2160),
        _location("Jerónimos Monastery", 38.6979, -9.2068),
        _location("São Jorge Castle", 38.7139, -9.1335),
        _location("Alfama", 38.7118, -9.1300),
    ],
    "hiddenGems": [
        _location("LX Factory", 38.7034, -9.1785),
        _location("Miradouro da Graça", 38.7163, -9.1311),
        _location("Feira da Ladra", 38.7150, -9.1270),
        _location("Aqueduto das Águas Livres", 38.7294, -9.1675),
    ],
    "restaurants": [
        _location("Time Out Market", 38.7069, -9.1459),
        _location("Cervejaria Ramiro", 38.7208, -9.1355),
        _location("Pastéis de Belém", 38.6975, -9.2032),
    ],
    "accommodation": [
        _location("Baixa", 38.7107, -9.1366),
        _location("Chiado", 38.7107, -9.1424),
        _location("Príncipe Real", 38.7163, -9.1486),
    ],
    "events": [
        _location("Fado night", 38.7115, -9.1295),
    ],
    "practicalAdvice": "Use the metro and trams; September is warm and dry.",
    "itinerary": [
        {
            "day": 1,
            "activities": [
                "Morning: 09:00 AM - Visit Belém Tower",
                "Afternoon: 01:00 PM - Lunch at Pastéis de Belém",
                "Evening: 07:00 PM - Dinner at Time Out Market",
            ],
        },
        {
            "day": 2,
            "activities": [
                "Morning: 09:30 AM - São Jorge Castle",
                "Afternoon: 02:00 PM - Walk through Alfama",
                "Evening: 08:00 PM - Fado night",
            ],
        },
        {
            "day": 3,
            "activities": [
                "Morning: 10:00 AM - LX Factory",
                "Afternoon: 03:00 PM - Feira da Ladra",
                "Evening: 07:30 PM - Sunset at Miradouro da Graça",
            ],
        },
    ],
}


@pytest.fixture
def lisbon_plan() -> dict:
    return copy.deepcopy(LISBON_PLAN)


def fenced(value) -> str:
    return "```json\n" + json.dumps(value, indent=2, ensure_ascii=False) + "\n```"


# ----------------------------------------------------------
# FAKES
# ----------------------------------------------------------
class FakeLLM:
    """Returns queued completions and records every prompt."""

    def __init__(self, responses: Optional[List[str]] = None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, text: str):
        self.responses.append(text)

    def generate(self, prompt: str, max_output_tokens: Optional[int] = None) -> str:
        self.calls.append({"prompt": prompt, "max_output_tokens": max_output_tokens})
        return self.responses.pop(0)


class FakePayments:
    def __init__(self):
        self.checkouts = []
        self.verified = []

    def create_checkout_session(self, price_id, success_url, cancel_url, customer_email=None, client_reference_id=None):
        self.checkouts.append({
            "price_id": price_id,
            "customer_email": customer_email,
            "client_reference_id": client_reference_id,
        })
        return {"id": "cs_test_123", "url": "https://checkout.stripe.com/c/pay/cs_test_123"}

    def verify_payment(self, session_id: str) -> Dict:
        self.verified.append(session_id)
        if session_id == "cs_unpaid":
            raise PaymentError("Payment not completed. Status: unpaid", code="payment_incomplete")
        return {
            "session_id": session_id,
            "payment_status": "paid",
            "subscription": "sub_123",
            "customer": "cus_123",
            "client_reference_id": None,
            "is_test_mode": True,
        }

    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> Dict:
        if signature != "valid-signature":
            raise PaymentError("Webhook Error: bad signature", code="invalid_signature")
        return json.loads(payload)


class FakeGeocoder:
    def search_places(self, query: str, limit: int = 5):
        if len(query.strip()) < 2:
            return []
        return [{"place_id": 1, "display_name": "Lisbon, Portugal", "lat": 38.72, "lng": -9.14}]


class FakePhotos:
    def __init__(self):
        self.requested = []

    def get_place_photos(self, lat, lng, title=""):
        self.requested.append(("place", title))
        return [f"https://upload.wikimedia.org/{title}.jpg"]

    def get_location_photos(self, location):
        self.requested.append(("location", location))
        return [f"https://upload.wikimedia.org/{location}.jpg"]

    def iter_photos(self, items, cancel_event=None):
        for item in items:
            yield item, self.get_place_photos(0, 0, item.title)


class FakePages:
    def fetch_page(self, url: str) -> str:
        return "<html>" + "x" * 1200 + "</html>"


# ----------------------------------------------------------
# FIXTURES
# ----------------------------------------------------------
@pytest.fixture
def store(tmp_path):
    db = SQLiteStore(str(tmp_path / "test.sqlite3"))
    yield db
    db.close()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def services(tmp_path, store, fake_llm):
    settings = Settings(db_path=str(tmp_path / "test.sqlite3"), STRIPE_PRICE_ID="price_default")
    return ServiceContainer(
        settings=settings,
        store=store,
        agent=TravelPlanAgent(fake_llm),
        payments=FakePayments(),
        subscriptions=SubscriptionService(store, duration_days=365),
        geocoder=FakeGeocoder(),
        photos=FakePhotos(),
        pages=FakePages(),
    )


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {create_access_token('user-1')}"}


@pytest.fixture
def premium_headers(services, auth_headers):
    services.subscriptions.create_or_update_subscription("user-1", "cs_test_premium")
    return auth_headers
