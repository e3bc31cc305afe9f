# backend/travelling_trip/core/services.py

from dataclasses import dataclass

from travelling_trip.agents.travel_agent import TravelPlanAgent
from travelling_trip.core.config_loader import Settings
from travelling_trip.core.llm import GeminiClient
from travelling_trip.db.trip_store import SQLiteStore
from travelling_trip.services.geocoding_service import NominatimGeocodingService
from travelling_trip.services.page_fetch_service import PageFetchService
from travelling_trip.services.payment_service import StripePaymentService
from travelling_trip.services.photo_service import PhotoService
from travelling_trip.services.subscription_service import SubscriptionService


@dataclass
class ServiceContainer:
    """Process-wide service handles, built once at startup and read-only afterwards."""

    settings: Settings
    store: SQLiteStore
    agent: TravelPlanAgent
    payments: StripePaymentService
    subscriptions: SubscriptionService
    geocoder: NominatimGeocodingService
    photos: PhotoService
    pages: PageFetchService


def build_services(settings: Settings) -> ServiceContainer:
    store = SQLiteStore(settings.db_path)
    llm = GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        temperature=settings.llm_temperature,
    )
    geocoder = NominatimGeocodingService(
        settings.nominatim_url,
        settings.http_user_agent,
        timeout=settings.lookup_timeout_seconds,
    )

    return ServiceContainer(
        settings=settings,
        store=store,
        agent=TravelPlanAgent(llm),
        payments=StripePaymentService(
            settings.STRIPE_SECRET_KEY,
            settings.STRIPE_WEBHOOK_SECRET,
            environment=settings.environment,
        ),
        subscriptions=SubscriptionService(store, settings.subscription_duration_days),
        geocoder=geocoder,
        photos=PhotoService(
            geocoder,
            settings.wikimedia_url,
            settings.http_user_agent,
            timeout=settings.lookup_timeout_seconds,
        ),
        pages=PageFetchService(
            timeout=settings.page_fetch_timeout_seconds,
            max_redirects=settings.page_fetch_max_redirects,
        ),
    )
