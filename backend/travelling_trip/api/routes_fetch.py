# backend/travelling_trip/api/routes_fetch.py

from fastapi import APIRouter, Depends

from travelling_trip.api.deps import get_services
from travelling_trip.core.services import ServiceContainer
from travelling_trip.models.itinerary_models import FetchIn

router = APIRouter(prefix="/fetch", tags=["fetch"])


@router.post("")
def fetch_page(body: FetchIn, services: ServiceContainer = Depends(get_services)):
    return {"data": services.pages.fetch_page(body.url)}
