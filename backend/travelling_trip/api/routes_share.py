# backend/travelling_trip/api/routes_share.py

from fastapi import APIRouter, Depends

from travelling_trip.api.deps import get_services, require_premium
from travelling_trip.core.services import ServiceContainer
from travelling_trip.models.itinerary_models import ShareTextIn
from travelling_trip.utils.share_text import format_travel_plan_for_sharing

router = APIRouter(prefix="/share", tags=["share"])


@router.post("/text")
def share_text(
    body: ShareTextIn,
    user_id: str = Depends(require_premium),
    services: ServiceContainer = Depends(get_services),
):
    text = format_travel_plan_for_sharing(
        body.suggestions,
        body.language,
        source_url=services.settings.share_source_url,
    )
    return {"text": text}
