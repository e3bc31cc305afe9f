# backend/travelling_trip/api/routes_plan.py

from fastapi import APIRouter, Depends

from travelling_trip.api.deps import get_services
from travelling_trip.core.logger import logger
from travelling_trip.core.services import ServiceContainer
from travelling_trip.models.planning_models import (
    MoreIdeasRequest,
    MoreIdeasResponse,
    PreciseItineraryRequest,
    PreciseItineraryResult,
    TravelPlanRequest,
)

router = APIRouter(prefix="/plan", tags=["planner"])


# --------------------------
# Full travel plan
# --------------------------
@router.post("")
def generate_plan(body: TravelPlanRequest, services: ServiceContainer = Depends(get_services)):
    suggestions = services.agent.generate_travel_plan(body)
    return suggestions.to_wire()


# --------------------------
# More activities / attractions / hidden gems
# --------------------------
@router.post("/more")
def generate_more(body: MoreIdeasRequest, services: ServiceContainer = Depends(get_services)):
    locations = services.agent.generate_more_ideas(
        body.destination,
        body.category,
        language=body.language,
        existing=body.existing,
    )
    return MoreIdeasResponse(category=body.category, locations=locations).to_wire()


# --------------------------
# Precise itinerary with travel times
# --------------------------
@router.post("/precise")
def generate_precise(body: PreciseItineraryRequest, services: ServiceContainer = Depends(get_services)):
    logger.info(f"Precise itinerary requested for {body.suggestions.destination.name}")
    days = services.agent.generate_precise_itinerary(
        body.suggestions,
        body.current_itinerary,
        language=body.language,
    )
    return PreciseItineraryResult(itinerary=days).to_wire()
