# backend/travelling_trip/models/planning_models.py

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import Field, field_validator

from travelling_trip.models.travel_models import (
    DayItinerary,
    Language,
    Location,
    TravelSuggestions,
    WireModel,
)


IdeaCategory = Literal["activities", "attractions", "hiddenGems"]


class TravelPlanRequest(WireModel):
    destination: str = Field(min_length=1)
    start_date: date
    duration: int = Field(ge=1, le=14)
    interests: List[str] = Field(default_factory=list)
    language: Language = "en"

    @field_validator("destination")
    @classmethod
    def _strip_destination(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("destination must not be blank")
        return value


class MoreIdeasRequest(WireModel):
    destination: str = Field(min_length=1)
    category: IdeaCategory
    language: Language = "en"
    existing: List[Location] = Field(default_factory=list)


class PreciseItineraryRequest(WireModel):
    suggestions: TravelSuggestions
    # day -> activities as edited by the user; keys arrive as strings from JSON.
    # Absent means "use the itinerary inside suggestions".
    current_itinerary: Optional[Dict[int, List[str]]] = None
    language: Language = "en"


# ----------------------------------------------------------
# Raw shape returned by the model for the precise itinerary
# ----------------------------------------------------------
class PreciseActivity(WireModel):
    time: str
    activity: str
    place: str
    nearby_landmarks: List[str] = Field(default_factory=list)
    booking_info: Optional[str] = None
    travel_time: Optional[str] = None


class PreciseDay(WireModel):
    day: int = Field(ge=1)
    title: Optional[str] = None
    activities: List[PreciseActivity]


class PreciseItineraryResponse(WireModel):
    itinerary: List[PreciseDay]


class MoreIdeasResponse(WireModel):
    category: IdeaCategory
    locations: List[Location]


class PreciseItineraryResult(WireModel):
    itinerary: List[DayItinerary]
