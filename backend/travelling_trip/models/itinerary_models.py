# backend/travelling_trip/models/itinerary_models.py

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from travelling_trip.models.travel_models import DayItinerary, Language, Location, TravelSuggestions, WireModel


# ----------------------------------------------------------
# ITINERARY BOARD
# ----------------------------------------------------------
class BoardRequest(WireModel):
    itinerary: List[DayItinerary]


class AppendActivityIn(BoardRequest):
    day: int
    activity: str


class ReorderIn(BoardRequest):
    day: int
    source_index: int
    target_index: int


class MoveIn(BoardRequest):
    source_day: int
    target_day: int
    source_index: int
    target_index: int


class DeleteActivityIn(BoardRequest):
    day: int
    index: int


class DropIn(BoardRequest):
    payload: str                 # DragPayload.encode() from drag start
    target_day: int
    target_index: int


class ItineraryOut(WireModel):
    itinerary: List[DayItinerary]
    removed: Optional[str] = None


class MapIn(WireModel):
    suggestions: TravelSuggestions
    view: Literal["overview", "itinerary"] = "overview"
    # edited itinerary; defaults to the one inside ``suggestions``
    itinerary: Optional[List[DayItinerary]] = None


# ----------------------------------------------------------
# TRIPS
# ----------------------------------------------------------
class SaveTripIn(WireModel):
    trip_title: str = Field(min_length=1)
    destination: Optional[str] = None
    data: TravelSuggestions


class UpdateTripIn(WireModel):
    trip_title: Optional[str] = None
    destination: Optional[str] = None
    data: Optional[TravelSuggestions] = None


class TripOut(BaseModel):
    id: str
    user_id: str
    trip_title: str
    destination: str
    data: Dict[str, Any]
    public_url_id: str
    created_at: str
    updated_at: str


class SharedTripOut(BaseModel):
    trip_title: str
    destination: str
    data: Dict[str, Any]
    created_at: str


class ShareTextIn(WireModel):
    suggestions: TravelSuggestions
    language: Language = "en"


# ----------------------------------------------------------
# PAYMENTS
# ----------------------------------------------------------
class CheckoutIn(WireModel):
    success_url: str = Field(min_length=1)
    cancel_url: str = Field(min_length=1)
    price_id: Optional[str] = None
    customer_email: Optional[EmailStr] = None


class ClaimIn(WireModel):
    session_id: str = Field(min_length=1)


# ----------------------------------------------------------
# LOOKUPS
# ----------------------------------------------------------
class PhotosIn(WireModel):
    items: List[Location]


class FetchIn(BaseModel):
    url: str = Field(min_length=1)
