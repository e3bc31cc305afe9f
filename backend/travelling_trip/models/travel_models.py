# backend/travelling_trip/models/travel_models.py

from typing import Annotated, Any, List, Literal, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel


Language = Literal["en", "fr"]


def _require_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    return value


Number = Annotated[float, BeforeValidator(_require_number)]


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


# ----------------------------------------------------------
# ENTITIES
# ----------------------------------------------------------
class Coordinates(WireModel):
    lat: Number
    lng: Number


class Location(WireModel):
    title: StrictStr
    description: StrictStr
    location: StrictStr
    coordinates: Optional[Coordinates] = None


class Destination(WireModel):
    name: StrictStr
    coordinates: Coordinates


class DayItinerary(WireModel):
    day: StrictInt = Field(ge=1)
    activities: List[StrictStr]


class TravelSuggestions(WireModel):
    destination: Destination
    must_see_attractions: List[Location]
    hidden_gems: List[Location]
    restaurants: List[Location]
    accommodation: List[Location]
    events: List[Location] = Field(default_factory=list)
    practical_advice: StrictStr
    itinerary: List[DayItinerary]

    @field_validator("events", mode="before")
    @classmethod
    def _missing_events_are_empty(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []

    @field_validator("itinerary")
    @classmethod
    def _unique_day_numbers(cls, days: List[DayItinerary]) -> List[DayItinerary]:
        seen = set()
        for entry in days:
            if entry.day in seen:
                raise ValueError(f"day {entry.day} appears more than once")
            seen.add(entry.day)
        return days


# ----------------------------------------------------------
# GENERATED DOCUMENTS
# ----------------------------------------------------------
class GeneratedLocation(Location):
    """A location as the model must return it: always placed on the map."""

    coordinates: Coordinates


class GeneratedTravelSuggestions(TravelSuggestions):
    must_see_attractions: List[GeneratedLocation]
    hidden_gems: List[GeneratedLocation]
    restaurants: List[GeneratedLocation]
    accommodation: List[GeneratedLocation]


# ----------------------------------------------------------
# VALIDATION
# ----------------------------------------------------------
class SuggestionsValidationError(ValueError):
    def __init__(self, violations: List[str]):
        super().__init__("; ".join(violations))
        self.violations = violations


def _violations(error: ValidationError) -> List[str]:
    out = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "<root>"
        out.append(f"{path}: {item['msg']}")
    return out


_locations_adapter = TypeAdapter(List[GeneratedLocation])


def validate_travel_suggestions(data: Any) -> TravelSuggestions:
    """
    Validate a generated document or raise SuggestionsValidationError listing
    every violation. Attractions, gems, restaurants and accommodation must
    all carry numeric coordinates.
    """
    if not isinstance(data, dict):
        raise SuggestionsValidationError([f"<root>: expected an object, got {type(data).__name__}"])
    try:
        return GeneratedTravelSuggestions.model_validate(data)
    except ValidationError as e:
        raise SuggestionsValidationError(_violations(e)) from e


def validate_locations(data: Any) -> List[Location]:
    try:
        return _locations_adapter.validate_python(data)
    except ValidationError as e:
        raise SuggestionsValidationError(_violations(e)) from e
