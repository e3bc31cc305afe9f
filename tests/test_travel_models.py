import pytest

from travelling_trip.models.travel_models import (
    SuggestionsValidationError,
    TravelSuggestions,
    validate_locations,
    validate_travel_suggestions,
)


def test_valid_document_round_trips_to_camel_case(lisbon_plan):
    suggestions = validate_travel_suggestions(lisbon_plan)

    assert suggestions.destination.name == "Lisbon"
    assert len(suggestions.must_see_attractions) == 4
    assert suggestions.to_wire() == lisbon_plan


def test_missing_events_default_to_empty(lisbon_plan):
    del lisbon_plan["events"]
    assert validate_travel_suggestions(lisbon_plan).events == []


def test_non_list_events_become_empty(lisbon_plan):
    lisbon_plan["events"] = None
    assert validate_travel_suggestions(lisbon_plan).events == []


def test_stored_location_coordinates_are_optional(lisbon_plan):
    del lisbon_plan["restaurants"][0]["coordinates"]
    suggestions = TravelSuggestions.model_validate(lisbon_plan)
    assert suggestions.restaurants[0].coordinates is None


@pytest.mark.parametrize("field", ["mustSeeAttractions", "hiddenGems", "restaurants", "accommodation"])
def test_generated_locations_require_coordinates(lisbon_plan, field):
    del lisbon_plan[field][0]["coordinates"]

    with pytest.raises(SuggestionsValidationError) as exc_info:
        validate_travel_suggestions(lisbon_plan)
    assert f"{field}.0.coordinates: Field required" in exc_info.value.violations


def test_generated_events_may_omit_coordinates(lisbon_plan):
    del lisbon_plan["events"][0]["coordinates"]
    assert validate_travel_suggestions(lisbon_plan).events[0].coordinates is None


def test_violations_are_enumerated_with_paths(lisbon_plan):
    lisbon_plan["mustSeeAttractions"][0]["title"] = 5
    lisbon_plan["hiddenGems"][1]["coordinates"]["lat"] = "38.7"
    lisbon_plan["practicalAdvice"] = ["not", "a", "string"]

    with pytest.raises(SuggestionsValidationError) as exc_info:
        validate_travel_suggestions(lisbon_plan)

    violations = exc_info.value.violations
    assert any(v.startswith("mustSeeAttractions.0.title") for v in violations)
    assert any(v.startswith("hiddenGems.1.coordinates.lat") for v in violations)
    assert any(v.startswith("practicalAdvice") for v in violations)


def test_boolean_coordinates_are_rejected(lisbon_plan):
    lisbon_plan["destination"]["coordinates"]["lng"] = True
    with pytest.raises(SuggestionsValidationError):
        validate_travel_suggestions(lisbon_plan)


def test_destination_coordinates_are_required(lisbon_plan):
    del lisbon_plan["destination"]["coordinates"]
    with pytest.raises(SuggestionsValidationError) as exc_info:
        validate_travel_suggestions(lisbon_plan)
    assert any(v.startswith("destination.coordinates") for v in exc_info.value.violations)


@pytest.mark.parametrize("field", ["mustSeeAttractions", "hiddenGems", "restaurants", "accommodation", "itinerary"])
def test_required_lists(lisbon_plan, field):
    del lisbon_plan[field]
    with pytest.raises(SuggestionsValidationError):
        validate_travel_suggestions(lisbon_plan)


def test_duplicate_day_numbers_are_rejected(lisbon_plan):
    lisbon_plan["itinerary"][2]["day"] = 1
    with pytest.raises(SuggestionsValidationError) as exc_info:
        validate_travel_suggestions(lisbon_plan)
    assert "appears more than once" in str(exc_info.value)


@pytest.mark.parametrize("day", [0, -1, "1", 1.5])
def test_day_numbers_must_be_positive_integers(lisbon_plan, day):
    lisbon_plan["itinerary"][0]["day"] = day
    with pytest.raises(SuggestionsValidationError):
        validate_travel_suggestions(lisbon_plan)


def test_activities_must_be_strings(lisbon_plan):
    lisbon_plan["itinerary"][0]["activities"].append({"activity": "Museum", "place": "MAAT"})
    with pytest.raises(SuggestionsValidationError):
        validate_travel_suggestions(lisbon_plan)


def test_non_object_document_is_a_root_violation():
    with pytest.raises(SuggestionsValidationError) as exc_info:
        validate_travel_suggestions([1, 2, 3])
    assert exc_info.value.violations == ["<root>: expected an object, got list"]


def test_validate_locations(lisbon_plan):
    locations = validate_locations(lisbon_plan["hiddenGems"])
    assert [loc.title for loc in locations][:2] == ["LX Factory", "Miradouro da Graça"]

    with pytest.raises(SuggestionsValidationError):
        validate_locations([{"title": "No description"}])

    unplaced = dict(lisbon_plan["hiddenGems"][0])
    del unplaced["coordinates"]
    with pytest.raises(SuggestionsValidationError) as exc_info:
        validate_locations([unplaced])
    assert exc_info.value.violations == ["0.coordinates: Field required"]
