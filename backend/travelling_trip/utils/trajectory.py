# backend/travelling_trip/utils/trajectory.py

import math
import re
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel

from travelling_trip.models.travel_models import Coordinates, Location, TravelSuggestions
from travelling_trip.utils.itinerary_board import ItineraryBoard


T = TypeVar("T")

MARKUP_RE = re.compile(r"</?[^>]+(>|$)")
TIMED_ACTIVITY_RE = re.compile(r"(\w+):\s*(\d+[h:]\d+)\s*(?:[AaPp]\.?[Mm]\.?)?\s*-\s*(.*)")
AT_PLACE_RE = re.compile(r"(.*) at (.*?)(?:\s+\(Near:|$|\s+-)")


class MapPoint(BaseModel):
    title: str
    description: str = ""
    type: str                    # attraction | gem | event | itinerary
    number: int
    coordinates: Coordinates
    day: Optional[int] = None
    index: Optional[int] = None


class MapView(BaseModel):
    points: List[MapPoint]
    trajectory: List[Tuple[float, float]]


# -------------------------------------------------------------------
# ORDERING
# -------------------------------------------------------------------
def euclidean_distance(a: Coordinates, b: Coordinates) -> float:
    """Straight-line distance in raw lat/lng degrees (not geodesic)."""
    return math.sqrt((a.lat - b.lat) ** 2 + (a.lng - b.lng) ** 2)


def order_by_nearest_neighbor(
    points: Sequence[T],
    coordinates_of: Callable[[T], Coordinates] = lambda point: point.coordinates,
) -> List[T]:
    """
    Greedy visiting order: start at the first point, then repeatedly take the
    unvisited point closest to the last one taken. Ties go to the earlier
    input point. O(n^2); not a tour optimizer.
    """
    if not points:
        return []

    ordered = [points[0]]
    remaining = list(points[1:])

    while remaining:
        last = coordinates_of(ordered[-1])
        nearest_index = 0
        shortest = math.inf
        for i, candidate in enumerate(remaining):
            distance = euclidean_distance(last, coordinates_of(candidate))
            if distance < shortest:
                shortest = distance
                nearest_index = i
        ordered.append(remaining.pop(nearest_index))

    return ordered


# -------------------------------------------------------------------
# MAP POINTS
# -------------------------------------------------------------------
def _numbered(locations: List[Location], kind: str) -> List[MapPoint]:
    return [
        MapPoint(
            title=loc.title,
            description=loc.description,
            type=kind,
            number=number,
            coordinates=loc.coordinates,
        )
        for number, loc in enumerate(locations, 1)
        if loc.coordinates is not None
    ]


def collect_map_points(suggestions: TravelSuggestions) -> List[MapPoint]:
    return (
        _numbered(suggestions.must_see_attractions, "attraction")
        + _numbered(suggestions.hidden_gems, "gem")
        + _numbered(suggestions.events, "event")
    )


def activity_title(activity: str) -> str:
    """Best guess at the place an activity string refers to."""
    text = MARKUP_RE.sub("", activity).strip()

    timed = TIMED_ACTIVITY_RE.search(text)
    if timed and timed.group(3):
        return timed.group(3).strip()

    at_place = AT_PLACE_RE.search(text)
    if at_place and at_place.group(1) and at_place.group(2):
        return at_place.group(1).strip()

    # "Title - description" entries added from the suggestion lists
    return text.split(" - ", 1)[0].strip()


def _match_location(title: str, locations: List[Location]) -> Optional[Location]:
    needle = title.lower()
    if not needle:
        return None
    for loc in locations:
        candidate = loc.title.lower()
        if candidate in needle or needle in candidate:
            return loc
    return None


def build_itinerary_map_items(board: ItineraryBoard, suggestions: TravelSuggestions) -> List[MapPoint]:
    items = []
    for entry in board.flatten():
        title = activity_title(entry.text)
        coordinates = suggestions.destination.coordinates
        for pool in (suggestions.must_see_attractions, suggestions.hidden_gems):
            match = _match_location(title, pool)
            if match is not None and match.coordinates is not None:
                coordinates = match.coordinates
                break

        items.append(
            MapPoint(
                title=title,
                description=MARKUP_RE.sub("", entry.text),
                type="itinerary",
                number=entry.display_index,
                coordinates=coordinates,
                day=entry.day,
                index=entry.index,
            )
        )
    return items


def build_map_view(suggestions: TravelSuggestions, board: Optional[ItineraryBoard] = None) -> MapView:
    """
    Itinerary view: itinerary points joined in display order.
    Overview: attractions, gems and events joined by nearest neighbour.
    """
    itinerary_points = build_itinerary_map_items(board, suggestions) if board is not None else []

    if itinerary_points:
        points = itinerary_points
        ordered = sorted(itinerary_points, key=lambda p: p.number)
    else:
        points = collect_map_points(suggestions)
        ordered = order_by_nearest_neighbor(points)

    return MapView(
        points=points,
        trajectory=[(p.coordinates.lat, p.coordinates.lng) for p in ordered],
    )
