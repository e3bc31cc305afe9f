# backend/travelling_trip/utils/itinerary_board.py

"""
In-memory itinerary editor backing drag & drop.

Every activity string belongs to exactly one (day, position). The four
mutations change the multiset of activities only by the single intended
addition or removal, and leave days they do not address untouched.
"""

from typing import Dict, Iterable, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from travelling_trip.models.travel_models import DayItinerary


class ItineraryError(ValueError):
    pass


class DragPayload(BaseModel):
    """What a dragged activity carries from drag start to drop."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    day: int = Field(ge=1)
    index: int = Field(ge=0)

    def encode(self) -> str:
        return self.model_dump_json()

    @classmethod
    def decode(cls, raw: str) -> "DragPayload":
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise ItineraryError(f"Malformed drag payload: {raw!r}") from e


class FlatActivity(NamedTuple):
    day: int
    index: int
    display_index: int
    text: str


class ItineraryBoard:
    def __init__(self, days: Optional[Dict[int, List[str]]] = None):
        self._days: Dict[int, List[str]] = {}
        for day, activities in (days or {}).items():
            self._check_day(day)
            self._days[day] = list(activities)

    # ------------------------------------------------------------------
    # CONVERSIONS
    # ------------------------------------------------------------------
    @classmethod
    def from_days(cls, days: Iterable[DayItinerary]) -> "ItineraryBoard":
        board = cls()
        for entry in days:
            if entry.day in board._days:
                raise ItineraryError(f"Day {entry.day} appears more than once")
            board._check_day(entry.day)
            board._days[entry.day] = list(entry.activities)
        return board

    def to_days(self) -> List[DayItinerary]:
        return [DayItinerary(day=day, activities=list(self._days[day])) for day in self.days]

    @property
    def days(self) -> List[int]:
        return sorted(self._days)

    def activities(self, day: int) -> List[str]:
        return list(self._days.get(day, []))

    def all_activities(self) -> List[str]:
        return [text for day in self.days for text in self._days[day]]

    def flatten(self) -> List[FlatActivity]:
        """Activities in day order with a running 1-based display number."""
        flat = []
        for day in self.days:
            for index, text in enumerate(self._days[day]):
                flat.append(FlatActivity(day, index, len(flat) + 1, text))
        return flat

    # ------------------------------------------------------------------
    # MUTATIONS
    # ------------------------------------------------------------------
    def append(self, day: int, activity: str) -> None:
        self._check_day(day)
        self._days.setdefault(day, []).append(activity)

    def reorder_within_day(self, day: int, source_index: int, target_index: int) -> None:
        """Swap two entries of one day."""
        entries = self._day_list(day)
        self._check_index(entries, day, source_index)
        self._check_index(entries, day, target_index)
        if source_index == target_index:
            return
        entries[source_index], entries[target_index] = entries[target_index], entries[source_index]

    def move_across_days(self, source_day: int, target_day: int, source_index: int, target_index: int) -> None:
        source = self._day_list(source_day)
        self._check_index(source, source_day, source_index)
        self._check_day(target_day)
        if target_index < 0:
            raise ItineraryError(f"Target index {target_index} is negative")

        target = self._days.setdefault(target_day, [])
        moved = source.pop(source_index)
        target.insert(target_index, moved)

    def delete(self, day: int, index: int) -> str:
        entries = self._day_list(day)
        self._check_index(entries, day, index)
        removed = entries.pop(index)
        if not entries:
            del self._days[day]
        return removed

    def handle_drop(self, payload: DragPayload, target_day: int, target_index: int) -> None:
        if payload.day == target_day:
            if payload.index == target_index:
                return
            self.reorder_within_day(target_day, payload.index, target_index)
        else:
            self.move_across_days(payload.day, target_day, payload.index, target_index)

    # ------------------------------------------------------------------
    # CHECKS
    # ------------------------------------------------------------------
    @staticmethod
    def _check_day(day: int) -> None:
        if isinstance(day, bool) or not isinstance(day, int) or day < 1:
            raise ItineraryError(f"Invalid day {day!r}; days are numbered from 1")

    def _day_list(self, day: int) -> List[str]:
        if day not in self._days:
            raise ItineraryError(f"Day {day} is not in the itinerary")
        return self._days[day]

    @staticmethod
    def _check_index(entries: List[str], day: int, index: int) -> None:
        if not 0 <= index < len(entries):
            raise ItineraryError(f"Index {index} out of range for day {day} ({len(entries)} activities)")
