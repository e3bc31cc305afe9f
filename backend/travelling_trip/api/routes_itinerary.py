# backend/travelling_trip/api/routes_itinerary.py

from fastapi import APIRouter

from travelling_trip.models.itinerary_models import (
    AppendActivityIn,
    DeleteActivityIn,
    DropIn,
    ItineraryOut,
    MapIn,
    MoveIn,
    ReorderIn,
)
from travelling_trip.utils.itinerary_board import DragPayload, ItineraryBoard
from travelling_trip.utils.trajectory import build_map_view

router = APIRouter(prefix="/itinerary", tags=["itinerary"])

# The board is rebuilt from the posted itinerary on each call; the client owns
# the working copy until it saves a trip.


@router.post("/append")
async def append_activity(body: AppendActivityIn):
    board = ItineraryBoard.from_days(body.itinerary)
    board.append(body.day, body.activity)
    return ItineraryOut(itinerary=board.to_days()).to_wire()


@router.post("/reorder")
async def reorder_activity(body: ReorderIn):
    board = ItineraryBoard.from_days(body.itinerary)
    board.reorder_within_day(body.day, body.source_index, body.target_index)
    return ItineraryOut(itinerary=board.to_days()).to_wire()


@router.post("/move")
async def move_activity(body: MoveIn):
    board = ItineraryBoard.from_days(body.itinerary)
    board.move_across_days(body.source_day, body.target_day, body.source_index, body.target_index)
    return ItineraryOut(itinerary=board.to_days()).to_wire()


@router.post("/delete")
async def delete_activity(body: DeleteActivityIn):
    board = ItineraryBoard.from_days(body.itinerary)
    removed = board.delete(body.day, body.index)
    return ItineraryOut(itinerary=board.to_days(), removed=removed).to_wire()


@router.post("/drop")
async def drop_activity(body: DropIn):
    board = ItineraryBoard.from_days(body.itinerary)
    board.handle_drop(DragPayload.decode(body.payload), body.target_day, body.target_index)
    return ItineraryOut(itinerary=board.to_days()).to_wire()


@router.post("/map")
async def itinerary_map(body: MapIn):
    board = None
    if body.view == "itinerary":
        days = body.itinerary if body.itinerary is not None else body.suggestions.itinerary
        board = ItineraryBoard.from_days(days)
    return build_map_view(body.suggestions, board).model_dump(mode="json")
