# backend/travelling_trip/api/routes_trips.py

from typing import List

from fastapi import APIRouter, Depends

from travelling_trip.api.deps import get_current_user_id, get_services, require_premium
from travelling_trip.core.errors import TripNotFoundError
from travelling_trip.core.logger import logger
from travelling_trip.core.services import ServiceContainer
from travelling_trip.models.itinerary_models import SaveTripIn, SharedTripOut, TripOut, UpdateTripIn

router = APIRouter(prefix="/trips", tags=["trips"])


def _owned_trip(services: ServiceContainer, trip_id: str, user_id: str) -> dict:
    trip = services.store.get_trip(trip_id)
    # someone else's trip looks the same as a missing one
    if not trip or trip["user_id"] != user_id:
        raise TripNotFoundError(f"Trip {trip_id} not found")
    return trip


# --------------------------
# Save (premium)
# --------------------------
@router.post("", response_model=TripOut)
def save_trip(
    body: SaveTripIn,
    user_id: str = Depends(require_premium),
    services: ServiceContainer = Depends(get_services),
):
    trip = services.store.save_trip(
        user_id=user_id,
        trip_title=body.trip_title,
        destination=body.destination or body.data.destination.name,
        data=body.data.to_wire(),
    )
    logger.info(f"Trip {trip['id']} saved for user {user_id}")
    return trip


@router.get("", response_model=List[TripOut])
def list_trips(
    user_id: str = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
):
    return services.store.list_user_trips(user_id)


# --------------------------
# Public snapshot (no auth)
# --------------------------
@router.get("/shared/{public_id}", response_model=SharedTripOut)
def get_shared_trip(public_id: str, services: ServiceContainer = Depends(get_services)):
    trip = services.store.get_trip_by_public_id(public_id)
    if not trip:
        raise TripNotFoundError("Shared trip not found")
    return trip


@router.get("/{trip_id}", response_model=TripOut)
def get_trip(
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
):
    return _owned_trip(services, trip_id, user_id)


@router.put("/{trip_id}", response_model=TripOut)
def update_trip(
    trip_id: str,
    body: UpdateTripIn,
    user_id: str = Depends(require_premium),
    services: ServiceContainer = Depends(get_services),
):
    _owned_trip(services, trip_id, user_id)
    return services.store.update_trip(
        trip_id,
        trip_title=body.trip_title,
        destination=body.destination,
        data=body.data.to_wire() if body.data is not None else None,
    )


@router.delete("/{trip_id}")
def delete_trip(
    trip_id: str,
    user_id: str = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
):
    _owned_trip(services, trip_id, user_id)
    services.store.delete_trip(trip_id)
    logger.info(f"Trip {trip_id} deleted by user {user_id}")
    return {"success": True}
