# backend/travelling_trip/api/routes_places.py

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from travelling_trip.api.deps import get_services
from travelling_trip.core.services import ServiceContainer
from travelling_trip.models.itinerary_models import PhotosIn

router = APIRouter(prefix="/places", tags=["places"])


@router.get("/autocomplete")
def autocomplete(q: str = Query(""), services: ServiceContainer = Depends(get_services)):
    return {"results": services.geocoder.search_places(q)}


@router.get("/photos")
def place_photos(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    title: str = "",
    location: Optional[str] = None,
    services: ServiceContainer = Depends(get_services),
):
    if lat is not None and lng is not None:
        return {"photos": services.photos.get_place_photos(lat, lng, title)}
    if location:
        return {"photos": services.photos.get_location_photos(location)}
    raise HTTPException(422, "Provide lat and lng, or location")


@router.post("/photos")
def batch_photos(body: PhotosIn, services: ServiceContainer = Depends(get_services)):
    return {
        "results": [
            {"title": item.title, "photos": photos}
            for item, photos in services.photos.iter_photos(body.items)
        ]
    }
