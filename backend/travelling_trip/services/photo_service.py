# backend/travelling_trip/services/photo_service.py

import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

import requests

from travelling_trip.core.errors import TransportError
from travelling_trip.core.logger import logger
from travelling_trip.models.travel_models import Location
from travelling_trip.services.geocoding_service import NominatimGeocodingService


MAX_PHOTOS = 3
SEARCH_LIMIT = 10

EXCLUDED_SUFFIXES = (".svg", ".pdf", ".ogg")
EXCLUDED_FRAGMENTS = ("flag_of_", "coat_of_arms_of_", "logo_")


def is_usable_image(url: Optional[str]) -> bool:
    if not url:
        return False
    lower = url.lower()
    if lower.endswith(EXCLUDED_SUFFIXES):
        return False
    return not any(fragment in lower for fragment in EXCLUDED_FRAGMENTS)


def search_term_from_place(place: Dict[str, Any]) -> str:
    address = place.get("address") or {}
    return (
        place.get("name")
        or address.get("tourism")
        or address.get("attraction")
        or address.get("building")
        or address.get("city")
        or place.get("display_name")
        or ""
    )


class PhotoService:
    """
    Photos for a place: Nominatim names the place, Wikimedia Commons supplies
    the images. Best-effort: any failure yields an empty list.
    """

    def __init__(
        self,
        geocoder: NominatimGeocodingService,
        wikimedia_url: str,
        user_agent: str,
        timeout: int = 15,
    ):
        self.geocoder = geocoder
        self.wikimedia_url = wikimedia_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    # -------------------------------------------------------
    # WIKIMEDIA COMMONS
    # -------------------------------------------------------
    def fetch_wikimedia_images(self, search_term: str) -> List[str]:
        params = {
            "action": "query",
            "generator": "search",
            "gsrsearch": f"File:{search_term}",
            "gsrlimit": SEARCH_LIMIT,
            "gsrnamespace": 6,
            "prop": "imageinfo",
            "iiprop": "url",
            "format": "json",
            "origin": "*",
        }
        try:
            resp = self.session.get(self.wikimedia_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Error fetching Wikimedia images for '{search_term}': {e}")
            return []

        pages = (data.get("query") or {}).get("pages") or {}
        urls = []
        for page in pages.values():
            info = page.get("imageinfo") or [{}]
            url = info[0].get("url")
            if is_usable_image(url):
                urls.append(url)
        return urls[:MAX_PHOTOS]

    # -------------------------------------------------------
    # PLACE LOOKUPS
    # -------------------------------------------------------
    def get_place_photos(self, lat: float, lng: float, title: str = "") -> List[str]:
        try:
            place = self.geocoder.reverse(lat, lng)
        except TransportError as e:
            logger.error(f"Error fetching photos for ({lat}, {lng}): {e}")
            return []

        search_term = title or search_term_from_place(place)
        if not search_term:
            return []
        return self.fetch_wikimedia_images(search_term)

    def get_location_photos(self, location: str) -> List[str]:
        try:
            place = self.geocoder.lookup(location)
        except TransportError as e:
            logger.error(f"Error fetching photos for '{location}': {e}")
            return []

        if place is None:
            logger.info(f"Location not found: {location}")
            return []

        search_term = search_term_from_place(place)
        if not search_term:
            return []
        return self.fetch_wikimedia_images(search_term)

    def photos_for(self, item: Location) -> List[str]:
        if item.coordinates is not None:
            return self.get_place_photos(item.coordinates.lat, item.coordinates.lng, item.title)
        return self.get_location_photos(item.location or item.title)

    # -------------------------------------------------------
    # SEQUENTIAL BATCH
    # -------------------------------------------------------
    def iter_photos(
        self,
        items: Iterable[Location],
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[Tuple[Location, List[str]]]:
        """
        One lookup at a time, in input order. Once ``cancel_event`` is set no
        further lookup starts and nothing more is yielded.
        """
        for item in items:
            if cancel_event is not None and cancel_event.is_set():
                logger.debug("Photo fetch cancelled")
                return
            photos = self.photos_for(item)
            if cancel_event is not None and cancel_event.is_set():
                return
            yield item, photos
