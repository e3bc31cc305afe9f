# backend/travelling_trip/services/geocoding_service.py

from typing import Any, Dict, List, Optional

import requests

from travelling_trip.core.errors import TransportError
from travelling_trip.core.logger import logger


MIN_QUERY_LENGTH = 2
AUTOCOMPLETE_LIMIT = 5


def format_location_name(result: Dict[str, Any]) -> str:
    """Label as city, country when Nominatim gives both, else its display name."""
    address = result.get("address")
    if not address:
        return result.get("display_name", "")

    place = address.get("city") or address.get("town") or address.get("village")
    country = address.get("country")
    if place and country:
        return f"{place}, {country}"
    return result.get("display_name", "")


class NominatimGeocodingService:
    def __init__(self, base_url: str, user_agent: str, timeout: int = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        # Nominatim usage policy requires an identifying agent
        self.session.headers.update({"User-Agent": user_agent})

    def _get(self, path: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            resp = self.session.get(url, params={**params, "format": "json"}, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Nominatim HTTP error on {path}: {e}")
            raise TransportError(f"Failed to fetch location details: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Nominatim request error on {path}: {e}")
            raise TransportError(f"Failed to fetch location details: {e}") from e

    # -------------------------------------------------------
    # AUTOCOMPLETE
    # -------------------------------------------------------
    def search_places(self, query: str, limit: int = AUTOCOMPLETE_LIMIT) -> List[Dict[str, Any]]:
        """Destination suggestions; short queries and lookup failures give []."""
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        try:
            results = self._get("search", {"q": query, "limit": limit, "addressdetails": 1})
        except TransportError:
            return []

        suggestions = []
        for result in results:
            suggestions.append({
                "place_id": result.get("place_id"),
                "display_name": format_location_name(result),
                "lat": float(result["lat"]) if result.get("lat") else None,
                "lng": float(result["lon"]) if result.get("lon") else None,
            })
        logger.debug(f"{len(suggestions)} suggestions for '{query}'")
        return suggestions

    # -------------------------------------------------------
    # LOOKUPS
    # -------------------------------------------------------
    def reverse(self, lat: float, lng: float) -> Dict[str, Any]:
        return self._get("reverse", {"lat": lat, "lon": lng, "addressdetails": 1})

    def lookup(self, query: str) -> Optional[Dict[str, Any]]:
        results = self._get("search", {"q": query, "limit": 1, "addressdetails": 1})
        return results[0] if results else None
