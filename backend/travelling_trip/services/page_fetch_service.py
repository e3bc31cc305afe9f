# backend/travelling_trip/services/page_fetch_service.py

from urllib.parse import urlparse

import requests

from travelling_trip.core.errors import PageFetchError, TransportError, TravelPlannerError
from travelling_trip.core.logger import logger


MIN_PAGE_BYTES = 1000
PREVIEW_CHARS = 200

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9,fr;q=0.8",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Referer": "https://www.booking.com/",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "same-origin",
    "Sec-Fetch-User": "?1",
    "Upgrade-Insecure-Requests": "1",
}


class PageFetchService:
    """Server-side fetch of hotel listing pages the browser cannot load cross-origin."""

    def __init__(self, timeout: int = 30, max_redirects: int = 10):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.max_redirects = max_redirects
        self.session.headers.update(BROWSER_HEADERS)

    def fetch_page(self, url: str) -> str:
        if urlparse(url).scheme not in ("http", "https"):
            raise TravelPlannerError(f"Unsupported URL: {url}", code="invalid_url", status_code=400)

        logger.info(f"Fetching data from: {url}")
        try:
            resp = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.error(f"Proxy HTTP error for {url}: {e}")
            raise TransportError(f"HTTP error! status: {e.response.status_code}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Proxy error for {url}: {e}")
            raise TransportError(f"Error fetching data: {e}") from e

        body = resp.text
        logger.info(f"Received {len(body)} bytes of data")

        if len(body) < MIN_PAGE_BYTES or "<html" not in body:
            logger.warning(f"Received incomplete or non-HTML response: {body[:PREVIEW_CHARS]!r}")
            raise PageFetchError("Invalid response from page", preview=body[:PREVIEW_CHARS])

        return body
