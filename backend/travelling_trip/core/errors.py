# backend/travelling_trip/core/errors.py

from typing import Any, Dict, Optional


class TravelPlannerError(Exception):
    """
    Base class for failures surfaced to the user as an error notification.

    Every subclass carries a machine-readable code and the HTTP status the
    API layer should answer with.
    """

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {"message": self.message, "code": self.code},
        }


class GenerationError(TravelPlannerError):
    """LLM output could not be decoded or failed schema validation."""

    status_code = 502
    code = "generation_failed"


class LLMTransportError(TravelPlannerError):
    status_code = 502
    code = "llm_unavailable"


class TransportError(TravelPlannerError):
    status_code = 502
    code = "http_error"


class PageFetchError(TransportError):
    code = "invalid_page"

    def __init__(self, message: str, preview: str = ""):
        super().__init__(message)
        self.preview = preview

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        body["error"]["preview"] = self.preview
        return body


class PaymentError(TravelPlannerError):
    status_code = 400
    code = "payment_error"


class TripNotFoundError(TravelPlannerError):
    status_code = 404
    code = "trip_not_found"
