# backend/travelling_trip/api/deps.py

from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from travelling_trip.core.security import user_id_from_authorization
from travelling_trip.core.services import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


# --------------------------
# Extract user ID
# --------------------------
def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(401, "Missing or invalid token")

    user_id = user_id_from_authorization(authorization)
    if not user_id:
        raise HTTPException(401, "Invalid token")
    return user_id


def require_premium(
    user_id: str = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
) -> str:
    if not services.subscriptions.has_active_subscription(user_id):
        raise HTTPException(402, "An active premium subscription is required")
    return user_id
