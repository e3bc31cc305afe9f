# backend/travelling_trip/api/routes_payment.py

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, Request

from travelling_trip.api.deps import get_current_user_id, get_services
from travelling_trip.core.errors import PaymentError
from travelling_trip.core.logger import logger
from travelling_trip.core.security import user_id_from_authorization
from travelling_trip.core.services import ServiceContainer
from travelling_trip.models.itinerary_models import CheckoutIn, ClaimIn

router = APIRouter(prefix="/payments", tags=["payments"])


# --------------------------
# Checkout
# --------------------------
@router.post("/checkout")
def create_checkout(
    body: CheckoutIn,
    authorization: Optional[str] = Header(None),
    services: ServiceContainer = Depends(get_services),
):
    price_id = body.price_id or services.settings.STRIPE_PRICE_ID
    if not price_id:
        raise PaymentError("Missing required parameters", code="missing_parameter")

    # signed-in buyers are linked by the webhook; anonymous ones claim later
    session = services.payments.create_checkout_session(
        price_id=price_id,
        success_url=body.success_url,
        cancel_url=body.cancel_url,
        customer_email=body.customer_email,
        client_reference_id=user_id_from_authorization(authorization),
    )
    return {"success": True, "data": session}


# --------------------------
# Verify after redirect
# --------------------------
@router.get("/verify")
def verify_payment(
    session_id: str = Query(..., min_length=1),
    authorization: Optional[str] = Header(None),
    services: ServiceContainer = Depends(get_services),
):
    result = services.payments.verify_payment(session_id)

    user_id = user_id_from_authorization(authorization)
    if user_id:
        services.subscriptions.create_or_update_subscription(user_id, session_id, result.get("subscription"))
    else:
        services.store.add_pending_subscription(session_id, stripe_subscription_id=result.get("subscription"))
        logger.info(f"Payment {session_id} verified without a signed-in user; stored as pending")

    premium = services.subscriptions.has_active_subscription(user_id)
    return {"success": True, "data": {**result, "premium": premium}}


@router.post("/claim")
def claim_subscription(
    body: ClaimIn,
    user_id: str = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
):
    subscription = services.subscriptions.claim_pending_subscription(user_id, body.session_id)
    if subscription is None:
        raise PaymentError("No pending subscription for this session", code="not_found", status_code=404)
    return {"success": True, "data": subscription}


@router.get("/subscription")
def get_subscription(
    user_id: str = Depends(get_current_user_id),
    services: ServiceContainer = Depends(get_services),
):
    return {
        "active": services.subscriptions.has_active_subscription(user_id),
        "subscription": services.subscriptions.get_subscription(user_id),
    }


# --------------------------
# Stripe webhook
# --------------------------
@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    services: ServiceContainer = Depends(get_services),
):
    payload = await request.body()
    event = services.payments.construct_webhook_event(payload, stripe_signature)
    outcome = services.subscriptions.handle_webhook_event(event)
    return {"received": True, "outcome": outcome}
