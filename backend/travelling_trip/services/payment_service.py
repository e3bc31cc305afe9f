# backend/travelling_trip/services/payment_service.py

import json
from typing import Any, Dict, Optional

import stripe

from travelling_trip.core.errors import PaymentError
from travelling_trip.core.logger import logger


def _payment_error(e: "stripe.StripeError", fallback: str) -> PaymentError:
    status = e.http_status if e.http_status and 400 <= e.http_status < 500 else 502
    return PaymentError(
        e.user_message or str(e) or fallback,
        code=e.code or "unknown_error",
        status_code=status,
    )


class StripePaymentService:
    """Checkout sessions, payment verification and webhook signature checks."""

    def __init__(self, secret_key: str, webhook_secret: str = "", environment: str = "development"):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.environment = environment

    # -------------------------------------------------------
    # CHECKOUT
    # -------------------------------------------------------
    def create_checkout_session(
        self,
        price_id: str,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str] = None,
        client_reference_id: Optional[str] = None,
    ) -> Dict[str, str]:
        logger.info(f"Creating checkout session with price ID: {price_id}")

        params: Dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "mode": "subscription",
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_email:
            params["customer_email"] = customer_email
        if client_reference_id:
            params["client_reference_id"] = client_reference_id

        try:
            session = stripe.checkout.Session.create(api_key=self.secret_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Error creating checkout session: {e} (code={e.code})")
            raise _payment_error(e, "Could not create checkout session") from e

        logger.info(f"Checkout session created: {session.id}")
        return {"id": session.id, "url": session.url}

    # -------------------------------------------------------
    # VERIFY
    # -------------------------------------------------------
    def is_test_mode(self, session_id: str) -> bool:
        return (
            self.environment != "production"
            or session_id.startswith("cs_test_")
            or "_test_" in self.secret_key
        )

    def verify_payment(self, session_id: str) -> Dict[str, Any]:
        """
        Paid sessions verify; in test mode any session Stripe knows about
        verifies. Anything else raises PaymentError(payment_incomplete).
        """
        logger.info(f"Verifying payment for session: {session_id}")

        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.secret_key)
        except stripe.StripeError as e:
            logger.error(f"Error verifying payment status: {e}")
            raise _payment_error(e, "Could not verify payment") from e

        test_mode = self.is_test_mode(session_id)
        payment_status = getattr(session, "payment_status", None)

        if payment_status != "paid" and not (test_mode and session.id):
            logger.warning(f"Payment not completed: {payment_status}")
            raise PaymentError(
                f"Payment not completed. Status: {payment_status}",
                code="payment_incomplete",
            )

        return {
            "session_id": session.id,
            "payment_status": payment_status or "paid",
            "subscription": getattr(session, "subscription", None),
            "customer": getattr(session, "customer", None),
            "client_reference_id": getattr(session, "client_reference_id", None),
            "is_test_mode": test_mode,
        }

    # -------------------------------------------------------
    # WEBHOOK
    # -------------------------------------------------------
    def construct_webhook_event(self, payload: bytes, signature: Optional[str]) -> Dict[str, Any]:
        if not signature or not self.webhook_secret:
            raise PaymentError("Missing stripe signature or webhook secret", code="missing_signature")

        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.error(f"Webhook signature verification failed: {e}")
            raise PaymentError(f"Webhook Error: {e}", code="invalid_signature") from e
        except ValueError as e:
            raise PaymentError(f"Webhook Error: {e}", code="invalid_payload") from e

        # signature checked against these exact bytes
        return json.loads(payload)
