# backend/travelling_trip/services/subscription_service.py

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from travelling_trip.core.errors import PaymentError
from travelling_trip.core.logger import logger
from travelling_trip.db.trip_store import SQLiteStore


ACTIVE = "active"
CANCELED = "canceled"


def _iso_from_epoch(seconds: Optional[int]) -> Optional[str]:
    if not seconds:
        return None
    return datetime.fromtimestamp(int(seconds), tz=timezone.utc).isoformat()


class SubscriptionService:
    def __init__(self, store: SQLiteStore, duration_days: int = 365):
        self.store = store
        self.duration_days = duration_days

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    # -------------------------------------------------------
    # ACTIVATION
    # -------------------------------------------------------
    def create_or_update_subscription(
        self,
        user_id: str,
        session_id: str,
        stripe_subscription_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Activate premium for one year. Calling again with a session that is
        already recorded for ``user_id`` returns the stored row unchanged; a
        session recorded for another user raises PaymentError (409).
        """
        existing = self.store.get_subscription_by_session(session_id)
        if existing:
            if existing["user_id"] != user_id:
                logger.warning(f"Session {session_id} belongs to another user; refused for user {user_id}")
                raise PaymentError(
                    "This checkout session is already linked to another account",
                    code="session_already_used",
                    status_code=409,
                )
            logger.info(f"Session {session_id} already recorded for user {user_id}")
            return existing

        expires_at = (self._now() + timedelta(days=self.duration_days)).isoformat()
        subscription = self.store.upsert_subscription(
            user_id=user_id,
            stripe_session_id=session_id,
            status=ACTIVE,
            expires_at=expires_at,
            stripe_subscription_id=stripe_subscription_id,
        )
        logger.info(f"Premium activated for user {user_id} until {expires_at}")
        return subscription

    def has_active_subscription(self, user_id: Optional[str]) -> bool:
        if not user_id:
            return False

        subscription = self.store.get_subscription(user_id)
        if not subscription or subscription["subscription_status"] != ACTIVE:
            return False
        return datetime.fromisoformat(subscription["expires_at"]) > self._now()

    def get_subscription(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.store.get_subscription(user_id)

    def claim_pending_subscription(self, user_id: str, session_id: str) -> Optional[Dict[str, Any]]:
        """Link a checkout paid before sign-in to ``user_id``; None if nothing is pending."""
        pending = self.store.pop_pending_subscription(session_id)
        if pending is None:
            logger.info(f"No pending subscription for session {session_id}")
            return None
        return self.create_or_update_subscription(user_id, session_id, pending.get("stripe_subscription_id"))

    # -------------------------------------------------------
    # WEBHOOK EVENTS
    # -------------------------------------------------------
    def handle_webhook_event(self, event: Dict[str, Any]) -> str:
        event_type = event.get("type", "")
        obj = (event.get("data") or {}).get("object") or {}
        logger.info(f"Stripe webhook event: {event_type}")

        if event_type == "checkout.session.completed":
            session_id = obj.get("id")
            user_id = obj.get("client_reference_id")
            if user_id:
                self.create_or_update_subscription(user_id, session_id, obj.get("subscription"))
                return "activated"
            self.store.add_pending_subscription(
                session_id,
                customer_email=obj.get("customer_email") or (obj.get("customer_details") or {}).get("email"),
                stripe_subscription_id=obj.get("subscription"),
            )
            return "pending"

        if event_type == "customer.subscription.updated":
            updated = self.store.update_subscription_status(
                obj.get("id"),
                obj.get("status", ACTIVE),
                _iso_from_epoch(obj.get("current_period_end")),
            )
            return "updated" if updated else "ignored"

        if event_type == "customer.subscription.deleted":
            updated = self.store.update_subscription_status(obj.get("id"), CANCELED)
            return "canceled" if updated else "ignored"

        return "ignored"
