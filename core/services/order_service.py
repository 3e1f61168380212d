# =============================================================================
# core/services/order_service.py - Order Recording
# =============================================================================
# Turns payment webhook events into order rows.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.order import OrderCreate

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def event_object(event: dict[str, Any]) -> dict[str, Any]:
    """The event's data.object, or {} when the payload doesn't have that shape."""
    data = event.get("data")
    if not isinstance(data, dict):
        return {}
    obj = data.get("object")
    return obj if isinstance(obj, dict) else {}


class OrderService:
    """Service for orders created by payment events."""

    @staticmethod
    def record_checkout(session: dict[str, Any]) -> dict[str, Any] | None:
        """
        Insert the order for a completed checkout session.

        A session that already has an order is left alone, so replayed
        webhook deliveries don't create duplicates.

        Returns:
            The new order dict, or None if the session was already recorded

        Raises:
            SupabaseClientError: If the lookup or insert fails
        """
        order = OrderCreate.from_checkout_session(session)

        existing = SupabaseClient.fetch_order_by_session(order.stripe_session_id)
        if existing:
            logger.info(f"Order for session {order.stripe_session_id} already recorded: {existing.get('id')}")
            return None

        created = SupabaseClient.insert_order(order.to_row())
        logger.info(
            f"Recorded order {created.get('id')} for listing {order.listing_id} "
            f"(session {order.stripe_session_id}, amount {order.amount})"
        )
        return created

    @staticmethod
    def handle_event(event: dict[str, Any]) -> dict[str, Any] | None:
        """
        Apply a verified payment event.

        Only checkout completion writes anything; other event types are
        acknowledged and ignored.
        """
        event_type = event.get("type")
        if event_type != CHECKOUT_COMPLETED:
            logger.debug(f"Ignoring webhook event type: {event_type}")
            return None

        session = event_object(event)
        return OrderService.record_checkout(session)
