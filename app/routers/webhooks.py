# =============================================================================
# app/routers/webhooks.py - Payment Webhook Endpoint
# =============================================================================
# Receives Stripe events. The signature is checked before anything else.
#
# Stripe is always answered 200 once the event is verified, even when the
# order insert fails. The failure is logged with the session id so the order
# can be reconciled by hand; answering 5xx would make Stripe redeliver for
# days.
# =============================================================================

import logging
from typing import Annotated

import stripe
from fastapi import APIRouter, Header, Request
from fastapi.responses import PlainTextResponse

from app.exceptions import WebhookSignatureError
from core.services.order_service import OrderService, event_object
from lib.stripe_client import StripeClient

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhooks/payments", response_class=PlainTextResponse)
async def payments_webhook(
    request: Request,
    stripe_signature: Annotated[str | None, Header(description="Stripe-Signature header")] = None,
):
    """
    Handle a Stripe webhook event.

    checkout.session.completed records an order; every other event type is
    acknowledged without changes.
    """
    payload = await request.body()

    try:
        event = StripeClient.verify_webhook(payload, stripe_signature or "")
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        raise WebhookSignatureError("invalid signature")
    except ValueError as e:
        logger.warning(f"Webhook payload could not be decoded: {e}")
        raise WebhookSignatureError("invalid payload")

    try:
        OrderService.handle_event(event)
    except Exception as e:
        session_id = event_object(event).get("id")
        logger.exception(f"Failed to record order for checkout session {session_id}: {e}")

    return PlainTextResponse("OK", status_code=200)
