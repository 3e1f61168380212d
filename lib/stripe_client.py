# =============================================================================
# lib/stripe_client.py - Stripe SDK Facade
# =============================================================================
# Thin wrapper around the stripe package for the calls the marketplace makes:
# - Hosted checkout sessions
# - Express connected accounts and their onboarding links
# - Webhook signature verification
#
# The secret key is passed per call instead of being set on the global
# `stripe.api_key`, so tests and scripts can't leak a key into each other.
#
# Usage:
#   from lib.stripe_client import StripeClient
#   session = StripeClient.create_checkout_session(params)
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any

import stripe

from app.config import settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"


class StripeClientError(Exception):
    """Error returned by the Stripe API or raised while calling it."""

    def __init__(self, message: str, operation: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.code = code

    def __str__(self) -> str:
        return f"[{self.operation}] {self.message}"


class StripeClient:
    """
    Class-level facade over the Stripe API.

    All methods are class methods; the API key comes from settings.
    """

    @classmethod
    def _api_key(cls) -> str:
        return settings.STRIPE_SECRET_KEY

    @classmethod
    def _call(cls, operation: str, func, *args, **kwargs) -> Any:
        """Run an SDK call, converting Stripe errors to StripeClientError."""
        try:
            return func(*args, api_key=cls._api_key(), **kwargs)
        except stripe.StripeError as e:
            logger.error(f"Stripe {operation} failed: {e}")
            raise StripeClientError(
                message=getattr(e, "user_message", None) or str(e),
                operation=operation,
                code=getattr(e, "code", None),
            ) from e

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    @classmethod
    def create_checkout_session(cls, params: dict[str, Any]) -> Any:
        """Create a hosted checkout session. Returns the Session object."""
        return cls._call("checkout.create", stripe.checkout.Session.create, **params)

    # -------------------------------------------------------------------------
    # Connected Accounts
    # -------------------------------------------------------------------------

    @classmethod
    def create_account(cls, params: dict[str, Any]) -> Any:
        return cls._call("account.create", stripe.Account.create, **params)

    @classmethod
    def create_account_link(cls, account_id: str, refresh_url: str, return_url: str) -> Any:
        return cls._call(
            "account_link.create",
            stripe.AccountLink.create,
            account=account_id,
            refresh_url=refresh_url,
            return_url=return_url,
            type="account_onboarding",
        )

    @classmethod
    def retrieve_account(cls, account_id: str) -> Any:
        return cls._call("account.retrieve", stripe.Account.retrieve, account_id)

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    @classmethod
    def verify_webhook(cls, payload: bytes, signature: str) -> dict[str, Any]:
        """
        Verify a webhook signature and decode the event.

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the Stripe-Signature header

        Returns:
            The event as a plain dict

        Raises:
            stripe.SignatureVerificationError: Signature missing, stale or wrong
            ValueError: Payload is not a JSON object
        """
        text = payload.decode("utf-8")
        stripe.WebhookSignature.verify_header(
            text,
            signature,
            settings.STRIPE_WEBHOOK_SECRET,
            settings.WEBHOOK_TOLERANCE_SECONDS,
        )
        event = json.loads(text)
        if not isinstance(event, dict):
            raise ValueError("Webhook payload is not a JSON object")
        return event
