# =============================================================================
# core/services/payment_service.py - Checkout & Connected Accounts
# =============================================================================
# Builds Stripe requests for hosted checkout and seller onboarding.
# Nothing is persisted locally: the pending checkout lives only at Stripe
# until the webhook reports it completed.
# =============================================================================

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from app.config import settings
from app.exceptions import PaymentProviderError
from core.models.payment import CheckoutSessionRequest, ConnectAccountStatus
from lib.stripe_client import StripeClient, StripeClientError

logger = logging.getLogger(__name__)


def to_minor_units(amount: float | Decimal) -> int:
    """Convert a currency amount to cents, rounding half up."""
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def platform_fee(amount_cents: int, percent: int | None = None) -> int:
    """Platform share of a split payment, in cents, rounded half up."""
    percent = settings.PLATFORM_FEE_PERCENT if percent is None else percent
    fee = Decimal(amount_cents) * Decimal(percent) / Decimal(100)
    return int(fee.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PaymentService:
    """Service for Stripe checkout and connected account onboarding."""

    @staticmethod
    def build_checkout_params(
        request: CheckoutSessionRequest,
        origin: str,
    ) -> dict[str, Any]:
        """
        Assemble the checkout session request.

        The buyer returns to {origin}/payment/success after paying and to the
        item page when cancelling.
        """
        amount = to_minor_units(request.price)

        params: dict[str, Any] = {
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": settings.CHECKOUT_CURRENCY,
                        "product_data": {"name": request.title},
                        "unit_amount": amount,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "success_url": f"{origin}/payment/success",
            "cancel_url": f"{origin}/item/{request.listing_id}",
            "metadata": {
                "listingId": request.listing_id,
                "sellerEmail": request.seller_email,
                "buyerEmail": request.buyer_email,
            },
        }

        if request.connected_account_id:
            params["payment_intent_data"] = {
                "application_fee_amount": platform_fee(amount),
                "transfer_data": {"destination": request.connected_account_id},
            }

        return params

    @staticmethod
    def create_checkout_session(request: CheckoutSessionRequest, origin: str) -> str:
        """
        Create a hosted checkout session.

        Returns:
            The URL to redirect the buyer to

        Raises:
            PaymentProviderError: If Stripe rejects the request
        """
        params = PaymentService.build_checkout_params(request, origin)

        try:
            session = StripeClient.create_checkout_session(params)
        except StripeClientError as e:
            logger.error(f"Checkout session for listing {request.listing_id} failed: {e}")
            raise PaymentProviderError("create checkout session") from e

        logger.info(f"Created checkout session {session.id} for listing {request.listing_id}")
        return session.url

    @staticmethod
    def create_connect_account(seller_email: str, origin: str) -> tuple[str, str]:
        """
        Create an express connected account and its onboarding link.

        Returns:
            Tuple of (account_id, onboarding_url)

        Raises:
            PaymentProviderError: If Stripe rejects either request
        """
        params = {
            "type": "express",
            "country": settings.CONNECT_COUNTRY,
            "email": seller_email,
            "capabilities": {
                "card_payments": {"requested": True},
                "transfers": {"requested": True},
            },
            "business_type": "individual",
            "business_profile": {
                "url": settings.CONNECT_BUSINESS_URL,
                "mcc": settings.CONNECT_MCC,
            },
        }

        try:
            account = StripeClient.create_account(params)
            link = StripeClient.create_account_link(
                account.id,
                refresh_url=f"{origin}/connect/refresh",
                return_url=f"{origin}/connect/return",
            )
        except StripeClientError as e:
            logger.error(f"Connected account for {seller_email} failed: {e}")
            raise PaymentProviderError("create connected account") from e

        logger.info(f"Created connected account {account.id} for {seller_email}")
        return account.id, link.url

    @staticmethod
    def get_connect_account(account_id: str) -> ConnectAccountStatus:
        """Onboarding status of a connected account."""
        try:
            account = StripeClient.retrieve_account(account_id)
        except StripeClientError as e:
            logger.error(f"Retrieving connected account {account_id} failed: {e}")
            raise PaymentProviderError("retrieve connected account") from e

        return ConnectAccountStatus(
            account_id=account.id,
            email=getattr(account, "email", None),
            charges_enabled=bool(getattr(account, "charges_enabled", False)),
            payouts_enabled=bool(getattr(account, "payouts_enabled", False)),
            details_submitted=bool(getattr(account, "details_submitted", False)),
        )
