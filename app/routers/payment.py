# =============================================================================
# app/routers/payment.py - Checkout & Connected Account Endpoints
# =============================================================================
# Hosted checkout for a listing and seller onboarding for split payouts.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import OriginDep
from app.exceptions import InvalidInputError
from core.models.payment import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    ConnectAccountRequest,
    ConnectAccountResponse,
    ConnectAccountStatus,
)
from core.services.payment_service import PaymentService

router = APIRouter()


@router.post("/payment/create-checkout-session", response_model=CheckoutSessionResponse)
async def create_checkout_session(request: CheckoutSessionRequest, origin: OriginDep):
    """
    Create a hosted checkout session for a listing.

    With connected_account_id the payment goes to the seller's account,
    less the platform fee. Returns the URL to redirect the buyer to.
    """
    url = PaymentService.create_checkout_session(request, origin)
    return CheckoutSessionResponse(url=url)


@router.post("/connect/create-account", response_model=ConnectAccountResponse)
async def create_connect_account(request: ConnectAccountRequest, origin: OriginDep):
    """
    Create a connected account for a seller.

    Returns the account ID and the onboarding link to send the seller to.
    """
    seller_email = (request.seller_email or "").strip()
    if not seller_email:
        raise InvalidInputError("Seller email is required", field="seller_email")

    account_id, onboarding_url = PaymentService.create_connect_account(seller_email, origin)
    return ConnectAccountResponse(account_id=account_id, onboarding_url=onboarding_url)


@router.get("/connect/accounts/{account_id}", response_model=ConnectAccountStatus)
async def get_connect_account(
    account_id: Annotated[str, Path(description="Connected account ID (acct_...)")],
):
    """Onboarding status of a connected account."""
    return PaymentService.get_connect_account(account_id)
