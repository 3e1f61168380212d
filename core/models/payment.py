# =============================================================================
# core/models/payment.py - Checkout & Connect Schemas
# =============================================================================

from pydantic import BaseModel, Field, field_validator


class CheckoutSessionRequest(BaseModel):
    """
    Input for POST /payment/create-checkout-session.

    connected_account_id routes the payment to a seller's connected account,
    minus the platform fee.
    """

    model_config = {"str_strip_whitespace": True}

    price: float = Field(..., gt=0, description="Item price in currency units")
    title: str = Field(..., min_length=1, description="Line item name")
    listing_id: str = Field(..., min_length=1)
    seller_email: str = Field(..., min_length=1)
    buyer_email: str = Field(..., min_length=1)
    connected_account_id: str | None = Field(
        default=None,
        description="Seller's connected account (acct_...) for split payouts"
    )

    @field_validator("connected_account_id")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None


class CheckoutSessionResponse(BaseModel):
    url: str


class ConnectAccountRequest(BaseModel):
    seller_email: str | None = None


class ConnectAccountResponse(BaseModel):
    account_id: str
    onboarding_url: str


class ConnectAccountStatus(BaseModel):
    account_id: str
    email: str | None = None
    charges_enabled: bool = False
    payouts_enabled: bool = False
    details_submitted: bool = False
