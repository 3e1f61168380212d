# =============================================================================
# core/models/order.py - Order Schemas
# =============================================================================
# Orders are written only by the payment webhook, one per completed hosted
# checkout session.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class PaymentStatus(str, Enum):
    PAID = "paid"


class OrderCreate(BaseModel):
    """Order row built from a `checkout.session.completed` event."""

    listing_id: str | None = Field(default=None, description="From session metadata.listingId")
    stripe_session_id: str = Field(..., description="Checkout session id (cs_...)")
    buyer_email: str | None = Field(default=None, description="From session metadata.buyerEmail")
    amount: float | None = Field(default=None, description="amount_total converted from cents")
    payment_status: PaymentStatus = PaymentStatus.PAID

    @classmethod
    def from_checkout_session(cls, session: dict) -> "OrderCreate":
        """Build the order from a checkout session object of a webhook event."""
        metadata = session.get("metadata") or {}
        amount_total = session.get("amount_total")
        return cls(
            listing_id=metadata.get("listingId"),
            stripe_session_id=session["id"],
            buyer_email=metadata.get("buyerEmail"),
            amount=amount_total / 100 if amount_total else None,
        )

    def to_row(self) -> dict:
        return self.model_dump(mode="json")
