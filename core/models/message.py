# =============================================================================
# core/models/message.py - Message Schemas
# =============================================================================
# A message belongs to one listing. A conversation is every message of a
# listing between the same two emails, in either direction.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

MAX_MESSAGE_LENGTH = 1000


class Message(BaseModel):
    """A row of the `messages` table. Messages are never edited."""

    id: str
    listing_id: str
    buyer_email: str
    seller_email: str
    message: str
    created_at: datetime | None = None


class MessageCreate(BaseModel):
    """
    Schema for sending a message.

    The text is trimmed before storage. Length is checked on the text as
    sent.
    """

    listing_id: str = Field(..., min_length=1, description="Listing the message is about")
    buyer_email: str = Field(..., min_length=1, description="Buyer's email")
    seller_email: str = Field(..., min_length=1, description="Must equal the listing's seller_email")
    message: str = Field(..., description=f"Message text, 1-{MAX_MESSAGE_LENGTH} characters")

    @field_validator("message")
    @classmethod
    def _check_message(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message content cannot be empty")
        if len(value) > MAX_MESSAGE_LENGTH:
            raise ValueError(f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters")
        return value.strip()


class ConversationQuery(BaseModel):
    """Which messages to return for GET /messages."""

    listing_id: str
    buyer_email: str | None = None
    seller_email: str | None = None

    @property
    def is_conversation(self) -> bool:
        """Both emails given: restrict to that pair."""
        return bool(self.buyer_email and self.seller_email)
