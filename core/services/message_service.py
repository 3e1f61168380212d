# =============================================================================
# core/services/message_service.py - Messaging Business Logic
# =============================================================================
# Sending checks that the listing exists and that the message is addressed
# to that listing's seller. Reading returns a listing's thread, optionally
# narrowed to one buyer/seller conversation.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_uuid
from core.models.message import ConversationQuery, MessageCreate
from app.exceptions import InvalidListingIdError, ListingNotFoundError, SellerMismatchError

logger = logging.getLogger(__name__)


class MessageService:
    """Service for listing messages."""

    @staticmethod
    def get_messages(conversation: ConversationQuery) -> list[dict[str, Any]]:
        """
        Messages of a listing in ascending created_at order.

        No read state and no pagination: the whole thread is returned.
        """
        if not is_uuid(conversation.listing_id):
            raise InvalidListingIdError(conversation.listing_id)
        return SupabaseClient.fetch_messages(conversation)

    @staticmethod
    def send_message(payload: MessageCreate) -> dict[str, Any]:
        """
        Store a message about a listing.

        A listing_id that is not UUID-shaped cannot name a listing, so it is
        reported as not found without querying.

        Raises:
            ListingNotFoundError: If the listing doesn't exist
            SellerMismatchError: If seller_email isn't the listing's seller
        """
        listing = None
        if is_uuid(payload.listing_id):
            listing = SupabaseClient.fetch_listing(payload.listing_id)
        if not listing:
            raise ListingNotFoundError(payload.listing_id)

        if listing.get("seller_email") != payload.seller_email:
            raise SellerMismatchError(payload.listing_id)

        message = SupabaseClient.insert_message(payload.model_dump())
        logger.info(f"Stored message {message['id']} on listing {payload.listing_id}")
        return message
