# =============================================================================
# core/services/listing_service.py - Listing Business Logic
# =============================================================================
# Handles listing CRUD operations and business logic.
# Separates HTTP concerns from database/business logic.
#
# Ownership is a plain string comparison against a caller-supplied
# seller_email. It stops honest mistakes, not attackers.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_uuid
from core.models.listing import ListingCreate, ListingFilters, ListingUpdate
from app.exceptions import (
    InvalidListingIdError,
    ListingNotFoundError,
    ListingOwnershipError,
)

logger = logging.getLogger(__name__)


class ListingService:
    """
    Service for listing operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def validate_listing_id(listing_id: str) -> str:
        """
        Reject malformed IDs before any query is issued.

        Raises:
            InvalidListingIdError: If listing_id is not UUID-shaped
        """
        if not is_uuid(listing_id):
            raise InvalidListingIdError(listing_id)
        return listing_id

    @staticmethod
    def list_listings(filters: ListingFilters) -> list[dict[str, Any]]:
        """Search listings, newest first."""
        return SupabaseClient.fetch_listings(filters)

    @staticmethod
    def get_listing(listing_id: str) -> dict[str, Any]:
        """
        Get a listing by ID.

        Raises:
            InvalidListingIdError: If listing_id is malformed
            ListingNotFoundError: If listing doesn't exist
        """
        ListingService.validate_listing_id(listing_id)

        listing = SupabaseClient.fetch_listing(listing_id)
        if not listing:
            raise ListingNotFoundError(listing_id)

        return listing

    @staticmethod
    def create_listing(payload: ListingCreate) -> dict[str, Any]:
        """
        Create a listing from a validated payload.

        Returns:
            Created listing dict with generated id and timestamps
        """
        listing = SupabaseClient.insert_listing(payload.to_row())
        logger.info(f"Created listing: {listing['id']} for seller: {listing.get('seller_email')}")
        return listing

    @staticmethod
    def _check_owner(listing: dict[str, Any], seller_email: str | None, action: str) -> None:
        # No email supplied means no check
        if seller_email and listing.get("seller_email") != seller_email:
            logger.warning(f"Rejected {action} of listing {listing.get('id')}: seller_email mismatch")
            raise ListingOwnershipError(str(listing.get("id")), action)

    @staticmethod
    def update_listing(listing_id: str, payload: ListingUpdate) -> dict[str, Any]:
        """
        Update the fields sent in payload.

        Raises:
            InvalidListingIdError: If listing_id is malformed
            ListingNotFoundError: If listing doesn't exist
            ListingOwnershipError: If seller_email is given and doesn't match
        """
        listing = ListingService.get_listing(listing_id)
        ListingService._check_owner(listing, payload.seller_email, "update")

        changes = payload.changes()
        if not changes:
            return listing  # Nothing to update

        changes["updated_at"] = datetime.now(timezone.utc).isoformat()

        updated = SupabaseClient.update_listing(listing_id, changes)
        if not updated:
            # Deleted between the fetch and the update
            raise ListingNotFoundError(listing_id)

        logger.info(f"Updated listing: {listing_id} ({', '.join(sorted(changes))})")
        return updated

    @staticmethod
    def delete_listing(listing_id: str, seller_email: str | None = None) -> None:
        """
        Delete a listing and, through the foreign key, its messages.

        Raises:
            InvalidListingIdError: If listing_id is malformed
            ListingNotFoundError: If listing doesn't exist
            ListingOwnershipError: If seller_email is given and doesn't match
        """
        listing = ListingService.get_listing(listing_id)
        ListingService._check_owner(listing, seller_email, "delete")

        SupabaseClient.delete_listing(listing_id)
        logger.info(f"Deleted listing: {listing_id}")
