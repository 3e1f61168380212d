# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides table-specific methods for:
# - Listings (search, fetch, insert, update, delete)
# - Messages (listing threads and conversations)
# - Orders (written by the payment webhook)
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   listing = SupabaseClient.fetch_listing(listing_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from core.models.listing import ListingFilters
from core.models.message import ConversationQuery
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

LISTINGS_TABLE = "listings"
MESSAGES_TABLE = "messages"
ORDERS_TABLE = "orders"

# PostgREST code for "single() matched no rows"
NO_ROWS_CODE = "PGRST116"

# Matches no real row; used to express "delete everything" through a filter
NIL_UUID = "00000000-0000-0000-0000-000000000000"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a code and a suggestion so logs say how to fix the failure,
    not only what failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        listings = SupabaseClient.fetch_listings(ListingFilters(category="vehicles"))
        listing = SupabaseClient.fetch_listing("550e8400-...")
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return normalize_uuid(uuid_value)

    # -------------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_listings(cls, filters: ListingFilters) -> list[dict[str, Any]]:
        """
        Fetch listings matching a set of filters.

        Every predicate produced by ``filters.predicates()`` is applied to one
        query; results are newest-first and cut to the requested page.

        Args:
            filters: Search, category, location, price range and pagination

        Returns:
            List of listing dicts (possibly empty)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        query = client.table(LISTINGS_TABLE).select("*")
        for predicate in filters.predicates():
            query = getattr(query, predicate.op)(*predicate.args)
        query = (
            query
            .order("created_at", desc=True)
            .range(filters.offset, filters.range_end)
        )

        try:
            response = query.execute()
            listings = response.data or []
            logger.debug(f"Fetched {len(listings)} listings for {filters.model_dump(exclude_none=True)}")
            return listings

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch listings: {e}",
                code="FETCH_LISTINGS_FAILED",
                details={"filters": filters.model_dump(exclude_none=True)}
            )

    @classmethod
    def fetch_listing(cls, listing_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a listing by ID.

        Returns:
            Listing dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        listing_id_str = cls._normalize_uuid(listing_id)

        try:
            response = (
                client.table(LISTINGS_TABLE)
                .select("*")
                .eq("id", listing_id_str)
                .single()
                .execute()
            )

            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch listing: {e}",
                code="FETCH_LISTING_FAILED",
                suggestion="Check that the listing_id exists",
                details={"listing_id": listing_id_str}
            )

    @classmethod
    def insert_listings(cls, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert one or more listings.

        Returns:
            Inserted rows with generated id and timestamps

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()

        try:
            response = (
                client.table(LISTINGS_TABLE)
                .insert(rows)
                .execute()
            )

            if response.data:
                return response.data
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert listings: {e}",
                code="INSERT_LISTING_FAILED",
                details={"count": len(rows)}
            )

    @classmethod
    def insert_listing(cls, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a single listing and return the stored row."""
        return cls.insert_listings([row])[0]

    @classmethod
    def update_listing(
        cls,
        listing_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update fields of a listing.

        Returns:
            Updated listing dict, or None if no row matched

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        listing_id_str = cls._normalize_uuid(listing_id)

        try:
            response = (
                client.table(LISTINGS_TABLE)
                .update(data)
                .eq("id", listing_id_str)
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update listing: {e}",
                code="UPDATE_LISTING_FAILED",
                details={"listing_id": listing_id_str, "fields": sorted(data)}
            )

    @classmethod
    def delete_listing(cls, listing_id: str | UUID) -> None:
        """
        Delete a listing. Its messages go with it (ON DELETE CASCADE).

        Raises:
            SupabaseClientError: If delete fails
        """
        client = cls.get_client()
        listing_id_str = cls._normalize_uuid(listing_id)

        try:
            client.table(LISTINGS_TABLE).delete().eq("id", listing_id_str).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete listing: {e}",
                code="DELETE_LISTING_FAILED",
                details={"listing_id": listing_id_str}
            )

    @classmethod
    def delete_all_listings(cls) -> None:
        """
        Delete every listing.

        PostgREST refuses unfiltered deletes, so the filter matches every
        real id.
        """
        client = cls.get_client()

        try:
            client.table(LISTINGS_TABLE).delete().neq("id", NIL_UUID).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to clear listings: {e}",
                code="CLEAR_LISTINGS_FAILED",
            )

    # -------------------------------------------------------------------------
    # Messages
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_messages(cls, conversation: ConversationQuery) -> list[dict[str, Any]]:
        """
        Fetch messages of a listing, oldest first.

        When both emails are given only the conversation between them is
        returned, whichever of the two is recorded as buyer.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        query = (
            client.table(MESSAGES_TABLE)
            .select("*")
            .eq("listing_id", conversation.listing_id)
        )

        if conversation.is_conversation:
            buyer, seller = conversation.buyer_email, conversation.seller_email
            query = query.or_(
                f"and(buyer_email.eq.{buyer},seller_email.eq.{seller}),"
                f"and(buyer_email.eq.{seller},seller_email.eq.{buyer})"
            )

        try:
            response = query.order("created_at", desc=False).execute()
            messages = response.data or []
            logger.debug(f"Fetched {len(messages)} messages for listing {conversation.listing_id}")
            return messages

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch messages: {e}",
                code="FETCH_MESSAGES_FAILED",
                suggestion="Check that the listing_id exists and the messages table is accessible",
                details={"listing_id": conversation.listing_id}
            )

    @classmethod
    def insert_message(cls, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a message.

        Returns:
            Inserted message dict with generated id and created_at

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(MESSAGES_TABLE)
                .insert(row)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert message: {e}",
                code="INSERT_MESSAGE_FAILED",
                details={"listing_id": row.get("listing_id")}
            )

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_order_by_session(cls, stripe_session_id: str) -> dict[str, Any] | None:
        """
        Find the order written for a checkout session, if any.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(ORDERS_TABLE)
                .select("*")
                .eq("stripe_session_id", stripe_session_id)
                .limit(1)
                .execute()
            )

            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch order: {e}",
                code="FETCH_ORDER_FAILED",
                details={"stripe_session_id": stripe_session_id}
            )

    @classmethod
    def insert_order(cls, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert an order.

        Raises:
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(ORDERS_TABLE)
                .insert(row)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert order: {e}",
                code="INSERT_ORDER_FAILED",
                details={"stripe_session_id": row.get("stripe_session_id")}
            )
