# =============================================================================
# app/routers/listings.py - Listing CRUD Endpoints
# =============================================================================
# Handles listing search, creation, update and deletion.
# There is no authentication: ownership is a seller_email comparison that is
# skipped when the caller omits the email.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query
from pydantic import BaseModel, Field

from app.dependencies import ListingFiltersDep
from core.models.listing import Listing, ListingCreate, ListingUpdate
from core.services.listing_service import ListingService

router = APIRouter()

ListingIdPath = Annotated[str, Path(description="Listing UUID")]


# =============================================================================
# Response Models
# =============================================================================

class ListingListResponse(BaseModel):
    """One page of listings."""
    listings: list[Listing] = Field(default_factory=list)
    count: int = Field(default=0, ge=0, description="Number of listings on this page")


class ListingResponse(BaseModel):
    listing: Listing


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "Listing deleted successfully"


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=ListingListResponse)
async def list_listings(filters: ListingFiltersDep):
    """
    Search listings.

    Filters are combined with AND. Results are newest first; paging is by
    offset, so rows can shift between pages when new listings arrive.
    """
    listings = ListingService.list_listings(filters)
    return {"listings": listings, "count": len(listings)}


@router.post("", response_model=ListingResponse, status_code=201)
async def create_listing(request: ListingCreate):
    """
    Create a listing.

    All fields except image_url are required; price must be positive and
    category one of the fixed values.
    """
    listing = ListingService.create_listing(request)
    return {"listing": listing}


@router.get("/{listing_id}", response_model=ListingResponse)
async def get_listing(listing_id: ListingIdPath):
    """Get a listing by ID."""
    return {"listing": ListingService.get_listing(listing_id)}


@router.put("/{listing_id}", response_model=ListingResponse)
async def update_listing(listing_id: ListingIdPath, request: ListingUpdate):
    """
    Update a listing.

    Only the fields sent are changed. When seller_email is sent it must be
    the listing's seller.
    """
    return {"listing": ListingService.update_listing(listing_id, request)}


@router.delete("/{listing_id}", response_model=DeleteResponse)
async def delete_listing(
    listing_id: ListingIdPath,
    seller_email: Annotated[str | None, Query(description="Must match the listing's seller when given")] = None,
):
    """
    Delete a listing and its messages.
    """
    ListingService.delete_listing(listing_id, seller_email=seller_email)
    return DeleteResponse()
