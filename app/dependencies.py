# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared request values.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Header, Query
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from app.config import settings
from core.models.listing import ListingFilters


def get_origin(origin: Annotated[str | None, Header()] = None) -> str:
    """
    Origin that payment redirects return to.

    Browsers send Origin on cross-site POSTs; server-to-server callers fall
    back to PUBLIC_BASE_URL.
    """
    return (origin or settings.PUBLIC_BASE_URL).rstrip("/")


def get_listing_filters(
    category: Annotated[str | None, Query(description="Category value, 'all' for every category")] = None,
    search: Annotated[str | None, Query(description="Case-insensitive match on title or description")] = None,
    location: Annotated[str | None, Query(description="Case-insensitive match on location")] = None,
    min_price: Annotated[float | None, Query(ge=0, description="Minimum price (inclusive)")] = None,
    max_price: Annotated[float | None, Query(ge=0, description="Maximum price (inclusive)")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Page size")] = 20,
    offset: Annotated[int, Query(ge=0, description="Rows to skip")] = 0,
) -> ListingFilters:
    """Collect listing query parameters into a ListingFilters object."""
    try:
        return ListingFilters(
            category=category,
            search=search,
            location=location,
            min_price=min_price,
            max_price=max_price,
            limit=limit,
            offset=offset,
        )
    except ValidationError as e:
        # Cross-field errors surface as ordinary 400 validation errors
        raise RequestValidationError(e.errors(include_url=False, include_context=False))


# Type aliases for dependency injection
OriginDep = Annotated[str, Depends(get_origin)]
ListingFiltersDep = Annotated[ListingFilters, Depends(get_listing_filters)]
