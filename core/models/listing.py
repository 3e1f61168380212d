# =============================================================================
# core/models/listing.py - Listing Schemas
# =============================================================================
# These models define the API contract for listing operations:
# - Listing: A listing row as stored and returned
# - ListingCreate: Input for POST /listings
# - ListingUpdate: Partial input for PUT /listings/{id}
# - ListingFilters: Search, filter and pagination options for GET /listings
#
# ListingFilters turns itself into a flat list of Predicate entries. The
# database layer applies them in one place (SupabaseClient.fetch_listings),
# so filter logic is data, not a chain of conditional query mutations.
# =============================================================================

import math
from datetime import datetime
from typing import Annotated, Any, NamedTuple

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .category import Category, is_valid_category

# Characters with meaning inside a PostgREST or=(...) expression
_FILTER_RESERVED = str.maketrans("", "", ",()")


def _validate_price(value: float) -> float:
    if not math.isfinite(value) or value <= 0:
        raise ValueError("Price must be a positive number")
    return value


def _validate_category(value: Any) -> Any:
    if not is_valid_category(value):
        raise ValueError("Invalid category")
    return value


Price = Annotated[float, AfterValidator(_validate_price)]
CategoryValue = Annotated[Category, BeforeValidator(_validate_category)]


class Listing(BaseModel):
    """
    A listing as stored in the `listings` table.

    category is kept as a plain string so rows written before the category
    set was fixed can still be read.
    """

    id: str
    title: str
    description: str | None = None
    price: float
    category: str
    seller_email: str
    image_url: str | None = None
    location: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ListingCreate(BaseModel):
    """
    Schema for creating a listing.

    Example:
        {
            "title": "Bike",
            "description": "Red",
            "price": 100,
            "category": "vehicles",
            "location": "Cebu",
            "seller_email": "a@x.com"
        }
    """

    model_config = {"str_strip_whitespace": True}

    title: str = Field(..., min_length=1, max_length=255, description="Listing title")
    description: str = Field(..., min_length=1, description="Item description")
    price: Price = Field(..., description="Asking price, must be positive")
    category: CategoryValue = Field(..., description="One of the fixed category values")
    location: str = Field(..., min_length=1, description="Where the item is")
    seller_email: str = Field(..., min_length=1, description="Seller contact email")
    image_url: str | None = Field(default=None, description="Public image URL from /upload")

    def to_row(self) -> dict[str, Any]:
        """Row for insertion into `listings`."""
        return self.model_dump(mode="json")


class ListingUpdate(BaseModel):
    """
    Partial update of a listing.

    seller_email is not written; when present it must match the stored
    owner. Omitting it skips the check entirely, so it is not a security
    boundary.
    """

    model_config = {"str_strip_whitespace": True}

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Price | None = None
    category: CategoryValue | None = None
    location: str | None = Field(default=None, min_length=1)
    image_url: str | None = None
    seller_email: str | None = Field(
        default=None,
        description="Caller's email, compared with the listing owner"
    )

    @field_validator("title", "price", "category", "location", mode="before")
    @classmethod
    def _not_null(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually sent, minus seller_email."""
        return self.model_dump(mode="json", exclude_unset=True, exclude={"seller_email"})


class Predicate(NamedTuple):
    """One query-builder call: method name plus its positional arguments."""
    op: str
    args: tuple[Any, ...]


class ListingFilters(BaseModel):
    """
    Filters for listing search.

    All filters are conjunctive. Results are newest-first and paginated by
    offset/limit; offsets can drift if listings are inserted between pages.
    """

    category: str | None = Field(default=None, description="Category value, 'all' for no filter")
    search: str | None = Field(default=None, description="Substring of title or description")
    location: str | None = Field(default=None, description="Substring of location")
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_price_range(self) -> "ListingFilters":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price cannot be greater than max_price")
        return self

    def predicates(self) -> list[Predicate]:
        """Translate the filters into query-builder predicates."""
        predicates: list[Predicate] = []

        if self.category and self.category != "all":
            predicates.append(Predicate("eq", ("category", self.category)))

        search = (self.search or "").translate(_FILTER_RESERVED).strip()
        if search:
            predicates.append(Predicate(
                "or_",
                (f"title.ilike.%{search}%,description.ilike.%{search}%",),
            ))

        location = (self.location or "").strip()
        if location:
            predicates.append(Predicate("ilike", ("location", f"%{location}%")))

        if self.min_price is not None:
            predicates.append(Predicate("gte", ("price", self.min_price)))

        if self.max_price is not None:
            predicates.append(Predicate("lte", ("price", self.max_price)))

        return predicates

    @property
    def range_end(self) -> int:
        """Inclusive end index for the PostgREST range header."""
        return self.offset + self.limit - 1
