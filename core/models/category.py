# =============================================================================
# core/models/category.py - Listing Categories
# =============================================================================
# The fixed set of marketplace categories. A listing's category must be one
# of these values; labels and the "popular" flag are what the UI shows.
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Allowed listing categories (stored by value)."""
    VEHICLES = "vehicles"
    PROPERTY_RENTALS = "property-rentals"
    APPAREL = "apparel"
    ELECTRONICS = "electronics"
    CLASSIFIEDS = "classifieds"
    ENTERTAINMENT = "entertainment"
    FAMILY = "family"
    FREE_STUFF = "free-stuff"
    GARDEN_OUTDOOR = "garden-outdoor"
    HOBBIES = "hobbies"
    HOME_GOODS = "home-goods"
    HOME_IMPROVEMENT = "home-improvement"
    HOME_SALES = "home-sales"
    MUSICAL_INSTRUMENTS = "musical-instruments"
    OFFICE_SUPPLIES = "office-supplies"
    PET_SUPPLIES = "pet-supplies"
    SPORTING_GOODS = "sporting-goods"
    TOYS_GAMES = "toys-games"
    BUY_SELL_GROUPS = "buy-sell-groups"


CATEGORY_LABELS: dict[Category, str] = {
    Category.VEHICLES: "Vehicles",
    Category.PROPERTY_RENTALS: "Property Rentals",
    Category.APPAREL: "Apparel",
    Category.ELECTRONICS: "Electronics",
    Category.CLASSIFIEDS: "Classifieds",
    Category.ENTERTAINMENT: "Entertainment",
    Category.FAMILY: "Family",
    Category.FREE_STUFF: "Free Stuff",
    Category.GARDEN_OUTDOOR: "Garden & Outdoor",
    Category.HOBBIES: "Hobbies",
    Category.HOME_GOODS: "Home Goods",
    Category.HOME_IMPROVEMENT: "Home Improvement",
    Category.HOME_SALES: "Home Sales",
    Category.MUSICAL_INSTRUMENTS: "Musical Instruments",
    Category.OFFICE_SUPPLIES: "Office Supplies",
    Category.PET_SUPPLIES: "Pet Supplies",
    Category.SPORTING_GOODS: "Sporting Goods",
    Category.TOYS_GAMES: "Toys & Games",
    Category.BUY_SELL_GROUPS: "Buy and sell groups",
}

POPULAR_CATEGORIES: frozenset[Category] = frozenset({
    Category.VEHICLES,
    Category.PROPERTY_RENTALS,
    Category.APPAREL,
    Category.ELECTRONICS,
})

ALLOWED_CATEGORY_VALUES: frozenset[str] = frozenset(c.value for c in Category)


class CategoryInfo(BaseModel):
    """A category as shown to clients."""
    value: Category
    label: str
    is_popular: bool = Field(default=False)


def is_valid_category(value: object) -> bool:
    """Check a raw value against the allowed category set."""
    if isinstance(value, Category):
        return True
    return isinstance(value, str) and value in ALLOWED_CATEGORY_VALUES


def get_category_by_value(value: str) -> CategoryInfo | None:
    """Look up a category by its stored value."""
    if not is_valid_category(value):
        return None
    category = Category(value)
    return CategoryInfo(
        value=category,
        label=CATEGORY_LABELS[category],
        is_popular=category in POPULAR_CATEGORIES,
    )


def get_category_by_label(label: str) -> CategoryInfo | None:
    """Look up a category by its display label."""
    for category, category_label in CATEGORY_LABELS.items():
        if category_label == label:
            return get_category_by_value(category.value)
    return None


def list_categories() -> list[CategoryInfo]:
    """All categories in display order."""
    return [get_category_by_value(category.value) for category in Category]
