# =============================================================================
# core/services/seed_service.py - Sample Data
# =============================================================================
# Fills an empty database with demo listings, or wipes all listings.
# Used by POST /seed and scripts/seed_database.py.
# =============================================================================

import logging
from enum import Enum

from lib.supabase_client import SupabaseClient
from core.models.category import Category
from core.models.listing import ListingCreate
from app.exceptions import InvalidSeedActionError

logger = logging.getLogger(__name__)


class SeedAction(str, Enum):
    SEED = "seed"
    CLEAR = "clear"


SAMPLE_LISTINGS: list[dict] = [
    {
        "title": "Alex Estala Rookie Topps Royalty Game Worn Relic Tennis Card. Numbered /5",
        "description": "Rare tennis card from Alex Estala's rookie collection. Game-worn relic included. "
                       "Limited edition numbered to only 5 pieces worldwide.",
        "price": 110000,
        "category": Category.ENTERTAINMENT,
        "seller_email": "collector@example.com",
        "location": "Manila, NCR",
    },
    {
        "title": "2006 Porsche Boxster",
        "description": "Well-maintained Porsche Boxster in excellent condition. Regular maintenance, "
                       "clean title. Perfect for weekend drives.",
        "price": 1600000,
        "category": Category.VEHICLES,
        "seller_email": "cardealer@example.com",
        "location": "Marikina, NCR",
    },
    {
        "title": "PHP Programming Course Materials",
        "description": "Complete PHP programming course with books, exercises, and project files. "
                       "Perfect for beginners to advanced learners.",
        "price": 2500,
        "category": Category.HOBBIES,
        "seller_email": "teacher@example.com",
        "location": "Dasmariñas, Cavite",
    },
    {
        "title": "Philippines 2,000 Piso Banknote, 1998, P-187a, UNC, Commemorative",
        "description": "Uncirculated commemorative 2000 peso banknote from 1998. Perfect condition, "
                       "great for collectors.",
        "price": 2250,
        "category": Category.HOBBIES,
        "seller_email": "numismatist@example.com",
        "location": "Mandaluyong, NCR",
    },
    {
        "title": "POCO F4 GT / K50 Gaming Phone",
        "description": "High-performance gaming phone with Snapdragon processor. Excellent for mobile "
                       "gaming and daily use.",
        "price": 9000,
        "category": Category.ELECTRONICS,
        "seller_email": "techseller@example.com",
        "location": "Muntinlupa, NCR",
    },
    {
        "title": "2 Bedroom House in Paranaque",
        "description": "Spacious 2-bedroom house in a quiet neighborhood. Perfect for small families. "
                       "Near schools and shopping centers.",
        "price": 3500000,
        "category": Category.HOME_SALES,
        "seller_email": "realestate@example.com",
        "location": "Parañaque, NCR",
    },
    {
        "title": "Brand New Nike Air Jordan Retro",
        "description": "Authentic Nike Air Jordan Retro sneakers in perfect condition. Size 9. "
                       "Limited edition colorway.",
        "price": 8500,
        "category": Category.APPAREL,
        "seller_email": "sneakerseller@example.com",
        "location": "Quezon City, NCR",
    },
    {
        "title": "MacBook Pro 14-inch M2",
        "description": "MacBook Pro with M2 chip. 512GB storage, 16GB RAM. Perfect for professionals "
                       "and students.",
        "price": 85000,
        "category": Category.ELECTRONICS,
        "seller_email": "appleusedhigh@example.com",
        "location": "Makati, NCR",
    },
    {
        "title": "Honda Civic 2020",
        "description": "Well-maintained Honda Civic with low mileage. Regular maintenance, clean papers. "
                       "Great fuel efficiency.",
        "price": 950000,
        "category": Category.VEHICLES,
        "seller_email": "hondadealer@example.com",
        "location": "Las Piñas, NCR",
    },
    {
        "title": "Yamaha R15 V3 Motorcycle",
        "description": "Sporty Yamaha R15 V3 in excellent condition. Perfect for city riding and "
                       "weekend trips.",
        "price": 125000,
        "category": Category.VEHICLES,
        "seller_email": "bikeseller@example.com",
        "location": "Parañaque, NCR",
    },
]


class SeedService:
    """Service for demo data."""

    @staticmethod
    def seed() -> int:
        """
        Insert the sample listings.

        Returns:
            Number of listings inserted
        """
        rows = [ListingCreate(**sample).to_row() for sample in SAMPLE_LISTINGS]
        inserted = SupabaseClient.insert_listings(rows)
        logger.info(f"Seeded {len(inserted)} sample listings")
        return len(inserted)

    @staticmethod
    def clear() -> None:
        """Delete every listing (and, by cascade, every message)."""
        SupabaseClient.delete_all_listings()
        logger.info("Cleared all listings")

    @staticmethod
    def run(action: str | None) -> dict:
        """
        Dispatch a /seed action.

        Raises:
            InvalidSeedActionError: If action is neither "seed" nor "clear"
        """
        if action == SeedAction.SEED.value:
            count = SeedService.seed()
            return {
                "success": True,
                "message": f"Successfully inserted {count} listings",
                "count": count,
            }

        if action == SeedAction.CLEAR.value:
            SeedService.clear()
            return {
                "success": True,
                "message": "Database cleared successfully",
            }

        raise InvalidSeedActionError(action)
