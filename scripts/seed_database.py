#!/usr/bin/env python3
# =============================================================================
# scripts/seed_database.py - Seed or Clear Sample Listings
# =============================================================================
# Runs the same actions as POST /api/v1/seed without starting the API.
#
# Usage:
#   python scripts/seed_database.py seed
#   python scripts/seed_database.py clear
#
# Prerequisites:
#   - Environment variables must be set (.env file)
# =============================================================================

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.services.seed_service import SeedAction, SeedService


def main():
    """Seed or clear the listings table."""
    parser = argparse.ArgumentParser(description="Seed or clear marketplace sample data")
    parser.add_argument("action", choices=[action.value for action in SeedAction])
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    result = SeedService.run(args.action)
    print(result["message"])


if __name__ == "__main__":
    main()
