# =============================================================================
# app/routers/seed.py - Sample Data Endpoint
# =============================================================================
# Inserts or removes demo listings. Not for production databases.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel

from core.services.seed_service import SeedService

router = APIRouter()


class SeedRequest(BaseModel):
    action: str | None = None


@router.post("/seed")
async def seed_database(request: SeedRequest):
    """
    Seed or clear the database.

    action "seed" inserts the sample listings; "clear" deletes all listings.
    """
    return SeedService.run(request.action)
