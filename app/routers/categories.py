# =============================================================================
# app/routers/categories.py - Category Endpoints
# =============================================================================

from fastapi import APIRouter

from core.models.category import CategoryInfo, list_categories

router = APIRouter()


@router.get("/categories", response_model=list[CategoryInfo])
async def get_categories():
    """List the fixed listing categories with their display labels."""
    return list_categories()
