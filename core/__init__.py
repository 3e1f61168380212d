# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the marketplace business logic:
# - models/: Pydantic schemas for listings, categories, messages, orders
#   and payment requests
# - services/: Listing, message, order, payment, storage and seed services
#
# Code in this package should NOT import from FastAPI.
# Routers stay thin; the rules live here.
# =============================================================================
