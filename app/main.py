# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Marketplace API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.exceptions import (
    MarketplaceException,
    marketplace_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    categories,
    health,
    listings,
    messages,
    payment,
    seed,
    upload,
    webhooks,
)
from core.services.storage_service import PUBLIC_PREFIX

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Settings are already validated at import; startup only reports them.
    """
    logger.info(f"Starting Marketplace API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Serving uploads from {settings.upload_path.resolve()}")

    yield

    logger.info("Shutting down Marketplace API")


# Create FastAPI application
app = FastAPI(
    title="Marketplace API",
    description="""
## Peer-to-Peer Marketplace API

Listings, buyer/seller messaging and Stripe checkout.

### Quick Start

```bash
# 1. Create a listing
curl -X POST http://localhost:8000/api/v1/listings \\
  -H "Content-Type: application/json" \\
  -d '{"title": "Bike", "description": "Red", "price": 100, "category": "vehicles", "location": "Cebu", "seller_email": "a@x.com"}'

# 2. Search
curl "http://localhost:8000/api/v1/listings?search=bike&max_price=200"

# 3. Message the seller
curl -X POST http://localhost:8000/api/v1/messages \\
  -H "Content-Type: application/json" \\
  -d '{"listing_id": "<id>", "buyer_email": "b@x.com", "seller_email": "a@x.com", "message": "Still available?"}'
```

Ownership checks compare a caller-supplied seller_email; they are not
authentication.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Listings", "description": "Search, create, update and delete listings"},
        {"name": "Categories", "description": "Fixed listing categories"},
        {"name": "Messages", "description": "Buyer/seller messages about a listing"},
        {"name": "Upload", "description": "Listing image uploads"},
        {"name": "Payments", "description": "Hosted checkout and seller onboarding"},
        {"name": "Webhooks", "description": "Payment provider callbacks"},
        {"name": "Seed", "description": "Sample data"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MarketplaceException)
async def handle_marketplace_exception(request: Request, exc: MarketplaceException):
    """Handle custom Marketplace exceptions."""
    return await marketplace_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Client input errors answer 400."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix=API_PREFIX,
    tags=["Health"]
)

# Listing endpoints
app.include_router(
    listings.router,
    prefix=f"{API_PREFIX}/listings",
    tags=["Listings"]
)

# Category endpoints
app.include_router(
    categories.router,
    prefix=API_PREFIX,
    tags=["Categories"]
)

# Messaging endpoints
app.include_router(
    messages.router,
    prefix=f"{API_PREFIX}/messages",
    tags=["Messages"]
)

# Image upload endpoints
app.include_router(
    upload.router,
    prefix=f"{API_PREFIX}/upload",
    tags=["Upload"]
)

# Checkout and connected account endpoints
app.include_router(
    payment.router,
    prefix=API_PREFIX,
    tags=["Payments"]
)

# Payment webhook
app.include_router(
    webhooks.router,
    prefix=API_PREFIX,
    tags=["Webhooks"]
)

# Sample data endpoint
app.include_router(
    seed.router,
    prefix=API_PREFIX,
    tags=["Seed"]
)

# Uploaded images
app.mount(
    PUBLIC_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "Marketplace API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
    }
