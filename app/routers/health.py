# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# /health answers as long as the process serves requests. /health/ready also
# reaches the listings table and the upload directory, and reports "degraded"
# when either is unavailable. /health/live only reports that the process runs.
# =============================================================================

import os
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings
from lib.supabase_client import LISTINGS_TABLE, SupabaseClient

router = APIRouter()

API_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Per dependency: "healthy" or "unhealthy: <reason>"."""
    database: str
    uploads: str


class ReadinessResponse(BaseModel):
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Marketplace API status, environment and version."""
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Whether listings can be read and images stored.

    Runs a one-row select on the listings table and checks that the upload
    directory exists and is writable. Failures are reported, never raised.
    """
    checks = ChecksResponse(database="unknown", uploads="unknown")

    try:
        client = SupabaseClient.get_client()
        client.table(LISTINGS_TABLE).select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    try:
        upload_dir = settings.upload_path
        upload_dir.mkdir(parents=True, exist_ok=True)
        checks.uploads = "healthy" if os.access(upload_dir, os.W_OK) else "unhealthy: not writable"
    except OSError as e:
        checks.uploads = f"unhealthy: {str(e)[:50]}"

    all_healthy = checks.database == "healthy" and checks.uploads == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    return LivenessResponse(
        status="alive",
        timestamp=_now(),
    )
