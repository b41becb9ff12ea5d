"""
Health API Routes

Service and storage backend health for deployment checks.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from portfolio.config import settings
from portfolio.services.asset_store import AssetStore
from portfolio.services.cleanup_scheduler import get_scheduler_status
from portfolio.services.store_factory import get_asset_store

router = APIRouter()


@router.get("/health")
async def api_health():
    """Health check under the API prefix."""
    return {
        "success": True,
        "message": "Server is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/storage/health")
async def storage_health(store: AssetStore = Depends(get_asset_store)):
    """
    Report the active storage backend.

    Only whether credentials are present is reported, never their values.
    """
    return {
        "success": True,
        "backend": store.store_name,
        "cloudName": settings.CLOUDINARY_CLOUD_NAME or None,
        "hasApiKey": bool(settings.CLOUDINARY_API_KEY),
        "hasApiSecret": bool(settings.CLOUDINARY_API_SECRET),
        "cleanup": get_scheduler_status(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
