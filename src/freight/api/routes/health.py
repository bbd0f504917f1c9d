"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings
from ...db.supabase import get_supabase_client
from ...services.geocoding.resolver import get_coordinate_resolver

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
async def check_database() -> dict:
    """Check database connection and delivery band table status."""
    supabase = await get_supabase_client()
    if not supabase:
        return {
            "configured": False,
            "message": "Supabase not configured. Set FREIGHT_SUPABASE_URL and FREIGHT_SUPABASE_KEY environment variables.",
        }

    try:
        await supabase.table(settings.bands_table).select("id").limit(1).execute()
        return {
            "configured": True,
            "connected": True,
            "message": f"Database connected. Table '{settings.bands_table}' is reachable.",
        }
    except Exception as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }


@router.get("/health/geocoding", status_code=status.HTTP_200_OK)
def geocoding_status() -> dict:
    """Report coordinate cache occupancy and the lookup providers in use."""
    resolver = get_coordinate_resolver()
    return {
        "cached_postal_codes": len(resolver.cache),
        "cache_ttl_seconds": resolver.cache.ttl_seconds,
        "postal_lookup": settings.viacep_base_url,
        "geocoder": settings.nominatim_base_url,
    }
