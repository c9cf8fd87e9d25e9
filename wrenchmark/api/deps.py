"""FastAPI dependency injection for services."""

import time
from typing import Annotated, Any

from fastapi import Depends, Header, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..core.config import Settings, get_settings
from ..core.logging import log_db_query, log_error, logger
from ..db import catalog as catalog_db
from ..services.admin import AdminService
from ..services.cache import CatalogCache
from ..services.catalog import CatalogService

# Rate limiter (shared by the app and the routers)
limiter = Limiter(key_func=get_remote_address)


def listing_rate_limit() -> str:
    return get_settings().rate_limit_listing


# -----------------------------------------------------------------------------
# Catalog Service
# -----------------------------------------------------------------------------

_catalog_service: CatalogService | None = None


def get_catalog_service() -> CatalogService:
    """Get or create the catalog service singleton."""
    global _catalog_service
    if _catalog_service is None:
        settings = get_settings()
        cache = CatalogCache(
            maxsize=settings.cache_maxsize, ttl=settings.cache_ttl_seconds
        )
        _catalog_service = CatalogService(cache=cache)
    return _catalog_service


def get_admin_service() -> AdminService:
    return AdminService(get_catalog_service())


# -----------------------------------------------------------------------------
# Admin Authentication
# -----------------------------------------------------------------------------


async def verify_admin_key(
    request: Request,
    x_admin_key: Annotated[str | None, Header()] = None,
    settings: Settings = Depends(get_settings),
) -> bool:
    """Verify admin API key for protected endpoints."""
    if not settings.api_admin_key:
        logger.warning("API_ADMIN_KEY not set - admin endpoints unprotected")
        raise HTTPException(
            status_code=503,
            detail="Admin endpoints not configured. Set API_ADMIN_KEY environment variable.",
        )

    if not x_admin_key:
        raise HTTPException(
            status_code=401,
            detail="Missing X-Admin-Key header",
        )

    if x_admin_key != settings.api_admin_key:
        logger.warning(f"Invalid admin key attempt from {request.client}")
        raise HTTPException(
            status_code=403,
            detail="Invalid admin key",
        )

    return True


# -----------------------------------------------------------------------------
# Health Check Helpers
# -----------------------------------------------------------------------------


async def check_supabase_health() -> dict[str, Any]:
    """Check Supabase connectivity."""
    start = time.time()
    try:
        await catalog_db.ping()
        duration_ms = (time.time() - start) * 1000
        log_db_query("health_check", "brands", duration_ms)
        return {
            "status": "healthy",
            "latency_ms": round(duration_ms, 2),
        }
    except Exception as e:
        duration_ms = (time.time() - start) * 1000
        log_error("Supabase health check failed", e)
        return {
            "status": "unhealthy",
            "error": str(e),
            "latency_ms": round(duration_ms, 2),
        }
