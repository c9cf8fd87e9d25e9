"""FastAPI application for the Wrenchmark motorcycle catalog API."""

import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from .api.admin import router as admin_router
from .api.deps import check_supabase_health, get_catalog_service, limiter
from .api.routes import router
from .core.config import get_settings, validate_settings
from .core.logging import log_error, log_request, log_response, logger

# Validate settings on startup
try:
    validate_settings()
except ValueError as e:
    logger.error(f"Configuration error: {e}")
    raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - initialize services on startup."""
    logger.info("Starting Wrenchmark Catalog API...")
    get_catalog_service()
    logger.info("Catalog service initialized")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="Wrenchmark Catalog API",
    description="Motorcycle catalog with component-based specifications",
    version="1.0.0",
    lifespan=lifespan,
)

# State for limiter
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    log_error("Rate limit exceeded", client=get_remote_address(request))
    return JSONResponse(
        status_code=429, content={"detail": "Rate limit exceeded. Try again later."}
    )


# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Admin-Key"],
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    log_request(request.method, request.url.path)

    response = await call_next(request)

    duration_ms = (time.time() - start) * 1000
    log_response(request.method, request.url.path, response.status_code, duration_ms)

    return response


# Routes
app.include_router(router, prefix="/api")
app.include_router(admin_router, prefix="/api")


class HealthResponse(BaseModel):
    status: str
    supabase: dict[str, Any] | None = None
    cache_entries: int | None = None


@app.get("/health", response_model=HealthResponse)
async def health_check(detailed: bool = False):
    """
    Health check endpoint.

    - Basic: Returns {"status": "healthy"}
    - Detailed (?detailed=true): Checks Supabase connectivity
    """
    if not detailed:
        return {"status": "healthy"}

    supabase_health = await check_supabase_health()
    overall = "healthy" if supabase_health["status"] == "healthy" else "degraded"

    return {
        "status": overall,
        "supabase": supabase_health,
        "cache_entries": len(get_catalog_service().cache),
    }
