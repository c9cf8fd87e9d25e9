"""Public catalog routes."""

from dataclasses import asdict
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from ..core.enums import ComponentType
from ..core.errors import RecordNotFoundError
from ..core.logging import log_error
from ..models.motorcycle import Motorcycle
from ..services.catalog import CatalogService
from ..services.completeness import assess_completeness, score_data_quality, summarize_catalog
from ..services.filters import MotorcycleFilters
from ..services.metrics import metrics_for_motorcycle
from .deps import get_catalog_service, limiter, listing_rate_limit

router = APIRouter()

Catalog = Annotated[CatalogService, Depends(get_catalog_service)]


def motorcycle_summary(motorcycle: Motorcycle) -> dict[str, Any]:
    """Listing shape: everything except the component data bag."""
    return motorcycle.model_dump(mode="json", by_alias=True, exclude={"component_data"})


def motorcycle_detail(motorcycle: Motorcycle) -> dict[str, Any]:
    return motorcycle.model_dump(mode="json", by_alias=True)


def _component_type_or_404(component_type: str) -> ComponentType:
    ctype = ComponentType.from_string(component_type)
    if ctype is None:
        raise HTTPException(status_code=404, detail=f"Unknown component type: {component_type}")
    return ctype


async def _motorcycle_or_404(catalog: CatalogService, slug: str) -> Motorcycle:
    try:
        return await catalog.get_motorcycle(slug)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Motorcycle not found")
    except Exception as e:
        log_error("Failed to get motorcycle", e, slug=slug)
        raise HTTPException(status_code=500, detail="Failed to retrieve motorcycle")


# ---------------------------------------------------------------------------
# Motorcycles
# ---------------------------------------------------------------------------


@router.get("/motorcycles")
@limiter.limit(listing_rate_limit)
async def list_motorcycles(request: Request, catalog: Catalog):
    """List published motorcycles.

    Filters come from query parameters: ``search``, ``make``, repeated
    ``category``, ``yearMin``/``yearMax``, ``engineMin``/``engineMax``,
    ``weightMin``/``weightMax``, ``seatMin``/``seatMax``, ``difficulty``
    and ``abs``.
    """
    filters = MotorcycleFilters.from_query(request.query_params)
    try:
        motorcycles = await catalog.list_motorcycles(filters)
    except Exception as e:
        log_error("Failed to list motorcycles", e, filters=filters.to_query())
        raise HTTPException(status_code=500, detail="Failed to retrieve motorcycles")

    return {
        "motorcycles": [motorcycle_summary(m) for m in motorcycles],
        "count": len(motorcycles),
        "filters": filters.to_query(),
        "active_filters": filters.count_active(),
        "data_quality": summarize_catalog(motorcycles),
    }


@router.get("/motorcycles/{slug}")
async def get_motorcycle(slug: str, catalog: Catalog):
    motorcycle = await _motorcycle_or_404(catalog, slug)
    return motorcycle_detail(motorcycle)


@router.get("/motorcycles/{slug}/completeness")
async def get_completeness(slug: str, catalog: Catalog):
    motorcycle = await _motorcycle_or_404(catalog, slug)
    completeness = assess_completeness(motorcycle)
    return {
        **asdict(completeness),
        "status": completeness.status,
        "data_quality": asdict(score_data_quality(motorcycle)),
    }


@router.get("/motorcycles/{slug}/metrics")
async def get_metrics(slug: str, catalog: Catalog):
    motorcycle = await _motorcycle_or_404(catalog, slug)
    return metrics_for_motorcycle(motorcycle).to_dict()


@router.get("/motorcycles/{slug}/navigation")
async def get_navigation(
    slug: str,
    catalog: Catalog,
    year: Optional[int] = None,
    configuration: Optional[str] = None,
):
    """Selected year and trim for a model; omitted levels use their defaults."""
    try:
        state = await catalog.get_navigation(slug, year=year, configuration_id=configuration)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Motorcycle not found")
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        log_error("Failed to resolve navigation", e, slug=slug)
        raise HTTPException(status_code=500, detail="Failed to resolve navigation")
    return state.to_dict()


# ---------------------------------------------------------------------------
# Brands
# ---------------------------------------------------------------------------


@router.get("/brands")
@limiter.limit(listing_rate_limit)
async def list_brands(request: Request, catalog: Catalog):
    try:
        brands = await catalog.list_brands()
    except Exception as e:
        log_error("Failed to list brands", e)
        raise HTTPException(status_code=500, detail="Failed to retrieve brands")
    return {"brands": [b.model_dump(mode="json") for b in brands]}


@router.get("/brands/{slug}")
async def get_brand(slug: str, catalog: Catalog):
    try:
        brand, motorcycles = await catalog.get_brand(slug)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Brand not found")
    except Exception as e:
        log_error("Failed to get brand", e, slug=slug)
        raise HTTPException(status_code=500, detail="Failed to retrieve brand")
    return {
        "brand": brand.model_dump(mode="json"),
        "motorcycles": [motorcycle_summary(m) for m in motorcycles],
    }


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


@router.get("/components/{component_type}")
@limiter.limit(listing_rate_limit)
async def list_components(request: Request, component_type: str, catalog: Catalog):
    ctype = _component_type_or_404(component_type)
    try:
        components = await catalog.list_components(ctype)
    except Exception as e:
        log_error("Failed to list components", e, type=ctype.value)
        raise HTTPException(status_code=500, detail="Failed to retrieve components")
    return {
        "component_type": ctype.value,
        "components": [c.model_dump(mode="json") for c in components],
    }
