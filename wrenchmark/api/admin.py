"""Admin routes. Every endpoint requires the X-Admin-Key header."""

from typing import Annotated, Any, Awaitable, Optional, TypeVar

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field

from ..core.enums import ComponentType
from ..core.errors import FormValidationError, RecordInUseError, RecordNotFoundError
from ..core.logging import log_error
from ..services.admin import AdminResource, AdminService
from ..services.catalog import CatalogService
from .deps import get_admin_service, get_catalog_service, verify_admin_key

router = APIRouter(prefix="/admin", dependencies=[Depends(verify_admin_key)])

Admin = Annotated[AdminService, Depends(get_admin_service)]
Payload = Annotated[dict[str, Any], Body()]

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------


class BulkUpdateRequest(BaseModel):
    ids: list[str] = Field(..., min_length=1)
    data: dict[str, Any] = Field(..., min_length=1)


class ImportRequest(BaseModel):
    csv: str = Field(..., min_length=1)
    dry_run: bool = False


class CloneRequest(BaseModel):
    name: Optional[str] = None
    model_year_id: Optional[str] = None


class AssignComponentRequest(BaseModel):
    component_id: str = Field(..., min_length=1)
    effective_from_year: Optional[int] = None
    effective_to_year: Optional[int] = None
    notes: Optional[str] = None


async def _guarded(action: str, operation: Awaitable[T], **context: Any) -> T:
    """Await an admin operation, mapping domain errors onto HTTP errors."""
    try:
        return await operation
    except FormValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors)
    except RecordNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RecordInUseError as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "usage": e.usage})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        log_error(f"Admin {action} failed", e, **context)
        raise HTTPException(status_code=500, detail=f"Failed to {action}")


def _component_type_or_404(component_type: str) -> ComponentType:
    ctype = ComponentType.from_string(component_type)
    if ctype is None:
        raise HTTPException(status_code=404, detail=f"Unknown component type: {component_type}")
    return ctype


# ---------------------------------------------------------------------------
# Models: publishing, bulk edits, import
# ---------------------------------------------------------------------------


@router.post("/models/bulk")
async def bulk_update_models(req: BulkUpdateRequest, admin: Admin):
    rows = await _guarded("bulk update models", admin.bulk_update_models(req.ids, req.data))
    return {"updated": len(rows), "ids": [r.get("id") for r in rows]}


@router.post("/models/import")
async def import_models(req: ImportRequest, admin: Admin):
    """Import models from CSV text. ``dry_run`` returns the parsed preview only."""
    return await _guarded("import models", admin.import_csv(req.csv, dry_run=req.dry_run))


@router.post("/models/{model_id}/publish")
async def publish_model(model_id: str, admin: Admin):
    return await _guarded(
        "publish model", admin.set_published(AdminResource.MODELS, model_id, True), id=model_id
    )


@router.post("/models/{model_id}/unpublish")
async def unpublish_model(model_id: str, admin: Admin):
    return await _guarded(
        "unpublish model",
        admin.set_published(AdminResource.MODELS, model_id, False),
        id=model_id,
    )


@router.put("/models/{model_id}/components/{component_type}")
async def assign_model_component(
    model_id: str, component_type: str, req: AssignComponentRequest, admin: Admin
):
    """Set the model-wide component of a type, replacing any previous one."""
    ctype = _component_type_or_404(component_type)
    return await _guarded(
        "assign component",
        admin.assign_component(
            model_id,
            ctype,
            req.component_id,
            effective_from_year=req.effective_from_year,
            effective_to_year=req.effective_to_year,
            notes=req.notes,
        ),
        model=model_id,
        type=ctype.value,
    )


@router.delete("/models/{model_id}/components/{component_type}")
async def unassign_model_component(model_id: str, component_type: str, admin: Admin):
    ctype = _component_type_or_404(component_type)
    removed = await _guarded(
        "unassign component", admin.unassign_component(model_id, ctype), model=model_id
    )
    return {"removed": removed}


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------


@router.post("/configurations/{configuration_id}/clone")
async def clone_configuration(
    configuration_id: str, admin: Admin, req: Optional[CloneRequest] = None
):
    req = req or CloneRequest()
    return await _guarded(
        "clone configuration",
        admin.clone_configuration(configuration_id, req.name, req.model_year_id),
        id=configuration_id,
    )


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


@router.post("/components/{component_type}", status_code=201)
async def create_component(component_type: str, data: Payload, admin: Admin):
    ctype = _component_type_or_404(component_type)
    return await _guarded(
        "create component", admin.create_component(ctype, data), type=ctype.value
    )


@router.patch("/components/{component_type}/{component_id}")
async def update_component(
    component_type: str, component_id: str, data: Payload, admin: Admin
):
    ctype = _component_type_or_404(component_type)
    return await _guarded(
        "update component",
        admin.update_component(ctype, component_id, data),
        type=ctype.value,
        id=component_id,
    )


@router.delete("/components/{component_type}/{component_id}")
async def delete_component(component_type: str, component_id: str, admin: Admin):
    """Delete a component; refused with 409 while trims or models still use it."""
    ctype = _component_type_or_404(component_type)
    return await _guarded(
        "delete component",
        admin.delete_component(ctype, component_id),
        type=ctype.value,
        id=component_id,
    )


@router.get("/components/{component_type}/{component_id}/usage")
async def component_usage(component_type: str, component_id: str, admin: Admin):
    ctype = _component_type_or_404(component_type)
    return await _guarded(
        "get component usage",
        admin.component_usage(ctype, component_id),
        type=ctype.value,
        id=component_id,
    )


# ---------------------------------------------------------------------------
# Dashboard and cache
# ---------------------------------------------------------------------------


@router.get("/stats")
async def stats(admin: Admin):
    return await _guarded("load stats", admin.stats())


@router.post("/cache/invalidate")
async def invalidate_cache(
    catalog: Annotated[CatalogService, Depends(get_catalog_service)],
):
    return {"removed": catalog.invalidate()}


# ---------------------------------------------------------------------------
# Generic CRUD (brands, models, model-years, configurations, colors)
# ---------------------------------------------------------------------------


@router.post("/{resource}", status_code=201)
async def create_record(resource: AdminResource, data: Payload, admin: Admin):
    return await _guarded(f"create {resource.value}", admin.create(resource, data))


@router.get("/{resource}/{record_id}")
async def get_record(resource: AdminResource, record_id: str, admin: Admin):
    return await _guarded(f"get {resource.value}", admin.get(resource, record_id), id=record_id)


@router.patch("/{resource}/{record_id}")
async def update_record(
    resource: AdminResource, record_id: str, data: Payload, admin: Admin
):
    return await _guarded(
        f"update {resource.value}", admin.update(resource, record_id, data), id=record_id
    )


@router.delete("/{resource}/{record_id}")
async def delete_record(resource: AdminResource, record_id: str, admin: Admin):
    return await _guarded(
        f"delete {resource.value}", admin.delete(resource, record_id), id=record_id
    )
