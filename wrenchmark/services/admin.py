"""Admin service - validated writes against the catalog tables.

Every write validates its payload first (FormValidationError before any
network call) and drops the catalog cache afterwards.
"""

from enum import Enum
from typing import Any

from ..core.config import get_settings
from ..core.enums import ComponentType
from ..core.logging import logger
from ..db import admin as admin_db
from ..db import catalog as catalog_db
from .catalog import CatalogService
from .completeness import completion_stats, summarize_catalog
from .importer import import_models, parse_import_csv
from .validation import validate_component, validate_model, validate_record


class AdminResource(str, Enum):
    """Editable catalog tables, by URL name."""

    BRANDS = "brands"
    MODELS = "models"
    MODEL_YEARS = "model-years"
    CONFIGURATIONS = "configurations"
    COLORS = "colors"

    @property
    def table(self) -> str:
        return _RESOURCE_TABLES[self]


_RESOURCE_TABLES = {
    AdminResource.BRANDS: "brands",
    AdminResource.MODELS: "motorcycle_models",
    AdminResource.MODEL_YEARS: "model_years",
    AdminResource.CONFIGURATIONS: "model_configurations",
    AdminResource.COLORS: "color_options",
}

# Tables whose rows carry an is_draft flag
PUBLISHABLE = {AdminResource.MODELS, AdminResource.CONFIGURATIONS}


def _validate(resource: AdminResource, data: dict[str, Any], partial: bool) -> dict[str, Any]:
    if resource == AdminResource.MODELS:
        return validate_model(data, partial=partial)
    return validate_record(resource.table, data, partial=partial)


class AdminService:
    def __init__(self, catalog: CatalogService) -> None:
        self._catalog = catalog

    def _changed(self, action: str, table: str, key: Any) -> None:
        logger.info(f"ADMIN {action} table={table} id={key}")
        self._catalog.invalidate()

    # -------------------------------------------------------------------------
    # Generic CRUD
    # -------------------------------------------------------------------------

    async def get(self, resource: AdminResource, record_id: str) -> dict[str, Any]:
        return await admin_db.fetch_record(resource.table, record_id)

    async def create(self, resource: AdminResource, data: dict[str, Any]) -> dict[str, Any]:
        cleaned = _validate(resource, data, partial=False)
        row = await admin_db.insert_record(resource.table, cleaned)
        self._changed("create", resource.table, row.get("id"))
        return row

    async def update(
        self, resource: AdminResource, record_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        cleaned = _validate(resource, data, partial=True)
        row = await admin_db.update_record(resource.table, record_id, cleaned)
        self._changed("update", resource.table, record_id)
        return row

    async def delete(self, resource: AdminResource, record_id: str) -> dict[str, Any]:
        row = await admin_db.delete_record(resource.table, record_id)
        self._changed("delete", resource.table, record_id)
        return row

    async def set_published(
        self, resource: AdminResource, record_id: str, published: bool
    ) -> dict[str, Any]:
        if resource not in PUBLISHABLE:
            raise ValueError(f"{resource.value} cannot be published")
        row = await admin_db.set_published(resource.table, record_id, published)
        self._changed("publish" if published else "unpublish", resource.table, record_id)
        return row

    async def bulk_update_models(
        self, model_ids: list[str], data: dict[str, Any]
    ) -> list[dict[str, Any]]:
        cleaned = validate_model(data, partial=True)
        rows = await admin_db.bulk_update("motorcycle_models", model_ids, cleaned)
        self._changed("bulk_update", "motorcycle_models", len(rows))
        return rows

    # -------------------------------------------------------------------------
    # Configurations
    # -------------------------------------------------------------------------

    async def clone_configuration(
        self,
        configuration_id: str,
        name: str | None = None,
        model_year_id: str | None = None,
    ) -> dict[str, Any]:
        row = await admin_db.clone_configuration(configuration_id, name, model_year_id)
        self._changed("clone", "model_configurations", row.get("id"))
        return row

    # -------------------------------------------------------------------------
    # Components
    # -------------------------------------------------------------------------

    async def create_component(
        self, component_type: ComponentType, data: dict[str, Any]
    ) -> dict[str, Any]:
        cleaned = validate_component(component_type, data)
        row = await admin_db.insert_record(component_type.table, cleaned)
        self._changed("create", component_type.table, row.get("id"))
        return row

    async def update_component(
        self, component_type: ComponentType, component_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        cleaned = validate_component(component_type, data, partial=True)
        row = await admin_db.update_record(component_type.table, component_id, cleaned)
        self._changed("update", component_type.table, component_id)
        return row

    async def delete_component(
        self, component_type: ComponentType, component_id: str
    ) -> dict[str, Any]:
        row = await admin_db.delete_component(component_type, component_id)
        self._changed("delete", component_type.table, component_id)
        return row

    async def component_usage(
        self, component_type: ComponentType, component_id: str
    ) -> dict[str, Any]:
        await admin_db.fetch_record(component_type.table, component_id)
        return await admin_db.component_usage(component_type, component_id)

    async def assign_component(
        self,
        model_id: str,
        component_type: ComponentType,
        component_id: str,
        effective_from_year: int | None = None,
        effective_to_year: int | None = None,
        notes: str | None = None,
    ) -> dict[str, Any]:
        row = await admin_db.assign_component(
            model_id,
            component_type,
            component_id,
            effective_from_year=effective_from_year,
            effective_to_year=effective_to_year,
            notes=notes,
        )
        self._changed("assign", "model_component_assignments", model_id)
        return row

    async def unassign_component(self, model_id: str, component_type: ComponentType) -> int:
        removed = await admin_db.unassign_component(model_id, component_type)
        self._changed("unassign", "model_component_assignments", model_id)
        return removed

    # -------------------------------------------------------------------------
    # Import and stats
    # -------------------------------------------------------------------------

    async def import_csv(self, csv_text: str, dry_run: bool = False) -> dict[str, Any]:
        """Parse CSV rows against known brands; insert the valid ones unless dry_run."""
        brands = await catalog_db.fetch_brands()
        rows = parse_import_csv(csv_text, brands)
        if dry_run:
            valid = sum(1 for r in rows if r.status != "error")
            return {
                "total": len(rows),
                "valid": valid,
                "imported": 0,
                "failed": len(rows) - valid,
                "rows": [r.to_dict() for r in rows],
            }
        result = await import_models(rows, batch_size=get_settings().import_batch_size)
        if result["imported"]:
            self._changed("import", "motorcycle_models", result["imported"])
        return result

    async def stats(self) -> dict[str, Any]:
        """Table counts plus completion figures over every model, drafts included."""
        counts = await admin_db.table_counts()
        motorcycles = await self._catalog.load_catalog(include_drafts=True)
        return {
            "counts": counts,
            "published_models": sum(1 for m in motorcycles if not m.is_draft),
            "draft_models": sum(1 for m in motorcycles if m.is_draft),
            "completion": completion_stats(motorcycles),
            "data_quality": summarize_catalog(motorcycles),
        }
