"""Catalog service - fetches, resolves and caches motorcycle records.

Flow:
1. Fetch nested model rows (years -> trims -> joined components)
2. Fetch model-level component assignments and the rows they point at
3. Resolve each model into a flattened Motorcycle (see resolver)
4. Cache the result per (resource, filters) until an admin write invalidates it
"""

from typing import Any

from ..core.enums import ComponentType
from ..core.errors import RecordNotFoundError
from ..core.logging import logger
from ..db import catalog as catalog_db
from ..models.catalog import Brand, ModelYear
from ..models.motorcycle import Motorcycle
from .cache import CatalogCache
from .filters import MotorcycleFilters
from .navigation import NavigationState
from .resolver import build_component_index, resolve_catalog, resolve_motorcycle_safe

# Resources dropped after any admin write
CATALOG_RESOURCES = ("motorcycles", "motorcycle", "model", "brands", "components")


class CatalogService:
    """Read side of the catalog used by the public API."""

    def __init__(self, cache: CatalogCache | None = None) -> None:
        self._cache = cache or CatalogCache()

    @property
    def cache(self) -> CatalogCache:
        return self._cache

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def _assignments_and_components(
        self, model_ids: list[str]
    ) -> tuple[list[dict[str, Any]], dict]:
        assignments = await catalog_db.fetch_model_assignments(model_ids)
        rows_by_type = await catalog_db.fetch_assigned_components(assignments)
        return assignments, build_component_index(rows_by_type)

    async def load_catalog(self, include_drafts: bool = False) -> list[Motorcycle]:
        """Fetch and resolve every model. Not cached."""
        rows = await catalog_db.fetch_models(include_drafts=include_drafts)
        model_ids = [str(r["id"]) for r in rows if r.get("id")]
        assignments, components = await self._assignments_and_components(model_ids)
        motorcycles = resolve_catalog(rows, assignments, components)
        logger.info(f"Resolved {len(motorcycles)} motorcycles (drafts={include_drafts})")
        return motorcycles

    async def all_motorcycles(self) -> list[Motorcycle]:
        return await self._cache.get_or_load("motorcycles", {}, self.load_catalog)

    async def list_motorcycles(
        self, filters: MotorcycleFilters | None = None
    ) -> list[Motorcycle]:
        """Published motorcycles matching the filters."""
        filters = filters or MotorcycleFilters()

        async def _load() -> list[Motorcycle]:
            return filters.apply(await self.all_motorcycles())

        return await self._cache.get_or_load("motorcycles", filters.cache_key(), _load)

    # -------------------------------------------------------------------------
    # Single model
    # -------------------------------------------------------------------------

    async def get_model_row(self, slug: str) -> dict[str, Any]:
        """Nested model row for a slug; raises RecordNotFoundError."""
        row = await self._cache.get_or_load(
            "model", {"slug": slug}, lambda: catalog_db.fetch_model_by_slug(slug)
        )
        if row is None:
            raise RecordNotFoundError("motorcycle_models", slug)
        return row

    async def get_motorcycle(self, slug: str) -> Motorcycle:
        async def _load() -> Motorcycle:
            row = await self.get_model_row(slug)
            assignments, components = await self._assignments_and_components([str(row["id"])])
            return resolve_motorcycle_safe(row, assignments, components)

        return await self._cache.get_or_load("motorcycle", {"slug": slug}, _load)

    async def get_navigation(
        self,
        slug: str,
        year: int | None = None,
        configuration_id: str | None = None,
    ) -> NavigationState:
        """Year/trim selection for a model, defaults filled in.

        Raises ValueError when the year or configuration does not belong to
        the model.
        """
        row = await self.get_model_row(slug)
        years = [ModelYear.model_validate(y) for y in (row.get("model_years") or [])]
        state = NavigationState(model_id=str(row["id"]), model_years=years)
        if year is not None:
            state.select_year_by_number(year)
        state.resolve()
        if configuration_id:
            state.select_configuration(configuration_id)
        return state

    # -------------------------------------------------------------------------
    # Brands and components
    # -------------------------------------------------------------------------

    async def list_brands(self) -> list[Brand]:
        async def _load() -> list[Brand]:
            return [Brand.model_validate(b) for b in await catalog_db.fetch_brands()]

        return await self._cache.get_or_load("brands", {}, _load)

    async def get_brand(self, slug: str) -> tuple[Brand, list[Motorcycle]]:
        """A brand and its published motorcycles."""
        row = await self._cache.get_or_load(
            "brands", {"slug": slug}, lambda: catalog_db.fetch_brand_by_slug(slug)
        )
        if row is None:
            raise RecordNotFoundError("brands", slug)
        brand = Brand.model_validate(row)
        motorcycles = [m for m in await self.all_motorcycles() if m.brand_id == brand.id]
        return brand, motorcycles

    async def list_components(self, component_type: ComponentType) -> list[Any]:
        async def _load() -> list[Any]:
            rows = await catalog_db.fetch_components(component_type, include_drafts=False)
            index = build_component_index({component_type: rows})
            return sorted(index[component_type].values(), key=_component_sort_key)

        return await self._cache.get_or_load(
            "components", {"type": component_type.value}, _load
        )

    def invalidate(self) -> int:
        """Drop all cached catalog data. Returns entries removed."""
        removed = sum(self._cache.invalidate(r) for r in CATALOG_RESOURCES)
        logger.info(f"Catalog cache invalidated ({removed} entries)")
        return removed


def _component_sort_key(component: Any) -> tuple[str, str]:
    label = getattr(component, "name", None) or getattr(component, "type", None) or ""
    return (str(label).lower(), component.id)
