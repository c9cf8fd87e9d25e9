"""Supabase catalog reads - async version.

The Supabase client is synchronous, so every query runs in a worker thread
via ``asyncio.to_thread``.
"""

import asyncio
import time
from typing import Any

from ..core.enums import ComponentType
from ..core.logging import log_db_query
from . import client as db_client

# Nested select for a model with its years, trims, joined components and colors
MODEL_SELECT = (
    "*, brand:brands(id, name, slug, country), "
    "model_years(*, "
    "configurations:model_configurations(*, "
    "engine:engine_id(*), "
    "brake_system:brake_system_id(*), "
    "frame:frame_id(*), "
    "suspension:suspension_id(*), "
    "wheel:wheel_id(*)"
    "), "
    "color_options(*)"
    ")"
)


def _rows(result: Any) -> list[dict[str, Any]]:
    if result.data and isinstance(result.data, list):
        return [row for row in result.data if isinstance(row, dict)]
    return []


async def fetch_models(
    search: str | None = None,
    brand_id: str | None = None,
    category: str | None = None,
    include_drafts: bool = False,
) -> list[dict[str, Any]]:
    """Fetch motorcycle models with nested years, trims and components."""
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_query():
        query = client.table("motorcycle_models").select(MODEL_SELECT)
        if not include_drafts:
            query = query.eq("is_draft", False)
        if brand_id:
            query = query.eq("brand_id", brand_id)
        if category:
            query = query.eq("type", category)
        if search:
            query = query.ilike("name", f"%{search}%")
        return query.order("name").execute()

    result = await asyncio.to_thread(_do_query)
    log_db_query("select", "motorcycle_models", (time.time() - start) * 1000)
    return _rows(result)


async def fetch_model_by_slug(
    slug: str, include_drafts: bool = False
) -> dict[str, Any] | None:
    """Fetch one model (nested) by slug, or None."""
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_query():
        query = client.table("motorcycle_models").select(MODEL_SELECT).eq("slug", slug)
        if not include_drafts:
            query = query.eq("is_draft", False)
        return query.limit(1).execute()

    result = await asyncio.to_thread(_do_query)
    log_db_query("select_by_slug", "motorcycle_models", (time.time() - start) * 1000)
    rows = _rows(result)
    return rows[0] if rows else None


async def fetch_model_assignments(model_ids: list[str]) -> list[dict[str, Any]]:
    """Fetch model-level component assignments for a set of models."""
    if not model_ids:
        return []
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_query():
        return (
            client.table("model_component_assignments")
            .select("*")
            .in_("model_id", model_ids)
            .execute()
        )

    result = await asyncio.to_thread(_do_query)
    log_db_query("select", "model_component_assignments", (time.time() - start) * 1000)
    return _rows(result)


async def fetch_components(
    component_type: ComponentType,
    ids: list[str] | None = None,
    include_drafts: bool = True,
) -> list[dict[str, Any]]:
    """Fetch rows from one component table, optionally restricted to ids."""
    if ids is not None and not ids:
        return []
    start = time.time()
    client = db_client.get_supabase_client()
    table = component_type.table

    def _do_query():
        query = client.table(table).select("*")
        if ids is not None:
            query = query.in_("id", ids)
        if not include_drafts:
            query = query.eq("is_draft", False)
        return query.execute()

    result = await asyncio.to_thread(_do_query)
    log_db_query("select", table, (time.time() - start) * 1000)
    return _rows(result)


async def fetch_assigned_components(
    assignments: list[dict[str, Any]],
) -> dict[ComponentType, list[dict[str, Any]]]:
    """Fetch every component row referenced by model assignments, per type."""
    wanted: dict[ComponentType, set[str]] = {}
    for a in assignments:
        ctype = ComponentType.from_string(a.get("component_type"))
        if ctype is not None and a.get("component_id"):
            wanted.setdefault(ctype, set()).add(str(a["component_id"]))

    types = list(wanted)
    results = await asyncio.gather(
        *(fetch_components(ctype, sorted(wanted[ctype])) for ctype in types)
    )
    return dict(zip(types, results))


async def fetch_brands() -> list[dict[str, Any]]:
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_query():
        return client.table("brands").select("*").order("name").execute()

    result = await asyncio.to_thread(_do_query)
    log_db_query("select", "brands", (time.time() - start) * 1000)
    return _rows(result)


async def fetch_brand_by_slug(slug: str) -> dict[str, Any] | None:
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_query():
        return client.table("brands").select("*").eq("slug", slug).limit(1).execute()

    result = await asyncio.to_thread(_do_query)
    log_db_query("select_by_slug", "brands", (time.time() - start) * 1000)
    rows = _rows(result)
    return rows[0] if rows else None


async def ping() -> None:
    """Cheapest possible query, used by the detailed health check."""
    client = db_client.get_supabase_client()

    def _do_query():
        return client.table("brands").select("id").limit(1).execute()

    await asyncio.to_thread(_do_query)
