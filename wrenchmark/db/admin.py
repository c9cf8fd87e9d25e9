"""Supabase admin writes - async version."""

import asyncio
import time
from typing import Any

from ..core.enums import ComponentType
from ..core.errors import RecordInUseError, RecordNotFoundError
from ..core.logging import log_db_query, logger
from . import client as db_client

# Columns that must not be copied when duplicating a row
_SYSTEM_COLUMNS = ("id", "created_at", "updated_at")

STATS_TABLES = [
    "brands",
    "motorcycle_models",
    "model_years",
    "model_configurations",
    "color_options",
    "model_component_assignments",
] + [ctype.table for ctype in ComponentType]


def _rows(result: Any) -> list[dict[str, Any]]:
    if result.data and isinstance(result.data, list):
        return [row for row in result.data if isinstance(row, dict)]
    return []


async def fetch_record(table: str, record_id: str) -> dict[str, Any]:
    """Fetch one row by id; raises RecordNotFoundError when absent."""
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_query():
        return client.table(table).select("*").eq("id", record_id).limit(1).execute()

    result = await asyncio.to_thread(_do_query)
    log_db_query("select_by_id", table, (time.time() - start) * 1000)
    rows = _rows(result)
    if not rows:
        raise RecordNotFoundError(table, record_id)
    return rows[0]


async def insert_record(table: str, data: dict[str, Any]) -> dict[str, Any]:
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_insert():
        return client.table(table).insert(data).execute()

    result = await asyncio.to_thread(_do_insert)
    log_db_query("insert", table, (time.time() - start) * 1000)
    rows = _rows(result)
    if not rows:
        raise RuntimeError(f"Insert into {table} returned no row")
    return rows[0]


async def insert_records(
    table: str, rows: list[dict[str, Any]], batch_size: int = 100
) -> list[dict[str, Any]]:
    """Insert rows in batches. Returns the inserted rows."""
    client = db_client.get_supabase_client()
    inserted: list[dict[str, Any]] = []

    for i in range(0, len(rows), batch_size):
        batch = rows[i : i + batch_size]
        start = time.time()

        def _do_insert(batch=batch):
            return client.table(table).insert(batch).execute()

        result = await asyncio.to_thread(_do_insert)
        log_db_query("insert_batch", table, (time.time() - start) * 1000)
        inserted.extend(_rows(result))
        logger.info(f"Inserted {min(i + batch_size, len(rows))}/{len(rows)} rows into {table}")

    return inserted


async def update_record(table: str, record_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Update one row by id; raises RecordNotFoundError when nothing matched."""
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_update():
        return client.table(table).update(data).eq("id", record_id).execute()

    result = await asyncio.to_thread(_do_update)
    log_db_query("update", table, (time.time() - start) * 1000)
    rows = _rows(result)
    if not rows:
        raise RecordNotFoundError(table, record_id)
    return rows[0]


async def delete_record(table: str, record_id: str) -> dict[str, Any]:
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_delete():
        return client.table(table).delete().eq("id", record_id).execute()

    result = await asyncio.to_thread(_do_delete)
    log_db_query("delete", table, (time.time() - start) * 1000)
    rows = _rows(result)
    if not rows:
        raise RecordNotFoundError(table, record_id)
    return rows[0]


async def set_published(table: str, record_id: str, published: bool) -> dict[str, Any]:
    """Publishing clears ``is_draft``; unpublishing sets it."""
    return await update_record(table, record_id, {"is_draft": not published})


async def bulk_update(
    table: str, record_ids: list[str], data: dict[str, Any]
) -> list[dict[str, Any]]:
    """Apply the same change to many rows. Returns the rows that matched."""
    if not record_ids:
        return []
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_update():
        return client.table(table).update(data).in_("id", record_ids).execute()

    result = await asyncio.to_thread(_do_update)
    log_db_query("bulk_update", table, (time.time() - start) * 1000)
    return _rows(result)


async def clone_configuration(
    configuration_id: str,
    name: str | None = None,
    model_year_id: str | None = None,
) -> dict[str, Any]:
    """Copy a trim (optionally into another year). The copy is never the default."""
    source = await fetch_record("model_configurations", configuration_id)
    data = {k: v for k, v in source.items() if k not in _SYSTEM_COLUMNS}
    data["is_default"] = False
    data["name"] = name or f"{source.get('name') or 'Standard'} (Copy)"
    if model_year_id:
        data["model_year_id"] = model_year_id
    return await insert_record("model_configurations", data)


async def component_usage(
    component_type: ComponentType, component_id: str
) -> dict[str, Any]:
    """Configurations and model assignments that reference a component."""
    start = time.time()
    client = db_client.get_supabase_client()

    def _configs():
        return (
            client.table("model_configurations")
            .select("id, name, model_year_id")
            .eq(component_type.id_field, component_id)
            .execute()
        )

    def _assignments():
        return (
            client.table("model_component_assignments")
            .select("id, model_id")
            .eq("component_type", component_type.value)
            .eq("component_id", component_id)
            .execute()
        )

    configs, assignments = await asyncio.gather(
        asyncio.to_thread(_configs), asyncio.to_thread(_assignments)
    )
    log_db_query("usage", component_type.table, (time.time() - start) * 1000)

    config_rows = _rows(configs)
    assignment_rows = _rows(assignments)
    return {
        "component_type": component_type.value,
        "component_id": component_id,
        "configurations": [r.get("id") for r in config_rows],
        "models": sorted({str(r.get("model_id")) for r in assignment_rows}),
        "usage_count": len(config_rows) + len(assignment_rows),
        "can_delete": not config_rows and not assignment_rows,
    }


async def delete_component(
    component_type: ComponentType, component_id: str
) -> dict[str, Any]:
    """Delete a component row unless something still references it."""
    usage = await component_usage(component_type, component_id)
    if not usage["can_delete"]:
        raise RecordInUseError(component_type.table, component_id, usage)
    return await delete_record(component_type.table, component_id)


async def assign_component(
    model_id: str,
    component_type: ComponentType,
    component_id: str,
    effective_from_year: int | None = None,
    effective_to_year: int | None = None,
    notes: str | None = None,
) -> dict[str, Any]:
    """Set the model-wide default component of a type, replacing any existing one."""
    # Both rows must exist before the old assignment is dropped
    await fetch_record("motorcycle_models", model_id)
    await fetch_record(component_type.table, component_id)
    await unassign_component(model_id, component_type)

    data: dict[str, Any] = {
        "model_id": model_id,
        "component_type": component_type.value,
        "component_id": component_id,
        "assignment_type": "standard",
        "is_default": True,
    }
    if effective_from_year is not None:
        data["effective_from_year"] = effective_from_year
    if effective_to_year is not None:
        data["effective_to_year"] = effective_to_year
    if notes:
        data["notes"] = notes
    return await insert_record("model_component_assignments", data)


async def unassign_component(model_id: str, component_type: ComponentType) -> int:
    """Remove a model's assignments of one type. Returns the number removed."""
    start = time.time()
    client = db_client.get_supabase_client()

    def _do_delete():
        return (
            client.table("model_component_assignments")
            .delete()
            .eq("model_id", model_id)
            .eq("component_type", component_type.value)
            .execute()
        )

    result = await asyncio.to_thread(_do_delete)
    log_db_query("delete", "model_component_assignments", (time.time() - start) * 1000)
    return len(_rows(result))


async def table_counts() -> dict[str, int]:
    """Row counts for the admin dashboard."""
    client = db_client.get_supabase_client()

    def _count(table: str):
        # count covers the whole table, data stops at the limit
        return client.table(table).select("id", count="exact").limit(1).execute()

    start = time.time()
    results = await asyncio.gather(
        *(asyncio.to_thread(_count, table) for table in STATS_TABLES)
    )
    log_db_query("count", "catalog", (time.time() - start) * 1000)
    return {table: result.count or 0 for table, result in zip(STATS_TABLES, results)}
