"""Tests for the Supabase data-access layer against the in-memory client."""

import asyncio

import pytest
from conftest import engine_row

from wrenchmark.core.enums import ComponentType
from wrenchmark.core.errors import RecordInUseError, RecordNotFoundError
from wrenchmark.db import admin as admin_db
from wrenchmark.db import catalog as catalog_db


class TestCatalogReads:
    def test_fetch_models_hides_drafts(self, fake_db):
        rows = asyncio.run(catalog_db.fetch_models())
        assert "Z900" not in [r["name"] for r in rows]
        assert len(rows) == 3

    def test_fetch_models_with_drafts(self, fake_db):
        rows = asyncio.run(catalog_db.fetch_models(include_drafts=True))
        assert len(rows) == 4

    def test_fetch_models_search_and_brand(self, fake_db):
        rows = asyncio.run(catalog_db.fetch_models(search="ninja", brand_id="brand-kawasaki"))
        assert [r["slug"] for r in rows] == ["kawasaki-ninja-650"]

    def test_fetch_model_by_slug(self, fake_db):
        row = asyncio.run(catalog_db.fetch_model_by_slug("yamaha-mt-07"))
        assert row["id"] == "mdl-mt07"
        assert asyncio.run(catalog_db.fetch_model_by_slug("kawasaki-z900")) is None
        assert asyncio.run(catalog_db.fetch_model_by_slug("missing")) is None

    def test_fetch_components_by_ids(self, fake_db):
        rows = asyncio.run(catalog_db.fetch_components(ComponentType.ENGINE, ["eng-689"]))
        assert [r["id"] for r in rows] == ["eng-689"]
        assert asyncio.run(catalog_db.fetch_components(ComponentType.ENGINE, [])) == []

    def test_fetch_assigned_components_groups_by_type(self, fake_db):
        assignments = [
            {"model_id": "m", "component_type": "engine", "component_id": "eng-649"},
            {"model_id": "m", "component_type": "brake_systems", "component_id": "brk-1"},
        ]
        grouped = asyncio.run(catalog_db.fetch_assigned_components(assignments))
        assert [r["id"] for r in grouped[ComponentType.ENGINE]] == ["eng-649"]
        assert [r["id"] for r in grouped[ComponentType.BRAKE_SYSTEM]] == ["brk-1"]

    def test_query_failure_propagates(self, fake_db):
        fake_db.failing_tables.add("brands")
        with pytest.raises(RuntimeError):
            asyncio.run(catalog_db.fetch_brands())


class TestAdminWrites:
    def test_insert_and_update(self, fake_db):
        row = asyncio.run(admin_db.insert_record("brands", {"name": "KTM", "slug": "ktm"}))
        assert row["id"]
        updated = asyncio.run(admin_db.update_record("brands", row["id"], {"country": "Austria"}))
        assert updated["country"] == "Austria"

    def test_update_missing_raises(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(admin_db.update_record("brands", "nope", {"name": "X"}))

    def test_delete_missing_raises(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(admin_db.delete_record("brands", "nope"))

    def test_publish_toggles_draft_flag(self, fake_db):
        row = asyncio.run(admin_db.set_published("motorcycle_models", "mdl-draft", True))
        assert row["is_draft"] is False
        row = asyncio.run(admin_db.set_published("motorcycle_models", "mdl-draft", False))
        assert row["is_draft"] is True

    def test_bulk_update(self, fake_db):
        rows = asyncio.run(
            admin_db.bulk_update("motorcycle_models", ["mdl-ninja", "mdl-mt07"], {"difficulty_level": 2})
        )
        assert len(rows) == 2
        assert asyncio.run(admin_db.bulk_update("motorcycle_models", [], {"x": 1})) == []

    def test_insert_records_batches(self, fake_db):
        rows = [{"name": f"Brand {i}", "slug": f"brand-{i}"} for i in range(5)]
        inserted = asyncio.run(admin_db.insert_records("brands", rows, batch_size=2))
        assert len(inserted) == 5
        assert fake_db.calls.count(("brands", "insert")) == 3


class TestCloneConfiguration:
    def test_clone_is_never_default(self, fake_db):
        clone = asyncio.run(admin_db.clone_configuration("cfg-base"))
        assert clone["id"] != "cfg-base"
        assert clone["is_default"] is False
        assert clone["name"] == "Base (Copy)"
        assert clone["model_year_id"] == "yr-2024"

    def test_clone_into_other_year(self, fake_db):
        clone = asyncio.run(admin_db.clone_configuration("cfg-abs", "ABS 2025", "yr-2025"))
        assert clone["name"] == "ABS 2025"
        assert clone["model_year_id"] == "yr-2025"
        assert clone["engine_id"] == "eng-649"

    def test_clone_missing(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(admin_db.clone_configuration("nope"))


class TestComponentUsage:
    def test_used_component(self, fake_db):
        usage = asyncio.run(admin_db.component_usage(ComponentType.ENGINE, "eng-649"))
        assert usage["configurations"] == ["cfg-abs"]
        assert usage["can_delete"] is False

    def test_unused_component_can_be_deleted(self, fake_db):
        usage = asyncio.run(admin_db.component_usage(ComponentType.ENGINE, "eng-unused"))
        assert usage["usage_count"] == 0
        assert usage["can_delete"] is True
        asyncio.run(admin_db.delete_component(ComponentType.ENGINE, "eng-unused"))
        assert "eng-unused" not in [r["id"] for r in fake_db.tables["engines"]]

    def test_delete_used_component_refused(self, fake_db):
        with pytest.raises(RecordInUseError) as exc:
            asyncio.run(admin_db.delete_component(ComponentType.ENGINE, "eng-689"))
        assert exc.value.usage["configurations"] == ["cfg-mt07"]

    def test_assignment_counts_as_usage(self, fake_db):
        asyncio.run(admin_db.assign_component("mdl-empty", ComponentType.ENGINE, "eng-unused"))
        usage = asyncio.run(admin_db.component_usage(ComponentType.ENGINE, "eng-unused"))
        assert usage["models"] == ["mdl-empty"]
        assert usage["can_delete"] is False


class TestModelAssignments:
    def test_assign_replaces_existing(self, fake_db):
        asyncio.run(admin_db.assign_component("mdl-empty", ComponentType.ENGINE, "eng-649"))
        asyncio.run(
            admin_db.assign_component(
                "mdl-empty", ComponentType.ENGINE, "eng-689", effective_from_year=2024
            )
        )
        rows = fake_db.tables["model_component_assignments"]
        assert len(rows) == 1
        assert rows[0]["component_id"] == "eng-689"
        assert rows[0]["effective_from_year"] == 2024

    def test_assign_unknown_component(self, fake_db):
        with pytest.raises(RecordNotFoundError):
            asyncio.run(admin_db.assign_component("mdl-empty", ComponentType.FRAME, "nope"))

    def test_unassign(self, fake_db):
        asyncio.run(admin_db.assign_component("mdl-empty", ComponentType.FRAME, "frm-1"))
        assert asyncio.run(admin_db.unassign_component("mdl-empty", ComponentType.FRAME)) == 1
        assert asyncio.run(admin_db.unassign_component("mdl-empty", ComponentType.FRAME)) == 0


class TestTableCounts:
    def test_counts(self, fake_db):
        counts = asyncio.run(admin_db.table_counts())
        assert counts["motorcycle_models"] == 4
        assert counts["engines"] == 3
        assert counts["wheels"] == 0

    def test_counts_are_not_capped_by_returned_rows(self, fake_db):
        fake_db.tables["engines"].extend(
            engine_row(id=f"eng-bulk-{i}", name=f"Bulk {i}") for i in range(1200)
        )
        counts = asyncio.run(admin_db.table_counts())
        assert counts["engines"] == 1203
