"""Shared fixtures: environment, an in-memory Supabase stand-in and sample rows."""

import copy
import os
import uuid
from typing import Any, Callable

import pytest

# Settings are validated at import time, so these must exist first
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ["API_ADMIN_KEY"] = "test-admin-key"
os.environ["RATE_LIMIT_LISTING"] = "1000/minute"

from wrenchmark.api import deps  # noqa: E402
from wrenchmark.db import client as db_client  # noqa: E402

ADMIN_HEADERS = {"X-Admin-Key": "test-admin-key"}


# ---------------------------------------------------------------------------
# In-memory Supabase client
# ---------------------------------------------------------------------------


class FakeResult:
    def __init__(self, data: list[dict[str, Any]], count: int | None = None):
        self.data = data
        self.count = count


class FakeQuery:
    """Implements the subset of the postgrest query builder the app uses.

    Nested selects are not parsed: rows are returned as stored, so tests seed
    ``motorcycle_models`` rows that already carry their nested years.
    """

    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._order: tuple[str, bool] | None = None
        self._limit: int | None = None
        self._count: str | None = None

    def select(self, *_args: Any, count: str | None = None, **_kwargs: Any) -> "FakeQuery":
        self._op = "select"
        self._count = count
        return self

    def insert(self, data: Any) -> "FakeQuery":
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data: dict[str, Any]) -> "FakeQuery":
        self._op = "update"
        self._payload = data
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: list[Any]) -> "FakeQuery":
        wanted = set(values)
        self._filters.append(lambda row: row.get(column) in wanted)
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        needle = pattern.strip("%").lower()
        self._filters.append(lambda row: needle in str(row.get(column) or "").lower())
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeQuery":
        self._limit = count
        return self

    def execute(self) -> FakeResult:
        self._db.calls.append((self._table, self._op))
        if self._table in self._db.failing_tables:
            raise RuntimeError(f"connection to {self._table} failed")

        rows = self._db.tables.setdefault(self._table, [])

        if self._op == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for item in items:
                row = {"id": str(uuid.uuid4()), **copy.deepcopy(item)}
                rows.append(row)
                inserted.append(copy.deepcopy(row))
            return FakeResult(inserted)

        matched = [row for row in rows if all(f(row) for f in self._filters)]

        if self._op == "update":
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return FakeResult(copy.deepcopy(matched))

        if self._op == "delete":
            self._db.tables[self._table] = [r for r in rows if r not in matched]
            return FakeResult(copy.deepcopy(matched))

        if self._order is not None:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: str(r.get(column) or ""), reverse=desc)
        total = len(matched) if self._count == "exact" else None
        if self._limit is not None:
            matched = matched[: self._limit]
        return FakeResult(copy.deepcopy(matched), count=total)


class FakeSupabase:
    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None):
        self.tables: dict[str, list[dict[str, Any]]] = copy.deepcopy(tables or {})
        self.calls: list[tuple[str, str]] = []
        self.failing_tables: set[str] = set()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


# ---------------------------------------------------------------------------
# Sample rows
# ---------------------------------------------------------------------------


def engine_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": "eng-649",
        "name": "649cc Parallel Twin",
        "displacement_cc": 649,
        "power_hp": 67,
        "torque_nm": 64,
        "cylinder_count": 2,
        "engine_type": "Parallel Twin",
        "cooling": "Liquid",
        "is_draft": False,
    }
    row.update(overrides)
    return row


def brake_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": "brk-1",
        "type": "Dual disc",
        "front_type": "Dual 300mm petal discs",
        "has_abs": True,
        "has_traction_control": False,
        "is_draft": False,
    }
    row.update(overrides)
    return row


def configuration_row(config_id: str, year_id: str, **overrides: Any) -> dict[str, Any]:
    row = {
        "id": config_id,
        "model_year_id": year_id,
        "name": "Base",
        "is_default": False,
        "engine_id": None,
        "brake_system_id": None,
        "frame_id": None,
        "suspension_id": None,
        "wheel_id": None,
        "engine": None,
        "brake_system": None,
        "frame": None,
        "suspension": None,
        "wheel": None,
    }
    row.update(overrides)
    return row


def year_row(year_id: str, model_id: str, year: int, configurations: list, **overrides: Any):
    row = {
        "id": year_id,
        "motorcycle_id": model_id,
        "year": year,
        "configurations": configurations,
        "color_options": [],
    }
    row.update(overrides)
    return row


def model_row(model_id: str = "mdl-ninja", model_years: list | None = None, **overrides: Any):
    row = {
        "id": model_id,
        "name": "Ninja 650",
        "slug": "kawasaki-ninja-650",
        "brand_id": "brand-kawasaki",
        "type": "Sport",
        "is_draft": False,
        "production_start_year": 2017,
        "engine_size": None,
        "horsepower": None,
        "weight_kg": None,
        "seat_height_mm": None,
        "has_abs": None,
        "brand": {"id": "brand-kawasaki", "name": "Kawasaki", "slug": "kawasaki"},
        "model_years": model_years if model_years is not None else [],
    }
    row.update(overrides)
    return row


def ninja_row(**overrides: Any) -> dict[str, Any]:
    """Ninja 650, 2024: default "Base" trim without engine, "ABS" trim with one."""
    base = configuration_row("cfg-base", "yr-2024", name="Base", is_default=True)
    abs_trim = configuration_row(
        "cfg-abs",
        "yr-2024",
        name="ABS",
        engine_id="eng-649",
        engine=engine_row(),
        brake_system_id="brk-1",
        brake_system=brake_row(),
        seat_height_mm=790,
        weight_kg=193,
    )
    years = [year_row("yr-2024", "mdl-ninja", 2024, [base, abs_trim])]
    return model_row("mdl-ninja", years, **overrides)


def catalog_tables() -> dict[str, list[dict[str, Any]]]:
    """A small catalog: a resolved Ninja, an engine-linked MT-07, a draft and a placeholder."""
    mt07_trim = configuration_row(
        "cfg-mt07",
        "yr-mt07-2023",
        name="Standard",
        is_default=True,
        engine_id="eng-689",
        engine=engine_row(id="eng-689", name="CP2", displacement_cc=689, power_hp=73),
        seat_height_mm=805,
        weight_kg=184,
    )
    mt07 = model_row(
        "mdl-mt07",
        [year_row("yr-mt07-2023", "mdl-mt07", 2023, [mt07_trim])],
        name="MT-07",
        slug="yamaha-mt-07",
        brand_id="brand-yamaha",
        type="Naked",
        brand={"id": "brand-yamaha", "name": "Yamaha", "slug": "yamaha"},
    )
    ninja = ninja_row(engine_size=649, horsepower=67)
    draft = model_row(
        "mdl-draft",
        [],
        name="Z900",
        slug="kawasaki-z900",
        is_draft=True,
        engine_size=948,
    )
    placeholder = model_row(
        "mdl-empty",
        [],
        name="Eliminator",
        slug="kawasaki-eliminator",
        type="Cruiser",
    )
    return {
        "brands": [
            {"id": "brand-kawasaki", "name": "Kawasaki", "slug": "kawasaki", "country": "Japan"},
            {"id": "brand-yamaha", "name": "Yamaha", "slug": "yamaha", "country": "Japan"},
        ],
        "motorcycle_models": [ninja, mt07, draft, placeholder],
        "model_configurations": [
            configuration_row("cfg-base", "yr-2024", name="Base", is_default=True),
            configuration_row("cfg-abs", "yr-2024", name="ABS", engine_id="eng-649"),
            configuration_row("cfg-mt07", "yr-mt07-2023", engine_id="eng-689", is_default=True),
        ],
        "engines": [
            engine_row(),
            engine_row(id="eng-689", name="CP2", displacement_cc=689, power_hp=73),
            engine_row(id="eng-unused", name="Spare", displacement_cc=399, power_hp=45),
        ],
        "brake_systems": [brake_row()],
        "frames": [
            {"id": "frm-1", "type": "Trellis", "material": "Steel", "wheelbase_mm": 1410,
             "is_draft": False},
        ],
        "suspensions": [],
        "wheels": [],
        "model_years": [],
        "color_options": [],
        "model_component_assignments": [],
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_db(monkeypatch) -> FakeSupabase:
    """Install an in-memory Supabase client and a fresh catalog service."""
    fake = FakeSupabase(catalog_tables())
    monkeypatch.setattr(db_client, "_supabase", fake)
    monkeypatch.setattr(deps, "_catalog_service", None)
    return fake
