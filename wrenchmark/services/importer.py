"""CSV import of motorcycle models for the admin console.

Expected columns::

    name,brand_name,type,production_start_year,base_description,engine_size,horsepower,weight_kg

Rows are parsed and checked first (preview); only rows without errors are
inserted.
"""

import io
from dataclasses import asdict, dataclass
from typing import Any, Optional

import pandas as pd

from ..core.enums import MotorcycleCategory
from ..core.logging import log_error, logger
from ..db import admin as admin_db
from ..utils.converters import optional_float, optional_int
from .validation import slugify

IMPORT_COLUMNS = [
    "name",
    "brand_name",
    "type",
    "production_start_year",
    "base_description",
    "engine_size",
    "horsepower",
    "weight_kg",
]

SAMPLE_CSV = """name,brand_name,type,production_start_year,base_description,engine_size,horsepower,weight_kg
Ninja 650,Kawasaki,Sport,2017,Sporty middleweight motorcycle,649,67,193
CBR600RR,Honda,Sport,2003,High-performance supersport,599,118,194
MT-07,Yamaha,Naked,2014,Lightweight naked bike,689,74,182
"""


@dataclass
class ImportRow:
    name: str = ""
    brand_name: str = ""
    type: str = ""
    production_start_year: Optional[int] = None
    base_description: Optional[str] = None
    engine_size: Optional[float] = None
    horsepower: Optional[float] = None
    weight_kg: Optional[float] = None
    brand_id: Optional[str] = None
    status: str = "pending"
    error: Optional[str] = None

    @property
    def slug(self) -> str:
        return slugify(self.brand_name, self.name)

    def fail(self, message: str) -> None:
        self.status = "error"
        self.error = message

    def to_record(self) -> dict[str, Any]:
        """Insert payload for motorcycle_models."""
        category = MotorcycleCategory.from_string(self.type)
        return {
            "name": self.name,
            "brand_id": self.brand_id,
            "type": category.value if category else self.type,
            "production_start_year": self.production_start_year,
            "base_description": self.base_description or None,
            "engine_size": self.engine_size,
            "horsepower": self.horsepower,
            "weight_kg": self.weight_kg,
            "slug": self.slug,
            "is_draft": False,
        }

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["slug"] = self.slug
        return data


def parse_import_csv(csv_text: str, brands: list[dict[str, Any]]) -> list[ImportRow]:
    """Parse CSV text into import rows, flagging invalid ones.

    Brands are matched by name, case-insensitively. A row is an error when
    its brand is unknown or it lacks a name or type.
    """
    if not csv_text or not csv_text.strip():
        return []

    df = pd.read_csv(
        io.StringIO(csv_text.strip()),
        dtype=str,
        keep_default_na=False,
        skipinitialspace=True,
    )
    df = df.fillna("")
    df.columns = [str(c).strip() for c in df.columns]

    brand_ids = {
        str(b.get("name", "")).lower().strip(): b.get("id")
        for b in brands
        if b.get("name")
    }

    rows: list[ImportRow] = []
    for _, raw in df.iterrows():
        values = {k: str(v).strip() for k, v in raw.to_dict().items()}
        row = ImportRow(
            name=values.get("name", ""),
            brand_name=values.get("brand_name", ""),
            type=values.get("type", ""),
            production_start_year=optional_int(values.get("production_start_year")),
            base_description=values.get("base_description") or None,
            engine_size=optional_float(values.get("engine_size")),
            horsepower=optional_float(values.get("horsepower")),
            weight_kg=optional_float(values.get("weight_kg")),
        )

        row.brand_id = brand_ids.get(row.brand_name.lower())
        if row.brand_name and row.brand_id is None:
            row.fail(f'Brand "{row.brand_name}" not found')

        if not row.name:
            row.fail("Name is required")
        elif row.brand_id is None:
            row.fail(row.error or "Valid brand is required")
        elif not row.type:
            row.fail("Type is required")

        rows.append(row)

    return rows


async def import_models(rows: list[ImportRow], batch_size: int = 100) -> dict[str, Any]:
    """Insert every valid row. A failed batch marks its rows as errors."""
    valid = [r for r in rows if r.status != "error"]

    for i in range(0, len(valid), batch_size):
        batch = valid[i : i + batch_size]
        try:
            await admin_db.insert_records(
                "motorcycle_models", [r.to_record() for r in batch], batch_size=batch_size
            )
        except Exception as e:
            log_error("Model import batch failed", e, start=i, size=len(batch))
            for row in batch:
                row.fail("Failed to create motorcycle")
            continue
        for row in batch:
            row.status = "success"

    imported = sum(1 for r in rows if r.status == "success")
    logger.info(f"Imported {imported} of {len(valid)} valid motorcycle rows")
    return {
        "total": len(rows),
        "valid": len(valid),
        "imported": imported,
        "failed": len(rows) - imported,
        "rows": [r.to_dict() for r in rows],
    }
