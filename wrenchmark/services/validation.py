"""Admin form validation, run before any write reaches Supabase."""

import re
from typing import Any

from ..core.enums import ComponentType, MotorcycleCategory
from ..core.errors import FormValidationError
from ..utils.converters import optional_int

HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

MIN_MODEL_YEAR = 1885
MAX_MODEL_YEAR = 2100

# Required fields per table (mirrors NOT NULL columns without defaults)
REQUIRED_FIELDS: dict[str, list[str]] = {
    "brands": ["name", "slug"],
    "motorcycle_models": ["name", "brand_id", "type"],
    "model_years": ["motorcycle_id", "year"],
    "model_configurations": ["model_year_id"],
    "color_options": ["model_year_id", "name"],
    "engines": ["name", "displacement_cc"],
    "brake_systems": ["type"],
    "frames": ["type"],
    "suspensions": [],
    "wheels": [],
}

NON_NEGATIVE_FIELDS = [
    "engine_size",
    "horsepower",
    "torque_nm",
    "top_speed_kph",
    "weight_kg",
    "seat_height_mm",
    "wheelbase_mm",
    "ground_clearance_mm",
    "fuel_capacity_l",
    "displacement_cc",
    "power_hp",
    "msrp_usd",
    "front_travel_mm",
    "rear_travel_mm",
]


def slugify(*parts: str) -> str:
    """Lowercase, hyphen-separated slug from one or more name parts."""
    text = "-".join(p for p in parts if p).lower()
    text = re.sub(r"[^a-z0-9]+", "-", text)
    return text.strip("-")


def _missing(data: dict[str, Any], fields: list[str]) -> list[str]:
    errors = []
    for name in fields:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            errors.append(f"{name} is required")
    return errors


def _check_numbers(data: dict[str, Any]) -> list[str]:
    errors = []
    for name in NON_NEGATIVE_FIELDS:
        value = data.get(name)
        if value is None or value == "":
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            errors.append(f"{name} must be a number")
            continue
        if number < 0:
            errors.append(f"{name} must not be negative")
    return errors


def validate_record(table: str, data: dict[str, Any], partial: bool = False) -> dict[str, Any]:
    """Validate a create (or, with ``partial``, an update) payload for a table.

    Returns the cleaned payload. Raises FormValidationError listing every
    problem found.
    """
    errors: list[str] = []
    cleaned = {k: v for k, v in data.items() if k not in ("id", "created_at", "updated_at")}

    if not partial:
        errors.extend(_missing(cleaned, REQUIRED_FIELDS.get(table, [])))
    else:
        # Updates may omit fields but may not blank required ones
        present = [f for f in REQUIRED_FIELDS.get(table, []) if f in cleaned]
        errors.extend(_missing(cleaned, present))

    errors.extend(_check_numbers(cleaned))

    if "slug" in cleaned and cleaned["slug"] and not SLUG_RE.match(str(cleaned["slug"])):
        errors.append("slug must be lowercase letters, digits and hyphens")

    if "year" in cleaned and cleaned["year"] is not None:
        try:
            year = int(cleaned["year"])
            if not MIN_MODEL_YEAR <= year <= MAX_MODEL_YEAR:
                errors.append(f"year must be between {MIN_MODEL_YEAR} and {MAX_MODEL_YEAR}")
        except (TypeError, ValueError):
            errors.append("year must be an integer")

    years = {}
    for name in ("production_start_year", "production_end_year"):
        if cleaned.get(name) in (None, ""):
            continue
        years[name] = optional_int(cleaned[name])
        if years[name] is None:
            errors.append(f"{name} must be an integer")
    start = years.get("production_start_year")
    end = years.get("production_end_year")
    if start is not None and end is not None and end < start:
        errors.append("production_end_year must not be before production_start_year")

    if table == "motorcycle_models" and cleaned.get("type"):
        if MotorcycleCategory.from_string(str(cleaned["type"])) is None:
            errors.append(f"type must be one of: {', '.join(c.value for c in MotorcycleCategory)}")

    if cleaned.get("hex_code") and not HEX_COLOR_RE.match(str(cleaned["hex_code"])):
        errors.append("hex_code must look like #RRGGBB")

    if "difficulty_level" in cleaned and cleaned["difficulty_level"] is not None:
        level = cleaned["difficulty_level"]
        if not isinstance(level, int) or not 1 <= level <= 5:
            errors.append("difficulty_level must be an integer from 1 to 5")

    if errors:
        raise FormValidationError(errors)
    return cleaned


def validate_model(data: dict[str, Any], partial: bool = False) -> dict[str, Any]:
    """Validate a motorcycle model payload, deriving a slug when absent."""
    cleaned = validate_record("motorcycle_models", data, partial=partial)
    if not partial and not cleaned.get("slug"):
        cleaned["slug"] = slugify(str(cleaned["name"]))
    if cleaned.get("type"):
        category = MotorcycleCategory.from_string(str(cleaned["type"]))
        if category is not None:
            cleaned["type"] = category.value
    return cleaned


def validate_component(
    component_type: ComponentType, data: dict[str, Any], partial: bool = False
) -> dict[str, Any]:
    cleaned = validate_record(component_type.table, data, partial=partial)
    cleaned.pop("component_type", None)
    return cleaned
