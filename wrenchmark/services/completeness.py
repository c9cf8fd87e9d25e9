"""Data-completeness scoring used to annotate catalog and admin views."""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import ComponentType
from ..models.catalog import Configuration
from ..models.motorcycle import Motorcycle
from ..utils.converters import is_present

# Component order used in every report
COMPONENT_ORDER = [
    ComponentType.ENGINE,
    ComponentType.BRAKE_SYSTEM,
    ComponentType.FRAME,
    ComponentType.SUSPENSION,
    ComponentType.WHEEL,
]

SPEC_FIELDS = [
    "engine_size",
    "horsepower",
    "torque_nm",
    "seat_height_mm",
    "weight_kg",
    "wheelbase_mm",
    "fuel_capacity_l",
]

# Field tiers for the admin data-quality score
REQUIRED_FIELDS = ["make", "model", "year"]
IMPORTANT_FIELDS = ["engine_size", "horsepower", "weight_kg", "seat_height_mm"]
OPTIONAL_FIELDS = ["torque_nm", "top_speed_kph", "fuel_capacity_l", "wheelbase_mm"]


@dataclass
class Completeness:
    percentage: int
    missing_components: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    has_engine: bool = False
    has_brakes: bool = False
    has_frame: bool = False
    has_suspension: bool = False
    has_wheels: bool = False

    @property
    def status(self) -> str:
        if self.percentage >= 80:
            return "complete"
        if self.percentage >= 50:
            return "in_progress"
        return "needs_attention"


@dataclass
class DataQuality:
    is_valid: bool
    has_minimal_data: bool
    completeness_score: int
    missing_fields: list[str] = field(default_factory=list)


def _component_present(
    component_type: ComponentType,
    motorcycle: Motorcycle,
    configuration: Optional[Configuration],
) -> bool:
    # Only resolved rows count; a bare id may point at a missing row
    if configuration is not None and configuration.component(component_type) is not None:
        return True
    data = motorcycle.component_data
    return data is not None and getattr(data, component_type.value) is not None


def assess_completeness(
    motorcycle: Motorcycle, configuration: Optional[Configuration] = None
) -> Completeness:
    """Count present components and spec fields into a percentage.

    When a configuration is given, its joined component rows count as present
    alongside the resolved ones. A link whose row is missing does not count.
    """
    if configuration is None and motorcycle.component_data is not None:
        configuration = motorcycle.component_data.selected_configuration

    flags = {
        ctype: _component_present(ctype, motorcycle, configuration)
        for ctype in COMPONENT_ORDER
    }
    missing_components = [ctype.label for ctype in COMPONENT_ORDER if not flags[ctype]]

    missing_fields = [
        name for name in SPEC_FIELDS if not is_present(getattr(motorcycle, name))
    ]

    total = len(COMPONENT_ORDER) + len(SPEC_FIELDS)
    present = (len(COMPONENT_ORDER) - len(missing_components)) + (
        len(SPEC_FIELDS) - len(missing_fields)
    )

    return Completeness(
        percentage=round(present / total * 100),
        missing_components=missing_components,
        missing_fields=missing_fields,
        has_engine=flags[ComponentType.ENGINE],
        has_brakes=flags[ComponentType.BRAKE_SYSTEM],
        has_frame=flags[ComponentType.FRAME],
        has_suspension=flags[ComponentType.SUSPENSION],
        has_wheels=flags[ComponentType.WHEEL],
    )


def score_data_quality(motorcycle: Motorcycle) -> DataQuality:
    """Required / important / optional field scoring for the admin dashboard."""
    missing_required = [
        f for f in REQUIRED_FIELDS if not is_present(getattr(motorcycle, f, None))
    ]
    missing_important = [
        f for f in IMPORTANT_FIELDS if not is_present(getattr(motorcycle, f, None))
    ]
    present_optional = sum(
        1 for f in OPTIONAL_FIELDS if is_present(getattr(motorcycle, f, None))
    )

    total = len(REQUIRED_FIELDS) + len(IMPORTANT_FIELDS) + len(OPTIONAL_FIELDS)
    present = (
        (len(REQUIRED_FIELDS) - len(missing_required))
        + (len(IMPORTANT_FIELDS) - len(missing_important))
        + present_optional
    )
    # make defaults to "Unknown", which is not real data
    if motorcycle.make == "Unknown" and "make" not in missing_required:
        missing_required.insert(0, "make")
        present -= 1

    return DataQuality(
        is_valid=not missing_required,
        has_minimal_data=not missing_required and len(missing_important) <= 2,
        completeness_score=round(present / total * 100),
        missing_fields=missing_required + missing_important,
    )


def summarize_catalog(motorcycles: list[Motorcycle]) -> dict[str, Any]:
    """Listing-level data quality counts."""
    return {
        "total": len(motorcycles),
        "with_engine": sum(1 for m in motorcycles if m.engine_size > 0),
        "with_power": sum(1 for m in motorcycles if m.horsepower > 0),
        "with_weight": sum(1 for m in motorcycles if is_present(m.weight_kg)),
        "with_seat_height": sum(1 for m in motorcycles if is_present(m.seat_height_mm)),
        "placeholders": sum(1 for m in motorcycles if m.is_placeholder),
        "with_component_data": sum(
            1
            for m in motorcycles
            if m.component_data is not None and m.component_data.configurations
        ),
        "by_migration_status": {
            status: sum(1 for m in motorcycles if m.migration_status.value == status)
            for status in ("migrated", "basic_data_only", "error_fallback")
        },
    }


def completion_stats(motorcycles: list[Motorcycle], top_fields: int = 8) -> dict[str, Any]:
    """Admin completion dashboard: bands, average, common gaps, per-category averages."""
    scored = [(m, assess_completeness(m)) for m in motorcycles]
    percentages = [c.percentage for _, c in scored]

    missing_counts: dict[str, int] = {}
    by_category: dict[str, list[int]] = {}
    for motorcycle, completeness in scored:
        for name in completeness.missing_components + completeness.missing_fields:
            missing_counts[name] = missing_counts.get(name, 0) + 1
        by_category.setdefault(motorcycle.type or "Unknown", []).append(
            completeness.percentage
        )

    top_missing = sorted(missing_counts.items(), key=lambda item: (-item[1], item[0]))

    return {
        "total": len(motorcycles),
        "excellent": sum(1 for p in percentages if p >= 90),
        "good": sum(1 for p in percentages if 70 <= p < 90),
        "fair": sum(1 for p in percentages if 50 <= p < 70),
        "poor": sum(1 for p in percentages if p < 50),
        "average_completion": round(sum(percentages) / len(percentages)) if percentages else 0,
        "top_missing_fields": [
            {"field": name, "count": count} for name, count in top_missing[:top_fields]
        ],
        "categories": {
            category: {"total": len(values), "average_completion": round(sum(values) / len(values))}
            for category, values in sorted(by_category.items())
        },
    }
