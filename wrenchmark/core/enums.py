"""Enums for catalog-related constants."""

from enum import Enum


class ComponentType(str, Enum):
    """Independently catalogued motorcycle components."""

    ENGINE = "engine"
    BRAKE_SYSTEM = "brake_system"
    FRAME = "frame"
    SUSPENSION = "suspension"
    WHEEL = "wheel"

    @property
    def table(self) -> str:
        """Supabase table holding this component type."""
        return _COMPONENT_TABLES[self]

    @property
    def id_field(self) -> str:
        """Foreign-key column on model_configurations."""
        return f"{self.value}_id"

    @property
    def override_field(self) -> str:
        """Override flag column on model_configurations."""
        return f"{self.value}_override"

    @property
    def label(self) -> str:
        """Name used for this component in completeness reports."""
        return _COMPONENT_LABELS[self]

    @classmethod
    def from_string(cls, value: str | None) -> "ComponentType | None":
        """Convert string to enum, accepting table names and common variations."""
        if not value:
            return None
        value_lower = value.lower().strip().replace("-", "_")
        mappings = {
            "engine": cls.ENGINE,
            "engines": cls.ENGINE,
            "brake_system": cls.BRAKE_SYSTEM,
            "brake_systems": cls.BRAKE_SYSTEM,
            "brake": cls.BRAKE_SYSTEM,
            "brakes": cls.BRAKE_SYSTEM,
            "frame": cls.FRAME,
            "frames": cls.FRAME,
            "suspension": cls.SUSPENSION,
            "suspensions": cls.SUSPENSION,
            "wheel": cls.WHEEL,
            "wheels": cls.WHEEL,
        }
        return mappings.get(value_lower)


_COMPONENT_TABLES = {
    ComponentType.ENGINE: "engines",
    ComponentType.BRAKE_SYSTEM: "brake_systems",
    ComponentType.FRAME: "frames",
    ComponentType.SUSPENSION: "suspensions",
    ComponentType.WHEEL: "wheels",
}

_COMPONENT_LABELS = {
    ComponentType.ENGINE: "engine",
    ComponentType.BRAKE_SYSTEM: "brakes",
    ComponentType.FRAME: "frame",
    ComponentType.SUSPENSION: "suspension",
    ComponentType.WHEEL: "wheels",
}


class MigrationStatus(str, Enum):
    """Which tier of the fallback chain supplied a motorcycle's data."""

    MIGRATED = "migrated"
    BASIC_DATA_ONLY = "basic_data_only"
    ERROR_FALLBACK = "error_fallback"


class DataTier(str, Enum):
    """Source of one resolved field group."""

    CONFIGURATION = "configuration"
    MODEL_ASSIGNMENT = "model_assignment"
    LEGACY = "legacy"
    NONE = "none"


class MotorcycleCategory(str, Enum):
    """Catalog categories (stored as motorcycle_models.type)."""

    SPORT = "Sport"
    CRUISER = "Cruiser"
    TOURING = "Touring"
    ADVENTURE = "Adventure"
    NAKED = "Naked"
    STANDARD = "Standard"
    SCOOTER = "Scooter"
    OFF_ROAD = "Off-road"
    DUAL_SPORT = "Dual-sport"

    @classmethod
    def from_string(cls, value: str | None) -> "MotorcycleCategory | None":
        """Convert string to enum case-insensitively, returning None if invalid."""
        if not value:
            return None
        value_lower = value.lower().strip()
        for category in cls:
            if category.value.lower() == value_lower:
                return category
        return None


# Performance category thresholds (hp per lb)
PERFORMANCE_THRESHOLDS = [
    (0.4, "Extreme Performance"),
    (0.3, "High Performance"),
    (0.2, "Sport Performance"),
    (0.15, "Moderate Performance"),
    (0.1, "Touring Performance"),
]
ENTRY_LEVEL_CATEGORY = "Entry Level"
