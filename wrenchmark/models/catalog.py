"""Catalog entities as stored in Supabase."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.enums import ComponentType
from .components import BrakeSystem, Engine, Frame, Suspension, Wheel

# Plural aliases used by older nested selects (e.g. ``engines:engine_id(*)``)
_LEGACY_JOIN_KEYS = {
    "engines": "engine",
    "brake_systems": "brake_system",
    "brakes": "brake_system",
    "frames": "frame",
    "suspensions": "suspension",
    "wheels": "wheel",
}


class Brand(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    slug: str
    country: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    website_url: Optional[str] = None
    founded: Optional[int] = None


class ColorOption(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    model_year_id: str
    name: str
    hex_code: Optional[str] = None
    image_url: Optional[str] = None
    is_limited: bool = False
    color_family: Optional[str] = None
    msrp_premium_usd: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def null_flags_to_false(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("is_limited") is None:
            data = {**data, "is_limited": False}
        return data


class Configuration(BaseModel):
    """A trim level within a model year."""

    model_config = ConfigDict(extra="ignore")

    id: str
    model_year_id: str
    name: Optional[str] = None
    trim_level: Optional[str] = None
    is_default: bool = False
    is_draft: bool = False

    engine_id: Optional[str] = None
    brake_system_id: Optional[str] = None
    frame_id: Optional[str] = None
    suspension_id: Optional[str] = None
    wheel_id: Optional[str] = None

    engine_override: bool = False
    brake_system_override: bool = False
    frame_override: bool = False
    suspension_override: bool = False
    wheel_override: bool = False

    seat_height_mm: Optional[float] = None
    weight_kg: Optional[float] = None
    wheelbase_mm: Optional[float] = None
    fuel_capacity_l: Optional[float] = None
    ground_clearance_mm: Optional[float] = None

    msrp_usd: Optional[float] = None
    image_url: Optional[str] = None
    market_region: Optional[str] = None

    # Joined component rows (None when not linked or not readable)
    engine: Optional[Engine] = None
    brake_system: Optional[BrakeSystem] = None
    frame: Optional[Frame] = None
    suspension: Optional[Suspension] = None
    wheel: Optional[Wheel] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_joins(cls, data: Any) -> Any:
        """Accept legacy plural join keys and tag joined component rows."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, key in _LEGACY_JOIN_KEYS.items():
            if legacy in data:
                value = data.pop(legacy)
                if data.get(key) is None:
                    data[key] = value
        for ctype in ComponentType:
            row = data.get(ctype.value)
            if isinstance(row, dict) and "component_type" not in row:
                data[ctype.value] = {**row, "component_type": ctype.value}
            # Null flags in the table mean "not set"
            if data.get(ctype.override_field) is None:
                data.pop(ctype.override_field, None)
        for flag in ("is_default", "is_draft"):
            if data.get(flag) is None:
                data.pop(flag, None)
        return data

    def component(self, component_type: ComponentType) -> Any:
        """Joined component row for a type, or None."""
        return getattr(self, component_type.value)

    def component_id(self, component_type: ComponentType) -> Optional[str]:
        return getattr(self, component_type.id_field)

    def has_dangling_link(self, component_type: ComponentType) -> bool:
        """A component id is set but its row did not come back with the join."""
        return bool(self.component_id(component_type)) and self.component(
            component_type
        ) is None

    @property
    def display_name(self) -> str:
        return self.name or self.trim_level or "Standard"


class ModelYear(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    motorcycle_id: str
    year: int
    changes: Optional[str] = None
    msrp_usd: Optional[float] = None
    is_available: Optional[bool] = None
    marketing_tagline: Optional[str] = None
    image_url: Optional[str] = None
    configurations: list[Configuration] = Field(default_factory=list)
    color_options: list[ColorOption] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def null_lists_to_empty(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            if "model_configurations" in data and not data.get("configurations"):
                data["configurations"] = data.pop("model_configurations")
            for key in ("configurations", "color_options"):
                if data.get(key) is None:
                    data[key] = []
        return data


class MotorcycleModel(BaseModel):
    """A motorcycle product line, including its legacy flat spec fields."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    slug: str
    brand_id: str
    type: str = "Standard"
    category: Optional[str] = None
    production_start_year: Optional[int] = None
    production_end_year: Optional[int] = None
    production_status: Optional[str] = None
    is_draft: bool = False
    default_image_url: Optional[str] = None
    summary: Optional[str] = None
    base_description: Optional[str] = None
    difficulty_level: Optional[int] = None
    transmission: Optional[str] = None
    drive_type: Optional[str] = None
    cooling_system: Optional[str] = None
    is_entry_level: Optional[bool] = None
    use_cases: list[str] = Field(default_factory=list)

    # Legacy flat fields
    engine_size: Optional[float] = None
    horsepower: Optional[float] = None
    torque_nm: Optional[float] = None
    top_speed_kph: Optional[float] = None
    has_abs: Optional[bool] = None
    weight_kg: Optional[float] = None
    seat_height_mm: Optional[float] = None
    wheelbase_mm: Optional[float] = None
    ground_clearance_mm: Optional[float] = None
    fuel_capacity_l: Optional[float] = None

    brand: Optional[Brand] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_brand(cls, data: Any) -> Any:
        """Accept the joined brand under either ``brand`` or ``brands``."""
        if isinstance(data, dict):
            data = dict(data)
            if "brands" in data:
                brands = data.pop("brands")
                if data.get("brand") is None:
                    data["brand"] = brands
            if data.get("use_cases") is None:
                data["use_cases"] = []
            if data.get("is_draft") is None:
                data.pop("is_draft", None)
            if not data.get("type"):
                data.pop("type", None)
        return data

    @property
    def make(self) -> str:
        return self.brand.name if self.brand else "Unknown"


class ModelComponentAssignment(BaseModel):
    """Model-wide default component, distinct from trim-specific links."""

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    model_id: str
    component_type: ComponentType
    component_id: str
    assignment_type: str = "standard"
    is_default: bool = True
    effective_from_year: Optional[int] = None
    effective_to_year: Optional[int] = None
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def normalize_type(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            ctype = ComponentType.from_string(data.get("component_type"))
            if ctype is not None:
                data["component_type"] = ctype
            if data.get("is_default") is None:
                data.pop("is_default", None)
            if data.get("assignment_type") is None:
                data.pop("assignment_type", None)
        return data

    def covers_year(self, year: Optional[int]) -> bool:
        """True if the assignment is effective for a model year."""
        if year is None:
            return True
        if self.effective_from_year is not None and year < self.effective_from_year:
            return False
        if self.effective_to_year is not None and year > self.effective_to_year:
            return False
        return True
