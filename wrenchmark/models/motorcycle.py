"""Flattened motorcycle view-model served to the browsing UI."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ..core.enums import DataTier, MigrationStatus
from ..utils.units import (
    kg_to_lb,
    kmh_to_mph,
    litres_to_gallons,
    mm_to_inches,
    nm_to_lbft,
    rounded,
)
from .catalog import ColorOption, Configuration
from .components import BrakeSystem, Engine, Frame, Suspension, Wheel


class ComponentData(BaseModel):
    """Resolved components and provenance attached to a motorcycle for detail views."""

    engine: Optional[Engine] = None
    brake_system: Optional[BrakeSystem] = None
    frame: Optional[Frame] = None
    suspension: Optional[Suspension] = None
    wheel: Optional[Wheel] = None

    selected_configuration: Optional[Configuration] = None
    selected_year: Optional[int] = None
    configurations: list[Configuration] = Field(default_factory=list)
    color_options: list[ColorOption] = Field(default_factory=list)

    # Which tier supplied each field group (engine, brakes, dimensions)
    sources: dict[str, DataTier] = Field(default_factory=dict)
    # Which tier supplied each component row
    component_sources: dict[str, DataTier] = Field(default_factory=dict)
    integrity_warnings: list[str] = Field(default_factory=list)


class Motorcycle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    slug: str
    brand_id: Optional[str] = None
    make: str = "Unknown"
    model: str
    year: Optional[int] = None
    type: str = "Standard"
    category: str = "Standard"
    is_draft: bool = False
    image_url: Optional[str] = None
    summary: Optional[str] = None
    difficulty_level: Optional[int] = None
    production_status: Optional[str] = None

    # Engine
    engine_size: float = 0
    horsepower: float = 0
    torque_nm: float = 0
    engine_type: Optional[str] = None
    cylinder_count: Optional[int] = None
    power_rpm: Optional[int] = None
    torque_rpm: Optional[int] = None
    cooling: Optional[str] = None
    fuel_system: Optional[str] = None

    # Brakes
    has_abs: bool = False
    brake_type: Optional[str] = None
    has_traction_control: bool = False

    # Dimensions (metric source of truth)
    seat_height_mm: Optional[float] = None
    weight_kg: Optional[float] = None
    wheelbase_mm: Optional[float] = None
    fuel_capacity_l: Optional[float] = None
    ground_clearance_mm: Optional[float] = None
    top_speed_kph: Optional[float] = None

    is_placeholder: bool = False
    migration_status: MigrationStatus = MigrationStatus.ERROR_FALLBACK

    component_data: Optional[ComponentData] = Field(
        default=None, serialization_alias="_componentData"
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def seat_height_in(self) -> Optional[float]:
        return rounded(mm_to_inches(self.seat_height_mm))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def weight_lbs(self) -> Optional[float]:
        return rounded(kg_to_lb(self.weight_kg))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def wheelbase_in(self) -> Optional[float]:
        return rounded(mm_to_inches(self.wheelbase_mm))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ground_clearance_in(self) -> Optional[float]:
        return rounded(mm_to_inches(self.ground_clearance_mm))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fuel_capacity_gal(self) -> Optional[float]:
        return rounded(litres_to_gallons(self.fuel_capacity_l), 2)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def top_speed_mph(self) -> Optional[float]:
        return rounded(kmh_to_mph(self.top_speed_kph))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def torque_lbft(self) -> Optional[float]:
        return rounded(nm_to_lbft(self.torque_nm)) if self.torque_nm else None
