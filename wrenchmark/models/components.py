"""Component catalog rows (engines, brake systems, frames, suspensions, wheels).

Each component shape is its own model carrying a literal ``component_type``
tag, and ``Component`` is the discriminated union over all five.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import ComponentType


class _ComponentBase(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    is_draft: bool = False
    notes: Optional[str] = None


class Engine(_ComponentBase):
    component_type: Literal["engine"] = "engine"

    name: str = ""
    displacement_cc: Optional[float] = None
    power_hp: Optional[float] = None
    power_rpm: Optional[int] = None
    torque_nm: Optional[float] = None
    torque_rpm: Optional[int] = None
    engine_type: Optional[str] = None
    cylinder_count: Optional[int] = None
    cooling: Optional[str] = None
    fuel_system: Optional[str] = None
    bore_mm: Optional[float] = None
    stroke_mm: Optional[float] = None
    compression_ratio: Optional[str] = None
    valve_train: Optional[str] = None

    @property
    def has_output(self) -> bool:
        """True when displacement or power is a non-zero figure."""
        return bool(self.displacement_cc) or bool(self.power_hp)


class BrakeSystem(_ComponentBase):
    component_type: Literal["brake_system"] = "brake_system"

    type: str = ""
    front_type: Optional[str] = None
    rear_type: Optional[str] = None
    front_disc_size_mm: Optional[str] = None
    rear_disc_size_mm: Optional[str] = None
    caliper_type: Optional[str] = None
    brake_brand: Optional[str] = None
    has_abs: Optional[bool] = None
    has_traction_control: Optional[bool] = None


class Frame(_ComponentBase):
    component_type: Literal["frame"] = "frame"

    type: str = ""
    material: Optional[str] = None
    construction_method: Optional[str] = None
    mounting_type: Optional[str] = None
    rake_degrees: Optional[float] = None
    trail_mm: Optional[float] = None
    wheelbase_mm: Optional[float] = None


class Suspension(_ComponentBase):
    component_type: Literal["suspension"] = "suspension"

    front_type: Optional[str] = None
    rear_type: Optional[str] = None
    brand: Optional[str] = None
    adjustability: Optional[str] = None
    damping_system: Optional[str] = None
    front_travel_mm: Optional[float] = None
    rear_travel_mm: Optional[float] = None


class Wheel(_ComponentBase):
    component_type: Literal["wheel"] = "wheel"

    type: Optional[str] = None
    front_size: Optional[str] = None
    rear_size: Optional[str] = None
    rim_material: Optional[str] = None
    front_tire_size: Optional[str] = None
    rear_tire_size: Optional[str] = None
    tubeless: Optional[bool] = None


Component = Annotated[
    Union[Engine, BrakeSystem, Frame, Suspension, Wheel],
    Field(discriminator="component_type"),
]

COMPONENT_MODELS: dict[ComponentType, type[_ComponentBase]] = {
    ComponentType.ENGINE: Engine,
    ComponentType.BRAKE_SYSTEM: BrakeSystem,
    ComponentType.FRAME: Frame,
    ComponentType.SUSPENSION: Suspension,
    ComponentType.WHEEL: Wheel,
}


def parse_component(component_type: ComponentType, row: dict[str, Any]) -> Any:
    """Validate a raw table row as the component model for its type.

    Rows coming back from Supabase do not carry the ``component_type`` tag,
    so the tag is taken from the table the row was read from.
    """
    data = dict(row)
    data["component_type"] = component_type.value
    return COMPONENT_MODELS[component_type].model_validate(data)
