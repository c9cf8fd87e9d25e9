"""Pydantic models for catalog rows and the motorcycle view-model."""

from .catalog import (
    Brand,
    ColorOption,
    Configuration,
    ModelComponentAssignment,
    ModelYear,
    MotorcycleModel,
)
from .components import (
    COMPONENT_MODELS,
    BrakeSystem,
    Component,
    Engine,
    Frame,
    Suspension,
    Wheel,
    parse_component,
)
from .motorcycle import ComponentData, Motorcycle

__all__ = [
    "Brand",
    "ColorOption",
    "Configuration",
    "ModelComponentAssignment",
    "ModelYear",
    "MotorcycleModel",
    "COMPONENT_MODELS",
    "BrakeSystem",
    "Component",
    "Engine",
    "Frame",
    "Suspension",
    "Wheel",
    "parse_component",
    "ComponentData",
    "Motorcycle",
]
