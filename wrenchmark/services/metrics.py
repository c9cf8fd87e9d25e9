"""Derived performance metrics for a resolved motorcycle or configuration.

All ratios are per pound of weight:

    power_to_weight  = hp / (kg * 2.20462)
    torque_to_weight = (Nm * 0.737562) / (kg * 2.20462)
    performance_index = 0.7 * power_to_weight + 0.3 * torque_to_weight
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from ..core.enums import ENTRY_LEVEL_CATEGORY, PERFORMANCE_THRESHOLDS
from ..models.motorcycle import Motorcycle
from ..utils.units import LB_PER_KG, LBFT_PER_NM

# Weight distribution clamp (percent on the front wheel)
MIN_FRONT_PERCENT = 40
MAX_FRONT_PERCENT = 55


def power_to_weight(power_hp: Optional[float], weight_kg: Optional[float]) -> float:
    """Horsepower per pound, 2 dp. 0 when either figure is unknown."""
    if not power_hp or not weight_kg:
        return 0
    return round(power_hp / (weight_kg * LB_PER_KG), 2)


def torque_to_weight(torque_nm: Optional[float], weight_kg: Optional[float]) -> float:
    if not torque_nm or not weight_kg:
        return 0
    return round((torque_nm * LBFT_PER_NM) / (weight_kg * LB_PER_KG), 2)


def performance_index(
    power_hp: Optional[float], torque_nm: Optional[float], weight_kg: Optional[float]
) -> float:
    if not power_hp or not weight_kg:
        return 0
    pw = power_to_weight(power_hp, weight_kg)
    tw = torque_to_weight(torque_nm, weight_kg)
    return round(pw * 0.7 + tw * 0.3, 2)


def displacement_per_cylinder(
    displacement_cc: Optional[float], cylinder_count: Optional[int]
) -> float:
    if not displacement_cc or not cylinder_count:
        return 0
    return round(displacement_cc / cylinder_count, 1)


def horsepower_per_litre(
    power_hp: Optional[float], displacement_cc: Optional[float]
) -> float:
    if not power_hp or not displacement_cc:
        return 0
    return round(power_hp / (displacement_cc / 1000), 1)


def weight_distribution(
    wheelbase_mm: Optional[float], seat_height_mm: Optional[float]
) -> dict[str, float]:
    """Rough front/rear split from seat height relative to wheelbase."""
    if not wheelbase_mm:
        return {"front": 50, "rear": 50}
    ratio = seat_height_mm / wheelbase_mm if seat_height_mm else 0.05
    front = min(max(45 + ratio * 100, MIN_FRONT_PERCENT), MAX_FRONT_PERCENT)
    return {"front": round(front, 1), "rear": round(100 - front, 1)}


def performance_category(pw_ratio: float) -> str:
    for threshold, label in PERFORMANCE_THRESHOLDS:
        if pw_ratio >= threshold:
            return label
    return ENTRY_LEVEL_CATEGORY


@dataclass
class PerformanceMetrics:
    power_to_weight: float
    torque_to_weight: float
    performance_index: float
    displacement_per_cylinder: float
    horsepower_per_litre: float
    weight_distribution: dict[str, float]
    performance_category: str
    weight_lbs: float
    torque_lbft: float
    displacement_litres: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def calculate_all_metrics(
    power_hp: Optional[float] = None,
    torque_nm: Optional[float] = None,
    displacement_cc: Optional[float] = None,
    cylinder_count: Optional[int] = None,
    weight_kg: Optional[float] = None,
    wheelbase_mm: Optional[float] = None,
    seat_height_mm: Optional[float] = None,
) -> PerformanceMetrics:
    pw = power_to_weight(power_hp, weight_kg)
    return PerformanceMetrics(
        power_to_weight=pw,
        torque_to_weight=torque_to_weight(torque_nm, weight_kg),
        performance_index=performance_index(power_hp, torque_nm, weight_kg),
        displacement_per_cylinder=displacement_per_cylinder(
            displacement_cc, cylinder_count or 1
        ),
        horsepower_per_litre=horsepower_per_litre(power_hp, displacement_cc),
        weight_distribution=weight_distribution(wheelbase_mm, seat_height_mm),
        performance_category=performance_category(pw),
        weight_lbs=round((weight_kg or 0) * LB_PER_KG, 1),
        torque_lbft=round((torque_nm or 0) * LBFT_PER_NM, 1),
        displacement_litres=round((displacement_cc or 0) / 1000, 2),
    )


def metrics_for_motorcycle(motorcycle: Motorcycle) -> PerformanceMetrics:
    return calculate_all_metrics(
        power_hp=motorcycle.horsepower,
        torque_nm=motorcycle.torque_nm,
        displacement_cc=motorcycle.engine_size,
        cylinder_count=motorcycle.cylinder_count,
        weight_kg=motorcycle.weight_kg,
        wheelbase_mm=motorcycle.wheelbase_mm,
        seat_height_mm=motorcycle.seat_height_mm,
    )
