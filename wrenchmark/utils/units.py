"""Metric to imperial conversions.

Converted values are always derived at read time from the metric source
fields and never stored.
"""

MM_PER_INCH = 25.4
LB_PER_KG = 2.20462
GAL_PER_LITRE = 0.264172
MPH_PER_KMH = 0.621371
LBFT_PER_NM = 0.737562


def mm_to_inches(mm: float | None) -> float | None:
    if mm is None:
        return None
    return mm / MM_PER_INCH


def kg_to_lb(kg: float | None) -> float | None:
    if kg is None:
        return None
    return kg * LB_PER_KG


def litres_to_gallons(litres: float | None) -> float | None:
    if litres is None:
        return None
    return litres * GAL_PER_LITRE


def kmh_to_mph(kmh: float | None) -> float | None:
    if kmh is None:
        return None
    return kmh * MPH_PER_KMH


def nm_to_lbft(nm: float | None) -> float | None:
    if nm is None:
        return None
    return nm * LBFT_PER_NM


def rounded(value: float | None, digits: int = 1) -> float | None:
    """Round for display, passing None through."""
    if value is None:
        return None
    return round(value, digits)
