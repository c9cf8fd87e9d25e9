"""Catalog services: resolution, scoring, filtering, caching and import."""

from .cache import CatalogCache
from .catalog import CatalogService
from .completeness import assess_completeness, completion_stats, score_data_quality
from .filters import MotorcycleFilters
from .metrics import calculate_all_metrics, metrics_for_motorcycle
from .navigation import NavigationState
from .resolver import resolve_catalog, resolve_motorcycle, resolve_motorcycle_safe

__all__ = [
    "CatalogCache",
    "CatalogService",
    "assess_completeness",
    "completion_stats",
    "score_data_quality",
    "MotorcycleFilters",
    "calculate_all_metrics",
    "metrics_for_motorcycle",
    "NavigationState",
    "resolve_catalog",
    "resolve_motorcycle",
    "resolve_motorcycle_safe",
]
