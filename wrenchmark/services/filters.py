"""Catalog listing filters parsed from query parameters."""

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import MotorcycleCategory
from ..models.motorcycle import Motorcycle
from ..utils.converters import optional_int

DEFAULT_YEAR_RANGE = (1980, 2030)
DEFAULT_ENGINE_RANGE = (0, 2000)
DEFAULT_DIFFICULTY = 5
DEFAULT_WEIGHT_RANGE = (100, 400)
DEFAULT_SEAT_HEIGHT_RANGE = (650, 950)


@dataclass
class MotorcycleFilters:
    search: str = ""
    make: str = ""
    categories: list[str] = field(default_factory=list)
    year_range: tuple[int, int] = DEFAULT_YEAR_RANGE
    engine_size_range: tuple[int, int] = DEFAULT_ENGINE_RANGE
    difficulty_level: int = DEFAULT_DIFFICULTY
    weight_range: tuple[int, int] = DEFAULT_WEIGHT_RANGE
    seat_height_range: tuple[int, int] = DEFAULT_SEAT_HEIGHT_RANGE
    abs: Optional[bool] = None

    @classmethod
    def from_query(cls, params: Any) -> "MotorcycleFilters":
        """Build filters from query parameters.

        ``params`` needs ``get``; ``getlist`` is used for repeated
        ``category`` parameters when available (Starlette ``QueryParams``).
        """
        filters = cls()

        if hasattr(params, "getlist"):
            raw_categories = params.getlist("category")
        else:
            value = params.get("category")
            raw_categories = value if isinstance(value, list) else ([value] if value else [])
        categories = []
        for raw in raw_categories:
            category = MotorcycleCategory.from_string(raw)
            if category is not None:
                categories.append(category.value)
        if categories:
            filters.categories = categories

        if params.get("make"):
            filters.make = str(params.get("make")).strip()
        if params.get("search"):
            filters.search = str(params.get("search")).strip()

        filters.year_range = _parse_range(params, "yearMin", "yearMax", filters.year_range)
        filters.engine_size_range = _parse_range(
            params, "engineMin", "engineMax", filters.engine_size_range
        )
        filters.weight_range = _parse_range(
            params, "weightMin", "weightMax", filters.weight_range
        )
        filters.seat_height_range = _parse_range(
            params, "seatMin", "seatMax", filters.seat_height_range
        )

        difficulty = optional_int(params.get("difficulty"))
        if difficulty is not None:
            filters.difficulty_level = difficulty

        abs_value = params.get("abs")
        if abs_value is not None and abs_value != "":
            filters.abs = str(abs_value).lower() == "true"

        return filters

    def to_query(self) -> dict[str, Any]:
        """Inverse of ``from_query``: only non-default filters are emitted."""
        query: dict[str, Any] = {}
        if self.categories:
            query["category"] = list(self.categories)
        if self.make:
            query["make"] = self.make
        if self.search:
            query["search"] = self.search
        for (lo_key, hi_key), value, default in (
            (("yearMin", "yearMax"), self.year_range, DEFAULT_YEAR_RANGE),
            (("engineMin", "engineMax"), self.engine_size_range, DEFAULT_ENGINE_RANGE),
            (("weightMin", "weightMax"), self.weight_range, DEFAULT_WEIGHT_RANGE),
            (("seatMin", "seatMax"), self.seat_height_range, DEFAULT_SEAT_HEIGHT_RANGE),
        ):
            if tuple(value) != default:
                query[lo_key] = str(value[0])
                query[hi_key] = str(value[1])
        if self.difficulty_level != DEFAULT_DIFFICULTY:
            query["difficulty"] = str(self.difficulty_level)
        if self.abs is not None:
            query["abs"] = str(self.abs).lower()
        return query

    def count_active(self) -> int:
        count = len(self.categories)
        if self.make:
            count += 1
        if self.search:
            count += 1
        if tuple(self.year_range) != DEFAULT_YEAR_RANGE:
            count += 1
        if tuple(self.engine_size_range) != DEFAULT_ENGINE_RANGE:
            count += 1
        if self.difficulty_level != DEFAULT_DIFFICULTY:
            count += 1
        if tuple(self.weight_range) != DEFAULT_WEIGHT_RANGE:
            count += 1
        if tuple(self.seat_height_range) != DEFAULT_SEAT_HEIGHT_RANGE:
            count += 1
        if self.abs is not None:
            count += 1
        return count

    def cache_key(self) -> dict[str, Any]:
        return self.to_query()

    def matches(self, motorcycle: Motorcycle) -> bool:
        """Unknown values pass range filters so missing data never hides a bike."""
        if self.search:
            needle = self.search.lower()
            haystack = f"{motorcycle.make} {motorcycle.name}".lower()
            if needle not in haystack:
                return False
        if self.make and motorcycle.make.lower() != self.make.lower():
            return False
        if self.categories:
            wanted = {c.lower() for c in self.categories}
            if motorcycle.category.lower() not in wanted and motorcycle.type.lower() not in wanted:
                return False
        if not _in_range(motorcycle.year, self.year_range, DEFAULT_YEAR_RANGE):
            return False
        if not _in_range(
            motorcycle.engine_size or None, self.engine_size_range, DEFAULT_ENGINE_RANGE
        ):
            return False
        if (
            motorcycle.difficulty_level is not None
            and motorcycle.difficulty_level > self.difficulty_level
        ):
            return False
        if not _in_range(motorcycle.weight_kg, self.weight_range, DEFAULT_WEIGHT_RANGE):
            return False
        if not _in_range(
            motorcycle.seat_height_mm, self.seat_height_range, DEFAULT_SEAT_HEIGHT_RANGE
        ):
            return False
        if self.abs is not None and motorcycle.has_abs != self.abs:
            return False
        return True

    def apply(self, motorcycles: list[Motorcycle]) -> list[Motorcycle]:
        return [m for m in motorcycles if self.matches(m)]


def _parse_range(
    params: Any, lo_key: str, hi_key: str, default: tuple[int, int]
) -> tuple[int, int]:
    lo = optional_int(params.get(lo_key))
    hi = optional_int(params.get(hi_key))
    if lo is None and hi is None:
        return default
    return (lo if lo is not None else default[0], hi if hi is not None else default[1])


def _in_range(
    value: Optional[float], bounds: tuple[int, int], default: tuple[int, int]
) -> bool:
    # A range left at its default is unbounded
    if value is None or tuple(bounds) == default:
        return True
    return bounds[0] <= value <= bounds[1]
