"""Tests for listing filters."""

from conftest import model_row, ninja_row

from wrenchmark.services.filters import MotorcycleFilters
from wrenchmark.services.resolver import resolve_motorcycle_row


def _motorcycles():
    ninja = resolve_motorcycle_row(
        ninja_row(engine_size=649, horsepower=67, weight_kg=193, seat_height_mm=790,
                  has_abs=True, difficulty_level=2)
    )
    r1 = resolve_motorcycle_row(
        model_row(
            "mdl-r1",
            [],
            name="YZF-R1",
            slug="yamaha-yzf-r1",
            brand={"id": "brand-yamaha", "name": "Yamaha", "slug": "yamaha"},
            engine_size=998,
            weight_kg=201,
            seat_height_mm=855,
            has_abs=True,
            difficulty_level=5,
            production_start_year=2015,
        )
    )
    cruiser = resolve_motorcycle_row(
        model_row(
            "mdl-cruiser",
            [],
            name="Vulcan S",
            slug="kawasaki-vulcan-s",
            type="Cruiser",
            engine_size=649,
            has_abs=False,
            production_start_year=2015,
        )
    )
    return [ninja, r1, cruiser]


class TestFromQuery:
    def test_defaults(self):
        filters = MotorcycleFilters.from_query({})
        assert filters == MotorcycleFilters()
        assert filters.count_active() == 0
        assert filters.to_query() == {}

    def test_parses_ranges_and_flags(self):
        filters = MotorcycleFilters.from_query(
            {"engineMin": "600", "engineMax": "700", "abs": "true", "make": " Kawasaki "}
        )
        assert filters.engine_size_range == (600, 700)
        assert filters.abs is True
        assert filters.make == "Kawasaki"
        assert filters.count_active() == 3

    def test_half_open_range_keeps_other_bound(self):
        filters = MotorcycleFilters.from_query({"yearMin": "2020"})
        assert filters.year_range == (2020, 2030)

    def test_unknown_category_ignored(self):
        filters = MotorcycleFilters.from_query({"category": ["sport", "hoverbike"]})
        assert filters.categories == ["Sport"]

    def test_round_trip_through_query(self):
        filters = MotorcycleFilters.from_query({"difficulty": "3", "search": "ninja"})
        assert MotorcycleFilters.from_query(filters.to_query()) == filters


class TestApply:
    def test_no_filters_keeps_everything(self):
        assert len(MotorcycleFilters().apply(_motorcycles())) == 3

    def test_search_matches_make_and_name(self):
        result = MotorcycleFilters(search="yamaha").apply(_motorcycles())
        assert [m.name for m in result] == ["YZF-R1"]

    def test_category(self):
        result = MotorcycleFilters(categories=["Cruiser"]).apply(_motorcycles())
        assert [m.name for m in result] == ["Vulcan S"]

    def test_engine_range(self):
        result = MotorcycleFilters(engine_size_range=(0, 700)).apply(_motorcycles())
        assert {m.name for m in result} == {"Ninja 650", "Vulcan S"}

    def test_unknown_weight_passes_weight_filter(self):
        result = MotorcycleFilters(weight_range=(150, 195)).apply(_motorcycles())
        assert {m.name for m in result} == {"Ninja 650", "Vulcan S"}

    def test_difficulty_cap(self):
        result = MotorcycleFilters(difficulty_level=3).apply(_motorcycles())
        assert {m.name for m in result} == {"Ninja 650", "Vulcan S"}

    def test_abs(self):
        result = MotorcycleFilters(abs=False).apply(_motorcycles())
        assert [m.name for m in result] == ["Vulcan S"]

    def test_make_is_case_insensitive(self):
        result = MotorcycleFilters(make="kawasaki").apply(_motorcycles())
        assert {m.name for m in result} == {"Ninja 650", "Vulcan S"}
