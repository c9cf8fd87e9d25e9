"""Tests for unit conversions and safe type conversion."""

import pytest

from wrenchmark.utils.converters import is_present, optional_float, optional_int, safe_float
from wrenchmark.utils.units import (
    kg_to_lb,
    kmh_to_mph,
    litres_to_gallons,
    mm_to_inches,
    nm_to_lbft,
    rounded,
)


class TestConversions:
    def test_mm_to_inches_is_exact(self):
        assert mm_to_inches(25.4) == 1.0

    def test_kg_to_lb(self):
        assert kg_to_lb(1) == pytest.approx(2.20462, abs=1e-5)

    def test_kmh_to_mph(self):
        assert kmh_to_mph(100) == pytest.approx(62.1371, abs=1e-3)

    def test_litres_to_gallons(self):
        assert litres_to_gallons(15) == pytest.approx(3.96258, abs=1e-5)

    def test_nm_to_lbft(self):
        assert nm_to_lbft(64) == pytest.approx(47.204, abs=1e-3)

    def test_none_passes_through(self):
        assert mm_to_inches(None) is None
        assert kg_to_lb(None) is None
        assert rounded(None) is None

    def test_rounded(self):
        assert rounded(31.10236) == 31.1
        assert rounded(3.96258, 2) == 3.96


class TestConverters:
    def test_safe_float(self):
        assert safe_float("649") == 649.0
        assert safe_float(None) == 0.0
        assert safe_float("n/a", default=-1.0) == -1.0

    def test_optional_int_handles_float_strings(self):
        assert optional_int("649.0") == 649
        assert optional_int("") is None
        assert optional_int("abc") is None

    def test_optional_float_keeps_missing(self):
        assert optional_float("") is None
        assert optional_float("abc") is None
        assert optional_float("193") == 193.0

    def test_is_present(self):
        assert not is_present(None)
        assert not is_present("")
        assert not is_present(0)
        assert not is_present(False)
        assert is_present(True)
        assert is_present(649)
        assert is_present("Liquid")
