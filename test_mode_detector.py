import pytest

from mathsheet.constants import UNIT_SYMBOLS
from mathsheet.mode_detector import Mode, detect


def test_imaginary_unit_suggests_complex():
    assert detect("i") is Mode.COMPLEX


@pytest.mark.parametrize("symbol", [
    "Pa", "psi", "bar", "N", "lbf", "m", "ft", "in", "s",
    "lb", "kg", "g", "Hz", "A", "K", "mol", "cd",
])
def test_unit_symbols_suggest_units(symbol):
    assert detect(symbol) is Mode.UNITS


@pytest.mark.parametrize("symbol", ["xyz", "", "I", "pa", "x", "J", "W", "V", "C", "yd", "mi"])
def test_other_symbols_suggest_nothing(symbol):
    assert detect(symbol) is None


def test_mode_values():
    assert [mode.value for mode in Mode] == ["float", "complex", "units"]
    assert Mode("units") is Mode.UNITS
    assert Mode.COMPLEX.label == "Complex"


def test_unit_table_matches_engine_units():
    assert UNIT_SYMBOLS == {
        "Pa", "psi", "bar", "N", "lbf", "m", "ft", "in", "s",
        "lb", "kg", "g", "Hz", "A", "K", "mol", "cd",
    }
