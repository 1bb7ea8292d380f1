"""Tests for the built-in casters (the scalar coercion table)."""

import math

import pytest

from safe_decoder import Float32, Int8, UInt8, UInt64
from safe_decoder.casters import (
    BUILTIN_CASTERS,
    cast_bool,
    cast_float,
    cast_float32,
    cast_int,
    format_scalar,
    make_int_caster,
)


class TestCastBool:
    """Test case-insensitive boolean rule."""

    @pytest.mark.parametrize("text, expected", [
        ("true", True), ("TRUE", True), ("True", True), ("tRuE", True),
        ("false", False), ("FALSE", False), ("False", False),
    ])
    def test_accepts_any_casing(self, text, expected):
        """``true`` / ``false`` in any casing."""
        assert cast_bool(text) is expected

    @pytest.mark.parametrize("text", ["1", "0", "yes", "", " true", "truee"])
    def test_declines_everything_else(self, text):
        """No truthiness guessing."""
        assert cast_bool(text) is None


class TestCastInt:
    """Test ASCII integer grammar."""

    @pytest.mark.parametrize("text, expected", [
        ("1", 1), ("-17", -17), ("+5", 5), ("007", 7),
        ("123456789012345678901234567890", 123456789012345678901234567890),
    ])
    def test_accepts_decimal(self, text, expected):
        assert cast_int(text) == expected

    @pytest.mark.parametrize("text", ["", "1.0", "1e3", " 1", "1_000", "١", "abc", "0x10"])
    def test_declines_non_decimal(self, text):
        """Whitespace, underscores and non-ASCII digits are rejected."""
        assert cast_int(text) is None

    def test_declines_numeral_past_conversion_limit(self):
        """Numerals too long for the interpreter to convert decline."""
        assert cast_int("9" * 5000) is None


class TestFixedWidthCasters:
    """Test make_int_caster."""

    def test_in_range(self):
        """In-range values become the fixed-width type."""
        value = make_int_caster(Int8)("-128")
        assert value == -128
        assert type(value) is Int8

    def test_overflow_declines(self):
        """Out-of-range values decline instead of wrapping."""
        assert make_int_caster(Int8)("128") is None
        assert make_int_caster(UInt8)("-1") is None
        assert make_int_caster(UInt64)(str(2 ** 64)) is None

    def test_caster_name(self):
        assert make_int_caster(UInt8).__name__ == "cast_uint8"


class TestCastFloat:
    """Test decimal float grammar."""

    @pytest.mark.parametrize("text, expected", [
        ("1", 1.0), ("1.5", 1.5), ("-0.25", -0.25), (".5", 0.5),
        ("1.", 1.0), ("1e3", 1000.0), ("2.5E-1", 0.25),
    ])
    def test_accepts_decimal(self, text, expected):
        assert cast_float(text) == expected

    def test_special_values(self):
        """inf / infinity / nan in any casing."""
        assert cast_float("inf") == math.inf
        assert cast_float("-Infinity") == -math.inf
        assert math.isnan(cast_float("NaN"))

    @pytest.mark.parametrize("text", ["", "1,5", "1.5.1", " 1", "e3", "1_0.0", "abc"])
    def test_declines(self, text):
        assert cast_float(text) is None

    def test_float32_overflow_declines(self):
        """Beyond single precision → decline."""
        assert cast_float32("1e39") is None
        assert isinstance(cast_float32("1.5"), Float32)


class TestFormatScalar:
    """Test canonical text of primitives."""

    @pytest.mark.parametrize("value, expected", [
        (1, "1"), (-3, "-3"), (1.5, "1.5"), (True, "true"), (False, "false"),
        (math.inf, "inf"), (-math.inf, "-inf"), (math.nan, "nan"),
        (UInt8(7), "7"),
    ])
    def test_primitives(self, value, expected):
        assert format_scalar(value) == expected

    @pytest.mark.parametrize("value", [None, [1], {"a": 1}, "text"])
    def test_non_primitives(self, value):
        """Containers, null and strings have no canonical scalar text."""
        assert format_scalar(value) is None


class TestBuiltinCasters:
    """Test the default caster table."""

    def test_default_types(self):
        for tp in (bool, int, float, Float32, Int8, UInt64):
            assert tp in BUILTIN_CASTERS

    def test_str_not_in_table(self):
        """Strings have their own coercion, not a caster."""
        assert str not in BUILTIN_CASTERS
