"""Tests for the scalar target types."""

from datetime import datetime, timedelta, timezone

import pytest

from safe_decoder import URL, Float32, Int8, Int64, UInt8, UInt16
from safe_decoder.scalars import FIXED_WIDTH_INTS, FixedWidthInt, parse_iso8601


class TestFixedWidthInt:
    """Test bounded integer types."""

    def test_bounds(self):
        assert (Int8.MIN, Int8.MAX) == (-128, 127)
        assert (UInt16.MIN, UInt16.MAX) == (0, 65535)
        assert Int64.MAX == 2 ** 63 - 1

    def test_construction_in_range(self):
        """In-range values construct and behave as ints."""
        value = UInt8(255)
        assert value == 255
        assert isinstance(value, int)
        assert repr(value) == "UInt8(255)"

    def test_construction_out_of_range(self):
        """Out-of-range values raise OverflowError."""
        with pytest.raises(OverflowError):
            UInt8(256)
        with pytest.raises(OverflowError):
            Int8(-129)

    def test_fits(self):
        assert UInt8.fits(0)
        assert not UInt8.fits(-1)

    def test_all_widths_registered(self):
        assert len(FIXED_WIDTH_INTS) == 8
        assert all(issubclass(tp, FixedWidthInt) for tp in FIXED_WIDTH_INTS)


class TestFloat32:
    """Test single-precision floats."""

    def test_rounds_to_single(self):
        """0.1 is not representable; it rounds to the nearest single."""
        assert Float32(0.1) != 0.1
        assert Float32(0.5) == 0.5

    def test_overflow(self):
        with pytest.raises(OverflowError):
            Float32(1e39)

    def test_infinity_passes_through(self):
        assert Float32(float("inf")) == float("inf")


class TestURL:
    """Test URL syntax check."""

    @pytest.mark.parametrize("text", [
        "https://example.com/a?b=c#d",
        "mailto:someone@example.com",
        "relative/path",
        "https://example.com/%20space",
    ])
    def test_valid(self, text):
        assert URL.is_valid(text)
        assert URL(text) == text

    @pytest.mark.parametrize("text", ["", "has space", "bad%zz", "tab\there", "ünïcode"])
    def test_invalid(self, text):
        assert not URL.is_valid(text)
        with pytest.raises(ValueError, match="invalid URL"):
            URL(text)

    def test_scheme(self):
        assert URL("HTTPS://example.com").scheme == "https"
        assert URL("relative/path").scheme is None


class TestParseIso8601:
    """Test the default date parser."""

    def test_utc(self):
        assert parse_iso8601("2019-01-01T01:01:01Z") == datetime(
            2019, 1, 1, 1, 1, 1, tzinfo=timezone.utc,
        )

    def test_offset(self):
        parsed = parse_iso8601("2019-01-01T01:01:01+02:30")
        assert parsed.utcoffset() == timedelta(hours=2, minutes=30)

    def test_fraction_truncated(self):
        parsed = parse_iso8601("2019-01-01T01:01:01.1234567Z")
        assert parsed.microsecond == 123456

    @pytest.mark.parametrize("text", [
        "", "2019-01-01", "2019-01-01T01:01:01", "2019-13-01T01:01:01Z", "yesterday",
    ])
    def test_invalid(self, text):
        """Missing zone, missing time and impossible dates raise ValueError."""
        with pytest.raises(ValueError):
            parse_iso8601(text)
