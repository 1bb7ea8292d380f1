"""Tests for the built-in coercions."""

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytest

from safe_decoder import (
    URL,
    DataCorruptedError,
    FailureKind,
    Float32,
    Int8,
    TypeMismatchError,
    UInt8,
    ValueNotFoundError,
    build_default_decoder,
)
from safe_decoder.handlers import (
    ArrayCoercion,
    CasterCoercion,
    DateCoercion,
    EnumMatcher,
    ListMatcher,
    NoCoercion,
    RawValueCoercion,
    StringCoercion,
    URLCoercion,
)


class Color(enum.Enum):
    RED = "red"
    GREEN = "green"


class Level(enum.Enum):
    LOW = 1
    HIGH = 2


class Ratio(enum.Enum):
    HALF = 0.5
    ONE = 1


class Flag(enum.Enum):
    ON = True
    OFF = False


@dataclass
class Box:
    size: int


class TestScalarCoercion:
    """Test CasterCoercion through the decoder."""

    @pytest.mark.parametrize("tp, raw, expected", [
        (int, "1", 1),
        (int, "-42", -42),
        (float, "1.5", 1.5),
        (float, "3", 3.0),
        (UInt8, "255", 255),
        (Int8, "-128", -128),
        (bool, "TRUE", True),
        (bool, "false", False),
    ])
    def test_numeric_strings(self, decoder, tp, raw, expected):
        assert decoder.decode(tp, raw) == expected

    def test_fixed_width_type_kept(self, decoder):
        assert type(decoder.decode(UInt8, "7")) is UInt8

    def test_float32(self, decoder):
        assert decoder.decode(Float32, "0.5") == 0.5

    def test_overflow_is_fatal(self, decoder):
        """An out-of-range numeral declines; the strict failure propagates."""
        with pytest.raises(TypeMismatchError):
            decoder.decode(UInt8, "256")

    def test_overlong_numeral_is_fatal(self, decoder):
        """A numeral too long to convert declines like any other overflow."""
        with pytest.raises(TypeMismatchError):
            decoder.decode(UInt8, "9" * 5000)
        with pytest.raises(TypeMismatchError):
            decoder.decode(int, "9" * 5000)

    @pytest.mark.parametrize("tp, raw", [
        (bool, "yes"), (bool, 1), (int, "1.0"), (int, "abc"), (int, True), (float, "1,5"),
    ])
    def test_undefined_inputs_are_fatal(self, decoder, tp, raw):
        with pytest.raises(TypeMismatchError):
            decoder.decode(tp, raw)

    def test_objects_have_no_string_form(self, decoder):
        with pytest.raises(TypeMismatchError):
            decoder.decode(int, {"a": 1})

    def test_corrupted_number_not_coerced(self, decoder):
        """1.5 for int is corrupted content, not a type mismatch."""
        with pytest.raises(DataCorruptedError):
            decoder.decode(int, 1.5)

    def test_custom_caster(self):
        """Casters can be overridden per decoder."""
        decoder = build_default_decoder(casters={bool: lambda text: {"yes": True, "no": False}.get(text)})
        assert decoder.decode(bool, "yes") is True
        with pytest.raises(TypeMismatchError):
            decoder.decode(bool, "true")

    def test_caster_coercion_without_caster_declines(self):
        with pytest.raises(TypeMismatchError):
            CasterCoercion({}).coerce(TypeMismatchError(int, "1"), None, int, None)


class TestStringCoercion:
    """Test StringCoercion."""

    @pytest.mark.parametrize("raw, expected", [
        (1, "1"), (-5, "-5"), (2.5, "2.5"), (True, "true"), (False, "false"),
    ])
    def test_primitives_to_text(self, decoder, raw, expected):
        assert decoder.decode(str, raw) == expected

    def test_integral_float_keeps_float_text(self, decoder):
        """Floats outside the Int64 range are spelled as floats."""
        assert decoder.decode(str, 1e20) == "1e+20"
        assert decoder.decode(str, 2.0) == "2"

    def test_containers_stay_fatal(self, decoder):
        with pytest.raises(TypeMismatchError):
            decoder.decode(str, [1])

    def test_only_type_mismatch(self):
        error = DataCorruptedError("bad")
        with pytest.raises(DataCorruptedError):
            StringCoercion().coerce(error, None, str, None)


class TestDateCoercion:
    """Test DateCoercion."""

    def test_empty_optional_is_none(self, reporting_decoder, reports):
        assert reporting_decoder.decode(Optional[datetime], "") is None
        assert reports == []

    def test_empty_required_is_fatal(self, decoder):
        with pytest.raises(DataCorruptedError):
            decoder.decode(datetime, "")

    def test_garbage_is_fatal(self, decoder):
        with pytest.raises(DataCorruptedError, match="invalid date"):
            decoder.decode(Optional[datetime], "yesterday")

    def test_number_is_fatal(self, decoder):
        """Dates never coerce from a type mismatch."""
        with pytest.raises(TypeMismatchError):
            decoder.decode(Optional[datetime], 1546300800)

    def test_only_data_corrupted(self):
        with pytest.raises(TypeMismatchError):
            DateCoercion().coerce(TypeMismatchError(datetime, 1), None, datetime, None)


class TestURLCoercion:
    """Test URLCoercion."""

    def test_invalid_optional_reports_once(self, reporting_decoder, reports):
        assert reporting_decoder.decode(Optional[URL], "not a url") is None
        assert reports == [(FailureKind.DATA_CORRUPTED, "", "not a url")]

    def test_valid_url_no_report(self, reporting_decoder, reports):
        assert reporting_decoder.decode(Optional[URL], "https://example.com") == "https://example.com"
        assert reports == []

    def test_invalid_required_is_fatal(self, reporting_decoder, reports):
        with pytest.raises(DataCorruptedError):
            reporting_decoder.decode(URL, "not a url")
        assert reports.raws == ["not a url"]

    def test_number_is_fatal(self, decoder):
        with pytest.raises(TypeMismatchError):
            decoder.decode(Optional[URL], 5)

    def test_only_data_corrupted(self):
        with pytest.raises(TypeMismatchError):
            URLCoercion().coerce(TypeMismatchError(URL, 1), None, URL, None)


class TestArrayCoercion:
    """Test ArrayCoercion."""

    def test_list_matcher(self):
        assert ListMatcher().matches(list[int])
        assert ListMatcher().matches(list)
        assert not ListMatcher().matches(dict[str, int])
        assert not ListMatcher().matches(int)

    def test_mixed_elements(self, decoder):
        assert decoder.decode(list[int], [1, "2", 3]) == [1, 2, 3]

    def test_bad_element_fails_whole_array(self, decoder):
        """No partial arrays: the original failure propagates."""
        with pytest.raises(TypeMismatchError) as exc:
            decoder.decode(list[int], [1, "x", 3])
        assert exc.value.pointer == "/1"

    def test_not_an_array(self, decoder):
        with pytest.raises(TypeMismatchError):
            decoder.decode(list[int], "1,2")

    def test_optional_elements(self, decoder):
        assert decoder.decode(list[Optional[int]], [None, "1"]) == [None, 1]

    def test_null_element_for_required(self, decoder):
        with pytest.raises(ValueNotFoundError):
            decoder.decode(list[int], [1, None])

    def test_records_inside(self, decoder):
        assert decoder.decode(list[Box], [{"size": "1"}, {"size": 2}]) == [Box(1), Box(2)]

    def test_corrupted_element_not_rewalked(self, decoder):
        """Only a type mismatch triggers the re-walk."""
        with pytest.raises(DataCorruptedError):
            decoder.decode(list[int], [1, 2.5])

    def test_only_type_mismatch(self):
        with pytest.raises(DataCorruptedError):
            ArrayCoercion().coerce(DataCorruptedError("x"), None, list[int], None)


class TestRawValueCoercion:
    """Test RawValueCoercion (enums)."""

    def test_enum_matcher(self):
        assert EnumMatcher().matches(Color)
        assert not EnumMatcher().matches(str)
        assert not EnumMatcher().matches(list[Color])

    def test_string_backed_unknown_optional(self, reporting_decoder, reports):
        assert reporting_decoder.decode(Optional[Color], "blue") is None
        assert reports == [(FailureKind.DATA_CORRUPTED, "", "blue")]

    def test_string_backed_empty_no_report(self, reporting_decoder, reports):
        assert reporting_decoder.decode(Optional[Color], "") is None
        assert reports == []

    def test_string_backed_unknown_required(self, reporting_decoder, reports):
        with pytest.raises(DataCorruptedError):
            reporting_decoder.decode(Color, "blue")
        assert reports.raws == ["blue"]

    def test_string_backed_wrong_shape(self, decoder):
        with pytest.raises(TypeMismatchError):
            decoder.decode(Optional[Color], 5)

    def test_int_backed_numeral_string(self, decoder):
        assert decoder.decode(Level, "2") is Level.HIGH

    def test_int_backed_unknown_numeral(self, reporting_decoder, reports):
        with pytest.raises(TypeMismatchError):
            reporting_decoder.decode(Level, "9")
        assert reports.raws == ["9"]

    def test_int_backed_unknown_number_optional(self, reporting_decoder, reports):
        assert reporting_decoder.decode(Optional[Level], 9) is None
        assert reports == [(FailureKind.DATA_CORRUPTED, "", "9")]

    def test_int_backed_garbage(self, reporting_decoder, reports):
        """A raw value that cannot be produced is fatal, without a report."""
        with pytest.raises(TypeMismatchError):
            reporting_decoder.decode(Optional[Level], "high")
        assert reports == []

    def test_float_backed(self, decoder):
        assert decoder.decode(Ratio, "0.5") is Ratio.HALF
        assert decoder.decode(Ratio, 1) is Ratio.ONE

    def test_bool_backed(self, decoder):
        assert decoder.decode(Flag, "True") is Flag.ON

    def test_direct_coerce_declines_absent(self):
        with pytest.raises(ValueNotFoundError):
            RawValueCoercion().coerce(ValueNotFoundError(Level), None, Level, None)


class TestNoCoercion:
    """Test the catch-all."""

    def test_reraises(self):
        error = TypeMismatchError(dict, 1)
        with pytest.raises(TypeMismatchError) as exc:
            NoCoercion().coerce(error, None, dict, None)
        assert exc.value is error

    def test_records_and_dicts_not_coerced(self, decoder):
        with pytest.raises(TypeMismatchError):
            decoder.decode(Box, "size=1")
        with pytest.raises(TypeMismatchError):
            decoder.decode(dict[str, int], {"a": "1"})
