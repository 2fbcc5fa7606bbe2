# tests/test_coerce.py
"""
Tests for optionator.coerce and optionator.numeric.

Covers:
    - text parsers for ints, floats, bools and durations
    - find_coercer() / coerce_default() type dispatch
    - duration formatting
    - bounded integer ranges
"""

from datetime import timedelta
from typing import List, Optional

import pytest

from optionator.coerce import (
    coerce_default,
    convert_value,
    find_coercer,
    format_duration,
    parse_bool,
    parse_duration,
    parse_float,
    parse_int,
    to_timedelta,
)
from optionator.exceptions import TypeMismatchError, UnsupportedTypeError
from optionator.numeric import Int8, Uint, Uint8, Uint16

SECOND = 1_000_000_000

# ---------------------------------------------------------------------------
# Scalar parsers
# ---------------------------------------------------------------------------


class TestScalarParsers:
    """Base-10 numbers and the fixed boolean vocabulary."""

    @pytest.mark.parametrize("text,expected", [("0", 0), ("42", 42), ("-7", -7), ("+3", 3)])
    def test_parse_int(self, text, expected):
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "1.5", " 1", "1_000", "0x10"])
    def test_parse_int_rejects(self, text):
        with pytest.raises(ValueError):
            parse_int(text)

    def test_parse_float(self):
        assert parse_float("1.25") == 1.25
        assert parse_float("-3") == -3.0
        assert parse_float("1e3") == 1000.0
        assert parse_float("inf") == float("inf")

    @pytest.mark.parametrize("text", ["", "x", " 1.0", "1_0.0"])
    def test_parse_float_rejects(self, text):
        with pytest.raises(ValueError):
            parse_float(text)

    @pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
    def test_parse_bool_true(self, text):
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
    def test_parse_bool_false(self, text):
        assert parse_bool(text) is False

    @pytest.mark.parametrize("text", ["yes", "no", "tRUE", "", "2"])
    def test_parse_bool_rejects(self, text):
        with pytest.raises(ValueError, match="invalid boolean"):
            parse_bool(text)


# ---------------------------------------------------------------------------
# Durations
# ---------------------------------------------------------------------------


class TestDurations:
    """Compound duration strings such as 30s and 1h30m."""

    @pytest.mark.parametrize("text,expected", [
        ("0", 0),
        ("30s", 30 * SECOND),
        ("1h30m", 90 * 60 * SECOND),
        ("1.5s", 1_500_000_000),
        ("300ms", 300_000_000),
        ("-2m", -120 * SECOND),
        ("+5s", 5 * SECOND),
        ("10us", 10_000),
        ("10µs", 10_000),
        ("7ns", 7),
        ("1h1m1s1ms", 3661 * SECOND + 1_000_000),
        (".5s", 500_000_000),
    ])
    def test_parse(self, text, expected):
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "-", "30", "s", "1x", "1 s", ".s", "1.2.3s"])
    def test_rejects(self, text):
        with pytest.raises(ValueError):
            parse_duration(text)

    def test_overflow(self):
        with pytest.raises(ValueError, match="overflow"):
            parse_duration("3000000h")

    def test_to_timedelta(self):
        assert to_timedelta(30 * SECOND) == timedelta(seconds=30)
        assert to_timedelta(-1_500_000) == -timedelta(milliseconds=1, microseconds=500)
        assert to_timedelta(-1_000) == -timedelta(microseconds=1)

    @pytest.mark.parametrize("nanoseconds", [1, 999, 500, -1_500_001])
    def test_to_timedelta_rejects_sub_microsecond(self, nanoseconds):
        with pytest.raises(ValueError, match="microsecond resolution"):
            to_timedelta(nanoseconds)

    @pytest.mark.parametrize("value,expected", [
        (timedelta(0), "0s"),
        (timedelta(seconds=30), "30s"),
        (timedelta(minutes=90), "1h30m0s"),
        (timedelta(seconds=90), "1m30s"),
        (timedelta(milliseconds=1500), "1.5s"),
        (timedelta(milliseconds=250), "250ms"),
        (timedelta(microseconds=12), "12µs"),
        (-timedelta(seconds=5), "-5s"),
    ])
    def test_format(self, value, expected):
        assert format_duration(value) == expected

    def test_format_parses_back(self):
        value = timedelta(hours=2, minutes=3, seconds=4, microseconds=500)
        assert to_timedelta(parse_duration(format_duration(value))) == value


# ---------------------------------------------------------------------------
# Type dispatch
# ---------------------------------------------------------------------------


class TestCoerceDefault:
    """coerce_default() picks the parser from the static type."""

    def test_str_verbatim(self):
        assert coerce_default(" spaced ", str) == " spaced "

    def test_int_and_bool_are_distinct(self):
        assert coerce_default("1", int) == 1
        assert coerce_default("1", bool) is True

    def test_float(self):
        assert coerce_default("2.5", float) == 2.5

    def test_timedelta(self):
        assert coerce_default("30s", timedelta) == timedelta(seconds=30)

    def test_timedelta_sub_microsecond_is_an_error(self):
        assert coerce_default("2000ns", timedelta) == timedelta(microseconds=2)
        for text in ("500ns", "1500ns", "1.5us"):
            with pytest.raises(ValueError, match="microsecond resolution"):
                coerce_default(text, timedelta, "every")

    def test_optional_unwraps(self):
        assert coerce_default("5", Optional[int]) == 5
        assert coerce_default("5", int | None) == 5

    def test_bounded_int(self):
        value = coerce_default("255", Uint8)
        assert value == 255
        assert type(value) is Uint8

    @pytest.mark.parametrize("tp,text", [(Uint8, "256"), (Uint8, "-1"), (Int8, "128"), (Uint16, "65536")])
    def test_bounded_int_out_of_range(self, tp, text):
        with pytest.raises(OverflowError, match="out of range"):
            coerce_default(text, tp)

    @pytest.mark.parametrize("tp", [list, dict, bytes, List[int], object])
    def test_unsupported(self, tp):
        assert find_coercer(tp) is None
        with pytest.raises(UnsupportedTypeError, match="unsupported field type"):
            coerce_default("x", tp, "field_x")


# ---------------------------------------------------------------------------
# Override conversion
# ---------------------------------------------------------------------------


class TestConvertValue:
    """convert_value() for override steps."""

    def test_exact_instance(self):
        assert convert_value("a", str) == "a"

    def test_str_only_from_str(self):
        with pytest.raises(TypeMismatchError):
            convert_value(5, str)

    def test_timedelta_only_from_timedelta(self):
        with pytest.raises(TypeMismatchError):
            convert_value(30, timedelta)

    def test_generic_alias_matches_origin(self):
        assert convert_value([1, 2], List[int]) == [1, 2]
        with pytest.raises(TypeMismatchError):
            convert_value((1, 2), List[int])

    def test_union(self):
        assert convert_value("x", int | str) == "x"

    def test_mismatch_names_field(self):
        with pytest.raises(TypeMismatchError, match="for field port"):
            convert_value("80", int, "port")


class TestBoundedInts:
    """numeric.BoundedInt subclasses."""

    def test_bounds(self):
        assert Uint8.bounds() == (0, 255)
        assert Int8.bounds() == (-128, 127)
        assert Uint.bounds() == (0, 2 ** 64 - 1)

    def test_default_is_zero(self):
        assert Uint16() == 0

    def test_repr(self):
        assert repr(Uint16(80)) == "Uint16(80)"
