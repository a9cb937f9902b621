"""Tests for runtime value helpers."""

import math

import pytest

from nepo.interpret._values import is_number, is_true, parse_number, to_text, truncate


class TestParseNumber:
    def test_decimal(self):
        assert parse_number("12.5") == 12.5

    def test_integer_text(self):
        assert parse_number("42") == 42.0
        assert isinstance(parse_number("42"), float)

    def test_negative(self):
        assert parse_number("-3") == -3.0

    def test_surrounding_whitespace(self):
        assert parse_number(" 7 ") == 7.0

    def test_exponent(self):
        assert parse_number("1e3") == 1000.0

    def test_malformed_falls_back_to_zero(self):
        assert parse_number("abc") == 0.0

    def test_empty_falls_back_to_zero(self):
        assert parse_number("") == 0.0


class TestPredicates:
    def test_is_number(self):
        assert is_number(1.0)
        assert not is_number(True)
        assert not is_number("1")
        assert not is_number(None)

    def test_is_true_only_for_boolean_true(self):
        assert is_true(True)
        assert not is_true(False)
        assert not is_true(1.0)
        assert not is_true("TRUE")
        assert not is_true(None)


class TestTruncate:
    @pytest.mark.parametrize("value, expected", [
        (2.9, 2),
        (-2.9, -2),
        (0.0, 0),
        (3.0, 3),
    ])
    def test_toward_zero(self, value, expected):
        assert truncate(value) == expected

    def test_non_finite(self):
        assert truncate(math.nan) == 0
        assert truncate(math.inf) == 0


class TestToText:
    def test_number(self):
        assert to_text(12.0) == "12.0"

    def test_boolean(self):
        assert to_text(True) == "true"
        assert to_text(False) == "false"

    def test_absent(self):
        assert to_text(None) == ""

    def test_text(self):
        assert to_text("Hi") == "Hi"
