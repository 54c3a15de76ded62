"""
Tests for number parsing and formatting.
"""
import math

import pytest
from calculator.formatting import (
    add_thousand_separators, format_number, number_to_string, parse_operand,
)


class TestFormatNumber:
    """Tests for format_number."""

    def test_fraction_truncated_not_rounded(self):
        """Test that the fraction keeps at most 8 digits without rounding."""
        assert format_number(1234567.123456789) == "1,234,567.12345678"
        assert format_number(2 / 3) == "0.66666666"

    def test_zero(self):
        assert format_number(0) == "0"
        assert format_number(-0.0) == "0"

    def test_nan_and_none(self):
        """Test that non-numeric input formats as an empty string."""
        assert format_number(float("nan")) == ""
        assert format_number(None) == ""

    def test_integer_grouping(self):
        assert format_number(1234567) == "1,234,567"
        assert format_number(999) == "999"
        assert format_number(1000) == "1,000"

    def test_integral_float_has_no_fraction(self):
        assert format_number(20.0) == "20"

    def test_negative_sign_not_grouped(self):
        """Test that the sign stays on the leftmost digit group."""
        assert format_number(-123) == "-123"
        assert format_number(-123456) == "-123,456"
        assert format_number(-1234.5) == "-1,234.5"

    def test_float_noise_truncated(self):
        assert format_number(0.1 + 0.2) == "0.30000000"

    def test_short_fraction_kept(self):
        assert format_number(20.5) == "20.5"

    def test_infinity(self):
        assert format_number(math.inf) == "Infinity"
        assert format_number(-math.inf) == "-Infinity"

    def test_exponent_preserved(self):
        """Test that exponent notation keeps its suffix."""
        assert format_number(1e21) == "1e+21"
        assert format_number(1.5e-7) == "1.5e-7"

    def test_large_values_use_exponent(self):
        """Test that values of 1e21 and above are not written out in full."""
        assert format_number(1.5e300) == "1.5e+300"
        assert format_number(-2.5e22) == "-2.5e+22"


class TestAddThousandSeparators:
    """Tests for add_thousand_separators."""

    @pytest.mark.parametrize("number, expected", [
        ("1", "1"),
        ("123", "123"),
        ("1234", "1,234"),
        ("1234567", "1,234,567"),
        ("-1234567", "-1,234,567"),
        ("-100", "-100"),
    ])
    def test_grouping(self, number, expected):
        assert add_thousand_separators(number) == expected

    def test_non_digits_returned_unchanged(self):
        assert add_thousand_separators("") == ""
        assert add_thousand_separators("abc") == "abc"


class TestNumberToString:
    """Tests for number_to_string."""

    def test_integral_values(self):
        assert number_to_string(5.0) == "5"
        assert number_to_string(-0.0) == "0"
        assert number_to_string(1e20) == "100000000000000000000"

    def test_fractions(self):
        assert number_to_string(0.5) == "0.5"
        assert number_to_string(0.00001) == "0.00001"

    def test_exponents(self):
        assert number_to_string(1e21) == "1e+21"
        assert number_to_string(1e-7) == "1e-7"
        assert number_to_string(1e24) == "1e+24"
        assert number_to_string(1.5e300) == "1.5e+300"

    def test_special_values(self):
        assert number_to_string(math.inf) == "Infinity"
        assert number_to_string(-math.inf) == "-Infinity"
        assert number_to_string(math.nan) == "NaN"

    def test_output_parses_back(self):
        for value in (0.1, 1 / 3, 123456.789, 1e-7, 1e21):
            assert parse_operand(number_to_string(value)) == value


class TestParseOperand:
    """Tests for parse_operand."""

    def test_valid_buffers(self):
        assert parse_operand("12.5") == 12.5
        assert parse_operand("0.") == 0.0
        assert parse_operand("5") == 5.0

    def test_invalid_buffers(self):
        assert parse_operand("") is None
        assert parse_operand(".") is None
        assert parse_operand("NaN") is None
        assert parse_operand("abc") is None

    def test_infinity_parses(self):
        assert parse_operand("Infinity") == math.inf
