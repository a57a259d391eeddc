import math
import sys

import pytest

from calculadora.config import FormatConfig
from calculadora.core.errors import MalformedDisplayError
from calculadora.core.formatting import format_number, parse_display


class TestFormatNumber:

    @pytest.mark.parametrize("value, expected", [
        (0.0, "0"),
        (-0.0, "0"),
        (8.0, "8"),
        (-2.0, "-2"),
        (2.5, "2.5"),
        (0.1 + 0.2, "0.3"),
        (1 / 3, "0.333333333333"),
        (123456789012.0, "123456789012"),
        (1234567890123.0, "1.23456789012E+12"),
        (1e16, "1E+16"),
        (1e-7, "1E-07"),
        (-1.5e20, "-1.5E+20"),
        (0.0001, "0.0001"),
    ])
    def test_values(self, value, expected):
        assert format_number(value) == expected

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_is_error(self, value):
        assert format_number(value) == "Error"

    def test_subnormal_is_zero(self):
        assert format_number(sys.float_info.min / 4) == "0"

    def test_largest_double(self):
        assert format_number(sys.float_info.max) == "1.79769313486E+308"

    def test_separator(self):
        assert format_number(2.5, FormatConfig(decimal_separator=",")) == "2,5"

    def test_falls_back_to_scientific_when_too_long(self):
        config = FormatConfig(max_display_length=8)
        assert format_number(123456789.0, config) == "1.234568E+08"

    def test_scientific_fallback_exponent_form(self):
        config = FormatConfig(max_display_length=12)
        assert format_number(1.23456789012e16, config) == "1.234568E+16"
        assert format_number(-1.23456789012e-100, config) == "-1.234568E-100"

    def test_exponent_kept_when_within_limit(self):
        config = FormatConfig(significant_digits=3)
        assert format_number(123456.0, config) == "1.23E+05"


class TestParseDisplay:

    @pytest.mark.parametrize("text, expected", [
        ("0", 0.0),
        ("0.", 0.0),
        ("-12.5", -12.5),
        ("1E+16", 1e16),
    ])
    def test_valid(self, text, expected):
        assert parse_display(text) == expected

    @pytest.mark.parametrize("text", ["", "Error", "abc", "-", "inf", "nan", "1_000", " 5", "1" * 65])
    def test_invalid(self, text):
        with pytest.raises(MalformedDisplayError):
            parse_display(text)

    def test_overflowing_text_is_rejected(self):
        with pytest.raises(MalformedDisplayError):
            parse_display("1E+999")

    def test_separator(self):
        assert parse_display("2,5", FormatConfig(decimal_separator=",")) == 2.5
