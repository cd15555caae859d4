"""Unit tests for dimension parsing and formatting."""

import pytest

from cuespec_mcp_server.drawing.dimensions import (
    parse_value,
    parse_dimension,
    convert_to_inches,
    to_inches,
    format_dimension,
)
from cuespec_mcp_server.models import Dimension, DimensionUnit


class TestParseValue:
    """Tests for numeric text parsing."""

    @pytest.mark.parametrize("a,b", [(1, 2), (3, 8), (5, 16), (7, 3), (15, 16)])
    def test_simple_fraction(self, a, b):
        """Test that 'a/b' parses to a/b."""
        assert parse_value(f"{a}/{b}") == pytest.approx(a / b)

    def test_mixed_number(self):
        """Test mixed numbers with a space or a hyphen."""
        assert parse_value("1 1/2") == 1.5
        assert parse_value("2-3/4") == 2.75

    def test_decimal(self):
        """Test decimal text."""
        assert parse_value("0.375") == 0.375
        assert parse_value(".5") == 0.5

    def test_leading_number_with_trailing_text(self):
        """Test that trailing words are ignored after a number."""
        assert parse_value("0.5 thru") == 0.5

    def test_zero_denominator(self):
        """Test that a zero denominator yields 0."""
        assert parse_value("3/0") == 0.0

    @pytest.mark.parametrize("text", ["", "   ", "abc", "1/2/3", "a/b", None])
    def test_unparsable_is_zero(self, text):
        """Test that unparsable input yields 0."""
        assert parse_value(text) == 0.0

    def test_negative_is_zero(self):
        """Test that negative values degrade to 0."""
        assert parse_value("-0.5") == 0.0
        assert parse_value(-2) == 0.0

    def test_numbers_pass_through(self):
        """Test numeric input."""
        assert parse_value(0.25) == 0.25
        assert parse_value(2) == 2.0


class TestParseDimension:
    """Tests for parse_dimension."""

    def test_empty_and_garbage_are_zero(self):
        """Test that empty and non-numeric text give value 0."""
        assert parse_dimension("").value == 0.0
        assert parse_dimension("abc").value == 0.0

    def test_number_is_inches(self):
        """Test that numeric input is taken as inches."""
        d = parse_dimension(0.75)
        assert d.value == 0.75
        assert d.unit == DimensionUnit.INCHES

    def test_mm_suffix(self):
        """Test mm suffix detection, case-insensitive."""
        d = parse_dimension(" 9.5MM ")
        assert d.value == 9.5
        assert d.unit == DimensionUnit.MILLIMETERS
        assert d.original_text == "9.5MM"

    def test_cm_suffix(self):
        """Test cm suffix detection."""
        d = parse_dimension("2.54cm")
        assert d.unit == DimensionUnit.CENTIMETERS
        assert d.value == 2.54

    def test_inch_markers_stripped(self):
        """Test inch marks and words."""
        assert parse_dimension('3/8"').value == 0.375
        assert parse_dimension("1.5 in").value == 1.5
        assert parse_dimension("2 inches").value == 2.0

    def test_default_unit_applies_without_suffix(self):
        """Test that the step unit applies to un-suffixed text."""
        d = parse_dimension("10", DimensionUnit.MILLIMETERS)
        assert d.unit == DimensionUnit.MILLIMETERS

    def test_suffix_overrides_default_unit(self):
        """Test that an inline suffix wins over the default unit."""
        d = parse_dimension("1cm", DimensionUnit.MILLIMETERS)
        assert d.unit == DimensionUnit.CENTIMETERS

    def test_non_string_is_empty(self):
        """Test that unsupported types give an empty dimension."""
        assert parse_dimension(None) == Dimension()
        assert parse_dimension(["1"]).value == 0.0


class TestConvertToInches:
    """Tests for unit conversion."""

    def test_mm(self):
        """Test 25.4mm is one inch."""
        assert convert_to_inches(parse_dimension("25.4mm")) == pytest.approx(1.0, abs=1e-9)

    def test_cm(self):
        """Test 2.54cm is one inch."""
        assert convert_to_inches(parse_dimension("2.54cm")) == pytest.approx(1.0, abs=1e-9)

    def test_inches_identity(self):
        """Test inches pass through unchanged."""
        assert convert_to_inches(Dimension(value=0.4, unit=DimensionUnit.INCHES)) == 0.4

    @pytest.mark.parametrize("a,b", [(1, 4), (3, 8), (11, 16), (9, 5)])
    def test_fraction_exact(self, a, b):
        """Test fraction text converts to a/b inches."""
        assert to_inches(f"{a}/{b}") == pytest.approx(a / b)


class TestFormatDimension:
    """Tests for display formatting."""

    def test_half(self):
        """Test 0.5 snaps to 1/2."""
        assert format_dimension(parse_dimension("0.5")) == '1/2"'

    def test_three_eighths(self):
        """Test 0.375 snaps to 3/8."""
        assert format_dimension(parse_dimension("0.375")) == '3/8"'

    def test_mixed(self):
        """Test whole part with a sixteenth fraction."""
        assert format_dimension(parse_dimension("1 5/16")) == '1 5/16"'

    def test_within_tolerance(self):
        """Test values within 0.001 snap."""
        assert format_dimension(Dimension(value=0.2505)) == '1/4"'

    def test_non_sixteenth_is_decimal(self):
        """Test values off the sixteenth grid use three decimals."""
        assert format_dimension(Dimension(value=0.401)) == '0.401"'

    def test_whole_inch_is_decimal(self):
        """Test whole inches have no fraction to snap to."""
        assert format_dimension(Dimension(value=2.0)) == '2.000"'

    def test_metric(self):
        """Test metric values keep one decimal and the unit."""
        assert format_dimension(parse_dimension("9.5mm")) == "9.5mm"
        assert format_dimension(parse_dimension("2cm")) == "2.0cm"
