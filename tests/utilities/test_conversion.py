"""Tests for unit conversion and round-half-up rounding."""

import pytest

from malaine.utilities.conversion import (
    STITCH_ROUNDING,
    convert_length,
    dimension_to_rows,
    dimension_to_stitches,
    raw_row_count,
    raw_stitch_count,
    round_count,
    round_half_up,
    rows_to_cm,
    stitches_to_cm,
)
from malaine.utilities.types import CM_PER_INCH, Gauge, LengthUnit


@pytest.fixture(scope="module")
def dk_gauge():
    """Typical DK gauge: 22 sts and 30 rows per 10 cm."""
    return Gauge(stitches_per_10=22.0, rows_per_10=30.0)


@pytest.fixture(scope="module")
def inch_gauge():
    """Worsted gauge expressed per 10 inches: 5 sts/inch, 7 rows/inch."""
    return Gauge(stitches_per_10=50.0, rows_per_10=70.0, unit=LengthUnit.INCH)


class TestRoundHalfUp:
    def test_rounding_mode_constant(self):
        import decimal

        assert STITCH_ROUNDING == decimal.ROUND_HALF_UP

    def test_half_goes_up(self):
        assert round_half_up(2.5) == 3.0
        assert round_half_up(0.5) == 1.0

    def test_differs_from_bankers_rounding(self):
        assert round(2.5) == 2
        assert round_count(2.5) == 3

    def test_two_places_as_written(self):
        assert round_half_up(2.675, 2) == 2.68

    def test_negative_ties_away_from_zero(self):
        assert round_half_up(-2.5) == -3.0

    def test_round_count_returns_int(self):
        assert isinstance(round_count(109.6), int)
        assert round_count(109.6) == 110
        assert round_count(109.4) == 109


class TestConvertLength:
    def test_same_unit_is_identity(self):
        assert convert_length(12.3, LengthUnit.CM, LengthUnit.CM) == 12.3

    def test_inch_to_cm(self):
        assert convert_length(1.0, LengthUnit.INCH, LengthUnit.CM) == CM_PER_INCH

    def test_cm_to_inch(self):
        assert convert_length(25.4, LengthUnit.CM, LengthUnit.INCH) == pytest.approx(10.0)

    def test_zero(self):
        assert convert_length(0.0, LengthUnit.INCH, LengthUnit.CM) == 0.0


class TestDimensionToStitches:
    def test_fifty_cm_at_22_per_10(self, dk_gauge):
        assert dimension_to_stitches(50, dk_gauge) == 110

    def test_raw_count_is_unrounded(self, dk_gauge):
        assert raw_stitch_count(10.3, dk_gauge) == pytest.approx(22.66)

    def test_zero_dimension(self, dk_gauge):
        assert dimension_to_stitches(0, dk_gauge) == 0

    def test_never_negative(self, dk_gauge):
        assert dimension_to_stitches(-5, dk_gauge) == 0

    def test_half_stitch_rounds_up(self):
        gauge = Gauge(stitches_per_10=25.0, rows_per_10=30.0)
        # 1 cm at 2.5 sts/cm = 2.5 stitches
        assert dimension_to_stitches(1, gauge) == 3

    def test_inch_dimension_on_cm_gauge(self, dk_gauge):
        # 10 inches = 25.4 cm → 55.88 stitches
        assert dimension_to_stitches(10, dk_gauge, LengthUnit.INCH) == 56

    def test_cm_dimension_on_inch_gauge(self, inch_gauge):
        # 25.4 cm = 10 inches → 50 stitches
        assert dimension_to_stitches(25.4, inch_gauge, LengthUnit.CM) == 50

    def test_unit_defaults_to_gauge_unit(self, inch_gauge):
        assert dimension_to_stitches(10, inch_gauge) == 50


class TestDimensionToRows:
    def test_forty_cm_at_30_per_10(self, dk_gauge):
        assert dimension_to_rows(40, dk_gauge) == 120

    def test_raw_rows(self, dk_gauge):
        assert raw_row_count(1.0, dk_gauge) == pytest.approx(3.0)

    def test_inch_gauge(self, inch_gauge):
        assert dimension_to_rows(2, inch_gauge) == 14


class TestBackToPhysical:
    def test_stitches_to_cm(self, dk_gauge):
        assert stitches_to_cm(110, dk_gauge) == pytest.approx(50.0)

    def test_rows_to_cm(self, dk_gauge):
        assert rows_to_cm(120, dk_gauge) == pytest.approx(40.0)

    def test_inch_gauge_reports_cm(self, inch_gauge):
        assert stitches_to_cm(50, inch_gauge) == pytest.approx(25.4)
