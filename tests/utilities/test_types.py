"""Tests for utilities type definitions."""

import pytest

from malaine.utilities.types import CM_PER_INCH, Gauge, LengthUnit


class TestLengthUnit:
    def test_values(self):
        assert LengthUnit.CM.value == "cm"
        assert LengthUnit.INCH.value == "inch"

    def test_plural_inches_accepted(self):
        assert LengthUnit("inches") is LengthUnit.INCH

    def test_unknown_unit_rejected(self):
        with pytest.raises(ValueError):
            LengthUnit("furlong")


class TestGauge:
    def test_defaults_to_cm(self):
        g = Gauge(stitches_per_10=22.0, rows_per_10=30.0)
        assert g.unit is LengthUnit.CM

    def test_per_cm_rates(self):
        g = Gauge(stitches_per_10=22.0, rows_per_10=30.0)
        assert g.stitches_per_cm == pytest.approx(2.2)
        assert g.rows_per_cm == pytest.approx(3.0)

    def test_per_cm_rates_from_inch_gauge(self):
        g = Gauge(stitches_per_10=50.0, rows_per_10=70.0, unit=LengthUnit.INCH)
        assert g.stitches_per_cm == pytest.approx(5.0 / CM_PER_INCH)
        assert g.rows_per_cm == pytest.approx(7.0 / CM_PER_INCH)

    def test_is_frozen(self):
        g = Gauge(stitches_per_10=22.0, rows_per_10=30.0)
        with pytest.raises(AttributeError):
            g.stitches_per_10 = 20.0  # type: ignore[misc]

    @pytest.mark.parametrize("stitches", [0, -4.0])
    def test_rejects_non_positive_stitches(self, stitches):
        with pytest.raises(ValueError, match="stitches_per_10 must be positive"):
            Gauge(stitches_per_10=stitches, rows_per_10=30.0)

    @pytest.mark.parametrize("rows", [0, -1.5])
    def test_rejects_non_positive_rows(self, rows):
        with pytest.raises(ValueError, match="rows_per_10 must be positive"):
            Gauge(stitches_per_10=22.0, rows_per_10=rows)

    def test_hashable(self):
        g = Gauge(stitches_per_10=22.0, rows_per_10=30.0)
        assert {g: "dk"}[g] == "dk"
