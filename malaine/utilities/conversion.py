"""
Unit conversion between physical dimensions and stitch/row counts.

A dimension is first expressed in the gauge's own unit, then scaled by the
gauge's per-10-unit counts:

    stitches = round(d / 10 * stitches_per_10)
    rows     = round(d / 10 * rows_per_10)

Rounding is round-half-up (STITCH_ROUNDING) so that a count sitting exactly
on .5 always goes up, independent of Python's banker's rounding. Every
downstream stitch count depends on this rule.

All functions are pure.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from .types import CM_PER_INCH, Gauge, LengthUnit

STITCH_ROUNDING: str = decimal.ROUND_HALF_UP


def round_half_up(value: float, places: int = 0) -> float:
    """Round *value* to *places* decimals, ties away from zero.

    Goes through ``str`` so that 2.675 rounds as written rather than as its
    binary approximation.
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=STITCH_ROUNDING))


def round_count(value: float) -> int:
    """Round a raw stitch/row count to the nearest whole stitch (half-up)."""
    return int(round_half_up(value))


def convert_length(value: float, from_unit: LengthUnit, to_unit: LengthUnit) -> float:
    """Convert a length between cm and inches."""
    if from_unit is to_unit:
        return value
    if from_unit is LengthUnit.INCH:
        return value * CM_PER_INCH
    return value / CM_PER_INCH


def raw_stitch_count(dimension: float, gauge: Gauge, unit: LengthUnit | None = None) -> float:
    """Convert a physical dimension to a raw (non-integer) stitch count.

    *unit* is the unit of *dimension*; it defaults to the gauge's unit.
    """
    d = convert_length(dimension, unit or gauge.unit, gauge.unit)
    return d / 10 * gauge.stitches_per_10


def raw_row_count(dimension: float, gauge: Gauge, unit: LengthUnit | None = None) -> float:
    """Convert a physical dimension to a raw (non-integer) row count."""
    d = convert_length(dimension, unit or gauge.unit, gauge.unit)
    return d / 10 * gauge.rows_per_10


def dimension_to_stitches(dimension: float, gauge: Gauge, unit: LengthUnit | None = None) -> int:
    """Convert a physical dimension to a whole stitch count (never negative)."""
    return max(0, round_count(raw_stitch_count(dimension, gauge, unit)))


def dimension_to_rows(dimension: float, gauge: Gauge, unit: LengthUnit | None = None) -> int:
    """Convert a physical dimension to a whole row count (never negative)."""
    return max(0, round_count(raw_row_count(dimension, gauge, unit)))


def stitches_to_cm(count: float, gauge: Gauge) -> float:
    """Convert a stitch count to a physical width in cm."""
    return count / gauge.stitches_per_cm


def rows_to_cm(count: float, gauge: Gauge) -> float:
    """Convert a row count to a physical length in cm."""
    return count / gauge.rows_per_cm
