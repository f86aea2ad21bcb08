"""
Core type definitions for the shared utilities layer.

All types are frozen dataclasses with fail-fast validation in __post_init__.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CM_PER_INCH: float = 2.54


class LengthUnit(str, Enum):
    """Unit system for physical dimensions and gauge spans."""

    CM = "cm"
    INCH = "inch"

    @classmethod
    def _missing_(cls, value: object) -> LengthUnit | None:
        # Calculation payloads spell inches in the plural.
        if value == "inches":
            return cls.INCH
        return None


@dataclass(frozen=True)
class Gauge:
    """
    Knitting gauge: stitches and rows over a 10-unit span.

    With ``unit=CM`` the counts are the familiar "per 10 cm" swatch values;
    with ``unit=INCH`` they are per 10 inches. Both counts must be strictly
    positive. Gauges are immutable after construction and safe to share.
    """

    stitches_per_10: float
    rows_per_10: float
    unit: LengthUnit = LengthUnit.CM

    def __post_init__(self) -> None:
        if self.stitches_per_10 <= 0:
            raise ValueError(f"stitches_per_10 must be positive, got {self.stitches_per_10}")
        if self.rows_per_10 <= 0:
            raise ValueError(f"rows_per_10 must be positive, got {self.rows_per_10}")

    @property
    def stitches_per_cm(self) -> float:
        return self.stitches_per_10 / 10 / _cm_per_unit(self.unit)

    @property
    def rows_per_cm(self) -> float:
        return self.rows_per_10 / 10 / _cm_per_unit(self.unit)


def _cm_per_unit(unit: LengthUnit) -> float:
    return CM_PER_INCH if unit is LengthUnit.INCH else 1.0
