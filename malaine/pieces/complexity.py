"""
Triangular shawl complexity estimate.

Classifies a shawl as low, medium or high complexity from its triangle area
(wingspan * depth / 2, in cm²) and construction method. Only used to warn
about instruction length; it never feeds into stitch counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from malaine.reference.types import ConstructionMethod
from malaine.utilities.conversion import round_count

LARGE_AREA_CM2 = 10_000
MEDIUM_AREA_CM2 = 5_000
SMALL_AREA_CM2 = 2_000
STITCHES_PER_CM2 = 0.5

_METHOD_FACTORS: dict[ConstructionMethod, tuple[float, str]] = {
    ConstructionMethod.TOP_DOWN_CENTER_OUT: (
        1.0,
        "Top-down center-out construction (standard complexity)",
    ),
    ConstructionMethod.SIDE_TO_SIDE: (1.1, "Side-to-side construction (moderate complexity)"),
    ConstructionMethod.BOTTOM_UP: (1.3, "Bottom-up construction (high initial stitch count)"),
}


class ComplexityLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class ShawlComplexity:
    level: ComplexityLevel
    estimated_stitches: int
    factors: tuple[str, ...]


def estimate_shawl_complexity(
    wingspan_cm: float,
    depth_cm: float,
    method: ConstructionMethod,
    border_stitches_each_side: int = 0,
) -> ShawlComplexity:
    area = wingspan_cm * depth_cm / 2
    factors: list[str] = []
    estimate = float(round_count(area * STITCHES_PER_CM2))

    if area > LARGE_AREA_CM2:
        factors.append("Large dimensions")
        estimate *= 1.2
    elif area > MEDIUM_AREA_CM2:
        factors.append("Medium dimensions")
    else:
        factors.append("Small to medium dimensions")

    multiplier, label = _METHOD_FACTORS[method]
    factors.append(label)
    estimate *= multiplier

    if border_stitches_each_side > 0:
        factors.append(f"Border stitches: {border_stitches_each_side} each side")
        estimate += border_stitches_each_side * 4

    if area > LARGE_AREA_CM2 or (area > MEDIUM_AREA_CM2 and method is ConstructionMethod.BOTTOM_UP):
        level = ComplexityLevel.HIGH
    elif area > SMALL_AREA_CM2 or method is ConstructionMethod.SIDE_TO_SIDE:
        level = ComplexityLevel.MEDIUM
    else:
        level = ComplexityLevel.LOW

    return ShawlComplexity(
        level=level, estimated_stitches=round_count(estimate), factors=tuple(factors)
    )
