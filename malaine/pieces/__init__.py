"""
Per-component calculators: physical targets → stitch counts, rows, shaping.

  silhouette        generic trapezoid/rectangle pieces (flat or circular)
  triangular_shawl  triangular shawls by construction method
  complexity        shawl complexity estimate (warnings only)
"""

from .complexity import ComplexityLevel, ShawlComplexity, estimate_shawl_complexity
from .silhouette import calculate_silhouette
from .triangular_shawl import (
    WORK_STYLE_ROW_FACTOR,
    ShawlShapingPhase,
    TriangularShawlCalculation,
    calculate_triangular_shawl,
    shawl_piece,
)

__all__ = [
    "calculate_silhouette",
    "WORK_STYLE_ROW_FACTOR",
    "ShawlShapingPhase",
    "TriangularShawlCalculation",
    "calculate_triangular_shawl",
    "shawl_piece",
    "ComplexityLevel",
    "ShawlComplexity",
    "estimate_shawl_complexity",
]
