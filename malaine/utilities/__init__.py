"""
Shared utilities for the Malaine pattern calculation core.

Provides the deterministic arithmetic every calculator shares: unit
conversion with a fixed rounding rule, stitch pattern repeat integration,
and shaping rate distribution.
"""

from .conversion import (
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
from .repeats import (
    IntegrationAnalysis,
    IntegrationOption,
    IntegrationType,
    integrate_stitch_pattern,
)
from .shaping import (
    PlacedInterval,
    ShapingAction,
    ShapingInterval,
    ShapingSchedule,
    place_intervals,
    schedule_shaping,
    spread_events,
)
from .types import CM_PER_INCH, Gauge, LengthUnit

__all__ = [
    # types
    "CM_PER_INCH",
    "Gauge",
    "LengthUnit",
    # conversion
    "STITCH_ROUNDING",
    "round_half_up",
    "round_count",
    "convert_length",
    "raw_stitch_count",
    "raw_row_count",
    "dimension_to_stitches",
    "dimension_to_rows",
    "stitches_to_cm",
    "rows_to_cm",
    # repeats
    "IntegrationType",
    "IntegrationOption",
    "IntegrationAnalysis",
    "integrate_stitch_pattern",
    # shaping
    "ShapingAction",
    "ShapingInterval",
    "PlacedInterval",
    "ShapingSchedule",
    "schedule_shaping",
    "spread_events",
    "place_intervals",
]
