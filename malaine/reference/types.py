"""
Core type definitions for the reference data layer.

Enums are the canonical vocabulary shared by the validator, the calculators
and the estimator; entry dataclasses are loaded from the YAML lookup tables
and are frozen after startup and never written to at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from malaine.utilities.conversion import convert_length
from malaine.utilities.types import LengthUnit

# ── Enums ──────────────────────────────────────────────────────────────────────


class ConstructionMethod(str, Enum):
    """Structural order in which a triangular shawl is worked."""

    TOP_DOWN_CENTER_OUT = "top_down_center_out"
    SIDE_TO_SIDE = "side_to_side"
    BOTTOM_UP = "bottom_up"


class WorkStyle(str, Enum):
    FLAT = "flat"
    IN_THE_ROUND = "in_the_round"


class ProjectType(str, Enum):
    """Project types the yarn quantity estimator knows an area formula for."""

    SCARF = "scarf"
    BABY_BLANKET = "baby_blanket"
    SIMPLE_HAT = "simple_hat"
    ADULT_SWEATER = "adult_sweater"


class GarmentSize(str, Enum):
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"


class EstimationMethod(str, Enum):
    AREA_BASED = "area_based"
    FIXED_YARDAGE = "fixed_yardage"


# ── Registry entry types (frozen, loaded from YAML) ───────────────────────────


@dataclass(frozen=True)
class YarnWeightEntry:
    id: str
    consumption_m_per_m2: float
    standard: bool
    aliases: tuple[str, ...] = ()
    notes: str = ""


@dataclass(frozen=True)
class ProjectDimensions:
    """Width and length of a flat project in a single unit."""

    width: float
    length: float
    unit: LengthUnit

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"width must be positive, got {self.width}")
        if self.length <= 0:
            raise ValueError(f"length must be positive, got {self.length}")


@dataclass(frozen=True)
class ProjectTypeEntry:
    id: ProjectType
    display_name: str
    estimation_method: EstimationMethod
    requires_dimensions: bool
    requires_size: bool
    predefined_surface_areas: MappingProxyType[GarmentSize, float] | None = None
    default_dimensions: ProjectDimensions | None = None


@dataclass(frozen=True)
class PlausibilityRange:
    """Soft bounds for a value; outside them is unusual, not invalid."""

    id: str
    minimum: float
    maximum: float
    description: str
    unit: LengthUnit | None = None

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum

    def in_unit(self, unit: LengthUnit) -> PlausibilityRange:
        """Return this range rescaled to *unit* (unitless ranges are returned as-is)."""
        if self.unit is None or self.unit is unit:
            return self
        return PlausibilityRange(
            id=self.id,
            minimum=convert_length(self.minimum, self.unit, unit),
            maximum=convert_length(self.maximum, self.unit, unit),
            description=self.description,
            unit=unit,
        )


@dataclass(frozen=True)
class ShawlConstructionEntry:
    id: ConstructionMethod
    display_name: str
    cast_on_stitches: int | None
    final_stitches: int | None
    stitches_per_event: int
    shaping_frequency: int
    depth_tolerance: float
    wingspan_tolerance: float
    wingspan_shape_factor: float
    description: str
