"""
CalculatedPatternDetails: the output contract of the calculation core.

Consumed by the instruction generator (per-piece counts, shaping and notes)
and the schematic generator (per-piece bottom width, top width, length).
Everything here is frozen; to_dict() produces the JSON shape with the
camelCase keys the downstream generators read.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from malaine.utilities.repeats import IntegrationAnalysis
from malaine.utilities.shaping import ShapingAction


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ShapingStep:
    """One contiguous block of shaping, anchored to absolute row numbers."""

    action: ShapingAction
    instruction: str
    start_row: int
    end_row: int
    stitch_count_change: int
    frequency: int
    repetitions: int
    notes: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.start_row < 1:
            raise ValueError(f"start_row must be >= 1, got {self.start_row}")
        if self.end_row < self.start_row:
            raise ValueError(
                f"end_row ({self.end_row}) must not precede start_row ({self.start_row})"
            )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.action.value,
            "instruction": self.instruction,
            "startRow": self.start_row,
            "endRow": self.end_row,
            "stitchCountChange": self.stitch_count_change,
            "frequency": self.frequency,
            "repetitions": self.repetitions,
        }
        if self.notes:
            data["notes"] = list(self.notes)
        return data


@dataclass(frozen=True)
class FinishedDimensions:
    """Dimensions the knitted piece actually achieves, in cm."""

    width_cm: float
    length_cm: float
    top_width_cm: float | None = None
    circumference_cm: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"width_cm": self.width_cm, "length_cm": self.length_cm}
        if self.top_width_cm is not None:
            data["top_width_cm"] = self.top_width_cm
        if self.circumference_cm is not None:
            data["circumference_cm"] = self.circumference_cm
        return data

    def schematic(self) -> dict[str, float]:
        return {
            "bottomWidth": self.width_cm,
            "topWidth": self.top_width_cm if self.top_width_cm is not None else self.width_cm,
            "length": self.length_cm,
        }


@dataclass(frozen=True)
class PieceYarnUsage:
    length_m: float
    weight_g: float
    percentage: float

    def to_dict(self) -> dict[str, float]:
        return {
            "length_m": self.length_m,
            "weight_g": self.weight_g,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class CalculatedPiece:
    """
    Calculation result for one garment component.

    ``surface_area_m2`` is the knitted fabric area of the piece; the
    orchestrator sums it across pieces for the pattern-level yarn estimate.
    ``stitch_counts_at_rows`` maps row numbers to the stitch count on the
    needles after that row, at the points where the count changes.
    """

    piece_key: str
    display_name: str
    cast_on_stitches: int
    length_in_rows: int
    final_stitch_count: int
    finished_dimensions: FinishedDimensions
    surface_area_m2: float
    shaping: tuple[ShapingStep, ...] = ()
    construction_notes: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    stitch_counts_at_rows: Mapping[int, int] = field(
        default_factory=lambda: MappingProxyType({})
    )
    repeat_integration: IntegrationAnalysis | None = None

    def __post_init__(self) -> None:
        for name in ("cast_on_stitches", "length_in_rows", "final_stitch_count"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be >= 0, got {value}")

    def to_dict(self, yarn_usage: PieceYarnUsage | None = None) -> dict[str, Any]:
        data: dict[str, Any] = {
            "pieceKey": self.piece_key,
            "displayName": self.display_name,
            "castOnStitches": self.cast_on_stitches,
            "lengthInRows": self.length_in_rows,
            "finalStitchCount": self.final_stitch_count,
            "finishedDimensions": self.finished_dimensions.to_dict(),
            "shaping": [s.to_dict() for s in self.shaping],
            "constructionNotes": list(self.construction_notes),
        }
        if self.stitch_counts_at_rows:
            data["stitchCountsAtRows"] = {str(r): c for r, c in self.stitch_counts_at_rows.items()}
        if self.repeat_integration is not None:
            data["stitchPatternIntegration"] = self.repeat_integration.to_dict()
        if yarn_usage is not None:
            data["yarnUsage"] = {
                "estimatedLength_m": yarn_usage.length_m,
                "estimatedWeight_g": yarn_usage.weight_g,
            }
        return data


@dataclass(frozen=True)
class YarnEstimationDetails:
    """Pattern-level yarn estimate with a per-piece breakdown."""

    total_length_m: float
    total_weight_g: float
    number_of_skeins: int
    surface_area_m2: float
    yarn_factor_used: float
    safety_margin: float
    confidence: Confidence
    by_piece: Mapping[str, PieceYarnUsage]
    factors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.number_of_skeins < 1:
            raise ValueError(f"number_of_skeins must be >= 1, got {self.number_of_skeins}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalLength_m": self.total_length_m,
            "totalWeight_g": self.total_weight_g,
            "numberOfSkeins": self.number_of_skeins,
            "surfaceArea_m2": self.surface_area_m2,
            "yarnFactorUsed": self.yarn_factor_used,
            "byPiece": {k: v.to_dict() for k, v in self.by_piece.items()},
            "safetyMargin": self.safety_margin,
            "confidence": self.confidence.value,
            "factors": list(self.factors),
        }


@dataclass(frozen=True)
class PatternInfo:
    session_id: str
    garment_type: str
    calculated_at: str
    schema_version: str
    craft_type: str = "knitting"

    def to_dict(self) -> dict[str, str]:
        return {
            "sessionId": self.session_id,
            "garmentType": self.garment_type,
            "craftType": self.craft_type,
            "calculatedAt": self.calculated_at,
            "schemaVersion": self.schema_version,
        }


@dataclass(frozen=True)
class CalculatedPatternDetails:
    """
    Complete result of one calculation request.

    When validation fails ``pieces`` is empty and ``errors`` carries the
    validator's messages verbatim. Warnings are surfaced either way.
    """

    pattern_info: PatternInfo
    pieces: Mapping[str, CalculatedPiece]
    yarn_estimation: YarnEstimationDetails | None = None
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    def schematic(self) -> dict[str, dict[str, float]]:
        """Per-piece ``{bottomWidth, topWidth, length}`` for the schematic generator."""
        return {k: p.finished_dimensions.schematic() for k, p in self.pieces.items()}

    def to_dict(self) -> dict[str, Any]:
        by_piece = self.yarn_estimation.by_piece if self.yarn_estimation else {}
        data: dict[str, Any] = {
            "patternInfo": self.pattern_info.to_dict(),
            "pieces": {k: p.to_dict(by_piece.get(k)) for k, p in self.pieces.items()},
            "schematic": self.schematic(),
            "warnings": list(self.warnings),
            "errors": list(self.errors),
        }
        if self.yarn_estimation is not None:
            data["yarnEstimation"] = self.yarn_estimation.to_dict()
        return data
