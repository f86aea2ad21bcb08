"""
Pattern calculation pipeline: wires validation, parsing, per-piece
calculation and the yarn estimate into one CalculatedPatternDetails.

Pipeline stages:

  1. validate_pattern_input()      → errors short-circuit into an error result
  2. parse_pattern_input()         → PatternCalculationInput
                                     (PipelineError("parse") on failure)
  3. per-component calculators     → CalculatedPiece per component
                                     (PipelineError("calculate") on failure)
  4. estimate_pattern_yarn()       → YarnEstimationDetails (optional;
                                     PipelineError("yarn") on failure)

Components are independent of each other; the order of the output pieces is
the order of ``garment.components`` in the payload. Components without an
attributes block are skipped (the validator already warned about them).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from malaine.pieces.silhouette import calculate_silhouette
from malaine.pieces.triangular_shawl import calculate_triangular_shawl, shawl_piece
from malaine.reference.registry import ReferenceRegistry, get_registry
from malaine.schemas.pattern_input import (
    ComponentDefinition,
    PatternCalculationInput,
    SilhouetteAttributes,
    TriangularShawlAttributes,
    YarnDefinition,
    parse_pattern_input,
)
from malaine.schemas.pattern_output import (
    CalculatedPatternDetails,
    CalculatedPiece,
    Confidence,
    PatternInfo,
    PieceYarnUsage,
    YarnEstimationDetails,
)
from malaine.utilities.conversion import round_half_up
from malaine.validator.pattern_input import validate_pattern_input
from malaine.yarn.estimator import BUFFER_PERCENTAGE, yarn_totals

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Raised when a pipeline stage fails unexpectedly.

    Attributes:
        stage: Name of the stage that failed
            (``"parse"``, ``"calculate"`` or ``"yarn"``).
        detail: Human-readable description of the failure.
    """

    def __init__(self, stage: str, detail: str) -> None:
        super().__init__(f"[{stage}] {detail}")
        self.stage = stage
        self.detail = detail


def calculate_pattern(
    payload: Any,
    *,
    include_yarn_estimate: bool = True,
    calculated_at: str | None = None,
    registry: ReferenceRegistry | None = None,
) -> CalculatedPatternDetails:
    """Validate *payload* and calculate every component of the garment.

    Parameters
    ----------
    payload:
        Deserialized pattern calculation request (camelCase keys).
    include_yarn_estimate:
        Whether to estimate yarn for the whole pattern.
    calculated_at:
        ISO 8601 timestamp recorded in the pattern info; defaults to now (UTC).

    Returns
    -------
    CalculatedPatternDetails
        With no pieces and the validator's errors when the payload is
        invalid; otherwise one CalculatedPiece per calculable component.

    Raises
    ------
    PipelineError
        If a stage fails on input the validator accepted.
    """
    registry = registry or get_registry()
    calculated_at = calculated_at or datetime.now(timezone.utc).isoformat()

    # Stage 1: Validation is the only gate for user input problems
    validation = validate_pattern_input(payload)
    if not validation.is_valid:
        logger.debug("Pattern input rejected with %d errors", len(validation.error_messages))
        return CalculatedPatternDetails(
            pattern_info=_error_info(payload, calculated_at),
            pieces=MappingProxyType({}),
            warnings=tuple(validation.warning_messages),
            errors=tuple(validation.error_messages),
        )

    # Stage 2: Parse into typed input
    try:
        pattern = parse_pattern_input(payload)
    except (KeyError, TypeError, ValueError) as exc:
        raise PipelineError("parse", str(exc)) from exc

    # Stage 3: Per-component calculation
    warnings = list(validation.warning_messages)
    pieces: dict[str, CalculatedPiece] = {}
    for component in pattern.garment.components:
        try:
            piece = calculate_component(component, pattern, registry)
        except (KeyError, ValueError, ZeroDivisionError) as exc:
            raise PipelineError(
                "calculate", f"component '{component.component_key}': {exc}"
            ) from exc
        if piece is None:
            continue
        pieces[piece.piece_key] = piece
        warnings.extend(f"{piece.piece_key}: {w}" for w in piece.warnings)

    # Stage 4: Pattern-level yarn estimate
    yarn_estimation = None
    if include_yarn_estimate and pieces:
        try:
            yarn_estimation = estimate_pattern_yarn(pieces, pattern.yarn, registry)
        except (ValueError, ZeroDivisionError) as exc:
            raise PipelineError("yarn", str(exc)) from exc

    logger.debug(
        "Calculated %d pieces for session %s", len(pieces), pattern.session_id
    )
    return CalculatedPatternDetails(
        pattern_info=PatternInfo(
            session_id=pattern.session_id,
            garment_type=pattern.garment.type_key,
            calculated_at=calculated_at,
            schema_version=pattern.version,
        ),
        pieces=MappingProxyType(pieces),
        yarn_estimation=yarn_estimation,
        warnings=tuple(warnings),
    )


def calculate_component(
    component: ComponentDefinition,
    pattern: PatternCalculationInput,
    registry: ReferenceRegistry,
) -> CalculatedPiece | None:
    """Dispatch one component to its calculator; None when it has no attributes."""
    match component.attributes:
        case SilhouetteAttributes() as attributes:
            return calculate_silhouette(
                component.component_key,
                component.display_name,
                attributes,
                pattern.gauge,
                pattern.stitch_pattern,
                pattern.units.dimension_unit,
                registry,
            )
        case TriangularShawlAttributes() as attributes:
            calc = calculate_triangular_shawl(attributes, pattern.gauge, registry)
            return shawl_piece(component.component_key, component.display_name, calc)
        case None:
            logger.debug("Component %s has no attributes; skipped", component.component_key)
            return None


def estimate_pattern_yarn(
    pieces: Mapping[str, CalculatedPiece],
    yarn: YarnDefinition,
    registry: ReferenceRegistry,
) -> YarnEstimationDetails:
    """
    Estimate yarn for the summed surface area of *pieces*.

    Uses the same buffer and skein rules as the standalone estimator. Each
    piece's share of length and weight is proportional to its area.
    """
    area = sum(p.surface_area_m2 for p in pieces.values())
    weight_entry = registry.find_yarn_weight(yarn.weight_category)
    factor = registry.consumption_factor(yarn.weight_category)
    total, weight, skeins = yarn_totals(
        area, factor, yarn.skein_meterage, yarn.skein_weight_grams
    )

    by_piece: dict[str, PieceYarnUsage] = {}
    for key, piece in pieces.items():
        share = piece.surface_area_m2 / area if area > 0 else 0.0
        by_piece[key] = PieceYarnUsage(
            length_m=round_half_up(total * share, 2),
            weight_g=round_half_up(weight * share, 2),
            percentage=round_half_up(share * 100, 2),
        )

    factors: list[str] = []
    if weight_entry is not None:
        factors.append(f"{weight_entry.id} yarn: {factor:g} m per m² of fabric")
    else:
        factors.append(
            f"Yarn weight {yarn.weight_category!r} not recognised; "
            f"default {factor:g} m per m² used"
        )
    has_skein_data = yarn.skein_meterage is not None and yarn.skein_weight_grams is not None
    if not has_skein_data:
        factors.append("Skein meterage and weight not both known; weight not estimated")
    factors.append(f"{BUFFER_PERCENTAGE}% buffer included")

    if weight_entry is not None and has_skein_data:
        confidence = Confidence.HIGH
    elif weight_entry is not None or has_skein_data:
        confidence = Confidence.MEDIUM
    else:
        confidence = Confidence.LOW

    return YarnEstimationDetails(
        total_length_m=round_half_up(total, 2),
        total_weight_g=round_half_up(weight, 2),
        number_of_skeins=skeins,
        surface_area_m2=round_half_up(area, 4),
        yarn_factor_used=factor,
        safety_margin=BUFFER_PERCENTAGE / 100,
        confidence=confidence,
        by_piece=MappingProxyType(by_piece),
        factors=tuple(factors),
    )


def _error_info(payload: Any, calculated_at: str) -> PatternInfo:
    """Best-effort pattern info for a payload that failed validation."""
    data: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    garment = data.get("garment")
    type_key = garment.get("typeKey") if isinstance(garment, Mapping) else None
    return PatternInfo(
        session_id=str(data.get("sessionId") or ""),
        garment_type=str(type_key or "unknown"),
        calculated_at=calculated_at,
        schema_version=str(data.get("version") or ""),
    )
