"""
Yarn quantity estimator.

Estimates how much yarn a simple project needs from its knitted surface
area and the yarn's weight category:

  area     = project surface in m² (dimensions, garment size or defaults)
  base     = area * consumption factor (m of yarn per m² of fabric)
  total    = base * (1 + BUFFER_PERCENTAGE / 100)
  weight   = total * skein grams / skein meterage   (when both are known)
  skeins   = ceil(total / meterage), else ceil(weight / skein grams), else 1

Gauge and yarn come inline or through a ProfileResolver. Anything that
cannot be resolved produces a failed EstimationOutcome, never an exception.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from malaine.reference.registry import ReferenceRegistry, get_registry
from malaine.reference.types import GarmentSize, ProjectDimensions, ProjectTypeEntry
from malaine.schemas.estimation import (
    EstimationContext,
    EstimationInput,
    EstimationOutcome,
    GaugeInfo,
    YarnInfo,
    YarnQuantityEstimate,
    parse_estimation_input,
)
from malaine.utilities.conversion import convert_length, round_half_up
from malaine.utilities.types import LengthUnit
from malaine.validator.estimation import validate_estimation_input

from .resolver import ProfileResolver

logger = logging.getLogger(__name__)

BUFFER_PERCENTAGE = 10
METERS_TO_YARDS = 1.0936
GRAMS_TO_OUNCES = 0.0353

_DEFAULT_SIZE = GarmentSize.M


# ── Surface area ───────────────────────────────────────────────────────────────


def dimensions_to_square_meters(dimensions: ProjectDimensions) -> float:
    width_m = convert_length(dimensions.width, dimensions.unit, LengthUnit.CM) / 100
    length_m = convert_length(dimensions.length, dimensions.unit, LengthUnit.CM) / 100
    return width_m * length_m


def project_surface_area(
    entry: ProjectTypeEntry,
    size: GarmentSize | None = None,
    dimensions: ProjectDimensions | None = None,
) -> float:
    """
    Surface area in m² for a project of type *entry*.

    Supplied dimensions win for dimension-based types and a supplied size for
    size-based types. Otherwise the medium predefined area is used, then the
    type's default dimensions.

    Raises
    ------
    ValueError
        If the entry offers no way to determine an area.
    """
    areas = entry.predefined_surface_areas
    if entry.requires_dimensions and dimensions is not None:
        return dimensions_to_square_meters(dimensions)
    if entry.requires_size and size is not None and areas is not None:
        return areas[size]
    if areas is not None and _DEFAULT_SIZE in areas:
        return areas[_DEFAULT_SIZE]
    if entry.default_dimensions is not None:
        return dimensions_to_square_meters(entry.default_dimensions)
    raise ValueError(f"Cannot determine surface area for project type {entry.id.value!r}")


# ── Calculation ────────────────────────────────────────────────────────────────


def yarn_totals(
    surface_area_m2: float,
    yarn_factor: float,
    skein_meterage: float | None = None,
    skein_weight_grams: float | None = None,
) -> tuple[float, float, int]:
    """
    Unrounded total length (m) and weight (g), and the skein count.

    Weight is 0 unless both skein meterage and skein weight are known. The
    skein count is never below 1.
    """
    base = surface_area_m2 * yarn_factor
    total = base * (1 + BUFFER_PERCENTAGE / 100)

    weight = 0.0
    if skein_meterage is not None and skein_weight_grams is not None:
        weight = total * skein_weight_grams / skein_meterage

    if skein_meterage is not None:
        skeins = math.ceil(total / skein_meterage)
    elif skein_weight_grams is not None and weight > 0:
        skeins = math.ceil(weight / skein_weight_grams)
    else:
        skeins = 1
    return total, weight, max(1, skeins)


def calculate_yarn_quantity(context: EstimationContext) -> YarnQuantityEstimate:
    """Turn a resolved context into rounded totals and a skein count."""
    yarn = context.yarn
    total, weight, skeins = yarn_totals(
        context.surface_area_m2,
        context.yarn_factor,
        yarn.skein_meterage,
        yarn.skein_weight_grams,
    )
    return YarnQuantityEstimate(
        total_length_meters=round_half_up(total, 2),
        total_weight_grams=round_half_up(weight, 2),
        number_of_skeins=skeins,
        surface_area_m2=round_half_up(context.surface_area_m2, 4),
        yarn_factor_used=context.yarn_factor,
        buffer_percentage=BUFFER_PERCENTAGE,
        calculation_method=context.project_config.estimation_method,
        yarn_weight_category_used=yarn.yarn_weight_category,
    )


def estimate_yarn_quantity(
    estimation_input: EstimationInput,
    resolver: ProfileResolver | None = None,
    registry: ReferenceRegistry | None = None,
) -> EstimationOutcome:
    """
    Resolve gauge and yarn, work out the surface area and estimate.

    Parameters
    ----------
    estimation_input:
        Parsed estimator input.
    resolver:
        Looks up ``gauge_profile_id`` / ``yarn_profile_id``. Only needed when
        the input references profiles instead of carrying inline data.
    registry:
        Reference registry; defaults to the module singleton.

    Returns
    -------
    EstimationOutcome
        ``success=False`` with a message when gauge, yarn, dimensions or size
        cannot be resolved.
    """
    registry = registry or get_registry()

    gauge = _resolve_gauge(estimation_input, resolver)
    if gauge is None:
        logger.warning(
            "Could not resolve gauge (profile id %r)", estimation_input.gauge_profile_id
        )
        return EstimationOutcome.failure("Failed to resolve gauge information")

    yarn = _resolve_yarn(estimation_input, resolver)
    if yarn is None:
        logger.warning(
            "Could not resolve yarn (profile id %r)", estimation_input.yarn_profile_id
        )
        return EstimationOutcome.failure("Failed to resolve yarn information")

    entry = registry.get_project_type(estimation_input.project_type)
    if entry.requires_dimensions and estimation_input.dimensions is None:
        return EstimationOutcome.failure("Dimensions are required for this project type")
    if entry.requires_size and estimation_input.garment_size is None:
        return EstimationOutcome.failure("Garment size is required for this project type")

    try:
        area = project_surface_area(
            entry, estimation_input.garment_size, estimation_input.dimensions
        )
    except ValueError as exc:
        logger.warning("Surface area unavailable: %s", exc)
        return EstimationOutcome.failure(str(exc))

    context = EstimationContext(
        gauge=gauge,
        yarn=yarn,
        project_config=entry,
        surface_area_m2=area,
        yarn_factor=registry.consumption_factor(yarn.yarn_weight_category),
    )
    estimate = calculate_yarn_quantity(context)
    logger.debug(
        "Estimated %.2f m (%d skeins) for %s over %.4f m²",
        estimate.total_length_meters,
        estimate.number_of_skeins,
        entry.id.value,
        estimate.surface_area_m2,
    )
    return EstimationOutcome(success=True, data=estimate)


def estimate_from_payload(
    payload: Any, resolver: ProfileResolver | None = None
) -> EstimationOutcome:
    """Validate a raw estimator payload, then estimate. Never raises for bad input."""
    result = validate_estimation_input(payload)
    if not result.is_valid:
        return EstimationOutcome.failure("; ".join(result.error_messages))
    return estimate_yarn_quantity(parse_estimation_input(payload), resolver)


def _resolve_gauge(
    estimation_input: EstimationInput, resolver: ProfileResolver | None
) -> GaugeInfo | None:
    if estimation_input.gauge_info is not None:
        return estimation_input.gauge_info
    if estimation_input.gauge_profile_id is None or resolver is None:
        return None
    return resolver.get_gauge_profile(estimation_input.gauge_profile_id)


def _resolve_yarn(
    estimation_input: EstimationInput, resolver: ProfileResolver | None
) -> YarnInfo | None:
    if estimation_input.yarn_info is not None:
        return estimation_input.yarn_info
    if estimation_input.yarn_profile_id is None or resolver is None:
        return None
    return resolver.get_yarn_profile(estimation_input.yarn_profile_id)


# ── Display ────────────────────────────────────────────────────────────────────


def format_estimate(estimate: YarnQuantityEstimate) -> dict[str, Any]:
    """Display form of an estimate: metric and imperial totals side by side."""
    formatted: dict[str, Any] = {
        "totalLength": {
            "meters": round_half_up(estimate.total_length_meters, 2),
            "yards": round_half_up(estimate.total_length_meters * METERS_TO_YARDS, 2),
        },
        "totalWeight": {
            "grams": round_half_up(estimate.total_weight_grams, 2),
            "ounces": round_half_up(estimate.total_weight_grams * GRAMS_TO_OUNCES, 2),
        },
        "numberOfSkeins": estimate.number_of_skeins,
        "surfaceArea": round_half_up(estimate.surface_area_m2, 4),
        "bufferPercentage": estimate.buffer_percentage,
        "calculationMethod": estimate.calculation_method.value,
    }
    if estimate.yarn_weight_category_used is not None:
        formatted["yarnWeightUsed"] = estimate.yarn_weight_category_used
    return formatted
