"""
Silhouette piece calculator: a trapezoid (or rectangle) described by a bottom
width, an optional top width and a length.

Steps:

  1. cast-on   = stitches for the bottom width (or circumference), then the
                 stitch pattern repeat is fitted with integrate_stitch_pattern
                 and the piece's repeat strategy picks the layout
  2. rows      = rows for the length
  3. top count = stitches for the top width, nudged so that the change from
                 the cast-on is a whole number of shaping events
  4. shaping   = the change spread evenly over the rows, as one or two
                 intervals anchored to absolute row numbers

When there are fewer rows than shaping events the schedule is capped at one
event per row and the top count falls short; a warning says by how much.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType

from malaine.reference.registry import ReferenceRegistry, get_registry
from malaine.schemas.pattern_input import (
    RepeatStrategy,
    SilhouetteAttributes,
    StitchPatternDefinition,
)
from malaine.schemas.pattern_output import CalculatedPiece, FinishedDimensions, ShapingStep
from malaine.utilities.conversion import (
    convert_length,
    dimension_to_rows,
    dimension_to_stitches,
    round_count,
    round_half_up,
    rows_to_cm,
    stitches_to_cm,
)
from malaine.utilities.repeats import IntegrationAnalysis, IntegrationType, integrate_stitch_pattern
from malaine.utilities.shaping import schedule_shaping
from malaine.utilities.types import Gauge, LengthUnit

from .common import step_from_interval

logger = logging.getLogger(__name__)

WIDTH_TOLERANCE_CM = 1.0
LENGTH_TOLERANCE_CM = 0.5


@dataclass(frozen=True)
class _CastOn:
    stitches: int
    analysis: IntegrationAnalysis | None
    notes: tuple[str, ...]
    warnings: tuple[str, ...]


def calculate_silhouette(
    piece_key: str,
    display_name: str,
    attributes: SilhouetteAttributes,
    gauge: Gauge,
    stitch_pattern: StitchPatternDefinition,
    dimension_unit: LengthUnit = LengthUnit.CM,
    registry: ReferenceRegistry | None = None,
) -> CalculatedPiece:
    """
    Calculate cast-on, rows, shaping and finished size of a silhouette piece.

    Parameters
    ----------
    piece_key, display_name:
        Identify the piece in the output.
    attributes:
        Target geometry in *dimension_unit*.
    gauge:
        Gauge in its own unit; dimensions are converted as needed.
    stitch_pattern:
        Repeat dimensions used to lay out the cast-on and check the length.
    registry:
        Reference registry for plausibility ranges; defaults to the singleton.
    """
    registry = registry or get_registry()
    circular = attributes.target_circumference is not None
    if attributes.target_circumference is not None:
        across = attributes.target_circumference
    elif attributes.target_width is not None:
        across = attributes.target_width
    else:
        raise ValueError(f"piece {piece_key!r} needs a target width or circumference")

    notes: list[str] = []
    warnings: list[str] = []

    cast = _cast_on(attributes, across, gauge, stitch_pattern, dimension_unit)
    cast_on = cast.stitches
    notes.extend(cast.notes)
    warnings.extend(cast.warnings)

    rows = dimension_to_rows(attributes.target_length, gauge, dimension_unit)
    repeat_rows = stitch_pattern.row_repeat_height
    if repeat_rows > 1 and rows % repeat_rows:
        notes.append(
            f"Length ends on row {rows % repeat_rows} of the {repeat_rows}-row "
            f'"{stitch_pattern.name}" repeat'
        )

    shaping, final, top_target = _shaping(
        attributes, cast_on, rows, gauge, dimension_unit, notes, warnings
    )

    # ── Finished dimensions ──
    across_cm = round_half_up(stitches_to_cm(cast_on, gauge), 2)
    length_cm = round_half_up(rows_to_cm(rows, gauge), 2)
    top_cm = (
        round_half_up(stitches_to_cm(final, gauge), 2)
        if attributes.target_top_width is not None
        else None
    )
    # Circular pieces are drawn flat, so their schematic width is half the round.
    finished = FinishedDimensions(
        width_cm=round_half_up(across_cm / 2, 2) if circular else across_cm,
        length_cm=length_cm,
        top_width_cm=(
            round_half_up(top_cm / 2, 2) if circular and top_cm is not None else top_cm
        ),
        circumference_cm=across_cm if circular else None,
    )

    target_across_cm = convert_length(across, dimension_unit, LengthUnit.CM)
    target_length_cm = convert_length(attributes.target_length, dimension_unit, LengthUnit.CM)
    if abs(across_cm - target_across_cm) > WIDTH_TOLERANCE_CM:
        label = "Circumference" if circular else "Width"
        warnings.append(
            f"{label} adjusted from {target_across_cm:.1f}cm to {across_cm:.1f}cm "
            f"by stitch rounding and the pattern repeat"
        )
    if abs(length_cm - target_length_cm) > LENGTH_TOLERANCE_CM:
        warnings.append(
            f"Length adjusted from {target_length_cm:.1f}cm to {length_cm:.1f}cm "
            f"due to row rounding"
        )
    warnings.extend(_plausibility_warnings(registry, max(cast_on, final), rows))

    top_across_cm = stitches_to_cm(final, gauge)
    area_m2 = (across_cm + top_across_cm) / 2 * length_cm / 10_000

    counts = {0: cast_on}
    for step in shaping:
        counts[step.end_row] = counts[max(counts)] + step.stitch_count_change

    logger.debug(
        "Silhouette %s: cast on %d, %d rows, final %d (target top %s)",
        piece_key,
        cast_on,
        rows,
        final,
        top_target,
    )

    return CalculatedPiece(
        piece_key=piece_key,
        display_name=display_name,
        cast_on_stitches=cast_on,
        length_in_rows=rows,
        final_stitch_count=final,
        finished_dimensions=finished,
        surface_area_m2=area_m2,
        shaping=tuple(shaping),
        construction_notes=tuple(notes),
        warnings=tuple(warnings),
        stitch_counts_at_rows=MappingProxyType(counts),
        repeat_integration=cast.analysis,
    )


# ── Steps ──────────────────────────────────────────────────────────────────────


def _cast_on(
    attributes: SilhouetteAttributes,
    across: float,
    gauge: Gauge,
    stitch_pattern: StitchPatternDefinition,
    unit: LengthUnit,
) -> _CastOn:
    stitches = dimension_to_stitches(across, gauge, unit)
    edge = attributes.edge_stitches_each_side
    repeat = stitch_pattern.stitch_repeat_width

    if repeat <= 1:
        return _CastOn(stitches, None, (), ())
    if stitches <= 2 * edge:
        return _CastOn(
            stitches,
            None,
            (),
            (
                f"{edge} edge stitches each side leave no room for the "
                f'"{stitch_pattern.name}" repeat in {stitches} stitches',
            ),
        )

    analysis = integrate_stitch_pattern(stitches, repeat, edge, stitch_pattern.name)

    match attributes.repeat_strategy:
        case RepeatStrategy.ADJUST:
            adjusted = analysis.suggested_adjusted_stitch_count
            if adjusted == stitches:
                return _CastOn(stitches, analysis, (), ())
            return _CastOn(
                adjusted,
                analysis,
                (
                    f"Cast-on adjusted from {stitches} to {adjusted} stitches to fit the "
                    f'{repeat}-stitch "{stitch_pattern.name}" repeat',
                ),
                (),
            )
        case RepeatStrategy.CENTER:
            centered = analysis.option(IntegrationType.CENTER_WITH_STOCKINETTE)
            if centered is not None:
                return _CastOn(stitches, analysis, (centered.description,), ())
            shortfall = analysis.option(IntegrationType.INCREASE_TO_MINIMUM)
            message = shortfall.description if shortfall else "no full repeat fits"
            return _CastOn(stitches, analysis, (), (message,))


def _shaping(
    attributes: SilhouetteAttributes,
    cast_on: int,
    rows: int,
    gauge: Gauge,
    unit: LengthUnit,
    notes: list[str],
    warnings: list[str],
) -> tuple[list[ShapingStep], int, int]:
    """Return the shaping steps, the final stitch count and the requested top count."""
    if attributes.target_top_width is None:
        return [], cast_on, cast_on

    per_event = attributes.stitches_per_shaping_event
    top = dimension_to_stitches(attributes.target_top_width, gauge, unit)
    delta = round_count((top - cast_on) / per_event) * per_event
    while cast_on + delta < 0:
        delta += per_event
    if cast_on + delta != top:
        notes.append(
            f"Top stitch count adjusted from {top} to {cast_on + delta} so shaping works "
            f"in steps of {per_event} stitches"
        )
        top = cast_on + delta

    if delta == 0:
        return [], cast_on, top

    schedule = schedule_shaping(delta, rows, per_event)
    if schedule.capped:
        applied = schedule.applied_events
        requested = schedule.requested_events
        if applied == 0:
            warnings.append(f"No rows available for {requested} shaping events; piece is unshaped")
        else:
            warnings.append(
                f"Only {applied} of {requested} shaping events fit in {rows} rows; top will be "
                f"{cast_on + schedule.stitch_change} stitches instead of {top}"
            )
        logger.warning("Capping %d shaping events to %d rows", requested, rows)

    steps = [step_from_interval(p) for p in schedule.placed]
    return steps, cast_on + schedule.stitch_change, top


def _plausibility_warnings(registry: ReferenceRegistry, stitches: int, rows: int) -> list[str]:
    warnings: list[str] = []
    width = registry.get_range("piece_stitches")
    length = registry.get_range("piece_rows")
    if stitches > width.maximum:
        warnings.append(
            "Very wide piece - consider breaking into sections or double-check measurements"
        )
    elif stitches < width.minimum:
        warnings.append("Very narrow piece - double-check measurements")
    if rows > length.maximum:
        warnings.append(
            "Very long piece - consider breaking into sections or double-check measurements"
        )
    elif rows < length.minimum:
        warnings.append("Very short piece - double-check measurements")
    return warnings
