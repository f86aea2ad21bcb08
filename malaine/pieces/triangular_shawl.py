"""
Triangular shawl calculator.

Each construction method ties wingspan and depth to cast-on and shaping
differently. Shaping parameters (core cast-on, stitches per event, every-N
rows, fixed final count, tolerances) come from the reference registry.

  top_down_center_out
      Small center cast-on, +4 stitches every 2nd row (1 at each edge, 2 at
      the spine). Depth sets the row count; events = target_rows // 2.
      Wingspan ≈ shape_factor * final core stitches / stitches_per_cm.

  side_to_side
      Cast on at one point, +1 stitch every 2nd row until the depth-derived
      stitch count, then the mirror decreases. Total rows set the wingspan;
      the final count equals the cast-on.

  bottom_up
      Cast on the full wingspan, -2 stitches every 2nd row until the fixed
      final count (3) remains, or one more when the parity does not allow it.

Work style: ``flat`` counts every row across both halves; ``in_the_round``
halves the effective row count (row factor 0.5), so the same depth is
reached in half as many rows.

Border stitches are added to every row's count on each side and take no
part in the shaping rate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType

from malaine.reference.registry import ReferenceRegistry, get_registry
from malaine.reference.types import ConstructionMethod, ShawlConstructionEntry, WorkStyle
from malaine.schemas.pattern_input import TriangularShawlAttributes
from malaine.schemas.pattern_output import CalculatedPiece, FinishedDimensions, ShapingStep
from malaine.utilities.conversion import round_count, round_half_up
from malaine.utilities.shaping import ShapingAction
from malaine.utilities.types import Gauge

from .common import describe_rate
from .complexity import ComplexityLevel, ShawlComplexity, estimate_shawl_complexity

logger = logging.getLogger(__name__)

WORK_STYLE_ROW_FACTOR: dict[WorkStyle, float] = {
    WorkStyle.FLAT: 1.0,
    WorkStyle.IN_THE_ROUND: 0.5,
}


@dataclass(frozen=True)
class ShawlShapingPhase:
    """One uniform run of shaping: ``events`` shaping rows every ``frequency`` rows."""

    action: ShapingAction
    description: str
    events: int
    stitches_per_event: int
    frequency: int
    start_row: int

    @property
    def rows(self) -> int:
        return self.events * self.frequency

    @property
    def end_row(self) -> int:
        return self.start_row + self.rows - 1

    @property
    def stitch_change(self) -> int:
        delta = self.events * self.stitches_per_event
        return delta if self.action is ShapingAction.INCREASE else -delta


@dataclass(frozen=True)
class TriangularShawlCalculation:
    """Complete stitch math for one triangular shawl."""

    construction_method: ConstructionMethod
    work_style: WorkStyle
    border_stitches_each_side: int
    cast_on_stitches: int
    final_stitch_count: int
    total_rows: int
    phases: tuple[ShawlShapingPhase, ...]
    actual_wingspan_cm: float
    actual_depth_cm: float
    setup_notes: str
    complexity: ShawlComplexity
    warnings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.cast_on_stitches < 0 or self.final_stitch_count < 0 or self.total_rows < 0:
            raise ValueError("stitch and row counts must be >= 0")


def calculate_triangular_shawl(
    attributes: TriangularShawlAttributes,
    gauge: Gauge,
    registry: ReferenceRegistry | None = None,
) -> TriangularShawlCalculation:
    """
    Calculate cast-on, shaping phases and achieved size of a triangular shawl.

    Parameters
    ----------
    attributes:
        Target wingspan and depth (cm), construction method, work style and
        border width.
    gauge:
        Gauge in any unit; per-cm rates are derived from it.
    registry:
        Reference registry; defaults to the module singleton.
    """
    registry = registry or get_registry()
    entry = registry.get_shawl_construction(attributes.construction_method)
    row_factor = WORK_STYLE_ROW_FACTOR[attributes.work_style]

    match attributes.construction_method:
        case ConstructionMethod.TOP_DOWN_CENTER_OUT:
            calc = _top_down(attributes, gauge, entry, row_factor)
        case ConstructionMethod.SIDE_TO_SIDE:
            calc = _side_to_side(attributes, gauge, entry, row_factor)
        case ConstructionMethod.BOTTOM_UP:
            calc = _bottom_up(attributes, gauge, entry, row_factor)

    cast_on_core, final_core, total_rows, phases, wingspan, depth, setup = calc
    border = attributes.border_stitches_each_side
    warnings = _tolerance_warnings(attributes, entry, wingspan, depth)

    complexity = estimate_shawl_complexity(
        attributes.target_wingspan_cm,
        attributes.target_depth_cm,
        attributes.construction_method,
        border,
    )
    if complexity.level is ComplexityLevel.HIGH:
        warnings.append(
            f"High complexity shawl (about {complexity.estimated_stitches} stitches): "
            f"expect long instructions"
        )

    logger.debug(
        "Triangular shawl %s: cast on %d, %d rows, final %d",
        attributes.construction_method.value,
        cast_on_core + 2 * border,
        total_rows,
        final_core + 2 * border,
    )

    return TriangularShawlCalculation(
        construction_method=attributes.construction_method,
        work_style=attributes.work_style,
        border_stitches_each_side=border,
        cast_on_stitches=cast_on_core + 2 * border,
        final_stitch_count=final_core + 2 * border,
        total_rows=total_rows,
        phases=tuple(phases),
        actual_wingspan_cm=round_half_up(wingspan, 1),
        actual_depth_cm=round_half_up(depth, 1),
        setup_notes=setup,
        complexity=complexity,
        warnings=tuple(warnings),
    )


# ── Construction methods ───────────────────────────────────────────────────────
#
# Each returns (core cast-on, core final, total rows, phases, wingspan cm,
# depth cm, setup note). "Core" counts exclude border stitches.

_MethodResult = tuple[int, int, int, list[ShawlShapingPhase], float, float, str]


def _top_down(
    attributes: TriangularShawlAttributes,
    gauge: Gauge,
    entry: ShawlConstructionEntry,
    row_factor: float,
) -> _MethodResult:
    rows_per_cm = gauge.rows_per_cm * row_factor
    border_cm = 2 * attributes.border_stitches_each_side / gauge.stitches_per_cm
    cast_on = _fixed(entry.cast_on_stitches, entry, "cast_on_stitches")

    target_rows = round_count(attributes.target_depth_cm * rows_per_cm)
    events = target_rows // entry.shaping_frequency
    phase = ShawlShapingPhase(
        action=ShapingAction.INCREASE,
        description=(
            describe_rate(
                ShapingAction.INCREASE, entry.stitches_per_event, entry.shaping_frequency, events
            )
            + " (1 at each end, 2 at center spine)"
        ),
        events=events,
        stitches_per_event=entry.stitches_per_event,
        frequency=entry.shaping_frequency,
        start_row=1,
    )
    final = cast_on + phase.stitch_change

    depth = phase.rows / rows_per_cm
    wingspan = entry.wingspan_shape_factor * final / gauge.stitches_per_cm + border_cm
    setup = f"Cast on {cast_on} stitches. Place markers for center spine if desired."
    return cast_on, final, phase.rows, [phase] if events else [], wingspan, depth, setup


def _side_to_side(
    attributes: TriangularShawlAttributes,
    gauge: Gauge,
    entry: ShawlConstructionEntry,
    row_factor: float,
) -> _MethodResult:
    rows_per_cm = gauge.rows_per_cm * row_factor
    border_cm = 2 * attributes.border_stitches_each_side / gauge.stitches_per_cm
    cast_on = _fixed(entry.cast_on_stitches, entry, "cast_on_stitches")
    per_event = entry.stitches_per_event

    widest = round_count(attributes.target_depth_cm * gauge.stitches_per_cm)
    events = max(0, widest - cast_on) // per_event
    increases = ShawlShapingPhase(
        action=ShapingAction.INCREASE,
        description=(
            describe_rate(ShapingAction.INCREASE, per_event, entry.shaping_frequency, events)
            + " at one edge until maximum depth"
        ),
        events=events,
        stitches_per_event=per_event,
        frequency=entry.shaping_frequency,
        start_row=1,
    )
    decreases = ShawlShapingPhase(
        action=ShapingAction.DECREASE,
        description=(
            describe_rate(ShapingAction.DECREASE, per_event, entry.shaping_frequency, events)
            + " at the same edge to form the second half"
        ),
        events=events,
        stitches_per_event=per_event,
        frequency=entry.shaping_frequency,
        start_row=increases.rows + 1,
    )
    total_rows = increases.rows + decreases.rows

    wingspan = total_rows / rows_per_cm
    depth = (cast_on + increases.stitch_change) / gauge.stitches_per_cm + border_cm
    setup = f"Cast on {cast_on} stitches at one point of the triangle."
    phases = [increases, decreases] if events else []
    return cast_on, cast_on, total_rows, phases, wingspan, depth, setup


def _bottom_up(
    attributes: TriangularShawlAttributes,
    gauge: Gauge,
    entry: ShawlConstructionEntry,
    row_factor: float,
) -> _MethodResult:
    rows_per_cm = gauge.rows_per_cm * row_factor
    border_cm = 2 * attributes.border_stitches_each_side / gauge.stitches_per_cm
    target_final = _fixed(entry.final_stitches, entry, "final_stitches")
    per_event = entry.stitches_per_event

    cast_on = round_count(attributes.target_wingspan_cm * gauge.stitches_per_cm)
    events = max(0, cast_on - target_final) // per_event
    phase = ShawlShapingPhase(
        action=ShapingAction.DECREASE,
        description=(
            describe_rate(ShapingAction.DECREASE, per_event, entry.shaping_frequency, events)
            + f" (1 at each end) until {target_final} stitches remain"
        ),
        events=events,
        stitches_per_event=per_event,
        frequency=entry.shaping_frequency,
        start_row=1,
    )
    final = cast_on + phase.stitch_change

    depth = phase.rows / rows_per_cm
    wingspan = cast_on / gauge.stitches_per_cm + border_cm
    setup = f"Cast on {cast_on} stitches for full wingspan."
    return cast_on, final, phase.rows, [phase] if events else [], wingspan, depth, setup


def _fixed(value: int | None, entry: ShawlConstructionEntry, name: str) -> int:
    if value is None:
        raise ValueError(f"construction method {entry.id.value!r} has no fixed {name}")
    return value


def _tolerance_warnings(
    attributes: TriangularShawlAttributes,
    entry: ShawlConstructionEntry,
    wingspan: float,
    depth: float,
) -> list[str]:
    warnings: list[str] = []
    target_depth = attributes.target_depth_cm
    target_wingspan = attributes.target_wingspan_cm
    if abs(depth - target_depth) > target_depth * entry.depth_tolerance:
        warnings.append(
            f"Actual depth ({depth:.1f}cm) differs from target ({target_depth:g}cm) "
            f"by more than {entry.depth_tolerance:.0%}"
        )
    if abs(wingspan - target_wingspan) > target_wingspan * entry.wingspan_tolerance:
        warnings.append(
            f"Actual wingspan ({wingspan:.1f}cm) differs from target ({target_wingspan:g}cm) "
            f"by more than {entry.wingspan_tolerance:.0%}"
        )
    return warnings


# ── Output ─────────────────────────────────────────────────────────────────────


def shawl_piece(
    piece_key: str, display_name: str, calc: TriangularShawlCalculation
) -> CalculatedPiece:
    """
    Convert a shawl calculation into a CalculatedPiece.

    The schematic draws the triangle with its wingspan edge at the bottom and
    the point at the top, whatever the working direction.
    """
    border = calc.border_stitches_each_side
    shaping: list[ShapingStep] = []
    counts = {0: calc.cast_on_stitches}
    for phase in calc.phases:
        shaping.append(
            ShapingStep(
                action=phase.action,
                instruction=phase.description,
                start_row=phase.start_row,
                end_row=phase.end_row,
                stitch_count_change=phase.stitch_change,
                frequency=phase.frequency,
                repetitions=phase.events,
                notes=(f"Work {border} border stitches each side plain",) if border else (),
            )
        )
        counts[phase.end_row] = counts[max(counts)] + phase.stitch_change

    notes = [calc.setup_notes]
    if calc.work_style is WorkStyle.IN_THE_ROUND:
        notes.append("Worked in the round: half the rows of a flat shawl of the same depth")
    notes.append(
        f"Complexity: {calc.complexity.level.value} "
        f"(about {calc.complexity.estimated_stitches} stitches)"
    )

    return CalculatedPiece(
        piece_key=piece_key,
        display_name=display_name,
        cast_on_stitches=calc.cast_on_stitches,
        length_in_rows=calc.total_rows,
        final_stitch_count=calc.final_stitch_count,
        finished_dimensions=FinishedDimensions(
            width_cm=calc.actual_wingspan_cm,
            length_cm=calc.actual_depth_cm,
            top_width_cm=0.0,
        ),
        surface_area_m2=calc.actual_wingspan_cm * calc.actual_depth_cm / 2 / 10_000,
        shaping=tuple(shaping),
        construction_notes=tuple(notes),
        warnings=calc.warnings,
        stitch_counts_at_rows=MappingProxyType(counts),
    )
