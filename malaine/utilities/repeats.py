"""
Stitch pattern repeat integration: fitting a motif into a fixed stitch count.

Given a component of ``target_stitch_count`` stitches with
``desired_edge_stitches`` reserved on each side as a plain border, works out
how many whole repeats of the motif fit and proposes layouts:

    available = target - 2 * edge
    full      = available // repeat
    remaining = available - full * repeat        (0 <= remaining < repeat)

Options are generated in a fixed precedence order:

  1. center_with_stockinette: keep the count, split the leftover stitches as
     stockinette filler either side of the repeats (needs full >= 1).
  2. adjust_for_full_repeats: round the count up to the next repeat boundary
     (needs remaining > 0).
  3. increase_to_minimum: no repeat fits at all; smallest count that
     holds one repeat plus borders (needs full == 0).

The pattern name is used for message text only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IntegrationType(str, Enum):
    """Kind of layout proposed for a stitch pattern repeat."""

    CENTER_WITH_STOCKINETTE = "center_with_stockinette"
    ADJUST_FOR_FULL_REPEATS = "adjust_for_full_repeats"
    INCREASE_TO_MINIMUM = "increase_to_minimum"


@dataclass(frozen=True)
class IntegrationOption:
    """One candidate layout for a stitch pattern repeat.

    Attributes:
        type: Layout kind.
        description: Human-readable summary for display.
        total_stitches: Component stitch count under this layout.
        edge_stitches_each_side: Plain border stitches on each side.
        centering_offset_stitches: 1 when the filler cannot be split evenly.
        stockinette_stitches_each_side: Filler on the narrower side
            (centering layouts only).
    """

    type: IntegrationType
    description: str
    total_stitches: int
    edge_stitches_each_side: int
    centering_offset_stitches: int = 0
    stockinette_stitches_each_side: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type.value,
            "description": self.description,
            "totalStitches": self.total_stitches,
            "edgeStitchesEachSide": self.edge_stitches_each_side,
            "centeringOffsetStitches": self.centering_offset_stitches,
        }
        if self.stockinette_stitches_each_side is not None:
            data["stockinetteStitchesEachSide"] = self.stockinette_stitches_each_side
        return data


@dataclass(frozen=True)
class IntegrationAnalysis:
    """Result of fitting a stitch repeat into a component's width."""

    full_repeats: int
    remaining_stitches: int
    suggested_adjusted_stitch_count: int
    options: tuple[IntegrationOption, ...]
    available_width_for_pattern: int
    stitches_used_by_repeats: int

    def option(self, kind: IntegrationType) -> IntegrationOption | None:
        """Return the first option of the given kind, if one was generated."""
        return next((o for o in self.options if o.type is kind), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fullRepeats": self.full_repeats,
            "remainingStitches": self.remaining_stitches,
            "suggestedAdjustedStitchCount": self.suggested_adjusted_stitch_count,
            "options": [o.to_dict() for o in self.options],
            "availableWidthForPattern": self.available_width_for_pattern,
            "stitchesUsedByRepeats": self.stitches_used_by_repeats,
        }


def integrate_stitch_pattern(
    target_stitch_count: int,
    stitch_repeat_width: int,
    desired_edge_stitches: int = 0,
    pattern_name: str = "pattern",
) -> IntegrationAnalysis:
    """
    Fit a stitch pattern repeat into a component of *target_stitch_count*.

    Args:
        target_stitch_count: Stitches available across the component.
        stitch_repeat_width: Stitches in one horizontal repeat of the motif.
        desired_edge_stitches: Plain border stitches reserved on each side.
        pattern_name: Display name for option descriptions.

    Returns:
        IntegrationAnalysis with options in precedence order.

    Raises:
        ValueError: If the preconditions (target > 0, repeat >= 1, edge >= 0,
            2 * edge < target) do not hold.
    """
    if target_stitch_count <= 0:
        raise ValueError(f"target_stitch_count must be positive, got {target_stitch_count}")
    if stitch_repeat_width < 1:
        raise ValueError(f"stitch_repeat_width must be >= 1, got {stitch_repeat_width}")
    if desired_edge_stitches < 0:
        raise ValueError(f"desired_edge_stitches must be >= 0, got {desired_edge_stitches}")
    if 2 * desired_edge_stitches >= target_stitch_count:
        raise ValueError(
            f"edge stitches ({desired_edge_stitches} each side) leave no room for the "
            f"pattern in {target_stitch_count} stitches"
        )

    edge = desired_edge_stitches
    available = target_stitch_count - 2 * edge
    full_repeats = available // stitch_repeat_width
    used = full_repeats * stitch_repeat_width
    remaining = available - used

    options: list[IntegrationOption] = []

    if full_repeats > 0:
        filler = remaining // 2
        offset = remaining % 2
        spread = f"{filler}-{filler + 1}" if offset else f"{filler}"
        options.append(
            IntegrationOption(
                type=IntegrationType.CENTER_WITH_STOCKINETTE,
                description=(
                    f'Use {full_repeats} repeats of "{pattern_name}", with {spread} '
                    f"stitches of stockinette on each side (plus {edge} edge stitches)"
                ),
                total_stitches=target_stitch_count,
                edge_stitches_each_side=edge,
                centering_offset_stitches=offset,
                stockinette_stitches_each_side=filler,
            )
        )

    if remaining > 0:
        adjusted = (full_repeats + 1) * stitch_repeat_width + 2 * edge
        options.append(
            IntegrationOption(
                type=IntegrationType.ADJUST_FOR_FULL_REPEATS,
                description=(
                    f"Adjust to {adjusted} total stitches for {full_repeats + 1} complete "
                    f'repeats of "{pattern_name}" (plus {edge} edge stitches each side)'
                ),
                total_stitches=adjusted,
                edge_stitches_each_side=edge,
            )
        )

    if full_repeats == 0:
        minimum = stitch_repeat_width + 2 * edge
        options.append(
            IntegrationOption(
                type=IntegrationType.INCREASE_TO_MINIMUM,
                description=(
                    f"Pattern too wide for current stitch count. Increase to at least "
                    f'{minimum} stitches for 1 complete repeat of "{pattern_name}"'
                ),
                total_stitches=minimum,
                edge_stitches_each_side=edge,
            )
        )

    suggested = options[1].total_stitches if len(options) > 1 else target_stitch_count

    return IntegrationAnalysis(
        full_repeats=full_repeats,
        remaining_stitches=remaining,
        suggested_adjusted_stitch_count=suggested,
        options=tuple(options),
        available_width_for_pattern=available,
        stitches_used_by_repeats=used,
    )
