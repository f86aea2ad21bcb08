"""Helpers shared by the piece calculators."""

from __future__ import annotations

from malaine.schemas.pattern_output import ShapingStep
from malaine.utilities.shaping import PlacedInterval, ShapingAction


def ordinal(n: int) -> str:
    """1 → '1st', 2 → '2nd', 11 → '11th', 22 → '22nd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def describe_rate(action: ShapingAction, stitches: int, every_n_rows: int, times: int) -> str:
    verb = "Increase" if action is ShapingAction.INCREASE else "Decrease"
    noun = "stitch" if stitches == 1 else "stitches"
    row = "row" if every_n_rows == 1 else f"{ordinal(every_n_rows)} row"
    count = "once" if times == 1 else f"{times} times"
    return f"{verb} {stitches} {noun} every {row}, {count}"


def step_from_interval(placed: PlacedInterval) -> ShapingStep:
    """Turn a placed shaping interval into an output ShapingStep."""
    interval = placed.interval
    return ShapingStep(
        action=interval.action,
        instruction=describe_rate(
            interval.action, interval.stitches_per_action, interval.every_n_rows, interval.times
        ),
        start_row=placed.start_row,
        end_row=placed.end_row,
        stitch_count_change=interval.stitch_change,
        frequency=interval.every_n_rows,
        repetitions=interval.times,
    )
