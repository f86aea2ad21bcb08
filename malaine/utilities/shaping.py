"""
Shaping schedules: spread increases or decreases over a run of rows.

A schedule is built from the signed stitch change a piece needs and the rows
it has. Events are spaced as evenly as whole rows allow: when the rows do
not divide evenly, the schedule has two rates, the shorter spacing first
("decrease every 4th row 7 times, then every 5th row 3 times").

A piece can never shape more than once per row. When more events are asked
for than there are rows, the schedule keeps one event per row and records
how many were requested, so callers can report the shortfall.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ShapingAction(str, Enum):
    """Direction of a shaping operation."""

    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass(frozen=True)
class ShapingInterval:
    """A single shaping instruction: perform action every N rows, repeated M times."""

    action: ShapingAction
    every_n_rows: int
    times: int
    stitches_per_action: int

    @property
    def rows(self) -> int:
        return self.every_n_rows * self.times

    @property
    def stitch_change(self) -> int:
        """Signed stitch change over the whole interval."""
        delta = self.stitches_per_action * self.times
        return delta if self.action is ShapingAction.INCREASE else -delta


@dataclass(frozen=True)
class PlacedInterval:
    """A ShapingInterval anchored to absolute row numbers (1-based, inclusive)."""

    interval: ShapingInterval
    start_row: int
    end_row: int


@dataclass(frozen=True)
class ShapingSchedule:
    """Placed intervals for one section, after capping to one event per row."""

    placed: tuple[PlacedInterval, ...]
    requested_events: int
    stitches_per_event: int

    @property
    def applied_events(self) -> int:
        return sum(p.interval.times for p in self.placed)

    @property
    def capped(self) -> bool:
        return self.applied_events < self.requested_events

    @property
    def stitch_change(self) -> int:
        """Signed stitch change the schedule actually delivers."""
        return sum(p.interval.stitch_change for p in self.placed)


def schedule_shaping(
    stitch_delta: int,
    rows: int,
    stitches_per_event: int = 2,
    first_row: int = 1,
) -> ShapingSchedule:
    """
    Build the shaping schedule for a section.

    Parameters
    ----------
    stitch_delta:
        Signed total stitch change; positive increases, negative decreases.
    rows:
        Rows available in the section. With no rows nothing can be shaped.
    stitches_per_event:
        Stitches changed on each shaping row (2 is one at each edge).
    first_row:
        Absolute row number the section starts on.

    Raises
    ------
    ValueError
        If *stitches_per_event* is below 1 or does not divide *stitch_delta*.
    """
    if stitches_per_event < 1:
        raise ValueError(f"stitches_per_event must be >= 1, got {stitches_per_event}")
    if stitch_delta % stitches_per_event:
        raise ValueError(
            f"stitch_delta ({stitch_delta}) must be divisible by "
            f"stitches_per_event ({stitches_per_event})"
        )

    requested = abs(stitch_delta) // stitches_per_event
    action = ShapingAction.INCREASE if stitch_delta > 0 else ShapingAction.DECREASE
    events = min(requested, max(rows, 0))
    intervals = spread_events(action, events, rows, stitches_per_event) if events else []
    return ShapingSchedule(
        placed=tuple(place_intervals(intervals, first_row)),
        requested_events=requested,
        stitches_per_event=stitches_per_event,
    )


def spread_events(
    action: ShapingAction, events: int, rows: int, stitches_per_event: int
) -> list[ShapingInterval]:
    """
    Space *events* shaping rows over *rows* rows, shorter spacing first.

    Every row of the section is covered, so the intervals' rows add up to
    *rows*. Needs ``1 <= events <= rows``.
    """
    if not 1 <= events <= rows:
        raise ValueError(f"cannot spread {events} shaping events over {rows} rows")

    spacing, longer = divmod(rows, events)
    runs = [(spacing, events - longer), (spacing + 1, longer)]
    return [
        ShapingInterval(
            action=action,
            every_n_rows=every,
            times=times,
            stitches_per_action=stitches_per_event,
        )
        for every, times in runs
        if times
    ]


def place_intervals(
    intervals: list[ShapingInterval], first_row: int = 1
) -> list[PlacedInterval]:
    """
    Anchor consecutive intervals to absolute row numbers.

    The first shaping row of each interval is ``every_n_rows`` rows into it,
    so an interval "every 4th row 3 times" starting at row 1 covers rows
    1 to 12 and shapes on rows 4, 8 and 12.
    """
    placed: list[PlacedInterval] = []
    cursor = first_row
    for interval in intervals:
        end = cursor + interval.rows - 1
        placed.append(PlacedInterval(interval=interval, start_row=cursor, end_row=end))
        cursor = end + 1
    return placed
