"""Tests for instruction wording helpers."""

import pytest

from malaine.pieces.common import describe_rate, ordinal
from malaine.utilities.shaping import ShapingAction


class TestOrdinal:
    @pytest.mark.parametrize(
        ("n", "expected"),
        [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"), (12, "12th"), (22, "22nd")],
    )
    def test_suffix(self, n, expected):
        assert ordinal(n) == expected


class TestDescribeRate:
    def test_every_row_once(self):
        assert (
            describe_rate(ShapingAction.INCREASE, 1, 1, 1) == "Increase 1 stitch every row, once"
        )

    def test_plural(self):
        assert (
            describe_rate(ShapingAction.DECREASE, 2, 4, 6)
            == "Decrease 2 stitches every 4th row, 6 times"
        )
