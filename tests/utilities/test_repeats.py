"""Tests for stitch pattern repeat integration."""

import pytest

from malaine.utilities.repeats import (
    IntegrationAnalysis,
    IntegrationType,
    integrate_stitch_pattern,
)


class TestWorkedExamples:
    def test_eight_stitch_repeat_in_100_with_borders(self):
        """100 sts, 8-st repeat, 3 edge sts: 11 repeats, 6 filler split 3/3."""
        analysis = integrate_stitch_pattern(100, 8, 3, "Seed Rib")
        assert analysis.available_width_for_pattern == 94
        assert analysis.full_repeats == 11
        assert analysis.stitches_used_by_repeats == 88
        assert analysis.remaining_stitches == 6

        center = analysis.option(IntegrationType.CENTER_WITH_STOCKINETTE)
        assert center is not None
        assert center.total_stitches == 100
        assert center.stockinette_stitches_each_side == 3
        assert center.centering_offset_stitches == 0
        assert center.edge_stitches_each_side == 3

    def test_adjust_option_rounds_up_to_next_repeat(self):
        analysis = integrate_stitch_pattern(100, 8, 3)
        adjust = analysis.option(IntegrationType.ADJUST_FOR_FULL_REPEATS)
        assert adjust is not None
        assert adjust.total_stitches == 102
        assert analysis.suggested_adjusted_stitch_count == 102

    def test_repeat_wider_than_piece(self):
        """20 sts, 30-st repeat, 2 edge sts: nothing fits; minimum is 34."""
        analysis = integrate_stitch_pattern(20, 30, 2, "Leaf Lace")
        assert analysis.full_repeats == 0
        assert analysis.option(IntegrationType.CENTER_WITH_STOCKINETTE) is None
        minimum = analysis.option(IntegrationType.INCREASE_TO_MINIMUM)
        assert minimum is not None
        assert minimum.total_stitches == 34
        assert '"Leaf Lace"' in minimum.description
        assert analysis.suggested_adjusted_stitch_count == 34

    def test_exact_fit_offers_only_centering(self):
        analysis = integrate_stitch_pattern(48, 12)
        assert analysis.remaining_stitches == 0
        assert [o.type for o in analysis.options] == [IntegrationType.CENTER_WITH_STOCKINETTE]
        assert analysis.suggested_adjusted_stitch_count == 48

    def test_odd_filler_gets_offset(self):
        analysis = integrate_stitch_pattern(45, 6)
        center = analysis.option(IntegrationType.CENTER_WITH_STOCKINETTE)
        assert analysis.remaining_stitches == 3
        assert center.stockinette_stitches_each_side == 1
        assert center.centering_offset_stitches == 1
        assert "1-2 stitches" in center.description


class TestInvariants:
    @pytest.mark.parametrize(
        "target, repeat, edge",
        [(100, 8, 3), (20, 30, 2), (48, 12, 0), (45, 6, 0), (131, 7, 5), (9, 4, 4), (1, 1, 0)],
    )
    def test_partition(self, target, repeat, edge):
        a = integrate_stitch_pattern(target, repeat, edge)
        assert 2 * edge + a.full_repeats * repeat + a.remaining_stitches == target
        assert 0 <= a.remaining_stitches < repeat

    @pytest.mark.parametrize("target, repeat, edge", [(100, 8, 3), (20, 30, 2), (131, 7, 5)])
    def test_adjustment_never_shrinks(self, target, repeat, edge):
        a = integrate_stitch_pattern(target, repeat, edge)
        assert a.suggested_adjusted_stitch_count >= target
        assert (a.suggested_adjusted_stitch_count - 2 * edge) % repeat == 0

    def test_options_in_precedence_order(self):
        a = integrate_stitch_pattern(100, 8, 3)
        assert [o.type for o in a.options] == [
            IntegrationType.CENTER_WITH_STOCKINETTE,
            IntegrationType.ADJUST_FOR_FULL_REPEATS,
        ]


class TestPreconditions:
    def test_rejects_non_positive_target(self):
        with pytest.raises(ValueError, match="target_stitch_count must be positive"):
            integrate_stitch_pattern(0, 4)

    def test_rejects_zero_repeat(self):
        with pytest.raises(ValueError, match="stitch_repeat_width must be >= 1"):
            integrate_stitch_pattern(40, 0)

    def test_rejects_negative_edge(self):
        with pytest.raises(ValueError, match="desired_edge_stitches must be >= 0"):
            integrate_stitch_pattern(40, 4, -1)

    def test_rejects_edges_that_fill_the_piece(self):
        with pytest.raises(ValueError, match="leave no room"):
            integrate_stitch_pattern(10, 4, 5)


class TestToDict:
    def test_camel_case_keys(self):
        data = integrate_stitch_pattern(100, 8, 3).to_dict()
        assert data["fullRepeats"] == 11
        assert data["availableWidthForPattern"] == 94
        assert data["options"][0]["type"] == "center_with_stockinette"
        assert data["options"][0]["stockinetteStitchesEachSide"] == 3
        assert "stockinetteStitchesEachSide" not in data["options"][1]

    def test_is_frozen(self):
        a = integrate_stitch_pattern(100, 8, 3)
        assert isinstance(a, IntegrationAnalysis)
        with pytest.raises(AttributeError):
            a.full_repeats = 3  # type: ignore[misc]
