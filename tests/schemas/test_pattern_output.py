"""Tests for the CalculatedPatternDetails output contract."""

from types import MappingProxyType

import pytest

from malaine.schemas.pattern_output import (
    CalculatedPatternDetails,
    CalculatedPiece,
    Confidence,
    FinishedDimensions,
    PatternInfo,
    PieceYarnUsage,
    ShapingStep,
    YarnEstimationDetails,
)
from malaine.utilities.shaping import ShapingAction

_INFO = PatternInfo(
    session_id="3f2b8c1e-9d4a-4f6b-a2c7-5e8d1b0a9c34",
    garment_type="tank",
    calculated_at="2024-05-01T12:00:01+00:00",
    schema_version="1.0.0",
)


def _step() -> ShapingStep:
    return ShapingStep(
        action=ShapingAction.DECREASE,
        instruction="Decrease 2 stitches every 4th row, 5 times",
        start_row=1,
        end_row=20,
        stitch_count_change=-10,
        frequency=4,
        repetitions=5,
    )


def _piece(**overrides) -> CalculatedPiece:
    fields = dict(
        piece_key="front",
        display_name="Front",
        cast_on_stitches=100,
        length_in_rows=20,
        final_stitch_count=90,
        finished_dimensions=FinishedDimensions(width_cm=45.45, length_cm=6.67, top_width_cm=40.91),
        surface_area_m2=0.0288,
        shaping=(_step(),),
        construction_notes=("Work edge stitches in garter",),
        stitch_counts_at_rows=MappingProxyType({0: 100, 20: 90}),
    )
    fields.update(overrides)
    return CalculatedPiece(**fields)


class TestShapingStep:
    def test_to_dict(self):
        data = _step().to_dict()
        assert data["type"] == "decrease"
        assert data["startRow"] == 1
        assert data["endRow"] == 20
        assert data["stitchCountChange"] == -10
        assert "notes" not in data

    def test_rejects_row_zero(self):
        with pytest.raises(ValueError, match="start_row must be >= 1"):
            ShapingStep(ShapingAction.INCREASE, "x", 0, 4, 2, 4, 1)

    def test_rejects_end_before_start(self):
        with pytest.raises(ValueError, match="must not precede"):
            ShapingStep(ShapingAction.INCREASE, "x", 5, 4, 2, 4, 1)


class TestFinishedDimensions:
    def test_schematic_uses_top_width(self):
        dims = FinishedDimensions(width_cm=50, length_cm=60, top_width_cm=40)
        assert dims.schematic() == {"bottomWidth": 50, "topWidth": 40, "length": 60}

    def test_rectangle_top_equals_bottom(self):
        dims = FinishedDimensions(width_cm=50, length_cm=60)
        assert dims.schematic()["topWidth"] == 50

    def test_circumference_only_when_set(self):
        assert "circumference_cm" not in FinishedDimensions(50, 60).to_dict()
        assert FinishedDimensions(27, 20, circumference_cm=54).to_dict()["circumference_cm"] == 54


class TestCalculatedPiece:
    def test_rejects_negative_counts(self):
        with pytest.raises(ValueError, match="final_stitch_count must be >= 0"):
            _piece(final_stitch_count=-2)

    def test_to_dict_keys(self):
        data = _piece().to_dict()
        assert data["castOnStitches"] == 100
        assert data["lengthInRows"] == 20
        assert data["finalStitchCount"] == 90
        assert data["finishedDimensions"]["top_width_cm"] == 40.91
        assert data["shaping"][0]["repetitions"] == 5
        assert data["stitchCountsAtRows"] == {"0": 100, "20": 90}
        assert "yarnUsage" not in data
        assert "stitchPatternIntegration" not in data

    def test_to_dict_with_yarn_usage(self):
        data = _piece().to_dict(PieceYarnUsage(length_m=25.3, weight_g=11.2, percentage=40.0))
        assert data["yarnUsage"] == {"estimatedLength_m": 25.3, "estimatedWeight_g": 11.2}


class TestCalculatedPatternDetails:
    def test_error_result(self):
        details = CalculatedPatternDetails(
            pattern_info=_INFO,
            pieces=MappingProxyType({}),
            errors=("version: required field is missing",),
        )
        assert details.success is False
        data = details.to_dict()
        assert data["pieces"] == {}
        assert data["errors"] == ["version: required field is missing"]
        assert "yarnEstimation" not in data

    def test_schematic_per_piece(self):
        details = CalculatedPatternDetails(_INFO, MappingProxyType({"front": _piece()}))
        assert details.success is True
        assert details.schematic() == {
            "front": {"bottomWidth": 45.45, "topWidth": 40.91, "length": 6.67}
        }

    def test_yarn_breakdown_attached_to_pieces(self):
        estimation = YarnEstimationDetails(
            total_length_m=31.68,
            total_weight_g=0.0,
            number_of_skeins=1,
            surface_area_m2=0.0288,
            yarn_factor_used=1000,
            safety_margin=0.1,
            confidence=Confidence.MEDIUM,
            by_piece=MappingProxyType({"front": PieceYarnUsage(31.68, 0.0, 100.0)}),
        )
        data = CalculatedPatternDetails(
            _INFO, MappingProxyType({"front": _piece()}), yarn_estimation=estimation
        ).to_dict()
        assert data["pieces"]["front"]["yarnUsage"]["estimatedLength_m"] == 31.68
        assert data["yarnEstimation"]["confidence"] == "medium"
        assert data["yarnEstimation"]["byPiece"]["front"]["percentage"] == 100.0
        assert data["patternInfo"]["craftType"] == "knitting"

    def test_yarn_estimation_skeins_at_least_one(self):
        with pytest.raises(ValueError, match="number_of_skeins"):
            YarnEstimationDetails(0, 0, 0, 0, 800, 0.1, Confidence.LOW, MappingProxyType({}))
