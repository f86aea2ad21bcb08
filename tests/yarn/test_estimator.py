"""
Tests for the yarn quantity estimator.

Worsted consumption is 800 m per m²; every total includes the 10% buffer.
"""

import pytest

from malaine.reference import (
    EstimationMethod,
    GarmentSize,
    ProjectDimensions,
    ProjectType,
    get_registry,
)
from malaine.schemas.estimation import (
    EstimationContext,
    EstimationInput,
    GaugeInfo,
    YarnInfo,
    YarnQuantityEstimate,
)
from malaine.utilities.types import LengthUnit
from malaine.yarn import (
    BUFFER_PERCENTAGE,
    InMemoryProfileResolver,
    calculate_yarn_quantity,
    dimensions_to_square_meters,
    estimate_from_payload,
    estimate_yarn_quantity,
    format_estimate,
    project_surface_area,
    yarn_totals,
)

_GAUGE = GaugeInfo(
    stitch_count=22, row_count=30, measurement_unit=LengthUnit.CM, swatch_width=10, swatch_height=10
)
_WORSTED = YarnInfo(yarn_weight_category="Worsted", skein_meterage=200, skein_weight_grams=100)
_SCARF_DIMS = ProjectDimensions(width=20, length=150, unit=LengthUnit.CM)


@pytest.fixture(scope="module")
def registry():
    return get_registry()


def _input(project_type=ProjectType.SCARF, **overrides):
    fields = {
        "project_type": project_type,
        "gauge_info": _GAUGE,
        "yarn_info": _WORSTED,
        "dimensions": _SCARF_DIMS if project_type is ProjectType.SCARF else None,
    }
    fields.update(overrides)
    return EstimationInput(**fields)


# ── yarn_totals ────────────────────────────────────────────────────────────────


class TestYarnTotals:
    def test_one_square_meter(self):
        total, weight, skeins = yarn_totals(1.0, 200, skein_meterage=100)
        assert total == pytest.approx(220.0)
        assert weight == 0.0
        assert skeins == 3

    def test_buffer_is_exact(self):
        total, _, _ = yarn_totals(0.5, 1000)
        assert BUFFER_PERCENTAGE == 10
        assert total == pytest.approx(0.5 * 1000 * 1.10)

    def test_weight_needs_both_skein_values(self):
        _, weight, skeins = yarn_totals(1.0, 200, skein_meterage=100, skein_weight_grams=50)
        assert weight == pytest.approx(110.0)
        assert skeins == 3

    def test_grams_alone_gives_no_weight(self):
        _, weight, skeins = yarn_totals(1.0, 200, skein_weight_grams=50)
        assert weight == 0.0
        assert skeins == 1

    @pytest.mark.parametrize("area", [0.0, 0.3])
    def test_at_least_one_skein(self, area):
        _, _, skeins = yarn_totals(area, 800)
        assert skeins == 1

    def test_zero_area_with_meterage(self):
        total, _, skeins = yarn_totals(0.0, 800, skein_meterage=200)
        assert total == 0.0
        assert skeins == 1


# ── Surface area ───────────────────────────────────────────────────────────────


class TestSurfaceArea:
    def test_dimensions_in_cm(self):
        assert dimensions_to_square_meters(_SCARF_DIMS) == pytest.approx(0.3)

    def test_dimensions_in_inches(self):
        dims = ProjectDimensions(width=8, length=60, unit=LengthUnit.INCH)
        assert dimensions_to_square_meters(dims) == pytest.approx(0.2032 * 1.524)

    def test_scarf_uses_supplied_dimensions(self, registry):
        entry = registry.get_project_type(ProjectType.SCARF)
        dims = ProjectDimensions(width=30, length=200, unit=LengthUnit.CM)
        assert project_surface_area(entry, dimensions=dims) == pytest.approx(0.6)

    def test_scarf_falls_back_to_default_dimensions(self, registry):
        entry = registry.get_project_type(ProjectType.SCARF)
        assert project_surface_area(entry) == pytest.approx(0.3)

    def test_hat_uses_medium_area(self, registry):
        entry = registry.get_project_type(ProjectType.SIMPLE_HAT)
        assert project_surface_area(entry, size=GarmentSize.XL) == pytest.approx(0.10)

    def test_sweater_by_size(self, registry):
        entry = registry.get_project_type(ProjectType.ADULT_SWEATER)
        assert project_surface_area(entry, size=GarmentSize.L) == pytest.approx(1.4)
        assert project_surface_area(entry) == pytest.approx(1.2)


# ── calculate_yarn_quantity ────────────────────────────────────────────────────


class TestCalculateYarnQuantity:
    def test_rounds_and_reports(self, registry):
        context = EstimationContext(
            gauge=_GAUGE,
            yarn=_WORSTED,
            project_config=registry.get_project_type(ProjectType.SCARF),
            surface_area_m2=0.3,
            yarn_factor=800,
        )
        estimate = calculate_yarn_quantity(context)
        assert estimate.total_length_meters == 264.0
        assert estimate.total_weight_grams == 132.0
        assert estimate.number_of_skeins == 2
        assert estimate.surface_area_m2 == 0.3
        assert estimate.buffer_percentage == 10
        assert estimate.calculation_method is EstimationMethod.AREA_BASED
        assert estimate.yarn_weight_category_used == "Worsted"


# ── estimate_yarn_quantity ─────────────────────────────────────────────────────


class TestEstimateYarnQuantity:
    def test_inline_scarf(self):
        outcome = estimate_yarn_quantity(_input())
        assert outcome.success
        assert outcome.data.total_length_meters == 264.0
        assert outcome.data.number_of_skeins == 2

    def test_scarf_in_inches(self):
        dims = ProjectDimensions(width=8, length=60, unit=LengthUnit.INCH)
        outcome = estimate_yarn_quantity(_input(dimensions=dims))
        assert outcome.data.surface_area_m2 == 0.3097

    def test_hat_without_size(self):
        outcome = estimate_yarn_quantity(_input(ProjectType.SIMPLE_HAT))
        assert outcome.success
        assert outcome.data.surface_area_m2 == 0.1
        assert outcome.data.total_length_meters == 88.0

    def test_sweater_by_size(self):
        outcome = estimate_yarn_quantity(
            _input(ProjectType.ADULT_SWEATER, garment_size=GarmentSize.XL)
        )
        assert outcome.data.surface_area_m2 == 1.6

    def test_unknown_weight_uses_default_factor(self):
        outcome = estimate_yarn_quantity(
            _input(yarn_info=YarnInfo(yarn_weight_category="Thread", skein_meterage=200))
        )
        assert outcome.data.yarn_factor_used == 800
        assert outcome.data.total_weight_grams == 0.0

    def test_scarf_without_dimensions_fails(self):
        outcome = estimate_yarn_quantity(_input(dimensions=None))
        assert not outcome.success
        assert outcome.error == "Dimensions are required for this project type"

    def test_sweater_without_size_fails(self):
        outcome = estimate_yarn_quantity(_input(ProjectType.ADULT_SWEATER))
        assert outcome.error == "Garment size is required for this project type"


class TestProfileResolution:
    def test_profiles_through_resolver(self):
        resolver = InMemoryProfileResolver(gauges={"g1": _GAUGE}, yarns={"y1": _WORSTED})
        outcome = estimate_yarn_quantity(
            _input(gauge_info=None, gauge_profile_id="g1", yarn_info=None, yarn_profile_id="y1"),
            resolver,
        )
        assert outcome.success
        assert outcome.data.total_length_meters == 264.0

    def test_inline_wins_over_profile(self):
        resolver = InMemoryProfileResolver(yarns={"y1": YarnInfo("Lace")})
        outcome = estimate_yarn_quantity(_input(yarn_profile_id="y1"), resolver)
        assert outcome.data.yarn_weight_category_used == "Worsted"

    def test_unknown_gauge_profile(self):
        outcome = estimate_yarn_quantity(
            _input(gauge_info=None, gauge_profile_id="missing"), InMemoryProfileResolver()
        )
        assert outcome.error == "Failed to resolve gauge information"

    def test_no_resolver_for_yarn_profile(self):
        outcome = estimate_yarn_quantity(_input(yarn_info=None, yarn_profile_id="y1"))
        assert outcome.error == "Failed to resolve yarn information"


class TestEstimateFromPayload:
    def test_valid_payload(self):
        outcome = estimate_from_payload(
            {
                "project_type": "simple_hat",
                "gauge_info": {
                    "stitch_count": 22,
                    "row_count": 30,
                    "measurement_unit": "cm",
                    "swatch_width": 10,
                    "swatch_height": 10,
                },
                "yarn_info": {"yarn_weight_category": "DK", "skein_meterage": 100},
            }
        )
        assert outcome.success
        assert outcome.data.total_length_meters == 110.0
        assert outcome.data.number_of_skeins == 2

    def test_invalid_payload_never_raises(self):
        outcome = estimate_from_payload({"project_type": "scarf"})
        assert not outcome.success
        assert outcome.to_dict() == {"success": False, "error": outcome.error}

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_skein_meterage_fails_cleanly(self, value):
        outcome = estimate_from_payload(
            {
                "project_type": "simple_hat",
                "gauge_info": {
                    "stitch_count": 22,
                    "row_count": 30,
                    "measurement_unit": "cm",
                    "swatch_width": 10,
                    "swatch_height": 10,
                },
                "yarn_info": {"yarn_weight_category": "DK", "skein_meterage": value},
            }
        )
        assert not outcome.success
        assert outcome.error.startswith("yarn_info.skein_meterage: must be a finite number")


# ── Display ────────────────────────────────────────────────────────────────────


class TestFormatEstimate:
    def test_imperial_alongside_metric(self):
        estimate = YarnQuantityEstimate(
            total_length_meters=264.0,
            total_weight_grams=132.0,
            number_of_skeins=2,
            surface_area_m2=0.3,
            yarn_factor_used=800,
            buffer_percentage=10,
            calculation_method=EstimationMethod.AREA_BASED,
            yarn_weight_category_used="Worsted",
        )
        formatted = format_estimate(estimate)
        assert formatted["totalLength"] == {"meters": 264.0, "yards": 288.71}
        assert formatted["totalWeight"] == {"grams": 132.0, "ounces": 4.66}
        assert formatted["numberOfSkeins"] == 2
        assert formatted["calculationMethod"] == "area_based"
        assert formatted["yarnWeightUsed"] == "Worsted"

    def test_no_category(self):
        estimate = YarnQuantityEstimate(
            total_length_meters=10.0,
            total_weight_grams=0.0,
            number_of_skeins=1,
            surface_area_m2=0.01,
            yarn_factor_used=800,
            buffer_percentage=10,
            calculation_method=EstimationMethod.AREA_BASED,
        )
        assert "yarnWeightUsed" not in format_estimate(estimate)
