"""
Yarn quantity estimator contracts.

Estimator payloads use snake_case keys. Gauge and yarn data arrive either
inline (``gauge_info`` / ``yarn_info``) or as a profile id resolved through
an injected ProfileResolver; EstimationContext holds the resolved values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from malaine.reference.types import (
    EstimationMethod,
    GarmentSize,
    ProjectDimensions,
    ProjectType,
    ProjectTypeEntry,
)
from malaine.utilities.types import Gauge, LengthUnit


@dataclass(frozen=True)
class GaugeInfo:
    """A measured swatch: stitch and row counts over its width and height."""

    stitch_count: float
    row_count: float
    measurement_unit: LengthUnit
    swatch_width: float
    swatch_height: float

    def __post_init__(self) -> None:
        for name in ("stitch_count", "row_count", "swatch_width", "swatch_height"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def to_gauge(self) -> Gauge:
        """Normalise the swatch to counts per 10 units of its measurement unit."""
        return Gauge(
            stitches_per_10=self.stitch_count / self.swatch_width * 10,
            rows_per_10=self.row_count / self.swatch_height * 10,
            unit=self.measurement_unit,
        )


@dataclass(frozen=True)
class YarnInfo:
    """Yarn data the estimator needs; every field may be unknown."""

    yarn_weight_category: str | None = None
    skein_meterage: float | None = None
    skein_weight_grams: float | None = None

    def __post_init__(self) -> None:
        if self.skein_meterage is not None and self.skein_meterage <= 0:
            raise ValueError(f"skein_meterage must be positive, got {self.skein_meterage}")
        if self.skein_weight_grams is not None and self.skein_weight_grams <= 0:
            raise ValueError(
                f"skein_weight_grams must be positive, got {self.skein_weight_grams}"
            )


@dataclass(frozen=True)
class EstimationInput:
    project_type: ProjectType
    gauge_profile_id: str | None = None
    gauge_info: GaugeInfo | None = None
    yarn_profile_id: str | None = None
    yarn_info: YarnInfo | None = None
    dimensions: ProjectDimensions | None = None
    garment_size: GarmentSize | None = None


@dataclass(frozen=True)
class EstimationContext:
    """Fully resolved inputs for one yarn quantity calculation."""

    gauge: GaugeInfo | None
    yarn: YarnInfo
    project_config: ProjectTypeEntry
    surface_area_m2: float
    yarn_factor: float

    def __post_init__(self) -> None:
        if self.surface_area_m2 < 0:
            raise ValueError(f"surface_area_m2 must be >= 0, got {self.surface_area_m2}")
        if self.yarn_factor <= 0:
            raise ValueError(f"yarn_factor must be positive, got {self.yarn_factor}")


@dataclass(frozen=True)
class YarnQuantityEstimate:
    total_length_meters: float
    total_weight_grams: float
    number_of_skeins: int
    surface_area_m2: float
    yarn_factor_used: float
    buffer_percentage: float
    calculation_method: EstimationMethod
    yarn_weight_category_used: str | None = None

    def __post_init__(self) -> None:
        if self.number_of_skeins < 1:
            raise ValueError(f"number_of_skeins must be >= 1, got {self.number_of_skeins}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "total_length_meters": self.total_length_meters,
            "total_weight_grams": self.total_weight_grams,
            "number_of_skeins": self.number_of_skeins,
            "surface_area_m2": self.surface_area_m2,
            "yarn_factor_used": self.yarn_factor_used,
            "buffer_percentage": self.buffer_percentage,
            "calculation_method": self.calculation_method.value,
        }
        if self.yarn_weight_category_used is not None:
            data["yarn_weight_category_used"] = self.yarn_weight_category_used
        return data


@dataclass(frozen=True)
class EstimationOutcome:
    """Either an estimate or the reason none could be produced."""

    success: bool
    data: YarnQuantityEstimate | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.data is None:
            raise ValueError("a successful outcome must carry data")
        if not self.success and not self.error:
            raise ValueError("a failed outcome must carry an error message")

    @classmethod
    def failure(cls, error: str) -> EstimationOutcome:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success and self.data is not None:
            return {"success": True, "data": self.data.to_dict()}
        return {"success": False, "error": self.error}


# ── Parsing ────────────────────────────────────────────────────────────────────


def parse_estimation_input(payload: Mapping[str, Any]) -> EstimationInput:
    """Build an EstimationInput from a payload that passed validate_estimation_input()."""
    gauge = payload.get("gauge_info")
    yarn = payload.get("yarn_info")
    dims = payload.get("dimensions")
    size = payload.get("garment_size")
    return EstimationInput(
        project_type=ProjectType(payload["project_type"]),
        gauge_profile_id=payload.get("gauge_profile_id"),
        gauge_info=parse_gauge_info(gauge) if gauge is not None else None,
        yarn_profile_id=payload.get("yarn_profile_id"),
        yarn_info=parse_yarn_info(yarn) if yarn is not None else None,
        dimensions=(
            ProjectDimensions(
                width=float(dims["width"]),
                length=float(dims["length"]),
                unit=LengthUnit(dims["unit"]),
            )
            if dims is not None
            else None
        ),
        garment_size=GarmentSize(size) if size is not None else None,
    )


def parse_gauge_info(data: Mapping[str, Any]) -> GaugeInfo:
    return GaugeInfo(
        stitch_count=float(data["stitch_count"]),
        row_count=float(data["row_count"]),
        measurement_unit=LengthUnit(data["measurement_unit"]),
        swatch_width=float(data["swatch_width"]),
        swatch_height=float(data["swatch_height"]),
    )


def parse_yarn_info(data: Mapping[str, Any]) -> YarnInfo:
    meterage = data.get("skein_meterage")
    grams = data.get("skein_weight_grams")
    return YarnInfo(
        yarn_weight_category=data.get("yarn_weight_category"),
        skein_meterage=float(meterage) if meterage is not None else None,
        skein_weight_grams=float(grams) if grams is not None else None,
    )
