"""
Typed model of a pattern calculation request.

The request arrives as a deserialized JSON mapping with camelCase keys. The
validator inspects the raw mapping; once it passes, parse_pattern_input()
turns it into the frozen dataclasses below, which is what the calculators
consume.

Component attributes are a closed tagged union keyed by ``attributes.type``:

    "silhouette"        → SilhouetteAttributes
    "triangular_shawl"  → TriangularShawlAttributes

Attribute keys are snake_case, matching what the pattern definition UI
stores for each component.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

from malaine.reference.types import ConstructionMethod, WorkStyle
from malaine.utilities.types import Gauge, LengthUnit

E = TypeVar("E", bound=Enum)


class AttributeKind(str, Enum):
    """Discriminator for component attribute variants."""

    SILHOUETTE = "silhouette"
    TRIANGULAR_SHAWL = "triangular_shawl"


class RepeatStrategy(str, Enum):
    """How a silhouette lays out the stitch pattern repeat across its width."""

    CENTER = "center"
    ADJUST = "adjust"


# ── Pattern-level definitions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Units:
    dimension_unit: LengthUnit
    gauge_unit: LengthUnit


@dataclass(frozen=True)
class YarnDefinition:
    """Yarn as described in the pattern; skein data is optional."""

    name: str
    weight_category: str
    skein_meterage: float | None = None
    skein_weight_grams: float | None = None
    fiber: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("YarnDefinition name must not be empty")
        if self.skein_meterage is not None and self.skein_meterage <= 0:
            raise ValueError(f"skein_meterage must be positive, got {self.skein_meterage}")
        if self.skein_weight_grams is not None and self.skein_weight_grams <= 0:
            raise ValueError(
                f"skein_weight_grams must be positive, got {self.skein_weight_grams}"
            )


@dataclass(frozen=True)
class StitchPatternDefinition:
    """A named stitch pattern with its repeat dimensions."""

    name: str
    stitch_repeat_width: int
    row_repeat_height: int
    pattern_type: str | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("StitchPatternDefinition name must not be empty")
        if self.stitch_repeat_width < 1:
            raise ValueError(
                f"stitch_repeat_width must be >= 1, got {self.stitch_repeat_width}"
            )
        if self.row_repeat_height < 1:
            raise ValueError(f"row_repeat_height must be >= 1, got {self.row_repeat_height}")


@dataclass(frozen=True)
class Measurements:
    """Finished garment measurements in the pattern's dimension unit."""

    finished_chest_circumference: float
    finished_length: float
    finished_waist_circumference: float | None = None
    finished_hip_circumference: float | None = None
    finished_shoulder_width: float | None = None
    finished_arm_length: float | None = None
    finished_upper_arm_circumference: float | None = None
    finished_neck_circumference: float | None = None
    additional: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        if self.finished_chest_circumference <= 0:
            raise ValueError(
                "finished_chest_circumference must be positive, got "
                f"{self.finished_chest_circumference}"
            )
        if self.finished_length <= 0:
            raise ValueError(f"finished_length must be positive, got {self.finished_length}")


# ── Component attributes (tagged union) ────────────────────────────────────────


@dataclass(frozen=True)
class SilhouetteAttributes:
    """
    A generic flat or circular piece: bottom width, optional top width, length.

    When ``target_top_width`` is None the piece is a rectangle. When
    ``target_circumference`` is set the piece is worked in the round and the
    circumference replaces the width.
    """

    target_length: float
    target_width: float | None = None
    target_top_width: float | None = None
    target_circumference: float | None = None
    edge_stitches_each_side: int = 0
    repeat_strategy: RepeatStrategy = RepeatStrategy.CENTER
    stitches_per_shaping_event: int = 2

    def __post_init__(self) -> None:
        if self.target_width is None and self.target_circumference is None:
            raise ValueError("either target_width or target_circumference is required")
        if self.target_width is not None and self.target_width <= 0:
            raise ValueError(f"target_width must be positive, got {self.target_width}")
        if self.target_length <= 0:
            raise ValueError(f"target_length must be positive, got {self.target_length}")
        if self.target_top_width is not None and self.target_top_width <= 0:
            raise ValueError(f"target_top_width must be positive, got {self.target_top_width}")
        if self.target_circumference is not None and self.target_circumference <= 0:
            raise ValueError(
                f"target_circumference must be positive, got {self.target_circumference}"
            )
        if self.edge_stitches_each_side < 0:
            raise ValueError(
                f"edge_stitches_each_side must be >= 0, got {self.edge_stitches_each_side}"
            )
        if self.stitches_per_shaping_event < 1:
            raise ValueError(
                "stitches_per_shaping_event must be >= 1, got "
                f"{self.stitches_per_shaping_event}"
            )

    @property
    def kind(self) -> AttributeKind:
        return AttributeKind.SILHOUETTE


@dataclass(frozen=True)
class TriangularShawlAttributes:
    """Triangular shawl geometry; dimensions are always in cm."""

    target_wingspan_cm: float
    target_depth_cm: float
    construction_method: ConstructionMethod
    work_style: WorkStyle = WorkStyle.FLAT
    border_stitches_each_side: int = 0

    def __post_init__(self) -> None:
        if self.target_wingspan_cm <= 0:
            raise ValueError(
                f"target_wingspan_cm must be positive, got {self.target_wingspan_cm}"
            )
        if self.target_depth_cm <= 0:
            raise ValueError(f"target_depth_cm must be positive, got {self.target_depth_cm}")
        if self.border_stitches_each_side < 0:
            raise ValueError(
                f"border_stitches_each_side must be >= 0, got {self.border_stitches_each_side}"
            )

    @property
    def kind(self) -> AttributeKind:
        return AttributeKind.TRIANGULAR_SHAWL


ComponentAttributes = SilhouetteAttributes | TriangularShawlAttributes


@dataclass(frozen=True)
class ComponentDefinition:
    component_key: str
    display_name: str
    attributes: ComponentAttributes | None

    def __post_init__(self) -> None:
        if not self.component_key:
            raise ValueError("component_key must not be empty")


@dataclass(frozen=True)
class GarmentDefinition:
    type_key: str
    display_name: str
    construction_method: str
    body_shape: str
    measurements: Measurements
    components: tuple[ComponentDefinition, ...]

    def __post_init__(self) -> None:
        keys = [c.component_key for c in self.components]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"duplicate component keys: {duplicates}")


@dataclass(frozen=True)
class PatternCalculationInput:
    """A complete, validated calculation request."""

    version: str
    session_id: str
    units: Units
    gauge: Gauge
    yarn: YarnDefinition
    stitch_pattern: StitchPatternDefinition
    garment: GarmentDefinition
    requested_at: str


# ── Parsing ────────────────────────────────────────────────────────────────────

_MEASUREMENT_KEYS: dict[str, str] = {
    "finishedWaistCircumference": "finished_waist_circumference",
    "finishedHipCircumference": "finished_hip_circumference",
    "finishedShoulderWidth": "finished_shoulder_width",
    "finishedArmLength": "finished_arm_length",
    "finishedUpperArmCircumference": "finished_upper_arm_circumference",
    "finishedNeckCircumference": "finished_neck_circumference",
}


def parse_pattern_input(payload: Mapping[str, Any]) -> PatternCalculationInput:
    """
    Build a PatternCalculationInput from a request payload.

    The payload is expected to have passed validate_pattern_input(); anything
    malformed surfaces as KeyError, TypeError or ValueError.
    """
    units = payload["units"]
    gauge = payload["gauge"]
    garment = payload["garment"]

    return PatternCalculationInput(
        version=payload["version"],
        session_id=payload["sessionId"],
        units=Units(
            dimension_unit=LengthUnit(units["dimensionUnit"]),
            gauge_unit=LengthUnit(units["gaugeUnit"]),
        ),
        gauge=Gauge(
            stitches_per_10=float(gauge["stitchesPer10cm"]),
            rows_per_10=float(gauge["rowsPer10cm"]),
            unit=LengthUnit(gauge.get("unit", units["gaugeUnit"])),
        ),
        yarn=parse_yarn(payload["yarn"]),
        stitch_pattern=parse_stitch_pattern(payload["stitchPattern"]),
        garment=GarmentDefinition(
            type_key=garment["typeKey"],
            display_name=garment["displayName"],
            construction_method=garment["constructionMethod"],
            body_shape=garment["bodyShape"],
            measurements=parse_measurements(garment["measurements"]),
            components=tuple(parse_component(c) for c in garment.get("components", [])),
        ),
        requested_at=payload["requestedAt"],
    )


def parse_yarn(data: Mapping[str, Any]) -> YarnDefinition:
    return YarnDefinition(
        name=data["name"],
        weight_category=data["weightCategory"],
        skein_meterage=_optional_float(data.get("skeinMeterage")),
        skein_weight_grams=_optional_float(data.get("skeinWeightGrams")),
        fiber=data.get("fiber"),
    )


def parse_stitch_pattern(data: Mapping[str, Any]) -> StitchPatternDefinition:
    return StitchPatternDefinition(
        name=data["name"],
        stitch_repeat_width=int(data["horizontalRepeat"]),
        row_repeat_height=int(data["verticalRepeat"]),
        pattern_type=data.get("patternType"),
    )


def parse_measurements(data: Mapping[str, Any]) -> Measurements:
    optional = {
        attr: _optional_float(data.get(key)) for key, attr in _MEASUREMENT_KEYS.items()
    }
    additional = data.get("additionalMeasurements") or {}
    return Measurements(
        finished_chest_circumference=float(data["finishedChestCircumference"]),
        finished_length=float(data["finishedLength"]),
        additional=MappingProxyType({k: float(v) for k, v in additional.items()}),
        **optional,
    )


def parse_component(data: Mapping[str, Any]) -> ComponentDefinition:
    attributes = data.get("attributes")
    return ComponentDefinition(
        component_key=data["componentKey"],
        display_name=data["displayName"],
        attributes=parse_attributes(attributes) if attributes else None,
    )


def parse_attributes(data: Mapping[str, Any]) -> ComponentAttributes:
    """Dispatch on the ``type`` tag to the matching attribute variant."""
    kind = AttributeKind(data["type"])
    match kind:
        case AttributeKind.SILHOUETTE:
            return SilhouetteAttributes(
                target_length=float(data["target_length"]),
                target_width=_optional_float(data.get("target_width")),
                target_top_width=_optional_float(data.get("target_top_width")),
                target_circumference=_optional_float(data.get("target_circumference")),
                edge_stitches_each_side=_int_or(data.get("edge_stitches_each_side"), 0),
                repeat_strategy=_enum_or(
                    RepeatStrategy, data.get("repeat_strategy"), RepeatStrategy.CENTER
                ),
                stitches_per_shaping_event=_int_or(data.get("stitches_per_shaping_event"), 2),
            )
        case AttributeKind.TRIANGULAR_SHAWL:
            return TriangularShawlAttributes(
                target_wingspan_cm=float(data["target_wingspan_cm"]),
                target_depth_cm=float(data["target_depth_cm"]),
                construction_method=ConstructionMethod(data["construction_method"]),
                work_style=_enum_or(WorkStyle, data.get("work_style"), WorkStyle.FLAT),
                border_stitches_each_side=_int_or(data.get("border_stitches_each_side"), 0),
            )


def _optional_float(value: Any) -> float | None:
    return None if value is None else float(value)


def _int_or(value: Any, default: int) -> int:
    return default if value is None else int(value)


def _enum_or(enum_cls: type[E], value: Any, default: E) -> E:
    return default if value is None else enum_cls(value)
