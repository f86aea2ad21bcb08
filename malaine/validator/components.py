"""
Component attribute validation.

Attributes are a tagged union keyed by ``type``; each variant has its own
checks. Silhouette widths are converted to stitches when a usable gauge is
known so that edge stitches that would swallow the whole piece are caught
here rather than in the repeat integrator.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from malaine.reference.types import ConstructionMethod, WorkStyle
from malaine.schemas.pattern_input import AttributeKind, RepeatStrategy
from malaine.utilities.conversion import dimension_to_stitches
from malaine.utilities.types import Gauge, LengthUnit

from .common import (
    MessageCollector,
    ValidationResult,
    check_enum,
    check_non_negative_int,
    check_positive,
    check_text,
)


def validate_component(
    out: MessageCollector,
    component: Any,
    path: str,
    gauge: Gauge | None,
    dimension_unit: LengthUnit | None,
) -> str | None:
    """Validate one component entry; returns its key when present."""
    if not isinstance(component, Mapping):
        out.error(path, "must be an object")
        return None

    key = check_text(out, component, "componentKey", f"{path}.componentKey")
    check_text(out, component, "displayName", f"{path}.displayName")

    attributes = component.get("attributes")
    if not attributes:
        out.warning(f"{path}.attributes", "no attributes defined; component will be skipped")
        return key
    if not isinstance(attributes, Mapping):
        out.error(f"{path}.attributes", "must be an object")
        return key

    kind = check_enum(out, attributes, "type", f"{path}.attributes.type", AttributeKind)
    match kind:
        case AttributeKind.SILHOUETTE:
            check_silhouette(out, attributes, f"{path}.attributes", gauge, dimension_unit)
        case AttributeKind.TRIANGULAR_SHAWL:
            check_triangular_shawl(out, attributes, f"{path}.attributes")
        case None:
            pass
    return key


def check_silhouette(
    out: MessageCollector,
    attributes: Mapping[str, Any],
    path: str,
    gauge: Gauge | None,
    dimension_unit: LengthUnit | None,
) -> None:
    has_circumference = attributes.get("target_circumference") is not None
    width = check_positive(
        out, attributes, "target_width", f"{path}.target_width", required=not has_circumference
    )
    circumference = check_positive(
        out, attributes, "target_circumference", f"{path}.target_circumference", required=False
    )
    check_positive(out, attributes, "target_top_width", f"{path}.target_top_width", required=False)
    check_positive(out, attributes, "target_length", f"{path}.target_length")
    edge = check_non_negative_int(
        out, attributes, "edge_stitches_each_side", f"{path}.edge_stitches_each_side"
    )
    check_enum(
        out,
        attributes,
        "repeat_strategy",
        f"{path}.repeat_strategy",
        RepeatStrategy,
        required=False,
    )
    check_positive(
        out,
        attributes,
        "stitches_per_shaping_event",
        f"{path}.stitches_per_shaping_event",
        required=False,
        integer=True,
    )

    across = circumference if circumference is not None else width
    if across is None or edge is None or gauge is None or dimension_unit is None:
        return
    stitches = dimension_to_stitches(across, gauge, dimension_unit)
    if 2 * edge >= stitches:
        out.error(
            f"{path}.edge_stitches_each_side",
            f"{edge} edge stitches each side leave no room for the pattern "
            f"in {stitches} stitches",
        )


def check_triangular_shawl(out: MessageCollector, attributes: Mapping[str, Any], path: str) -> None:
    check_positive(
        out,
        attributes,
        "target_wingspan_cm",
        f"{path}.target_wingspan_cm",
        range_id="shawl_wingspan",
        unit=LengthUnit.CM,
    )
    check_positive(
        out,
        attributes,
        "target_depth_cm",
        f"{path}.target_depth_cm",
        range_id="shawl_depth",
        unit=LengthUnit.CM,
    )
    check_enum(
        out, attributes, "construction_method", f"{path}.construction_method", ConstructionMethod
    )
    check_enum(out, attributes, "work_style", f"{path}.work_style", WorkStyle)
    check_non_negative_int(
        out, attributes, "border_stitches_each_side", f"{path}.border_stitches_each_side"
    )


def validate_triangular_shawl_attributes(attributes: Mapping[str, Any]) -> ValidationResult:
    """Validate a standalone triangular shawl attribute mapping."""
    out = MessageCollector()
    check_triangular_shawl(out, attributes, "attributes")
    return out.result()
