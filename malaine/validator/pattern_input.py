"""
Pattern calculation request validation.

validate_pattern_input() is the first and only gate before calculation. It
walks the raw request mapping section by section:

  version        MAJOR.MINOR.PATCH
  sessionId      RFC-4122 UUID (v1-v5)
  units          dimensionUnit / gaugeUnit in {cm, inches}
  gauge          stitchesPer10cm / rowsPer10cm > 0, plausibility warnings
  yarn           name, weight category (unknown category → warning)
  stitchPattern  name, horizontal / vertical repeat (whole numbers >= 1)
  garment        descriptive fields, measurements, components
  requestedAt    ISO-8601 timestamp

An absent top-level section is recorded in ``missing_fields``; absent
nested fields are field-scoped errors. Never raises for bad input.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from malaine.reference.registry import get_registry
from malaine.utilities.types import Gauge, LengthUnit

from .common import (
    MessageCollector,
    ValidationResult,
    check_enum,
    check_positive,
    check_text,
    is_valid_timestamp,
    is_valid_uuid,
    is_valid_version,
    require_mapping,
)
from .components import validate_component

logger = logging.getLogger(__name__)

_TOP_LEVEL = (
    "version",
    "sessionId",
    "units",
    "gauge",
    "yarn",
    "stitchPattern",
    "garment",
    "requestedAt",
)


def validate_pattern_input(payload: Any) -> ValidationResult:
    """
    Validate a pattern calculation request payload.

    Parameters
    ----------
    payload:
        The deserialized request mapping (camelCase keys).

    Returns
    -------
    ValidationResult
        ``is_valid`` is True only when there are no errors and no missing
        top-level fields.
    """
    out = MessageCollector()
    if not isinstance(payload, Mapping):
        out.error("input", "must be an object")
        return out.result()

    for name in _TOP_LEVEL:
        if payload.get(name) in (None, ""):
            out.missing(name)

    _check_formats(out, payload)
    units = _check_units(out, payload.get("units"))
    gauge = _check_gauge(out, payload.get("gauge"), units)
    _check_yarn(out, payload.get("yarn"))
    _check_stitch_pattern(out, payload.get("stitchPattern"))
    _check_garment(out, payload.get("garment"), gauge, units[0] if units else None)

    result = out.result()
    logger.debug(
        "Validated pattern input: %d errors, %d warnings, %d missing",
        len(result.errors),
        len(result.warnings),
        len(result.missing_fields),
    )
    return result


# Short alias used by callers that only ever validate one payload kind.
validate = validate_pattern_input


# ── Sections ───────────────────────────────────────────────────────────────────


def _check_formats(out: MessageCollector, payload: Mapping[str, Any]) -> None:
    version = payload.get("version")
    if version not in (None, "") and not (isinstance(version, str) and is_valid_version(version)):
        out.error("version", f"invalid version format {version!r} (expected MAJOR.MINOR.PATCH)")

    session_id = payload.get("sessionId")
    if session_id not in (None, "") and not (
        isinstance(session_id, str) and is_valid_uuid(session_id)
    ):
        out.error("sessionId", f"invalid session ID format {session_id!r}")

    requested_at = payload.get("requestedAt")
    if requested_at not in (None, "") and not (
        isinstance(requested_at, str) and is_valid_timestamp(requested_at)
    ):
        out.error("requestedAt", f"invalid timestamp format {requested_at!r}")


def _check_units(out: MessageCollector, units: Any) -> tuple[LengthUnit, LengthUnit] | None:
    if units is None:
        return None
    if not isinstance(units, Mapping):
        out.error("units", "must be an object")
        return None
    dimension = check_enum(out, units, "dimensionUnit", "units.dimensionUnit", LengthUnit)
    gauge = check_enum(out, units, "gaugeUnit", "units.gaugeUnit", LengthUnit)
    if dimension is None or gauge is None:
        return None
    return dimension, gauge


def _check_gauge(
    out: MessageCollector,
    gauge: Any,
    units: tuple[LengthUnit, LengthUnit] | None,
) -> Gauge | None:
    if gauge is None:
        return None
    if not isinstance(gauge, Mapping):
        out.error("gauge", "must be an object")
        return None
    stitches = check_positive(
        out,
        gauge,
        "stitchesPer10cm",
        "gauge.stitchesPer10cm",
        range_id="gauge_stitches_per_10",
    )
    rows = check_positive(
        out, gauge, "rowsPer10cm", "gauge.rowsPer10cm", range_id="gauge_rows_per_10"
    )
    unit = check_enum(out, gauge, "unit", "gauge.unit", LengthUnit)
    if stitches is None or rows is None or unit is None:
        return None
    if units is not None and units[1] is not unit:
        out.warning(
            "gauge.unit",
            f"gauge unit {unit.value!r} differs from units.gaugeUnit {units[1].value!r}; "
            f"using {unit.value!r}",
        )
    return Gauge(stitches_per_10=stitches, rows_per_10=rows, unit=unit)


def _check_yarn(out: MessageCollector, yarn: Any) -> None:
    if yarn is None:
        return
    if not isinstance(yarn, Mapping):
        out.error("yarn", "must be an object")
        return
    check_text(out, yarn, "name", "yarn.name")
    category = check_text(out, yarn, "weightCategory", "yarn.weightCategory")
    if category is not None and not get_registry().is_standard_weight(category):
        out.warning("yarn.weightCategory", f"unusual yarn weight category {category!r}")
    check_positive(out, yarn, "skeinMeterage", "yarn.skeinMeterage", required=False)
    check_positive(out, yarn, "skeinWeightGrams", "yarn.skeinWeightGrams", required=False)


def _check_stitch_pattern(out: MessageCollector, pattern: Any) -> None:
    if pattern is None:
        return
    if not isinstance(pattern, Mapping):
        out.error("stitchPattern", "must be an object")
        return
    check_text(out, pattern, "name", "stitchPattern.name")
    check_positive(
        out,
        pattern,
        "horizontalRepeat",
        "stitchPattern.horizontalRepeat",
        integer=True,
        range_id="stitch_repeat_width",
    )
    check_positive(
        out,
        pattern,
        "verticalRepeat",
        "stitchPattern.verticalRepeat",
        integer=True,
        range_id="row_repeat_height",
    )


def _check_garment(
    out: MessageCollector,
    garment: Any,
    gauge: Gauge | None,
    dimension_unit: LengthUnit | None,
) -> None:
    if garment is None:
        return
    if not isinstance(garment, Mapping):
        out.error("garment", "must be an object")
        return
    for key in ("typeKey", "displayName", "constructionMethod", "bodyShape"):
        check_text(out, garment, key, f"garment.{key}")

    measurements = require_mapping(out, garment, "measurements", "garment.measurements")
    if measurements is not None:
        _check_measurements(out, measurements, dimension_unit)

    components = garment.get("components")
    if components is None or not isinstance(components, list):
        out.error("garment.components", "required list of components is missing or invalid")
        return
    if not components:
        out.warning("garment.components", "no garment components defined")
        return

    seen: set[str] = set()
    for index, component in enumerate(components):
        path = f"garment.components[{index}]"
        key = validate_component(out, component, path, gauge, dimension_unit)
        if key is None:
            continue
        if key in seen:
            out.error(f"{path}.componentKey", f"duplicate component key {key!r}")
        seen.add(key)


def _check_measurements(
    out: MessageCollector,
    measurements: Mapping[str, Any],
    unit: LengthUnit | None,
) -> None:
    # Ranges are stored in cm; without a valid dimension unit assume cm.
    unit = unit or LengthUnit.CM
    check_positive(
        out,
        measurements,
        "finishedChestCircumference",
        "garment.measurements.finishedChestCircumference",
        range_id="chest_circumference",
        unit=unit,
    )
    check_positive(
        out,
        measurements,
        "finishedLength",
        "garment.measurements.finishedLength",
        range_id="garment_length",
        unit=unit,
    )
    for key in (
        "finishedWaistCircumference",
        "finishedHipCircumference",
        "finishedShoulderWidth",
        "finishedArmLength",
        "finishedUpperArmCircumference",
        "finishedNeckCircumference",
    ):
        check_positive(out, measurements, key, f"garment.measurements.{key}", required=False)

    additional = measurements.get("additionalMeasurements")
    if additional is None:
        return
    if not isinstance(additional, Mapping):
        out.error("garment.measurements.additionalMeasurements", "must be an object")
        return
    for key in additional:
        check_positive(
            out, additional, key, f"garment.measurements.additionalMeasurements.{key}"
        )
