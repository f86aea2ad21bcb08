"""
Yarn quantity estimator input validation.

Applies the shared severity policy to estimator payloads (snake_case keys).
Whether dimensions or a garment size are required depends on the project
type's entry in the reference registry.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from malaine.reference.registry import get_registry
from malaine.reference.types import GarmentSize, ProjectType
from malaine.utilities.types import LengthUnit

from .common import (
    MessageCollector,
    ValidationResult,
    check_enum,
    check_positive,
    check_text,
)


def validate_estimation_input(payload: Any) -> ValidationResult:
    """Validate a yarn quantity estimator payload. Never raises for bad input."""
    out = MessageCollector()
    if not isinstance(payload, Mapping):
        out.error("input", "must be an object")
        return out.result()

    project_type: ProjectType | None = None
    if payload.get("project_type") is None:
        out.missing("project_type")
    else:
        project_type = check_enum(out, payload, "project_type", "project_type", ProjectType)

    _check_source(out, payload, "gauge_profile_id", "gauge_info", _check_gauge_info)
    _check_source(out, payload, "yarn_profile_id", "yarn_info", _check_yarn_info)

    if project_type is not None:
        entry = get_registry().get_project_type(project_type)
        dims = payload.get("dimensions")
        if dims is None:
            if entry.requires_dimensions:
                out.error("dimensions", f"required for project type {project_type.value!r}")
        else:
            _check_dimensions(out, dims)
        size = payload.get("garment_size")
        if size is None:
            if entry.requires_size:
                out.error("garment_size", f"required for project type {project_type.value!r}")
        else:
            check_enum(out, payload, "garment_size", "garment_size", GarmentSize)

    return out.result()


def _check_source(
    out: MessageCollector,
    payload: Mapping[str, Any],
    id_key: str,
    info_key: str,
    check_info: Callable[[MessageCollector, Mapping[str, Any]], None],
) -> None:
    """Either a profile id or inline info must be supplied."""
    profile_id = payload.get(id_key)
    info = payload.get(info_key)
    if profile_id is None and info is None:
        out.missing(info_key)
        out.error(info_key, f"either {id_key} or {info_key} is required")
        return
    if profile_id is not None:
        check_text(out, payload, id_key, id_key)
    if info is not None:
        if not isinstance(info, Mapping):
            out.error(info_key, "must be an object")
            return
        check_info(out, info)


def _check_gauge_info(out: MessageCollector, info: Mapping[str, Any]) -> None:
    stitches = check_positive(out, info, "stitch_count", "gauge_info.stitch_count")
    rows = check_positive(out, info, "row_count", "gauge_info.row_count")
    unit = check_enum(out, info, "measurement_unit", "gauge_info.measurement_unit", LengthUnit)
    width = check_positive(out, info, "swatch_width", "gauge_info.swatch_width")
    height = check_positive(out, info, "swatch_height", "gauge_info.swatch_height")
    if stitches is None or rows is None or unit is None or width is None or height is None:
        return
    registry = get_registry()
    for value, range_id, path in (
        (stitches / width * 10, "gauge_stitches_per_10", "gauge_info.stitch_count"),
        (rows / height * 10, "gauge_rows_per_10", "gauge_info.row_count"),
    ):
        r = registry.get_range(range_id)
        if not r.contains(value):
            out.warning(path, f"unusual {r.description}: {value:.1f}")


def _check_yarn_info(out: MessageCollector, info: Mapping[str, Any]) -> None:
    category = info.get("yarn_weight_category")
    if category is not None:
        if not isinstance(category, str) or not category.strip():
            out.error("yarn_info.yarn_weight_category", "must be a non-empty string")
        elif get_registry().find_yarn_weight(category) is None:
            out.warning(
                "yarn_info.yarn_weight_category",
                f"unknown yarn weight category {category!r}; the default consumption "
                f"factor will be used",
            )
    check_positive(out, info, "skein_meterage", "yarn_info.skein_meterage", required=False)
    check_positive(
        out, info, "skein_weight_grams", "yarn_info.skein_weight_grams", required=False
    )


def _check_dimensions(out: MessageCollector, dims: Any) -> None:
    if not isinstance(dims, Mapping):
        out.error("dimensions", "must be an object")
        return
    unit = check_enum(out, dims, "unit", "dimensions.unit", LengthUnit)
    check_positive(
        out,
        dims,
        "width",
        "dimensions.width",
        range_id="project_width" if unit is not None else None,
        unit=unit,
    )
    check_positive(
        out,
        dims,
        "length",
        "dimensions.length",
        range_id="project_length" if unit is not None else None,
        unit=unit,
    )
