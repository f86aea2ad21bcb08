"""Yarn quantity estimation by surface area and yarn weight category."""

from .estimator import (
    BUFFER_PERCENTAGE,
    GRAMS_TO_OUNCES,
    METERS_TO_YARDS,
    calculate_yarn_quantity,
    dimensions_to_square_meters,
    estimate_from_payload,
    estimate_yarn_quantity,
    format_estimate,
    project_surface_area,
    yarn_totals,
)
from .resolver import InMemoryProfileResolver, ProfileResolver

__all__ = [
    "BUFFER_PERCENTAGE",
    "GRAMS_TO_OUNCES",
    "METERS_TO_YARDS",
    "calculate_yarn_quantity",
    "yarn_totals",
    "dimensions_to_square_meters",
    "estimate_from_payload",
    "estimate_yarn_quantity",
    "format_estimate",
    "project_surface_area",
    "InMemoryProfileResolver",
    "ProfileResolver",
]
