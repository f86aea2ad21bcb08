from .registry import ReferenceRegistry, get_registry
from .types import (
    ConstructionMethod,
    EstimationMethod,
    GarmentSize,
    PlausibilityRange,
    ProjectDimensions,
    ProjectType,
    ProjectTypeEntry,
    ShawlConstructionEntry,
    WorkStyle,
    YarnWeightEntry,
)

__all__ = [
    # Enums
    "ConstructionMethod",
    "WorkStyle",
    "ProjectType",
    "GarmentSize",
    "EstimationMethod",
    # Runtime objects
    "ProjectDimensions",
    # Registry entry types (frozen, loaded from YAML)
    "YarnWeightEntry",
    "ProjectTypeEntry",
    "PlausibilityRange",
    "ShawlConstructionEntry",
    # Registry
    "ReferenceRegistry",
    "get_registry",
]
