"""
Data contracts for the Malaine calculation core.

Request models (pattern input and estimator input), the estimator's result
types, and the CalculatedPatternDetails output consumed downstream.
"""

from .estimation import (
    EstimationContext,
    EstimationInput,
    EstimationOutcome,
    GaugeInfo,
    YarnInfo,
    YarnQuantityEstimate,
    parse_estimation_input,
)
from .pattern_input import (
    AttributeKind,
    ComponentAttributes,
    ComponentDefinition,
    GarmentDefinition,
    Measurements,
    PatternCalculationInput,
    RepeatStrategy,
    SilhouetteAttributes,
    StitchPatternDefinition,
    TriangularShawlAttributes,
    Units,
    YarnDefinition,
    parse_attributes,
    parse_pattern_input,
)
from .pattern_output import (
    CalculatedPatternDetails,
    CalculatedPiece,
    Confidence,
    FinishedDimensions,
    PatternInfo,
    PieceYarnUsage,
    ShapingStep,
    YarnEstimationDetails,
)

__all__ = [
    # pattern input
    "AttributeKind",
    "RepeatStrategy",
    "Units",
    "YarnDefinition",
    "StitchPatternDefinition",
    "Measurements",
    "SilhouetteAttributes",
    "TriangularShawlAttributes",
    "ComponentAttributes",
    "ComponentDefinition",
    "GarmentDefinition",
    "PatternCalculationInput",
    "parse_pattern_input",
    "parse_attributes",
    # pattern output
    "Confidence",
    "ShapingStep",
    "FinishedDimensions",
    "PieceYarnUsage",
    "CalculatedPiece",
    "YarnEstimationDetails",
    "PatternInfo",
    "CalculatedPatternDetails",
    # estimation
    "GaugeInfo",
    "YarnInfo",
    "EstimationInput",
    "EstimationContext",
    "YarnQuantityEstimate",
    "EstimationOutcome",
    "parse_estimation_input",
]
