from .common import Severity, ValidationMessage, ValidationResult
from .components import validate_triangular_shawl_attributes
from .estimation import validate_estimation_input
from .pattern_input import validate, validate_pattern_input

__all__ = [
    "Severity",
    "ValidationMessage",
    "ValidationResult",
    "validate",
    "validate_pattern_input",
    "validate_estimation_input",
    "validate_triangular_shawl_attributes",
]
