"""
Malaine garment pattern calculation core.

Turns a validated garment definition (gauge, yarn, stitch pattern, target
measurements) into per-piece stitch counts, row counts, shaping schedules
and a yarn estimate. The standalone yarn quantity estimator lives in
malaine.yarn.
"""

from .orchestrator import PipelineError, calculate_pattern
from .validator import validate_estimation_input, validate_pattern_input
from .yarn import estimate_from_payload, estimate_yarn_quantity

__version__ = "0.1.0"

__all__ = [
    "PipelineError",
    "calculate_pattern",
    "estimate_from_payload",
    "estimate_yarn_quantity",
    "validate_estimation_input",
    "validate_pattern_input",
]
