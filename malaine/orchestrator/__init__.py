from .pipeline import (
    PipelineError,
    calculate_component,
    calculate_pattern,
    estimate_pattern_yarn,
)

__all__ = [
    "PipelineError",
    "calculate_component",
    "calculate_pattern",
    "estimate_pattern_yarn",
]
