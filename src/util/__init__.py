"""StormSim utility functions."""

from .math_utils import (
    vector_magnitude,
    rotate_vector_90,
    unit_vector,
    clamp,
    exponential_filter,
    linear_interpolate,
)

__all__ = [
    "vector_magnitude",
    "rotate_vector_90",
    "unit_vector",
    "clamp",
    "exponential_filter",
    "linear_interpolate",
]
