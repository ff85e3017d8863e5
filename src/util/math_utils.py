"""
Mathematical Utility Functions

Planar vector helpers, clamping and smoothing used by the trajectory
policies. All vectors are (dx, dy) tuples in world units.
"""

import math
from typing import Sequence, Tuple


def vector_magnitude(dx: float, dy: float) -> float:
    """Length of the vector (dx, dy)."""
    return math.hypot(dx, dy)


def rotate_vector_90(dx: float, dy: float, clockwise: bool = True) -> Tuple[float, float]:
    """
    Rotate a vector a quarter turn.

    Args:
        dx: X component
        dy: Y component
        clockwise: Rotate to the right of the motion when True, left otherwise

    Returns:
        Rotated (dx, dy)
    """
    if clockwise:
        return (dy, -dx)
    return (-dy, dx)


def unit_vector(dx: float, dy: float) -> Tuple[float, float]:
    """Normalize to unit length; the zero vector maps to (0, 0)."""
    mag = vector_magnitude(dx, dy)
    if mag < 1e-10:
        return (0.0, 0.0)
    return (dx / mag, dy / mag)


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]."""
    return max(lower, min(upper, value))


def exponential_filter(
    values: Sequence[Tuple[float, float]],
    alpha: float = 0.3,
) -> Tuple[float, float]:
    """
    Exponentially smooth a chronological sequence of (dx, dy) vectors.

    Args:
        values: Vectors, oldest first
        alpha: Weight of each newer sample, in (0, 1]

    Returns:
        Smoothed (dx, dy)

    Raises:
        ValueError: If values is empty or alpha is out of range
    """
    if not values:
        raise ValueError("Cannot filter empty sequence")
    if not 0 < alpha <= 1:
        raise ValueError(f"Alpha must be in (0, 1], got {alpha}")

    sx, sy = values[0]
    for dx, dy in values[1:]:
        sx += alpha * (dx - sx)
        sy += alpha * (dy - sy)
    return (sx, sy)


def linear_interpolate(x: float, x1: float, x2: float, y1: float, y2: float) -> float:
    """Map x from [x1, x2] onto [y1, y2], holding the end values outside the range."""
    if x <= x1:
        return y1
    if x >= x2:
        return y2
    return y1 + (x - x1) / (x2 - x1) * (y2 - y1)
