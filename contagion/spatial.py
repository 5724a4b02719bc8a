"""
Spatial utility functions for 2D field geometry.

Helper functions for distance calculations and boundary handling
in the simulation field.
"""

import numpy as np
from typing import Tuple


def distance_squared(pos_a: np.ndarray, pos_b: np.ndarray) -> float:
    """
    Calculate squared Euclidean distance between two points.

    Args:
        pos_a: Position [x, y]
        pos_b: Position [x, y]

    Returns:
        Squared distance (no sqrt, for radius comparisons)
    """
    diff = pos_a - pos_b
    return float(np.dot(diff, diff))


def normalize(vec: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Normalize vector to unit length.

    Args:
        vec: Vector to normalize [x, y]

    Returns:
        Tuple of (normalized vector, original length)
    """
    length = np.sqrt(np.dot(vec, vec))

    if length < 1e-9:
        # Zero vector, return zero direction
        return np.zeros_like(vec, dtype=np.float64), 0.0

    return vec / length, float(length)


def polar_to_cartesian(magnitude: float, angle: float) -> np.ndarray:
    """
    Convert a polar (magnitude, angle) pair to a 2D vector.

    Args:
        magnitude: Vector length
        angle: Angle in radians

    Returns:
        Vector [x, y]
    """
    return np.array([magnitude * np.cos(angle), magnitude * np.sin(angle)], dtype=np.float64)


def reflect_into_bounds(
    position: np.ndarray,
    velocity: np.ndarray,
    lo_bound: np.ndarray,
    hi_bound: np.ndarray
) -> bool:
    """
    Clamp position into an axis-aligned box, reflecting velocity.

    For each axis where the position left [lo, hi], the position is
    clamped to the crossed bound and that velocity component is inverted.
    Arrays are modified in place.

    Args:
        position: Position [x, y] (modified)
        velocity: Velocity [vx, vy] (modified)
        lo_bound: Lower corner [x, y]
        hi_bound: Upper corner [x, y]

    Returns:
        True if any axis was reflected
    """
    reflected = False
    for axis in range(len(position)):
        if position[axis] > hi_bound[axis]:
            position[axis] = hi_bound[axis]
            velocity[axis] = -velocity[axis]
            reflected = True
        elif position[axis] < lo_bound[axis]:
            position[axis] = lo_bound[axis]
            velocity[axis] = -velocity[axis]
            reflected = True
    return reflected


def within_bounds(position: np.ndarray, lo_bound: np.ndarray, hi_bound: np.ndarray) -> bool:
    """Check that position lies inside [lo, hi] on every axis"""
    return bool(np.all(position >= lo_bound) and np.all(position <= hi_bound))
