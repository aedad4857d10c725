"""
Geometry utilities for the rover grid simulator.

Provides grid-cell metrics (Euclidean edge cost, Manhattan heuristic),
degree-based angle normalization and heading helpers used by the planner,
the motion model and the navigation executor.
"""

from __future__ import annotations

from typing import Tuple
import math


Cell = Tuple[int, int]


# ---------------------------------------------------------------------------
# Grid metrics
# ---------------------------------------------------------------------------


def euclidean(a: Cell, b: Cell) -> float:
    """Straight-line distance between two grid cells."""
    return math.sqrt((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2)


def manhattan(a: Cell, b: Cell) -> float:
    """Taxicab distance between two grid cells, as float."""
    return float(abs(a[0] - b[0]) + abs(a[1] - b[1]))


def is_orthogonal_step(a: Cell, b: Cell) -> bool:
    """True if b is one of the four N/S/E/W neighbours of a."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


# ---------------------------------------------------------------------------
# Angle helpers (degrees)
# ---------------------------------------------------------------------------


def wrap_angle_deg(theta: float) -> float:
    """Wrap angle to (-180, 180] degrees."""
    t = math.fmod(theta, 360.0)
    if t <= -180.0:
        t += 360.0
    elif t > 180.0:
        t -= 360.0
    return t


def heading_deg(x1: float, y1: float, x2: float, y2: float) -> float:
    """Heading from (x1, y1) toward (x2, y2), CCW from +x, in degrees."""
    return math.degrees(math.atan2(y2 - y1, x2 - x1))


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def clamp(value: float, vmin: float, vmax: float) -> float:
    """Clamp value to [vmin, vmax]."""
    return max(vmin, min(vmax, value))
