"""Polar helpers for laying out the circle map."""

from __future__ import annotations

import math
from typing import Tuple


def polar_to_cartesian(cx: float, cy: float, radius: float, angle: float) -> Tuple[float, float]:
    """Screen position for *angle* degrees: 0 at the top, increasing clockwise (y down)."""
    rad = math.radians(angle - 90.0)
    return cx + radius * math.cos(rad), cy + radius * math.sin(rad)
