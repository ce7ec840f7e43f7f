"""Bring a raw track outline into the display frame used by the circle map."""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from livetiming_core.model import TrackMapData
from circlemap.analysis.projection_model import NormalizedOutline, Transform

# Quarter-turn so the published map rotation lines up with the circle's
# start/finish at the top.
ROTATION_CORRECTION_DEG = 90.0


class InsufficientDataError(ValueError):
    """Raised when an outline has fewer than two points."""


def rotate(x: float, y: float, rotation: float, cx: float, cy: float) -> Tuple[float, float]:
    """Rotate (x, y) by *rotation* degrees about (cx, cy)."""
    theta = math.radians(rotation)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    dx = x - cx
    dy = y - cy
    return cx + dx * cos_t - dy * sin_t, cy + dx * sin_t + dy * cos_t


def rotate_points(
    xs: Sequence[float], ys: Sequence[float], rotation: float, cx: float, cy: float
) -> np.ndarray:
    """Vectorised :func:`rotate`; returns an (N, 2) array."""
    theta = np.radians(rotation)
    dx = np.asarray(xs, dtype=float) - cx
    dy = np.asarray(ys, dtype=float) - cy
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)
    return np.column_stack((cx + dx * cos_t - dy * sin_t, cy + dx * sin_t + dy * cos_t))


def compute_transform(xs: Sequence[float], ys: Sequence[float], base_rotation: float) -> Transform:
    """Half the bounding-box range on each axis, plus the fixed rotation correction.

    The centre is the half-range offset from zero, not the centroid; map
    coordinates are expected to already be laid out so that this lands on the
    visual centre.
    """
    if len(xs) < 2 or len(ys) < 2:
        raise InsufficientDataError(f"outline needs at least 2 points, got {min(len(xs), len(ys))}")
    center_x = (max(xs) - min(xs)) / 2
    center_y = (max(ys) - min(ys)) / 2
    return Transform(
        center=(float(center_x), float(center_y)),
        rotation=float(base_rotation) + ROTATION_CORRECTION_DEG,
    )


def normalize_outline(track_map: TrackMapData) -> NormalizedOutline:
    """Rotate every outline point about the shared centre.

    Raises:
        InsufficientDataError: fewer than two points.
        ValueError: x and y sequences differ in length.
    """
    xs, ys = track_map.x, track_map.y
    if len(xs) != len(ys):
        raise ValueError(f"outline x/y length mismatch: {len(xs)} vs {len(ys)}")

    transform = compute_transform(xs, ys, track_map.rotation)
    cx, cy = transform.center
    points = rotate_points(xs, ys, transform.rotation, cx, cy)
    points.setflags(write=False)
    return NormalizedOutline(points=points, transform=transform)


__all__ = [
    "ROTATION_CORRECTION_DEG",
    "InsufficientDataError",
    "rotate",
    "rotate_points",
    "compute_transform",
    "normalize_outline",
]
