"""
projection_model.py

Derived, immutable results of the circle projection. Recomputed on every
update; never persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class ProjectionStatus(Enum):
    NOT_READY = "not_ready"
    INSUFFICIENT_DATA = "insufficient_data"
    READY = "ready"


@dataclass(frozen=True)
class Transform:
    """Centre + rotation (degrees) shared by the outline and every car."""
    center: Tuple[float, float]
    rotation: float


@dataclass(frozen=True, eq=False)
class NormalizedOutline:
    """Rotated outline points, shape (N, 2), same order as the raw outline."""
    points: np.ndarray
    transform: Transform

    def __len__(self) -> int:
        return int(self.points.shape[0])


@dataclass(frozen=True)
class ProjectedCar:
    """
    One car placed on the circle.
    - angle: progress * 360, always in [0, 360)
    - progress: outline_index / len(outline), in [0, 1)
    - label: TLA, or the racing number when the roster has no entry
    - gap: interval to the car ahead, literal feed text (None when unknown)
    - gap_ms: the same interval in milliseconds, 0 for lap counts
    - catching: closing on the car ahead
    """
    racing_number: str
    angle: float
    progress: float
    outline_index: int
    label: str
    team_colour: Optional[str] = None
    gap: Optional[str] = None
    gap_ms: int = 0
    catching: bool = False


@dataclass(frozen=True)
class GapAnnotation:
    """Interval label placed halfway between a car and its predecessor."""
    racing_number: str
    midpoint_angle: float
    gap_text: str
    gap_ms: int = 0
    catching: bool = False


@dataclass(frozen=True)
class CircleMapFrame:
    """Everything a renderer needs for one update."""
    status: ProjectionStatus
    circuit_key: Optional[str] = None
    cars: Tuple[ProjectedCar, ...] = ()
    gaps: Tuple[GapAnnotation, ...] = ()

    @property
    def ready(self) -> bool:
        return self.status is ProjectionStatus.READY
