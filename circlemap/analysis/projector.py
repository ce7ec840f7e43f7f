"""
projector.py

Place each car on the circle: rotate its raw position with the circuit's
Transform, find the nearest outline point, turn the index into an angle.
"""

from typing import List, Mapping, Optional, Tuple

import numpy as np

from livetiming_core.model import CarSample, Driver, TimingLine
from circlemap.analysis.normalizer import rotate
from circlemap.analysis.projection_model import NormalizedOutline, ProjectedCar

FULL_CIRCLE_DEG = 360.0


def find_min_distance(point: Tuple[float, float], outline_points: np.ndarray) -> int:
    """
    Index of the outline point closest to *point*.
    Linear scan; np.argmin returns the first minimum, so ties go to the lowest index.
    """
    if len(outline_points) == 0:
        raise ValueError("cannot search an empty outline")
    diffs = np.asarray(outline_points, dtype=float) - np.asarray(point, dtype=float)
    dists = np.einsum("ij,ij->i", diffs, diffs)
    return int(np.argmin(dists))


def project_car(
    sample: CarSample,
    outline: NormalizedOutline,
    driver: Optional[Driver] = None,
    timing: Optional[TimingLine] = None,
) -> ProjectedCar:
    cx, cy = outline.transform.center
    rotated = rotate(sample.x, sample.y, outline.transform.rotation, cx, cy)
    idx = find_min_distance(rotated, outline.points)
    progress = idx / len(outline)
    label = driver.tla if driver and driver.tla else sample.racing_number
    return ProjectedCar(
        racing_number=sample.racing_number,
        angle=progress * FULL_CIRCLE_DEG,
        progress=progress,
        outline_index=idx,
        label=label,
        team_colour=driver.team_colour if driver else None,
        gap=timing.interval if timing else None,
        gap_ms=timing.interval_ms if timing else 0,
        catching=timing.catching if timing else False,
    )


def project_cars(
    outline: Optional[NormalizedOutline],
    samples: Mapping[str, CarSample],
    drivers: Optional[Mapping[str, Driver]] = None,
    timing: Optional[Mapping[str, TimingLine]] = None,
) -> List[ProjectedCar]:
    """
    One ProjectedCar per car with a current sample, in sample order.
    Returns [] while the outline is not available. Cars without a sample are
    simply absent; roster and timing entries are optional per car.
    """
    if outline is None or len(outline) == 0:
        return []

    drivers = drivers or {}
    timing = timing or {}
    projected: List[ProjectedCar] = []
    for nr, sample in samples.items():
        projected.append(project_car(sample, outline, driver=drivers.get(nr), timing=timing.get(nr)))
    return projected

