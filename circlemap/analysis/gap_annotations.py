"""
gap_annotations.py

Helpers for placing interval labels on the circle.
Each label sits halfway between a car and the car in front of it, with the
last car on the circle acting as predecessor of the first one.
"""

from typing import Iterable, List, Sequence

from circlemap.analysis.projection_model import GapAnnotation, ProjectedCar

FULL_CIRCLE_DEG = 360.0


def order_by_angle(cars: Iterable[ProjectedCar]) -> List[ProjectedCar]:
    """Ascending angle; equal angles fall back to the racing number."""
    return sorted(cars, key=lambda car: (car.angle, car.racing_number))


def normalize_angle(angle: float) -> float:
    angle = angle % FULL_CIRCLE_DEG
    # tiny negatives wrap to exactly 360.0
    if angle >= FULL_CIRCLE_DEG:
        angle -= FULL_CIRCLE_DEG
    return angle


def midpoint_angle(prev_angle: float, angle: float, wraps: bool = False) -> float:
    """
    Angle halfway between *prev_angle* and *angle*.
    With wraps=True the predecessor sits before the 0/360 boundary, so the
    forward distance is angle + 360 - prev_angle.
    """
    if not wraps:
        return (prev_angle + angle) / 2
    diff = angle + FULL_CIRCLE_DEG - prev_angle
    return normalize_angle(prev_angle + diff / 2)


def annotate_gaps(cars: Sequence[ProjectedCar]) -> List[GapAnnotation]:
    """
    Return one GapAnnotation per car with a known interval, in angular order.
    Cars without an interval (None or empty text) get no annotation.
    """
    ordered = order_by_angle(cars)
    annotations: List[GapAnnotation] = []

    for idx, car in enumerate(ordered):
        if not car.gap:
            continue
        prev = ordered[idx - 1]  # idx 0 -> last car on the circle
        mid = midpoint_angle(prev.angle, car.angle, wraps=idx == 0)
        annotations.append(
            GapAnnotation(
                racing_number=car.racing_number,
                midpoint_angle=mid,
                gap_text=car.gap,
                gap_ms=car.gap_ms,
                catching=car.catching,
            )
        )

    return annotations
