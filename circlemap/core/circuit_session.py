"""
circuit_session.py

CircuitSession owns the normalized outline for the currently selected
circuit and turns LiveState snapshots into CircleMapFrames.

Map retrieval is asynchronous. Every request gets a generation number and
only the response for the latest generation (and the current circuit) is
applied; anything older is a stale fetch and is dropped.
"""

from __future__ import annotations

import logging
from typing import Optional

from livetiming_core.model import LiveState, TrackMapData
from circlemap.analysis.gap_annotations import annotate_gaps, order_by_angle
from circlemap.analysis.normalizer import InsufficientDataError, normalize_outline
from circlemap.analysis.projection_model import (
    CircleMapFrame,
    NormalizedOutline,
    ProjectionStatus,
)
from circlemap.analysis.projector import project_cars

log = logging.getLogger(__name__)


class CircuitSession:
    def __init__(self) -> None:
        self._circuit_key: Optional[str] = None
        self._generation = 0
        self._outline: Optional[NormalizedOutline] = None
        self._status = ProjectionStatus.NOT_READY

    @property
    def circuit_key(self) -> Optional[str]:
        return self._circuit_key

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def outline(self) -> Optional[NormalizedOutline]:
        return self._outline

    @property
    def status(self) -> ProjectionStatus:
        return self._status

    def needs_map(self, circuit_key: Optional[str]) -> bool:
        return bool(circuit_key) and circuit_key != self._circuit_key

    def begin_request(self, circuit_key: str) -> int:
        """Forget the current outline and start a new request for *circuit_key*."""
        self._generation += 1
        self._circuit_key = circuit_key
        self._outline = None
        self._status = ProjectionStatus.NOT_READY
        log.info(f"[CircuitSession] Requesting map for circuit {circuit_key} (#{self._generation})")
        return self._generation

    def complete_request(
        self,
        circuit_key: str,
        generation: int,
        track_map: Optional[TrackMapData],
    ) -> bool:
        """
        Apply a map response. Returns True when the outline became usable.
        Stale responses, missing maps and too-short outlines leave no outline.
        """
        if generation != self._generation or circuit_key != self._circuit_key:
            log.info(
                f"[CircuitSession] Ignoring stale map for circuit {circuit_key} "
                f"(#{generation}, current {self._circuit_key} #{self._generation})"
            )
            return False

        if track_map is None:
            log.warning(f"[CircuitSession] No map available for circuit {circuit_key}")
            self._status = ProjectionStatus.NOT_READY
            return False

        try:
            self._outline = normalize_outline(track_map)
        except InsufficientDataError as e:
            log.warning(f"[CircuitSession] Unusable map for circuit {circuit_key}: {e}")
            self._outline = None
            self._status = ProjectionStatus.INSUFFICIENT_DATA
            return False
        except ValueError as e:
            log.error(f"[CircuitSession] Invalid map for circuit {circuit_key}: {e}")
            self._outline = None
            self._status = ProjectionStatus.NOT_READY
            return False

        self._status = ProjectionStatus.READY
        log.info(f"[CircuitSession] Circuit {circuit_key} ready ({len(self._outline)} points)")
        return True

    def project(self, state: LiveState) -> CircleMapFrame:
        """Pure recompute from *state*; empty frame unless the outline is ready."""
        if self._status is not ProjectionStatus.READY or self._outline is None:
            return CircleMapFrame(status=self._status, circuit_key=self._circuit_key)

        cars = order_by_angle(project_cars(self._outline, state.positions, state.drivers, state.timing))
        gaps = annotate_gaps(cars)
        return CircleMapFrame(
            status=self._status,
            circuit_key=self._circuit_key,
            cars=tuple(cars),
            gaps=tuple(gaps),
        )
