from __future__ import annotations

import logging
from typing import Optional

from PyQt5 import QtCore

from livetiming_core.model import LiveState
from circlemap.analysis.projection_model import CircleMapFrame
from circlemap.core.circuit_session import CircuitSession

log = logging.getLogger(__name__)


class CircleMapController(QtCore.QObject):
    """
    Sits between the updater, the map fetcher and the overlays.

    - `on_state_updated` takes every LiveState; a new circuit key triggers
      `map_requested(circuit_key, generation)`.
    - `on_map_loaded` hands fetch results to the session guard.
    - `state_received` fires for every LiveState read, so overlays can drop a
      stale feed error.
    - `frame_ready` carries the recomputed CircleMapFrame after either input
      changes.
    """
    map_requested = QtCore.pyqtSignal(str, int)
    frame_ready = QtCore.pyqtSignal(object)  # CircleMapFrame
    state_received = QtCore.pyqtSignal()

    def __init__(self, session: Optional[CircuitSession] = None):
        super().__init__()
        self._session = session or CircuitSession()
        self._last_state: Optional[LiveState] = None
        self._last_frame: Optional[CircleMapFrame] = None

    @property
    def session(self) -> CircuitSession:
        return self._session

    @property
    def last_frame(self) -> Optional[CircleMapFrame]:
        return self._last_frame

    @QtCore.pyqtSlot(object)
    def on_state_updated(self, state: LiveState):
        self._last_state = state
        self.state_received.emit()
        if self._session.needs_map(state.circuit_key):
            generation = self._session.begin_request(state.circuit_key)
            self._publish()
            self.map_requested.emit(state.circuit_key, generation)
            return
        self._publish()

    @QtCore.pyqtSlot(str, int, object)
    def on_map_loaded(self, circuit_key: str, generation: int, track_map):
        stale = generation != self._session.generation
        self._session.complete_request(circuit_key, generation, track_map)
        if not stale:
            self._publish()

    def _publish(self):
        state = self._last_state or LiveState()
        self._last_frame = self._session.project(state)
        self.frame_ready.emit(self._last_frame)
