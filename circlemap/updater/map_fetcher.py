"""
map_fetcher.py

TrackMapFetcher loads track outlines off the UI thread. Move it to its own
QThread and drive it through `fetch(circuit_key, generation)` with a queued
connection; results come back on `map_loaded`.
"""

import logging

from PyQt5 import QtCore

from livetiming_core.map_loader import TrackMapLoader

log = logging.getLogger(__name__)


class TrackMapFetcher(QtCore.QObject):
    map_loaded = QtCore.pyqtSignal(str, int, object)  # circuit_key, generation, TrackMapData | None

    def __init__(self, loader: TrackMapLoader):
        super().__init__()
        self._loader = loader

    @QtCore.pyqtSlot(str, int)
    def fetch(self, circuit_key: str, generation: int):
        log.info(f"[TrackMapFetcher] Fetching circuit {circuit_key} (#{generation})")
        track_map = self._loader.load(circuit_key)
        self.map_loaded.emit(circuit_key, generation, track_map)
