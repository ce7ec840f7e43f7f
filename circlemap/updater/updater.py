"""
updater.py

RaceUpdater runs in a worker QThread and polls LiveStateReader periodically.
It emits `state_updated` (LiveState) and `error` (str).
"""

import logging
from typing import Optional

from PyQt5 import QtCore

from livetiming_core.reader import LiveStateReader, ReadError

log = logging.getLogger(__name__)


class RaceUpdater(QtCore.QObject):
    """
    RaceUpdater polls LiveStateReader and emits LiveState objects.

    Usage:
      - create LiveStateReader and RaceUpdater(reader, poll_ms)
      - create QThread, move updater to thread, start thread, invoke start()
      - connect signals: state_updated (LiveState), error (str)
      - call stop() (via QMetaObject.invokeMethod) before quitting thread
    """
    state_updated = QtCore.pyqtSignal(object)  # LiveState
    error = QtCore.pyqtSignal(str)

    def __init__(self, reader: LiveStateReader, poll_ms: int = 250):
        super().__init__()
        self._reader = reader
        self._poll_ms = max(20, int(poll_ms))
        self._timer: Optional[QtCore.QTimer] = None
        self._running = False
        self._last_error_msg: Optional[str] = None

    @property
    def poll_ms(self) -> int:
        return self._poll_ms

    @property
    def running(self) -> bool:
        return self._running

    @QtCore.pyqtSlot()
    def start(self):
        """Called in the worker thread; starts a QTimer in that thread's event loop."""
        if self._running:
            return
        self._running = True
        self._last_error_msg = None
        self._timer = QtCore.QTimer()
        self._timer.setTimerType(QtCore.Qt.PreciseTimer)
        self._timer.setInterval(self._poll_ms)
        self._timer.timeout.connect(self._on_tick)
        self._timer.start()

    @QtCore.pyqtSlot()
    def stop(self):
        """Stop polling (thread owner should quit the thread afterwards)."""
        self._running = False
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    @QtCore.pyqtSlot(int)
    def set_poll_interval(self, ms: int):
        """Adjust polling rate dynamically."""
        self._poll_ms = max(20, int(ms))
        if self._timer is not None:
            self._timer.setInterval(self._poll_ms)

    def poll_once(self):
        """Read one snapshot and emit it; read failures are emitted as `error`."""
        try:
            state = self._reader.read_state()
        except ReadError as re:
            self._emit_error_once(str(re))
            return
        except Exception as e:
            # Unexpected errors: emit but keep polling
            log.exception("[RaceUpdater] Unexpected error while reading live state")
            self._emit_error_once(f"{type(e).__name__}: {e}")
            return

        self._last_error_msg = None
        self.state_updated.emit(state)

    def _on_tick(self):
        if not self._running:
            return
        self.poll_once()

    def _emit_error_once(self, msg: str) -> None:
        if not msg or self._last_error_msg == msg:
            return
        self._last_error_msg = msg
        log.warning(f"[RaceUpdater] {msg}")
        self.error.emit(msg)
