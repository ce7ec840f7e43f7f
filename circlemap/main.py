"""
main.py

Entry point: loads settings, starts the live-state updater and the map
fetcher in worker threads, and shows the circle map overlay.
"""
import argparse
import logging, os, sys

from collections import deque
from PyQt5 import QtWidgets, QtCore, QtGui

from livetiming_core.map_loader import TrackMapLoader
from livetiming_core.reader import LiveStateReader
from circlemap.core.config_backend import ConfigBackend
from circlemap.core.config_store import init_config_store
from circlemap.core.version import __version__
from circlemap.overlays.circle_map_overlay import CircleMapOverlay
from circlemap.ui.circle_map_controller import CircleMapController
from circlemap.updater.map_fetcher import TrackMapFetcher
from circlemap.updater.overlay_manager import OverlayManager
from circlemap.updater.updater import RaceUpdater

log = logging.getLogger(__name__)


class CappedFileHandler(logging.FileHandler):
    """A FileHandler that keeps only the last N lines of logs."""
    def __init__(self, filename, max_lines=200, mode="a", encoding="utf-8"):
        super().__init__(filename, mode=mode, encoding=encoding)
        self.max_lines = max_lines
        self._buffer = deque(maxlen=max_lines)

    def emit(self, record):
        msg = self.format(record)
        self._buffer.append(msg + "\n")
        # Flush buffer to file every 10 lines or on error
        if len(self._buffer) % 10 == 0 or record.levelno >= logging.ERROR:
            with open(self.baseFilename, "w", encoding=self.encoding) as f:
                f.writelines(self._buffer)


def configure_logging(log_path: str, level=logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[CappedFileHandler(log_path, max_lines=200), logging.StreamHandler(sys.stdout)],
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Live circle map of the running order")
    parser.add_argument("--settings", help="path to settings.ini (default: next to the script)")
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    return parser.parse_known_args(argv)[0]


def _start_worker(obj: QtCore.QObject) -> QtCore.QThread:
    thread = QtCore.QThread()
    obj.moveToThread(thread)
    thread.start()
    return thread


def _stop_thread(thread: QtCore.QThread):
    if thread.isRunning():
        thread.quit()
        if not thread.wait(2000):
            log.warning("Worker thread did not stop cleanly")
            thread.terminate()
            thread.wait(1000)


def main(argv=None):
    args = parse_args(argv)

    base_dir = os.path.dirname(sys.argv[0])
    configure_logging(
        os.path.join(base_dir, "circlemap_log.txt"),
        level=logging.DEBUG if args.debug else logging.INFO,
    )
    log.info(f"Starting circle map {__version__}")

    app = QtWidgets.QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(True)

    store = init_config_store(ConfigBackend(args.settings))
    cfg = store.config
    log.info(f"Settings: {store.backend.path}")

    reader = LiveStateReader(cfg.state_path)
    updater = RaceUpdater(reader, poll_ms=cfg.poll_ms)
    fetcher = TrackMapFetcher(TrackMapLoader(cfg.maps_dir))
    controller = CircleMapController()

    overlay = CircleMapOverlay(cfg)
    manager = OverlayManager()
    manager.add_overlay(overlay)

    # Cross-thread signals are queued automatically
    updater.state_updated.connect(controller.on_state_updated)
    controller.map_requested.connect(fetcher.fetch)
    fetcher.map_loaded.connect(controller.on_map_loaded)
    manager.connect_sources(controller, updater)
    store.config_changed.connect(overlay.apply_config)
    store.config_changed.connect(
        lambda new_cfg: QtCore.QMetaObject.invokeMethod(
            updater, "set_poll_interval", QtCore.Qt.QueuedConnection, QtCore.Q_ARG(int, new_cfg.poll_ms)
        )
    )

    # F5 on the overlay re-reads settings.ini; feed and map paths need a restart
    def reload_settings():
        try:
            store.reload()
        except ValueError as e:
            log.error(f"Settings reload failed: {e}")
            return
        log.info(f"Settings reloaded from {store.backend.path}")

    reload_shortcut = QtWidgets.QShortcut(QtGui.QKeySequence("F5"), overlay)
    reload_shortcut.activated.connect(reload_settings)

    updater_thread = _start_worker(updater)
    fetcher_thread = _start_worker(fetcher)

    shutdown_done = False

    def cleanup():
        nonlocal shutdown_done
        if shutdown_done:
            return
        shutdown_done = True
        manager.disconnect_sources(controller, updater)
        QtCore.QMetaObject.invokeMethod(updater, "stop", QtCore.Qt.BlockingQueuedConnection)
        _stop_thread(updater_thread)
        _stop_thread(fetcher_thread)

    app.aboutToQuit.connect(cleanup)

    manager.show_all()
    QtCore.QMetaObject.invokeMethod(updater, "start", QtCore.Qt.QueuedConnection)

    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
