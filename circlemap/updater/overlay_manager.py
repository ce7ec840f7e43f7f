"""
overlay_manager.py

OverlayManager keeps the overlays implementing BaseOverlay and connects them
to the controller (frames) and the updater (feed errors).
"""
import logging
log = logging.getLogger(__name__)

from typing import List

from circlemap.overlays.base_overlay import BaseOverlay


class OverlayManager:
    def __init__(self):
        self._overlays: List[BaseOverlay] = []

    def add_overlay(self, overlay: BaseOverlay):
        self._overlays.append(overlay)

    def show_all(self):
        for o in self._overlays:
            o.widget().show()
            o.widget().raise_()

    def connect_sources(self, controller, updater):
        """Frames and feed recovery come from the controller, errors straight from the updater."""
        for o in self._overlays:
            controller.frame_ready.connect(o.on_frame_ready)
            controller.state_received.connect(o.clear_error)
            updater.error.connect(o.on_error)

    def disconnect_sources(self, controller, updater):
        for o in self._overlays:
            log.info(f"[OverlayManager] Disconnecting sources from overlay: {o}")
            try:
                controller.frame_ready.disconnect(o.on_frame_ready)
                controller.state_received.disconnect(o.clear_error)
                updater.error.disconnect(o.on_error)
            except TypeError:
                # already disconnected
                pass
