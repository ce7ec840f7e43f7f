"""
base_overlay.py

Defines the BaseOverlay interface that all overlays must implement.
"""

from abc import ABC, abstractmethod

from circlemap.analysis.projection_model import CircleMapFrame


class BaseOverlay(ABC):
    """Abstract overlay interface."""

    @abstractmethod
    def widget(self):
        """Return the QWidget associated with this overlay."""
        pass

    @abstractmethod
    def on_frame_ready(self, frame: CircleMapFrame):
        """Handle a freshly projected frame."""
        pass

    @abstractmethod
    def on_error(self, msg: str):
        """Handle an error message."""
        pass

    @abstractmethod
    def clear_error(self):
        """Drop the error shown after the feed delivered a state again."""
        pass
