from PyQt5 import QtWidgets, QtCore, QtGui
from typing import Optional

import logging
log = logging.getLogger(__name__)

from circlemap.overlays.base_overlay import BaseOverlay
from circlemap.analysis.circle_geometry import polar_to_cartesian
from circlemap.analysis.projection_model import CircleMapFrame, GapAnnotation, ProjectionStatus
from circlemap.core.config_store import ConfigModel, get_config_store


def parse_rgba(value: str, fallback=(0, 0, 0, 160)) -> QtGui.QColor:
    try:
        parts = [int(p.strip()) for p in value.split(",")]
    except (AttributeError, ValueError):
        parts = list(fallback)
    if len(parts) == 3:
        parts.append(255)
    if len(parts) != 4:
        parts = list(fallback)
    return QtGui.QColor(*parts)


def car_color(team_colour: Optional[str], default: str) -> QtGui.QColor:
    """Team colours arrive as bare hex ("3671C6")."""
    if team_colour:
        color = QtGui.QColor(f"#{team_colour.lstrip('#')}")
        if color.isValid():
            return color
    return QtGui.QColor(default)


def gap_color(gap: GapAnnotation, cfg: ConfigModel) -> QtGui.QColor:
    """Catching beats close; lap-count intervals (0 ms) are never close."""
    if gap.catching:
        return QtGui.QColor(cfg.catching_color)
    if 0 < gap.gap_ms <= cfg.close_gap_ms:
        return QtGui.QColor(cfg.close_gap_color)
    return QtGui.QColor(cfg.gap_color)


class CircleMapOverlay(QtWidgets.QWidget):
    """Cars on a circle, ordered by track progress, with interval labels between them."""

    PLACEHOLDER_TEXT = {
        ProjectionStatus.NOT_READY: "Waiting for track map",
        ProjectionStatus.INSUFFICIENT_DATA: "Track map has too few points",
    }

    def __init__(self, cfg: Optional[ConfigModel] = None):
        super().__init__()
        flags = (
            QtCore.Qt.FramelessWindowHint
            | QtCore.Qt.Window
            | QtCore.Qt.WindowStaysOnTopHint
        )
        self.setWindowFlags(flags)
        self.setAttribute(QtCore.Qt.WA_TranslucentBackground, True)

        self.cfg = cfg or get_config_store().config
        self.resize(self.cfg.size, self.cfg.size)
        self.move(200, 200)

        self._frame: Optional[CircleMapFrame] = None
        self._error_msg: Optional[str] = None
        self._drag_pos: Optional[QtCore.QPoint] = None

        self.installEventFilter(self)

    # -----------------------------
    # BaseOverlay API
    # -----------------------------
    def widget(self):
        return self

    def on_frame_ready(self, frame: CircleMapFrame):
        self._frame = frame
        self.update()

    def on_error(self, msg: str):
        """Keep the last frame but show the feed problem."""
        if self._error_msg != msg:
            log.error(f"[CircleMapOverlay] on_error: {msg}")
        self._error_msg = msg
        self.update()

    def clear_error(self):
        if self._error_msg is None:
            return
        log.info("[CircleMapOverlay] Feed recovered")
        self._error_msg = None
        self.update()

    @property
    def frame(self) -> Optional[CircleMapFrame]:
        return self._frame

    @property
    def error_message(self) -> Optional[str]:
        return self._error_msg

    def apply_config(self, cfg: ConfigModel):
        self.cfg = cfg
        self.resize(cfg.size, cfg.size)
        self.update()

    # -----------------------------
    # Painting
    # -----------------------------
    def paintEvent(self, event):
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.Antialiasing)
        painter.fillRect(self.rect(), parse_rgba(self.cfg.background_rgba))

        side = min(self.width(), self.height())
        center_x = self.width() / 2
        center_y = self.height() / 2
        radius = side / 2 - self.cfg.margin - self.cfg.gap_offset / 2

        frame = self._frame
        if frame is None or not frame.ready:
            status = frame.status if frame else ProjectionStatus.NOT_READY
            painter.setPen(QtGui.QPen(QtGui.QColor(self.cfg.label_color)))
            painter.drawText(self.rect(), QtCore.Qt.AlignCenter, self.PLACEHOLDER_TEXT[status])
            self._paint_error(painter)
            return

        # --- Track circle ---
        painter.setPen(QtGui.QPen(QtGui.QColor(self.cfg.track_color), 2))
        painter.setBrush(QtCore.Qt.NoBrush)
        painter.drawEllipse(QtCore.QPointF(center_x, center_y), radius, radius)

        # --- Cars ---
        font = QtGui.QFont(self.cfg.font_family, self.cfg.font_size)
        painter.setFont(font)
        metrics = QtGui.QFontMetrics(font)
        bubble = self.cfg.bubble_size / 2

        for car in frame.cars:
            px, py = polar_to_cartesian(center_x, center_y, radius, car.angle)
            painter.setBrush(QtGui.QBrush(car_color(car.team_colour, self.cfg.default_car_color)))
            painter.setPen(QtGui.QPen(QtGui.QColor("black")))
            painter.drawEllipse(QtCore.QPointF(px, py), bubble, bubble)

            painter.setPen(QtGui.QPen(QtGui.QColor(self.cfg.label_color)))
            text_w = metrics.horizontalAdvance(car.label)
            painter.drawText(int(px - text_w / 2), int(py - bubble - 3), car.label)

        # --- Interval labels ---
        if self.cfg.show_gaps:
            small = QtGui.QFont(self.cfg.font_family, max(1, self.cfg.font_size - 2))
            painter.setFont(small)
            small_metrics = QtGui.QFontMetrics(small)
            for gap in frame.gaps:
                painter.setPen(QtGui.QPen(gap_color(gap, self.cfg)))
                gx, gy = polar_to_cartesian(center_x, center_y, radius + self.cfg.gap_offset, gap.midpoint_angle)
                text_w = small_metrics.horizontalAdvance(gap.gap_text)
                painter.drawText(int(gx - text_w / 2), int(gy + small_metrics.ascent() / 2), gap.gap_text)

        self._paint_error(painter)

    def _paint_error(self, painter: QtGui.QPainter):
        if not self._error_msg:
            return
        painter.setPen(QtGui.QPen(QtGui.QColor("red"), 2))
        painter.drawText(10, 20, self._error_msg)

    # -----------------------------
    # Dragging
    # -----------------------------
    def eventFilter(self, source, event):
        if (
            event.type() == QtCore.QEvent.MouseButtonPress
            and event.button() == QtCore.Qt.LeftButton
        ):
            self._drag_pos = event.globalPos() - self.frameGeometry().topLeft()
            event.accept()
            return True
        elif event.type() == QtCore.QEvent.MouseMove and (
            event.buttons() & QtCore.Qt.LeftButton
        ):
            if self._drag_pos is not None:
                self.move(event.globalPos() - self._drag_pos)
                event.accept()
                return True
        elif event.type() == QtCore.QEvent.MouseButtonRelease:
            self._drag_pos = None
            event.accept()
            return True
        return super().eventFilter(source, event)


BaseOverlay.register(CircleMapOverlay)
