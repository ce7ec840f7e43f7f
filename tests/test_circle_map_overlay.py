import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt5 import QtWidgets

from circlemap.analysis.projection_model import (
    CircleMapFrame,
    GapAnnotation,
    ProjectedCar,
    ProjectionStatus,
)
from circlemap.core.config_store import ConfigModel
from circlemap.overlays.base_overlay import BaseOverlay
from circlemap.overlays.circle_map_overlay import CircleMapOverlay, car_color, gap_color, parse_rgba


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


def _frame() -> CircleMapFrame:
    cars = (
        ProjectedCar("1", 10.0, 10 / 360, 1, "VER", "3671C6", None),
        ProjectedCar("44", 170.0, 170 / 360, 17, "HAM", None, "+0.273"),
    )
    gaps = (GapAnnotation("44", 90.0, "+0.273"),)
    return CircleMapFrame(ProjectionStatus.READY, "63", cars, gaps)


def test_parse_rgba():
    assert parse_rgba("10, 20, 30, 40").getRgb() == (10, 20, 30, 40)
    assert parse_rgba("10,20,30").getRgb() == (10, 20, 30, 255)
    assert parse_rgba("bogus").getRgb() == (0, 0, 0, 160)
    assert parse_rgba("1,2").getRgb() == (0, 0, 0, 160)


def test_car_color_uses_team_colour_or_default():
    assert car_color("3671C6", "#ffffff").name() == "#3671c6"
    assert car_color(None, "#ffffff").name() == "#ffffff"
    assert car_color("zzz", "#00ff00").name() == "#00ff00"


def test_overlay_renders_frame(qapp):
    overlay = CircleMapOverlay(ConfigModel())
    frame = _frame()

    overlay.on_frame_ready(frame)
    pixmap = overlay.grab()

    assert overlay.frame is frame
    assert not pixmap.isNull()
    assert isinstance(overlay, BaseOverlay)
    assert overlay.widget() is overlay


def test_overlay_renders_placeholder_and_error(qapp):
    overlay = CircleMapOverlay(ConfigModel())

    overlay.on_frame_ready(CircleMapFrame(ProjectionStatus.INSUFFICIENT_DATA, "63"))
    overlay.on_error("ReadError: live state file not found")

    assert not overlay.grab().isNull()


def test_apply_config_resizes(qapp):
    overlay = CircleMapOverlay(ConfigModel())
    cfg = ConfigModel(size=250)

    overlay.apply_config(cfg)

    assert overlay.cfg is cfg
    assert overlay.width() == 250


def test_feed_error_survives_new_frames_until_cleared(qapp):
    overlay = CircleMapOverlay(ConfigModel())
    overlay.on_error("ReadError: live state file not found")

    overlay.on_frame_ready(_frame())

    assert overlay.error_message == "ReadError: live state file not found"

    overlay.clear_error()

    assert overlay.error_message is None
    assert not overlay.grab().isNull()


def test_gap_color_prefers_catching_then_close():
    cfg = ConfigModel(close_gap_ms=1000, gap_color="#111111", close_gap_color="#222222", catching_color="#333333")

    assert gap_color(GapAnnotation("1", 0.0, "+0.4", 400, True), cfg).name() == "#333333"
    assert gap_color(GapAnnotation("1", 0.0, "+0.4", 400, False), cfg).name() == "#222222"
    assert gap_color(GapAnnotation("1", 0.0, "+1.0", 1000, False), cfg).name() == "#222222"
    assert gap_color(GapAnnotation("1", 0.0, "+2.5", 2500, False), cfg).name() == "#111111"
    assert gap_color(GapAnnotation("1", 0.0, "1L", 0, False), cfg).name() == "#111111"
