"""QObject-based singleton store for configuration management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from PyQt5 import QtCore

from circlemap.core.config_backend import ConfigBackend

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class ConfigModel:
    # Feed
    state_path: str = "live_state.json"
    poll_ms: int = 250

    # Track maps
    maps_dir: str = "maps"

    # Overlay
    size: int = 400
    margin: int = 20
    gap_offset: int = 24
    bubble_size: int = 8
    font_family: str = "Arial"
    font_size: int = 9
    show_gaps: bool = True
    close_gap_ms: int = 1000

    # Colors
    background_rgba: str = "0,0,0,160"
    track_color: str = "#3f3f46"
    label_color: str = "#d4d4d8"
    gap_color: str = "#71717a"
    close_gap_color: str = "#f59e0b"
    catching_color: str = "#22c55e"
    default_car_color: str = "#ffffff"


def _as_int(section: str, key: str, raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"[{section}] {key} must be an integer, got {raw!r}") from exc


def _as_bool(section: str, key: str, raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"[{section}] {key} must be a boolean, got {raw!r}")


class ConfigStore(QtCore.QObject):
    config_changed = QtCore.pyqtSignal(object)

    def __init__(self, backend: Optional[ConfigBackend] = None) -> None:
        super().__init__()
        self._backend = backend or ConfigBackend()
        self._config = ConfigModel()
        self.reload()

    @property
    def config(self) -> ConfigModel:
        return self._config

    @property
    def backend(self) -> ConfigBackend:
        return self._backend

    def reload(self) -> ConfigModel:
        data = self._backend.load()
        cfg = ConfigModel()

        self._apply_feed_settings(cfg, data)
        self._apply_overlay_settings(cfg, data)

        self._config = cfg
        self.config_changed.emit(cfg)
        return cfg

    def _apply_feed_settings(self, cfg: ConfigModel, data: Mapping[str, Mapping[str, str]]) -> None:
        feed = data.get("feed", {})
        maps = data.get("maps", {})

        cfg.state_path = self._backend.resolve_path(feed.get("state_path", cfg.state_path))
        cfg.poll_ms = max(20, _as_int("feed", "poll_ms", feed.get("poll_ms"), cfg.poll_ms))
        cfg.maps_dir = self._backend.resolve_path(maps.get("maps_dir", cfg.maps_dir))

    def _apply_overlay_settings(self, cfg: ConfigModel, data: Mapping[str, Mapping[str, str]]) -> None:
        overlay = data.get("overlay", {})
        colors = data.get("colors", {})

        cfg.size = _as_int("overlay", "size", overlay.get("size"), cfg.size)
        cfg.margin = _as_int("overlay", "margin", overlay.get("margin"), cfg.margin)
        cfg.gap_offset = _as_int("overlay", "gap_offset", overlay.get("gap_offset"), cfg.gap_offset)
        cfg.bubble_size = _as_int("overlay", "bubble_size", overlay.get("bubble_size"), cfg.bubble_size)
        cfg.font_family = overlay.get("font_family", cfg.font_family)
        cfg.font_size = _as_int("overlay", "font_size", overlay.get("font_size"), cfg.font_size)
        cfg.show_gaps = _as_bool("overlay", "show_gaps", overlay.get("show_gaps"), cfg.show_gaps)
        cfg.close_gap_ms = _as_int("overlay", "close_gap_ms", overlay.get("close_gap_ms"), cfg.close_gap_ms)

        cfg.background_rgba = colors.get("background_rgba", cfg.background_rgba)
        cfg.track_color = colors.get("track_color", cfg.track_color)
        cfg.label_color = colors.get("label_color", cfg.label_color)
        cfg.gap_color = colors.get("gap_color", cfg.gap_color)
        cfg.close_gap_color = colors.get("close_gap_color", cfg.close_gap_color)
        cfg.catching_color = colors.get("catching_color", cfg.catching_color)
        cfg.default_car_color = colors.get("default_car_color", cfg.default_car_color)


_CONFIG_STORE: Optional[ConfigStore] = None


def get_config_store() -> ConfigStore:
    global _CONFIG_STORE
    if _CONFIG_STORE is None:
        _CONFIG_STORE = ConfigStore()
    return _CONFIG_STORE


def init_config_store(backend: Optional[ConfigBackend] = None) -> ConfigStore:
    """Replace the shared store, e.g. with one reading a settings file given on the command line."""
    global _CONFIG_STORE
    _CONFIG_STORE = ConfigStore(backend)
    return _CONFIG_STORE


__all__ = [
    "ConfigModel",
    "ConfigStore",
    "get_config_store",
    "init_config_store",
]
