"""
map_loader.py

Load raw track outlines ({"x": [...], "y": [...], "rotation": n}) from a maps
folder, one JSON file per circuit key.
"""

import json
import logging
import math
import os
from typing import Any, List, Optional

from livetiming_core.model import TrackMapData

log = logging.getLogger(__name__)


class MapLoadError(RuntimeError):
    """Raised when a track map file exists but cannot be used."""
    pass


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _numeric_list(payload: dict, key: str, path: str) -> List[float]:
    values = payload.get(key)
    if not isinstance(values, list):
        raise MapLoadError(f"'{key}' must be a list in {path}")
    out: List[float] = []
    for value in values:
        if not _is_finite_number(value):
            raise MapLoadError(f"'{key}' contains non-finite or non-numeric value {value!r} in {path}")
        out.append(float(value))
    return out


def load_track_map(path: str, circuit_key: str) -> TrackMapData:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload: Any = json.load(handle)
    except json.JSONDecodeError as exc:
        raise MapLoadError(f"invalid JSON in {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise MapLoadError(f"track map must be a JSON object: {path}")

    xs = _numeric_list(payload, "x", path)
    ys = _numeric_list(payload, "y", path)
    if len(xs) != len(ys):
        raise MapLoadError(f"x/y length mismatch ({len(xs)} vs {len(ys)}) in {path}")

    rotation = payload.get("rotation", 0.0)
    if not _is_finite_number(rotation):
        raise MapLoadError(f"'rotation' must be a finite number in {path}")

    return TrackMapData(
        circuit_key=str(circuit_key),
        x=tuple(xs),
        y=tuple(ys),
        rotation=float(rotation),
    )


class TrackMapLoader:
    """Resolve <maps_dir>/<circuit_key>.json; None when unavailable."""

    def __init__(self, maps_dir: str):
        self._maps_dir = maps_dir

    @property
    def maps_dir(self) -> str:
        return self._maps_dir

    def path_for(self, circuit_key: str) -> str:
        return os.path.join(self._maps_dir, f"{circuit_key}.json")

    def load(self, circuit_key: Optional[str]) -> Optional[TrackMapData]:
        if not circuit_key:
            return None

        path = self.path_for(circuit_key)
        if not os.path.isfile(path):
            log.warning(f"[TrackMapLoader] No map for circuit {circuit_key}: {path}")
            return None

        try:
            track_map = load_track_map(path, circuit_key)
        except (OSError, MapLoadError) as e:
            log.error(f"[TrackMapLoader] Map load failed for circuit {circuit_key}: {e}")
            return None

        log.info(f"[TrackMapLoader] Loaded circuit {circuit_key} ({len(track_map)} points)")
        return track_map
