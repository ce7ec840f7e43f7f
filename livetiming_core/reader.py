"""
reader.py

LiveStateReader: translates a JSON dump of the live timing store into a
LiveState snapshot (model.LiveState). All parsing/mapping logic lives here;
no UI code in this module.

Expected layout (keys as published by the live store):

    {
      "sessionInfo": {"meeting": {"circuit": {"key": 63}}},
      "positions":   {"1": {"X": 123, "Y": -45, "Z": 0, "Status": "OnTrack"}},
      "driverList":  {"1": {"racingNumber": "1", "tla": "VER", "teamColour": "3671C6"}},
      "timingData":  {"lines": {"1": {"intervalToPositionAhead": {"value": "+0.273"}}}}
    }

Cars whose position entry has no finite numeric X/Y are left out of the snapshot.
"""

import json
import logging
import math
from typing import Any, Dict, Mapping, Optional

from livetiming_core.model import CarSample, Driver, LiveState, TimingLine

log = logging.getLogger(__name__)


class ReadError(RuntimeError):
    """Raised when the live state file is missing or invalid."""
    pass


def _is_number(value: Any) -> bool:
    # json.load accepts NaN and Infinity literals
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, dict) else {}


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def parse_positions(raw: Any) -> Dict[str, CarSample]:
    out: Dict[str, CarSample] = {}
    for nr, entry in _mapping(raw).items():
        entry = _mapping(entry)
        x, y = entry.get("X"), entry.get("Y")
        if not (_is_number(x) and _is_number(y)):
            continue
        out[str(nr)] = CarSample(racing_number=str(nr), x=float(x), y=float(y))
    return out


def parse_drivers(raw: Any) -> Dict[str, Driver]:
    out: Dict[str, Driver] = {}
    for nr, entry in _mapping(raw).items():
        entry = _mapping(entry)
        racing_number = str(entry.get("racingNumber") or nr)
        out[racing_number] = Driver(
            racing_number=racing_number,
            full_name=str(entry.get("fullName") or ""),
            tla=str(entry.get("tla") or ""),
            team_colour=_optional_str(entry.get("teamColour")) or None,
        )
    return out


def parse_timing(raw: Any) -> Dict[str, TimingLine]:
    lines = _mapping(_mapping(raw).get("lines"))
    out: Dict[str, TimingLine] = {}
    for nr, entry in lines.items():
        entry = _mapping(entry)
        interval = _mapping(entry.get("intervalToPositionAhead"))
        out[str(nr)] = TimingLine(
            racing_number=str(nr),
            interval=_optional_str(interval.get("value")),
            catching=bool(interval.get("catching", False)),
        )
    return out


def parse_circuit_key(raw: Any) -> Optional[str]:
    key = _mapping(_mapping(_mapping(raw).get("meeting")).get("circuit")).get("key")
    if key is None or key == "":
        return None
    return str(key)


def parse_live_state(payload: Mapping[str, Any]) -> LiveState:
    return LiveState(
        circuit_key=parse_circuit_key(payload.get("sessionInfo")),
        positions=parse_positions(payload.get("positions")),
        drivers=parse_drivers(payload.get("driverList")),
        timing=parse_timing(payload.get("timingData")),
    )


class LiveStateReader:
    """
    LiveStateReader reads the live store dump at `path` and returns LiveState
    snapshots. Each call re-reads the file; nothing is cached between calls.
    """

    def __init__(self, path: str):
        log.info(f"Initializing LiveStateReader for {path}")
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def read_state(self) -> LiveState:
        """Read and parse the snapshot. Raise ReadError on failure."""
        try:
            with open(self._path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError as exc:
            raise ReadError(f"live state file not found: {self._path}") from exc
        except json.JSONDecodeError as exc:
            raise ReadError(f"invalid live state JSON in {self._path}: {exc}") from exc
        except OSError as exc:
            raise ReadError(f"cannot read live state {self._path}: {exc}") from exc

        if not isinstance(payload, dict):
            raise ReadError(f"live state must be a JSON object: {self._path}")

        return parse_live_state(payload)
