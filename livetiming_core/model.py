"""
model.py

Immutable data models for the live feed snapshot (drivers, car positions,
timing lines) and the raw track outline handed over by the map loader.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from livetiming_core.timing_parsers import parse_gap


@dataclass(frozen=True)
class Driver:
    """
    Roster entry keyed by racing number.
    - racing_number: opaque identity key ("1", "44", ...)
    - full_name: display name (may be empty)
    - tla: three-letter abbreviation used as the map label
    - team_colour: hex colour without '#', None if unknown
    """
    racing_number: str
    full_name: str = ""
    tla: str = ""
    team_colour: Optional[str] = None


@dataclass(frozen=True)
class CarSample:
    """Raw telemetry position of one car at the current instant."""
    racing_number: str
    x: float
    y: float


@dataclass(frozen=True)
class TimingLine:
    """
    Per-car timing strings exactly as published by the feed.
    - interval: interval to the car ahead ("+0.273", "1L", "")
    - catching: whether the car is closing on the car ahead
    """
    racing_number: str
    interval: Optional[str] = None
    catching: bool = False

    @property
    def interval_ms(self) -> int:
        return parse_gap(self.interval or "")


@dataclass(frozen=True)
class LiveState:
    """
    Snapshot of the live store used by the projection pipeline.
    - circuit_key: identifier of the selected circuit (None until known)
    - positions: racing_number -> CarSample for cars with a current position
    - drivers: racing_number -> Driver
    - timing: racing_number -> TimingLine
    """
    circuit_key: Optional[str] = None
    positions: Dict[str, CarSample] = field(default_factory=dict)
    drivers: Dict[str, Driver] = field(default_factory=dict)
    timing: Dict[str, TimingLine] = field(default_factory=dict)


@dataclass(frozen=True)
class TrackMapData:
    """
    Raw track outline as returned by the map loader.
    x/y are equal-length ordered samples of the closed loop; rotation is the
    base rotation (degrees) published with the map.
    """
    circuit_key: str
    x: Tuple[float, ...]
    y: Tuple[float, ...]
    rotation: float = 0.0

    def __len__(self) -> int:
        return len(self.x)
