import math
from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple


@dataclass
class TrackPoint:
    lat: float
    lon: float
    elevation: float | None  # meters
    time: datetime | None = None


class DerivedPoint(NamedTuple):
    """One sample of the profile as a read-only (distance, elevation, gradient) tuple."""
    distance: float  # meters from the first point, 3D
    elevation: float  # meters, NaN when the track point had none
    gradient: float  # percent, NaN for the first point


@dataclass(frozen=True)
class Band:
    """A gradient class: [low, high) in percent, drawn in one color."""
    low: float
    high: float
    color: str
    label: str | None = None

    def contains(self, gradient: float) -> bool:
        return self.low <= gradient < self.high

    @property
    def display_label(self) -> str:
        if self.label:
            return self.label
        if math.isinf(self.low) and math.isinf(self.high):
            return "any"
        if math.isinf(self.high):
            return f"> {self.low:g}%"
        if math.isinf(self.low):
            return f"< {self.high:g}%"
        return f"{self.low:g} - {self.high:g}%"


@dataclass(frozen=True)
class WindowAssignment:
    start: int  # first derived index in the window
    end: int  # one past the last index
    average: float  # mean gradient over the window (percent)
    band: Band

    def __len__(self) -> int:
        return self.end - self.start

    def covers(self, index: int) -> bool:
        return self.start <= index < self.end
