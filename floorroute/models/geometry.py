"""Floor plan geometry: points, corridor rectangles and the corridor model."""

import math
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Tuple

from ..config import ConfigurationError


class Point(NamedTuple):
    """Integer (x, y) position on the plane."""
    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned walkable corridor segment with inclusive bounds.

    Bounds may extend past the plane; they are clamped where the grid is
    built, never rejected.
    """
    x1: int
    y1: int
    x2: int
    y2: int
    name: str = ""

    def __post_init__(self):
        if self.x1 > self.x2 or self.y1 > self.y2:
            raise ConfigurationError(
                f"Malformed corridor {self.name or '<unnamed>'}: "
                f"({self.x1}, {self.y1}, {self.x2}, {self.y2}) requires x1<=x2 and y1<=y2"
            )

    @property
    def centroid(self) -> Tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    def distance_to_centroid(self, point: Point) -> float:
        """Euclidean distance from a point to this corridor's centroid."""
        cx, cy = self.centroid
        return math.hypot(point[0] - cx, point[1] - cy)

    def clamp(self, point: Point) -> Point:
        """Project a point onto the rectangle footprint, each axis independently."""
        return Point(
            max(self.x1, min(self.x2, point[0])),
            max(self.y1, min(self.y2, point[1])),
        )

    def contains(self, point: Point) -> bool:
        return self.x1 <= point[0] <= self.x2 and self.y1 <= point[1] <= self.y2

    def to_dict(self) -> dict:
        return {"name": self.name, "x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2}


@dataclass(frozen=True)
class CorridorModel:
    """Ordered walkable corridors over a fixed width x height plane."""
    width: int
    height: int
    corridors: Tuple[Rect, ...] = ()

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                f"Plane dimensions must be positive, got {self.width}x{self.height}"
            )
        # Accept any iterable of Rect but store it immutably
        object.__setattr__(self, "corridors", tuple(self.corridors))

    def in_bounds(self, point: Point) -> bool:
        return 0 <= point[0] < self.width and 0 <= point[1] < self.height

    def __len__(self) -> int:
        return len(self.corridors)


@dataclass(frozen=True)
class EntryRule:
    """Entry point used for numeric table identifiers within [low, high]."""
    name: str
    point: Point
    low: int
    high: int

    def __post_init__(self):
        if self.low > self.high:
            raise ConfigurationError(
                f"Entry {self.name}: range low ({self.low}) is greater than high ({self.high})"
            )

    def matches(self, number: int) -> bool:
        return self.low <= number <= self.high


@dataclass(frozen=True)
class FloorPlan:
    """Everything fixed about one floor: corridors, entry points and background."""
    corridors: CorridorModel
    default_entry: Point
    default_entry_name: str = "default"
    entry_rules: Tuple[EntryRule, ...] = field(default_factory=tuple)
    background: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "entry_rules", tuple(self.entry_rules))

    @property
    def width(self) -> int:
        return self.corridors.width

    @property
    def height(self) -> int:
        return self.corridors.height

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "width": self.width,
            "height": self.height,
            "corridors": [rect.to_dict() for rect in self.corridors.corridors],
            "default_entry": {
                "name": self.default_entry_name,
                "x": self.default_entry.x,
                "y": self.default_entry.y,
            },
            "entry_rules": [
                {
                    "name": rule.name,
                    "x": rule.point.x,
                    "y": rule.point.y,
                    "low": rule.low,
                    "high": rule.high,
                }
                for rule in self.entry_rules
            ],
        }
