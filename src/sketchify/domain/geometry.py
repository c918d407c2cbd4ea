"""Primitive geometric value types.

This module defines the value types every pipeline stage shares:
- Point: An immutable 2D point that doubles as a vector
- BoundingBox: An axis-aligned box with overlap and containment tests
- FatLine: A line with a signed-distance band, used by Bezier clipping
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Point:
    """A point in 2D space.

    Immutable and hashable for use in sets/dicts. Also used as a 2D vector
    for directions and tangents.

    Attributes:
        x: X coordinate in path units
        y: Y coordinate in path units
    """

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> "Point":
        """Multiply both coordinates by a factor."""
        return Point(self.x * factor, self.y * factor)

    def dot(self, other: "Point") -> float:
        """Dot product, treating both points as vectors."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: "Point") -> float:
        """Z component of the cross product, treating both points as vectors."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Euclidean length, treating the point as a vector."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: "Point", t: float) -> "Point":
        """Linear interpolation towards another point.

        Args:
            other: Target point (reached at t=1)
            t: Interpolation parameter

        Returns:
            Interpolated point
        """
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def to_tuple(self) -> tuple[float, float]:
        """Convert to simple (x, y) tuple.

        Returns:
            Tuple of (x, y) coordinates
        """
        return (self.x, self.y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary.

        Returns:
            Dictionary with x and y fields
        """
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Point":
        """Deserialize from dictionary.

        Args:
            data: Dictionary with x and y fields

        Returns:
            Point instance
        """
        return cls(x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned bounding box.

    Attributes:
        min_x: Left edge
        min_y: Bottom edge
        max_x: Right edge
        max_y: Top edge
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_points(cls, points: "list[Point] | tuple[Point, ...]") -> "BoundingBox":
        """Smallest box containing all points.

        Raises:
            ValueError: If points is empty
        """
        if not points:
            raise ValueError("Cannot build a bounding box from no points")
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2.0, (self.min_y + self.max_y) / 2.0)

    def union(self, other: "BoundingBox") -> "BoundingBox":
        """Smallest box containing both boxes."""
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    def overlaps(self, other: "BoundingBox", tolerance: float = 0.0) -> bool:
        """Check whether two boxes intersect (touching counts).

        Args:
            other: Box to test against
            tolerance: Amount by which the boxes may miss each other

        Returns:
            True if the boxes share at least one point within tolerance
        """
        return not (
            self.max_x < other.min_x - tolerance
            or other.max_x < self.min_x - tolerance
            or self.max_y < other.min_y - tolerance
            or other.max_y < self.min_y - tolerance
        )

    def contains(self, other: "BoundingBox", tolerance: float = 0.0) -> bool:
        """Check whether another box lies inside this one."""
        return (
            other.min_x >= self.min_x - tolerance
            and other.min_y >= self.min_y - tolerance
            and other.max_x <= self.max_x + tolerance
            and other.max_y <= self.max_y + tolerance
        )

    def contains_point(self, point: Point, tolerance: float = 0.0) -> bool:
        """Check whether a point lies inside this box."""
        return (
            self.min_x - tolerance <= point.x <= self.max_x + tolerance
            and self.min_y - tolerance <= point.y <= self.max_y + tolerance
        )

    def to_tuple(self) -> tuple[float, float, float, float]:
        """Convert to (min_x, min_y, max_x, max_y)."""
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "min_x": self.min_x,
            "min_y": self.min_y,
            "max_x": self.max_x,
            "max_y": self.max_y,
        }


@dataclass(frozen=True, slots=True)
class FatLine:
    """A normalized line a*x + b*y + c = 0 and a band of signed distances.

    Every point of the curve the fat line was built from lies within
    [d_min, d_max] of the line.

    Attributes:
        a: X coefficient (unit normal x)
        b: Y coefficient (unit normal y)
        c: Constant term
        d_min: Lower bound of signed distances
        d_max: Upper bound of signed distances
    """

    a: float
    b: float
    c: float
    d_min: float
    d_max: float

    def distance(self, point: Point) -> float:
        """Signed distance from the line to a point."""
        return self.a * point.x + self.b * point.y + self.c
