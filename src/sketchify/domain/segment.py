"""Canonical path segments and intersections.

After normalization every path is a list of subpaths, each a sequence of
segments of exactly two kinds:
- Line: a straight segment
- CubicBezier: a cubic Bezier curve (quadratics are degree-elevated)

Elliptical arcs have no segment type; they are rejected during normalization.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

from sketchify.domain.geometry import Point


class SegmentKind(str, Enum):
    """Kind of a segment or fragment."""

    LINE = "line"
    CUBIC = "cubic"


@dataclass(frozen=True, slots=True)
class Line:
    """A straight segment.

    Attributes:
        start: Start point
        end: End point
        id: Stable identifier, unique within a path
    """

    kind: ClassVar[SegmentKind] = SegmentKind.LINE

    start: Point
    end: Point
    id: int = -1

    @property
    def points(self) -> tuple[Point, Point]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "id": self.id,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class CubicBezier:
    """A cubic Bezier curve.

    Attributes:
        start: Start point (P0)
        control1: First control point (P1)
        control2: Second control point (P2)
        end: End point (P3)
        id: Stable identifier, unique within a path
    """

    kind: ClassVar[SegmentKind] = SegmentKind.CUBIC

    start: Point
    control1: Point
    control2: Point
    end: Point
    id: int = -1

    @property
    def points(self) -> tuple[Point, Point, Point, Point]:
        return (self.start, self.control1, self.control2, self.end)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "id": self.id,
            "start": self.start.to_dict(),
            "control1": self.control1.to_dict(),
            "control2": self.control2.to_dict(),
            "end": self.end.to_dict(),
        }


Segment = Line | CubicBezier


@dataclass(frozen=True, slots=True)
class Subpath:
    """A run of connected segments started by a move command.

    Attributes:
        index: Position of the subpath within its path
        segments: Segments in drawing order
        closed: True if the subpath was explicitly closed
    """

    index: int
    segments: tuple[Segment, ...] = field(default_factory=tuple)
    closed: bool = False

    @property
    def start(self) -> Point:
        return self.segments[0].start

    @property
    def end(self) -> Point:
        return self.segments[-1].end

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "closed": self.closed,
            "segments": [segment.to_dict() for segment in self.segments],
        }


@dataclass(frozen=True, slots=True)
class Intersection:
    """A crossing of two segments.

    Attributes:
        point: Location of the crossing
        t_first: Parameter in [0, 1] on the first segment
        t_second: Parameter in [0, 1] on the second segment
    """

    point: Point
    t_first: float
    t_second: float

    def swapped(self) -> "Intersection":
        """Same crossing with the operand order reversed."""
        return Intersection(self.point, self.t_second, self.t_first)


@dataclass(frozen=True, slots=True)
class PathIntersection:
    """An intersection tagged with the ids of the two segments involved.

    A curve crossing itself has both ids equal, with t_first < t_second.
    """

    first_id: int
    second_id: int
    intersection: Intersection

    def parameter_for(self, segment_id: int) -> float:
        """Parameter of this crossing on the given segment.

        Raises:
            KeyError: If the segment is not part of this intersection
        """
        if segment_id == self.first_id:
            return self.intersection.t_first
        if segment_id == self.second_id:
            return self.intersection.t_second
        raise KeyError(segment_id)
