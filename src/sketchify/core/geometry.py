"""Geometric operations on segments and closed paths.

This module provides the segment-level utilities shared by the intersection,
region and classification stages:
- Evaluation, tangents and bounds for either segment kind
- Signed turning angles between tangents
- Signed area of sampled loops (shoelace formula)
- Axis crossings via monotone pieces and bisection
- Winding numbers by ray casting against segments
- Point-on-segment tests

All functions are pure and stateless.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from sketchify.core.bezier import (
    axis_extrema,
    bezier_derivative,
    evaluate_bezier,
    get_bezier_bounds,
)
from sketchify.domain import BoundingBox, CubicBezier, Line, Point, Segment

_BISECTION_STEPS = 64


@dataclass(frozen=True, slots=True)
class AxisCrossing:
    """Where a segment crosses an axis-parallel line.

    Attributes:
        t: Parameter on the segment
        position: Coordinate of the crossing along the line
        direction: +1 if the segment moves towards larger values of the
            crossed coordinate, -1 otherwise
    """

    t: float
    position: float
    direction: int


def point_at(segment: Segment, t: float) -> Point:
    """Position on a segment at parameter t."""
    if isinstance(segment, Line):
        return segment.start.lerp(segment.end, t)
    return evaluate_bezier(t, segment)


def tangent_at(segment: Segment, t: float, tolerance: float = 1e-12) -> Point:
    """Direction of travel along a segment at parameter t.

    Where a cubic's derivative vanishes (a control point coincides with an
    endpoint) the direction towards the next distinct control point is used.
    """
    if isinstance(segment, Line):
        return segment.end - segment.start

    derivative = bezier_derivative(t, segment)
    if derivative.length() > tolerance:
        return derivative

    p0, p1, p2, p3 = segment.points
    if t <= 0.5:
        candidates = (p1 - p0, p2 - p0, p3 - p0)
    else:
        candidates = (p3 - p2, p3 - p1, p3 - p0)
    for candidate in candidates:
        if candidate.length() > tolerance:
            return candidate
    return derivative


def segment_bounds(segment: Segment) -> BoundingBox:
    """Exact axis-aligned bounds of a segment."""
    if isinstance(segment, Line):
        return BoundingBox.from_points(segment.points)
    return get_bezier_bounds(segment)


def signed_angle(incoming: Point, outgoing: Point) -> float:
    """Signed angle in radians turning from one direction to another.

    Positive is a counter-clockwise (left) turn, negative a clockwise one.

    Examples:
        >>> round(signed_angle(Point(1, 0), Point(0, 1)), 6)
        1.570796
    """
    return math.atan2(incoming.cross(outgoing), incoming.dot(outgoing))


def signed_area(points: list[Point]) -> float:
    """Calculate signed area of a polygon using the shoelace formula.

    The sign of the area indicates winding direction:
    - Positive area: counter-clockwise winding
    - Negative area: clockwise winding

    Args:
        points: List of points forming the polygon boundary

    Returns:
        Signed area in square units. Returns 0.0 for degenerate polygons.

    Examples:
        >>> square = [Point(0.0, 0.0), Point(1.0, 0.0), Point(1.0, 1.0), Point(0.0, 1.0)]
        >>> signed_area(square)
        1.0
    """
    n = len(points)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += points[i].x * points[j].y
        area -= points[j].x * points[i].y

    return area / 2.0


def sample_loop(segments: Iterable[Segment], samples_per_curve: int = 16) -> list[Point]:
    """Polygon approximating a closed chain of segments.

    Lines contribute their start point; curves contribute evenly spaced
    samples excluding their end point.
    """
    points: list[Point] = []
    for segment in segments:
        if isinstance(segment, Line):
            points.append(segment.start)
        else:
            points.extend(
                evaluate_bezier(i / samples_per_curve, segment) for i in range(samples_per_curve)
            )
    return points


def _coordinate(point: Point, axis: int) -> float:
    return point.x if axis == 0 else point.y


def _monotone_pieces(segment: Segment, axis: int) -> list[tuple[float, float]]:
    if isinstance(segment, Line):
        return [(0.0, 1.0)]
    breaks = [0.0, *axis_extrema(segment, axis), 1.0]
    return list(zip(breaks[:-1], breaks[1:]))


def _solve_on_piece(segment: CubicBezier, axis: int, value: float, t0: float, t1: float) -> float:
    """Bisection for the parameter where a monotone piece reaches a value."""
    v0 = _coordinate(evaluate_bezier(t0, segment), axis) - value
    if v0 == 0.0:
        return t0
    if _coordinate(evaluate_bezier(t1, segment), axis) == value:
        return t1
    for _ in range(_BISECTION_STEPS):
        mid = (t0 + t1) / 2.0
        v_mid = _coordinate(evaluate_bezier(mid, segment), axis) - value
        if v_mid == 0.0:
            return mid
        if (v_mid < 0.0) == (v0 < 0.0):
            t0, v0 = mid, v_mid
        else:
            t1 = mid
        if t1 - t0 < 1e-15:
            break
    return (t0 + t1) / 2.0


def axis_crossings(segment: Segment, axis: int, value: float, half_open: bool = True) -> list[AxisCrossing]:
    """Find where a segment crosses the line where one coordinate equals value.

    The segment is split into pieces that are monotone along the axis, so
    each piece crosses at most once. With ``half_open`` a piece running from
    coordinate a to b counts only if min(a, b) <= value < max(a, b): a chain
    of pieces passing through a vertex at exactly ``value`` is counted once,
    and pieces that merely touch the line from below are not counted.
    Pieces lying flat along the line are never counted.

    Args:
        segment: Line or cubic to intersect
        axis: 0 to cross a vertical line x=value, 1 for a horizontal line y=value
        value: Coordinate of the line
        half_open: Apply the half-open rule; if False every touch counts

    Returns:
        Crossings in parameter order
    """
    other = 1 - axis
    crossings: list[AxisCrossing] = []
    for t0, t1 in _monotone_pieces(segment, axis):
        a = _coordinate(point_at(segment, t0), axis)
        b = _coordinate(point_at(segment, t1), axis)
        if a == b:
            continue
        low, high = min(a, b), max(a, b)
        if half_open:
            if not low <= value < high:
                continue
        elif not low <= value <= high:
            continue

        if isinstance(segment, Line):
            t = (value - a) / (b - a)
        else:
            t = _solve_on_piece(segment, axis, value, t0, t1)
        crossings.append(
            AxisCrossing(
                t=t,
                position=_coordinate(point_at(segment, t), other),
                direction=1 if b > a else -1,
            )
        )
    return crossings


def winding_number(point: Point, segments: Iterable[Segment]) -> int:
    """Winding number of closed segment chains around a point.

    Casts a ray from the point towards +x. An upward crossing (point to the
    crossing's left) adds one, a downward crossing subtracts one. The point
    must not lie on any segment.

    Examples:
        >>> ccw = [Line(Point(0, 0), Point(2, 0)), Line(Point(2, 0), Point(2, 2)),
        ...        Line(Point(2, 2), Point(0, 2)), Line(Point(0, 2), Point(0, 0))]
        >>> winding_number(Point(1, 1), ccw)
        1
    """
    total = 0
    for segment in segments:
        for crossing in axis_crossings(segment, 1, point.y):
            if crossing.position > point.x:
                total += crossing.direction
    return total


def nearest_point_on_segment(point: Point, seg_start: Point, seg_end: Point) -> tuple[Point, float]:
    """Find the closest point on a line segment to a given point.

    Projects the point onto the infinite line, then clamps to the segment endpoints.

    Args:
        point: The point to project
        seg_start: Start point of line segment
        seg_end: End point of line segment

    Returns:
        Tuple of (nearest_point, distance)
    """
    direction = seg_end - seg_start
    length_sq = direction.dot(direction)
    if length_sq < 1e-24:
        return seg_start, point.distance_to(seg_start)

    t = max(0.0, min(1.0, (point - seg_start).dot(direction) / length_sq))
    nearest = seg_start.lerp(seg_end, t)
    return nearest, point.distance_to(nearest)


def is_point_on_segment(point: Point, segment: Segment, tolerance: float) -> bool:
    """Check whether a point lies within tolerance of a segment.

    Curves are tested by crossing them with the horizontal and vertical
    lines through the point; a curve passing within tolerance of the point
    crosses one of them within tolerance of it.
    """
    if isinstance(segment, Line):
        return nearest_point_on_segment(point, segment.start, segment.end)[1] <= tolerance

    if not segment_bounds(segment).contains_point(point, tolerance):
        return False
    if point.distance_to(segment.start) <= tolerance or point.distance_to(segment.end) <= tolerance:
        return True
    for axis in (0, 1):
        position = _coordinate(point, axis)
        along = _coordinate(point, 1 - axis)
        for crossing in axis_crossings(segment, 1 - axis, along, half_open=False):
            if abs(crossing.position - position) <= tolerance:
                return True
    return False
