"""Cubic Bezier primitives.

This module provides the curve operations the rest of the pipeline builds on:
- Evaluation and derivatives (Bernstein form)
- Exact axis-aligned bounds from derivative roots
- De Casteljau subdivision and sub-range extraction
- Degeneracy classification (point, line or proper curve)
- Exact quadratic to cubic degree elevation
- Fat lines and convex-hull clipping for Bezier clipping

All functions are pure and stateless. Parameters are not clamped: callers
that need [0, 1] must clamp themselves.
"""

from enum import Enum, auto

from sketchify.core.roots import EPSILON, solve_quadratic
from sketchify.domain import BoundingBox, CubicBezier, FatLine, Line, Point


class BezierDegeneracy(Enum):
    """Geometric degeneracy of a cubic curve."""

    POINT = auto()
    LINE = auto()
    NORMAL = auto()


def evaluate_bezier(t: float, curve: CubicBezier) -> Point:
    """Evaluate a cubic curve at parameter t.

    Examples:
        >>> c = CubicBezier(Point(0, 0), Point(0, 1), Point(1, 1), Point(1, 0))
        >>> evaluate_bezier(0.5, c)
        Point(x=0.5, y=0.75)
    """
    mt = 1.0 - t
    b0 = mt * mt * mt
    b1 = 3.0 * mt * mt * t
    b2 = 3.0 * mt * t * t
    b3 = t * t * t
    p0, p1, p2, p3 = curve.points
    return Point(
        b0 * p0.x + b1 * p1.x + b2 * p2.x + b3 * p3.x,
        b0 * p0.y + b1 * p1.y + b2 * p2.y + b3 * p3.y,
    )


def bezier_derivative(t: float, curve: CubicBezier) -> Point:
    """First derivative of a cubic curve at parameter t."""
    mt = 1.0 - t
    p0, p1, p2, p3 = curve.points
    a = 3.0 * mt * mt
    b = 6.0 * mt * t
    c = 3.0 * t * t
    return Point(
        a * (p1.x - p0.x) + b * (p2.x - p1.x) + c * (p3.x - p2.x),
        a * (p1.y - p0.y) + b * (p2.y - p1.y) + c * (p3.y - p2.y),
    )


def power_coefficients(v0: float, v1: float, v2: float, v3: float) -> tuple[float, float, float, float]:
    """Convert one coordinate of a cubic from Bernstein to power basis.

    Returns:
        Coefficients (c3, c2, c1, c0) of c3*t^3 + c2*t^2 + c1*t + c0
    """
    return (
        -v0 + 3.0 * v1 - 3.0 * v2 + v3,
        3.0 * v0 - 6.0 * v1 + 3.0 * v2,
        -3.0 * v0 + 3.0 * v1,
        v0,
    )


def axis_extrema(curve: CubicBezier, axis: int) -> list[float]:
    """Parameters in (0, 1) where one coordinate of the curve is stationary.

    Args:
        curve: Curve to inspect
        axis: 0 for x, 1 for y

    Returns:
        Sorted interior parameters of local extrema along the axis
    """
    values = [point.x if axis == 0 else point.y for point in curve.points]
    c3, c2, c1, _ = power_coefficients(*values)
    return [t for t in solve_quadratic(3.0 * c3, 2.0 * c2, c1) if 0.0 < t < 1.0]


def get_bezier_bounds(curve: CubicBezier) -> BoundingBox:
    """Exact axis-aligned bounds of a cubic curve.

    The curve's extremes lie at its endpoints or where a coordinate's
    derivative vanishes, so only those parameters are evaluated.
    """
    params = [0.0, 1.0, *axis_extrema(curve, 0), *axis_extrema(curve, 1)]
    return BoundingBox.from_points([evaluate_bezier(t, curve) for t in params])


def split_bezier(curve: CubicBezier, t: float) -> tuple[CubicBezier, CubicBezier]:
    """Split a curve at t with De Casteljau's algorithm.

    Both halves keep the parent's id.
    """
    p0, p1, p2, p3 = curve.points
    p01 = p0.lerp(p1, t)
    p12 = p1.lerp(p2, t)
    p23 = p2.lerp(p3, t)
    p012 = p01.lerp(p12, t)
    p123 = p12.lerp(p23, t)
    mid = p012.lerp(p123, t)
    return (
        CubicBezier(p0, p01, p012, mid, curve.id),
        CubicBezier(mid, p123, p23, p3, curve.id),
    )


def subdivide_bezier(
    curve: CubicBezier,
    t: float,
    t0: float = 0.0,
    t1: float = 1.0,
) -> tuple[tuple[CubicBezier, tuple[float, float]], tuple[CubicBezier, tuple[float, float]]]:
    """Split a sub-curve and track where the halves sit in the parent domain.

    Args:
        curve: Sub-curve covering [t0, t1] of some parent curve
        t: Local split parameter in [0, 1]
        t0: Parent parameter where the sub-curve starts
        t1: Parent parameter where the sub-curve ends

    Returns:
        ((left, (t0, tm)), (right, (tm, t1))) where tm is the split position
        in the parent's parameter domain
    """
    left, right = split_bezier(curve, t)
    tm = t0 + (t1 - t0) * t
    return (left, (t0, tm)), (right, (tm, t1))


def sub_curve(curve: CubicBezier, t0: float, t1: float) -> CubicBezier:
    """Extract the part of a curve between two parameters.

    Args:
        curve: Parent curve
        t0: Start parameter
        t1: End parameter (t1 >= t0)

    Returns:
        Cubic curve tracing the parent over [t0, t1]
    """
    if t0 <= 0.0 and t1 >= 1.0:
        return curve
    tail = split_bezier(curve, t0)[1] if t0 > 0.0 else curve
    if t0 >= 1.0:
        return tail
    local = (t1 - t0) / (1.0 - t0)
    if local >= 1.0:
        return tail
    return split_bezier(tail, local)[0]


def degenerate_chord(curve: CubicBezier) -> Line:
    """Line through the two control points farthest apart.

    For a LINE-degenerate curve this segment covers the whole curve.
    """
    points = curve.points
    best = (points[0], points[3])
    best_distance = -1.0
    for i in range(4):
        for j in range(i + 1, 4):
            distance = points[i].distance_to(points[j])
            if distance > best_distance:
                best = (points[i], points[j])
                best_distance = distance
    return Line(best[0], best[1], curve.id)


def check_bezier_degeneracy(curve: CubicBezier, tolerance: float = EPSILON) -> BezierDegeneracy:
    """Classify a curve as a point, a straight line or a proper curve.

    Args:
        curve: Curve to classify
        tolerance: Distance below which points coincide or lie on a line

    Returns:
        POINT if all control points coincide, LINE if all lie on one line,
        NORMAL otherwise
    """
    chord = degenerate_chord(curve)
    direction = chord.end - chord.start
    length = direction.length()
    if length <= tolerance:
        return BezierDegeneracy.POINT
    for point in curve.points:
        if abs(direction.cross(point - chord.start)) / length > tolerance:
            return BezierDegeneracy.NORMAL
    return BezierDegeneracy.LINE


def convert_quadratic_to_cubic(start: Point, control: Point, end: Point, segment_id: int = -1) -> CubicBezier:
    """Exact degree elevation of a quadratic curve.

    Examples:
        >>> c = convert_quadratic_to_cubic(Point(0, 0), Point(3, 3), Point(6, 0))
        >>> c.control1, c.control2
        (Point(x=2.0, y=2.0), Point(x=4.0, y=2.0))
    """
    control1 = start + (control - start).scaled(2.0 / 3.0)
    control2 = end + (control - end).scaled(2.0 / 3.0)
    return CubicBezier(start, control1, control2, end, segment_id)


def make_fat_line(curve: CubicBezier, tolerance: float = EPSILON) -> FatLine:
    """Build the fat line of a curve.

    The line runs along the chord from start to end; the band bounds the
    signed distance of every point of the curve from it. When the chord is
    degenerate (closed loop) the line runs towards the farthest control
    point and the band falls back to the control points' distance range.
    """
    p0, p1, p2, p3 = curve.points
    direction = p3 - p0
    tight = True
    if direction.length() <= tolerance:
        tight = False
        direction = max((p1 - p0, p2 - p0), key=lambda vector: vector.length())
        if direction.length() <= tolerance:
            direction = Point(1.0, 0.0)

    length = direction.length()
    a = -direction.y / length
    b = direction.x / length
    c = -(a * p0.x + b * p0.y)

    distances = [a * p.x + b * p.y + c for p in curve.points]
    if tight:
        d1, d2 = distances[1], distances[2]
        factor = 0.75 if d1 * d2 > 0.0 else 4.0 / 9.0
        d_min = factor * min(0.0, d1, d2)
        d_max = factor * max(0.0, d1, d2)
    else:
        d_min = min(distances)
        d_max = max(distances)
    return FatLine(a, b, c, d_min, d_max)


def clip_to_fat_line(
    curve: CubicBezier,
    fat_line: FatLine,
    tolerance: float = EPSILON,
) -> tuple[float, float] | None:
    """Clip a curve's parameter range against a fat line.

    Builds the distance function of the curve's control polygon, with
    control point i at parameter i/3, and intersects its convex hull with
    the band [d_min, d_max]. Every pair of control points spans a segment
    inside the hull, so the hull's extent within the band is the extent of
    those segments within the band.

    Args:
        curve: Curve to clip
        fat_line: Fat line of the other curve
        tolerance: Widening applied to the band

    Returns:
        (t_min, t_max) within [0, 1] that may still hold an intersection,
        or None if the curve lies entirely outside the band
    """
    low = fat_line.d_min - tolerance
    high = fat_line.d_max + tolerance
    distances = [fat_line.distance(point) for point in curve.points]
    params = [0.0, 1.0 / 3.0, 2.0 / 3.0, 1.0]

    candidates: list[float] = [
        t for t, d in zip(params, distances, strict=True) if low <= d <= high
    ]
    for i in range(4):
        for j in range(i + 1, 4):
            di, dj = distances[i], distances[j]
            if di == dj:
                continue
            for bound in (low, high):
                s = (bound - di) / (dj - di)
                if 0.0 <= s <= 1.0:
                    candidates.append(params[i] + (params[j] - params[i]) * s)

    if not candidates:
        return None
    return max(0.0, min(candidates)), min(1.0, max(candidates))

