"""Pairwise segment intersection.

This module finds every crossing between the segments of a path. Each pair
of segment kinds has its own method:

- Line x Line: direct solution of the 2x2 linear system
- Line x Curve: the line's implicit equation substituted into the curve
  gives one cubic, solved in closed form
- Curve x Curve: Bezier clipping with fat lines, run on an explicit work
  stack with bisection when clipping stalls

Curves that are geometrically a point or a straight line are delegated to
the simpler cases. Results always come back as (parameter on the first
operand, parameter on the second operand).
"""

from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from sketchify.config import GeometryConfig
from sketchify.core.bezier import (
    BezierDegeneracy,
    check_bezier_degeneracy,
    clip_to_fat_line,
    degenerate_chord,
    evaluate_bezier,
    get_bezier_bounds,
    make_fat_line,
    power_coefficients,
    sub_curve,
)
from sketchify.core.geometry import segment_bounds
from sketchify.core.roots import EPSILON, solve_cubic
from sketchify.domain import (
    CubicBezier,
    Intersection,
    Line,
    PathIntersection,
    Point,
    Segment,
    Subpath,
)

logger = structlog.get_logger(__name__)

# A clipping pass that keeps more than this share of a range has stalled
_CLIP_STALL_RATIO = 0.8


def _clamp_unit(t: float) -> float:
    return max(0.0, min(1.0, t))


def line_line_intersections(first: Line, second: Line, tolerance: float = EPSILON) -> list[Intersection]:
    """Intersect two line segments.

    Parallel and collinear segments (determinant within tolerance of zero,
    relative to the segment lengths) do not intersect.

    Examples:
        >>> hits = line_line_intersections(
        ...     Line(Point(0, 0), Point(2, 2)), Line(Point(0, 2), Point(2, 0)))
        >>> hits[0].point, hits[0].t_first, hits[0].t_second
        (Point(x=1.0, y=1.0), 0.5, 0.5)
    """
    d1 = first.end - first.start
    d2 = second.end - second.start
    length1 = d1.length()
    length2 = d2.length()
    if length1 <= tolerance or length2 <= tolerance:
        return []

    denominator = d1.cross(d2)
    if abs(denominator) <= tolerance * length1 * length2:
        return []

    offset = second.start - first.start
    t1 = offset.cross(d2) / denominator
    t2 = offset.cross(d1) / denominator
    if not (-tolerance <= t1 <= 1.0 + tolerance and -tolerance <= t2 <= 1.0 + tolerance):
        return []

    t1 = _clamp_unit(t1)
    t2 = _clamp_unit(t2)
    return [Intersection(first.start.lerp(first.end, t1), t1, t2)]


def line_curve_intersections(
    line: Line,
    curve: CubicBezier,
    tolerance: float = EPSILON,
    parameter_tolerance: float = 1e-6,
) -> list[Intersection]:
    """Intersect a line segment with a cubic curve.

    Args:
        line: Line segment (first operand)
        curve: Cubic curve (second operand)
        tolerance: Slack on the [0, 1] parameter ranges
        parameter_tolerance: Curve roots closer than this are merged

    Returns:
        Intersections ordered by curve parameter, with t_first on the line
    """
    direction = line.end - line.start
    length_sq = direction.dot(direction)
    if length_sq <= tolerance * tolerance:
        return []

    # Signed distance to the line, scaled to unit normal
    length = length_sq ** 0.5
    nx = -direction.y / length
    ny = direction.x / length
    xs = power_coefficients(*(p.x for p in curve.points))
    ys = power_coefficients(*(p.y for p in curve.points))
    c3 = nx * xs[0] + ny * ys[0]
    c2 = nx * xs[1] + ny * ys[1]
    c1 = nx * xs[2] + ny * ys[2]
    c0 = nx * (xs[3] - line.start.x) + ny * (ys[3] - line.start.y)

    hits: list[Intersection] = []
    for root in solve_cubic(c3, c2, c1, c0):
        if not -tolerance <= root <= 1.0 + tolerance:
            continue
        t_curve = _clamp_unit(root)
        if hits and abs(hits[-1].t_second - t_curve) <= parameter_tolerance:
            continue
        point = evaluate_bezier(t_curve, curve)
        t_line = (point - line.start).dot(direction) / length_sq
        if not -tolerance <= t_line <= 1.0 + tolerance:
            continue
        hits.append(Intersection(point, _clamp_unit(t_line), t_curve))
    return hits


@dataclass(frozen=True, slots=True)
class _ClipTask:
    """Parameter ranges of a pending curve/curve subproblem."""

    a0: float
    a1: float
    b0: float
    b1: float
    depth: int


def _remaining_share(old0: float, old1: float, new0: float, new1: float, tolerance: float) -> float:
    width = old1 - old0
    if width <= tolerance:
        return 0.0
    return (new1 - new0) / width


def _midpoint_hit(first: CubicBezier, second: CubicBezier, task: _ClipTask) -> Intersection:
    ta = (task.a0 + task.a1) / 2.0
    tb = (task.b0 + task.b1) / 2.0
    pa = evaluate_bezier(ta, first)
    pb = evaluate_bezier(tb, second)
    return Intersection((pa + pb).scaled(0.5), _clamp_unit(ta), _clamp_unit(tb))


def _halves(t0: float, t1: float, tolerance: float) -> list[tuple[float, float]]:
    if t1 - t0 <= tolerance:
        return [(t0, t1)]
    mid = (t0 + t1) / 2.0
    return [(t0, mid), (mid, t1)]


def _clip_task(
    first: CubicBezier,
    second: CubicBezier,
    task: _ClipTask,
    config: GeometryConfig,
    found: list[Intersection],
) -> list[_ClipTask]:
    """Run clipping iterations on one subproblem.

    Appends converged intersections to ``found`` and returns the
    subproblems still to be examined.
    """
    tolerance = config.clip_tolerance
    a0, a1, b0, b1 = task.a0, task.a1, task.b0, task.b1

    for _ in range(config.max_clip_iterations):
        if a1 - a0 <= tolerance and b1 - b0 <= tolerance:
            found.append(_midpoint_hit(first, second, _ClipTask(a0, a1, b0, b1, task.depth)))
            return []

        piece_a = sub_curve(first, a0, a1)
        piece_b = sub_curve(second, b0, b1)
        if not get_bezier_bounds(piece_a).overlaps(get_bezier_bounds(piece_b), config.point_tolerance):
            return []

        clipped_a = clip_to_fat_line(piece_a, make_fat_line(piece_b))
        if clipped_a is None:
            return []
        new_a0 = a0 + (a1 - a0) * clipped_a[0]
        new_a1 = a0 + (a1 - a0) * clipped_a[1]

        piece_a = sub_curve(first, new_a0, new_a1)
        clipped_b = clip_to_fat_line(piece_b, make_fat_line(piece_a))
        if clipped_b is None:
            return []
        new_b0 = b0 + (b1 - b0) * clipped_b[0]
        new_b1 = b0 + (b1 - b0) * clipped_b[1]

        share = max(
            _remaining_share(a0, a1, new_a0, new_a1, tolerance),
            _remaining_share(b0, b1, new_b0, new_b1, tolerance),
        )
        a0, a1, b0, b1 = new_a0, new_a1, new_b0, new_b1
        if share > _CLIP_STALL_RATIO:
            break

    current = _ClipTask(a0, a1, b0, b1, task.depth)
    if a1 - a0 <= tolerance and b1 - b0 <= tolerance:
        found.append(_midpoint_hit(first, second, current))
        return []
    if task.depth >= config.max_clip_depth:
        logger.debug("Clip depth ceiling reached", depth=task.depth, a=(a0, a1), b=(b0, b1))
        found.append(_midpoint_hit(first, second, current))
        return []

    return [
        _ClipTask(ra0, ra1, rb0, rb1, task.depth + 1)
        for ra0, ra1 in _halves(a0, a1, tolerance)
        for rb0, rb1 in _halves(b0, b1, tolerance)
    ]


def merge_intersections(hits: list[Intersection], tolerance: float) -> list[Intersection]:
    """Drop hits whose point and both parameters match an earlier hit."""
    merged: list[Intersection] = []
    for hit in sorted(hits, key=lambda h: (h.t_first, h.t_second)):
        duplicate = any(
            abs(kept.t_first - hit.t_first) <= tolerance
            and abs(kept.t_second - hit.t_second) <= tolerance
            and kept.point.distance_to(hit.point) <= tolerance
            for kept in merged
        )
        if not duplicate:
            merged.append(hit)
    return merged


def _clip_curves(first: CubicBezier, second: CubicBezier, config: GeometryConfig) -> list[Intersection]:
    found: list[Intersection] = []
    stack = [_ClipTask(0.0, 1.0, 0.0, 1.0, 0)]
    budget = config.max_clip_tasks
    while stack:
        if budget == 0:
            logger.debug(
                "Clip task budget exhausted",
                first=first.id,
                second=second.id,
                pending=len(stack),
                found=len(found),
            )
            break
        budget -= 1
        stack.extend(_clip_task(first, second, stack.pop(), config, found))
    return found


def _params_on_degenerate(curve: CubicBezier, projection: float, chord: Line) -> list[float]:
    """Parameters where a straight cubic reaches a position along its chord.

    A straight cubic may run back over itself, so every root is kept.
    """
    direction = chord.end - chord.start
    xs = power_coefficients(*(p.x for p in curve.points))
    ys = power_coefficients(*(p.y for p in curve.points))
    c3 = direction.x * xs[0] + direction.y * ys[0]
    c2 = direction.x * xs[1] + direction.y * ys[1]
    c1 = direction.x * xs[2] + direction.y * ys[2]
    c0 = (
        direction.x * (xs[3] - chord.start.x)
        + direction.y * (ys[3] - chord.start.y)
        - projection
    )
    params: list[float] = []
    for root in solve_cubic(c3, c2, c1, c0):
        if -EPSILON <= root <= 1.0 + EPSILON:
            t = _clamp_unit(root)
            if not params or abs(params[-1] - t) > EPSILON:
                params.append(t)
    return params


def _degenerate_intersections(
    first: CubicBezier,
    first_kind: BezierDegeneracy,
    second: CubicBezier,
    second_kind: BezierDegeneracy,
    config: GeometryConfig,
) -> list[Intersection]:
    first_chord = degenerate_chord(first) if first_kind is BezierDegeneracy.LINE else None
    second_chord = degenerate_chord(second) if second_kind is BezierDegeneracy.LINE else None
    hits = intersect_segments(first_chord or first, second_chord or second, config)

    results: list[Intersection] = []
    for hit in hits:
        if first_chord is not None:
            projection = (hit.point - first_chord.start).dot(first_chord.end - first_chord.start)
            first_params = _params_on_degenerate(first, projection, first_chord)
        else:
            first_params = [hit.t_first]
        if second_chord is not None:
            projection = (hit.point - second_chord.start).dot(second_chord.end - second_chord.start)
            second_params = _params_on_degenerate(second, projection, second_chord)
        else:
            second_params = [hit.t_second]
        results.extend(
            Intersection(hit.point, ta, tb) for ta in first_params for tb in second_params
        )
    return merge_intersections(results, config.merge_tolerance)


def curve_curve_intersections(
    first: CubicBezier,
    second: CubicBezier,
    config: GeometryConfig | None = None,
) -> list[Intersection]:
    """Intersect two cubic curves with Bezier clipping.

    Clipping alternates between the curves, narrowing each one's parameter
    range to where it can still meet the other's fat line. When a pass
    keeps more than 80% of a range, both ranges are bisected and all four
    combinations are examined. Subproblems live on an explicit stack;
    depth, iteration and task ceilings from the configuration bound the
    work, so overlapping or self-tangent curves still terminate with a
    finite result.

    Args:
        first: First curve
        second: Second curve
        config: Tolerances and budgets (defaults if None)

    Returns:
        Merged intersections ordered by parameter on the first curve
    """
    config = config or GeometryConfig()
    first_kind = check_bezier_degeneracy(first, config.point_tolerance)
    second_kind = check_bezier_degeneracy(second, config.point_tolerance)
    if BezierDegeneracy.POINT in (first_kind, second_kind):
        return []
    if BezierDegeneracy.LINE in (first_kind, second_kind):
        return _degenerate_intersections(first, first_kind, second, second_kind, config)
    return merge_intersections(_clip_curves(first, second, config), config.merge_tolerance)


def cubic_self_intersections(curve: CubicBezier, config: GeometryConfig | None = None) -> list[Intersection]:
    """Find where a cubic curve crosses itself.

    With the curve in power form B(t) = a*t^3 + b*t^2 + c*t + d, two
    distinct parameters s and t meet when a*(s^2 + s*t + t^2) + b*(s + t)
    + c = 0. Writing the sum s + t and product s*t turns this into two
    linear equations: the sum comes from eliminating the product, and s
    and t are then the roots of a quadratic. A cubic has at most one such
    loop point.

    Args:
        curve: Curve to inspect
        config: Tolerances (defaults if None)

    Returns:
        At most one intersection, with t_first < t_second
    """
    config = config or GeometryConfig()
    if check_bezier_degeneracy(curve, config.point_tolerance) is not BezierDegeneracy.NORMAL:
        return []

    ax, bx, cx, _ = power_coefficients(*(p.x for p in curve.points))
    ay, by, cy, _ = power_coefficients(*(p.y for p in curve.points))
    cross = ay * bx - ax * by
    if abs(cross) <= EPSILON * max(abs(ax), abs(ay), abs(bx), abs(by), 1.0):
        return []

    total = (ax * cy - ay * cx) / cross
    if abs(ax) >= abs(ay):
        product = total * total + (bx * total + cx) / ax
    else:
        product = total * total + (by * total + cy) / ay

    discriminant = total * total - 4.0 * product
    if discriminant <= config.parameter_tolerance ** 2:
        return []
    root = discriminant ** 0.5
    s = (total - root) / 2.0
    t = (total + root) / 2.0
    if s < -EPSILON or t > 1.0 + EPSILON:
        return []

    s = _clamp_unit(s)
    t = _clamp_unit(t)
    if s <= config.parameter_tolerance and t >= 1.0 - config.parameter_tolerance:
        # Closed curve touching itself at its own endpoints
        return []
    point = (evaluate_bezier(s, curve) + evaluate_bezier(t, curve)).scaled(0.5)
    return [Intersection(point, s, t)]


def intersect_segments(first: Segment, second: Segment, config: GeometryConfig | None = None) -> list[Intersection]:
    """Intersect two segments of any kind.

    Returns:
        Intersections with t_first on ``first`` and t_second on ``second``
    """
    config = config or GeometryConfig()
    match (first, second):
        case (Line(), Line()):
            return line_line_intersections(first, second)
        case (Line(), CubicBezier()):
            return line_curve_intersections(first, second, parameter_tolerance=config.parameter_tolerance)
        case (CubicBezier(), Line()):
            return [
                hit.swapped()
                for hit in line_curve_intersections(
                    second, first, parameter_tolerance=config.parameter_tolerance
                )
            ]
        case (CubicBezier(), CubicBezier()):
            return curve_curve_intersections(first, second, config)
    raise TypeError(f"Unsupported segment pair: {type(first).__name__}, {type(second).__name__}")


def _joints(subpaths: Sequence[Subpath], tolerance: float) -> dict[tuple[int, int], list[Point]]:
    """Shared endpoints of segments that follow each other within a subpath.

    Returns:
        Map from (earlier id, later id) to the joint points between them
    """
    joints: dict[tuple[int, int], list[Point]] = {}
    for subpath in subpaths:
        segments = subpath.segments
        for previous, following in zip(segments, segments[1:]):
            joints.setdefault((previous.id, following.id), []).append(previous.end)
        if len(segments) > 1 and segments[-1].end.distance_to(segments[0].start) <= tolerance:
            key = (segments[0].id, segments[-1].id)
            joints.setdefault(key, []).append(segments[0].start)
    return joints


def find_path_intersections(
    subpaths: Sequence[Subpath],
    config: GeometryConfig | None = None,
) -> list[PathIntersection]:
    """Find all non-trivial intersections between the segments of a path.

    Every cubic is checked for a loop crossing itself, recorded with the
    curve as both operands. Every pair of segments is tested, after a
    bounding-box prefilter. The
    contact at the shared endpoint of consecutive segments in a subpath
    (including the wrap-around of a closed subpath) is not an intersection
    and is dropped; other crossings of such segments are kept.

    Args:
        subpaths: Normalized subpaths of one path
        config: Tolerances and budgets (defaults if None)

    Returns:
        Intersections tagged with the ids of both segments, in pair order
    """
    config = config or GeometryConfig()
    segments = [segment for subpath in subpaths for segment in subpath.segments]
    bounds = [segment_bounds(segment) for segment in segments]
    joints = _joints(subpaths, config.point_tolerance)

    results: list[PathIntersection] = []
    for i, first in enumerate(segments):
        if isinstance(first, CubicBezier):
            for hit in cubic_self_intersections(first, config):
                results.append(PathIntersection(first.id, first.id, hit))
        for j in range(i + 1, len(segments)):
            second = segments[j]
            if not bounds[i].overlaps(bounds[j], config.point_tolerance):
                continue
            joint_points = joints.get((first.id, second.id), [])
            for hit in intersect_segments(first, second, config):
                if any(hit.point.distance_to(joint) <= config.merge_tolerance for joint in joint_points):
                    continue
                results.append(PathIntersection(first.id, second.id, hit))
    return results
