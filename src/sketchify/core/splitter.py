"""Fragment splitting.

Cuts every segment at the parameters where it meets another segment, so
that the resulting fragments only touch at their endpoints. Fragment
endpoints are snapped to the shared intersection point: two fragments meet
exactly where the intersection was reported, whatever rounding either
segment's parametrization introduces.
"""

from collections.abc import Sequence

from sketchify.config import GeometryConfig
from sketchify.core.bezier import sub_curve
from sketchify.core.geometry import point_at
from sketchify.domain import (
    CubicBezier,
    Fragment,
    Line,
    PathIntersection,
    Point,
    Segment,
    SegmentKind,
    Subpath,
)


def close_subpath(subpath: Subpath, next_id: int, tolerance: float = 1e-6) -> Subpath:
    """Add the implicit closing line of a subpath.

    Filled subpaths are rendered as if closed. An explicitly closed subpath
    already ends at its start (the normalizer emitted the closing line), as
    does an open one whose end happens to meet its start.

    Args:
        subpath: Subpath to close
        next_id: Id for the closing line, if one is needed
        tolerance: Distance at which end and start coincide

    Returns:
        The subpath, with a closing line appended if it was needed
    """
    if subpath.end.distance_to(subpath.start) <= tolerance:
        return subpath
    closing = Line(subpath.end, subpath.start, next_id)
    return Subpath(index=subpath.index, segments=(*subpath.segments, closing), closed=True)


def close_subpaths(subpaths: Sequence[Subpath], tolerance: float = 1e-6) -> list[Subpath]:
    """Close every subpath of a path, numbering new lines after existing ids."""
    next_id = 1 + max(segment.id for subpath in subpaths for segment in subpath.segments)
    closed: list[Subpath] = []
    for subpath in subpaths:
        result = close_subpath(subpath, next_id, tolerance)
        if result is not subpath:
            next_id += 1
        closed.append(result)
    return closed


def collect_cuts(intersections: Sequence[PathIntersection]) -> dict[int, list[tuple[float, Point]]]:
    """Group intersection parameters and points by segment id."""
    cuts: dict[int, list[tuple[float, Point]]] = {}
    for record in intersections:
        hit = record.intersection
        cuts.setdefault(record.first_id, []).append((hit.t_first, hit.point))
        cuts.setdefault(record.second_id, []).append((hit.t_second, hit.point))
    return cuts


def _collapsed(segment: Segment, t0: float, p0: Point, t1: float, p1: Point, point_tolerance: float) -> bool:
    """Check that the piece of a segment between two cuts has no extent.

    Matching end points are not enough: a curve looping back through a
    crossing starts and ends its loop at the same point.
    """
    if p0.distance_to(p1) > point_tolerance:
        return False
    return point_at(segment, (t0 + t1) / 2.0).distance_to(p0) <= point_tolerance


def _ordered_cuts(
    segment: Segment,
    cuts: Sequence[tuple[float, Point]],
    point_tolerance: float,
) -> list[tuple[float, Point]]:
    ordered = [(0.0, segment.start)]
    for t, point in sorted(cuts, key=lambda cut: cut[0]):
        if t <= 0.0 or t >= 1.0:
            continue
        last_t, last_point = ordered[-1]
        if t <= last_t or _collapsed(segment, last_t, last_point, t, point, point_tolerance):
            continue
        ordered.append((t, point))
    # A cut at the end point is the end point
    if len(ordered) > 1:
        last_t, last_point = ordered[-1]
        if _collapsed(segment, last_t, last_point, 1.0, segment.end, point_tolerance):
            ordered.pop()
    ordered.append((1.0, segment.end))
    return ordered


def split_segment(
    segment: Segment,
    cuts: Sequence[tuple[float, Point]],
    subpath_index: int,
    first_fragment_id: int,
    config: GeometryConfig | None = None,
) -> list[Fragment]:
    """Cut one segment into fragments.

    Cuts whose points lie within ``point_tolerance`` of the previous cut (or
    of the segment's ends) are merged into it, so several segments crossing
    at one point produce a single cut. Pieces shorter than
    ``point_tolerance`` are skipped; their neighbours still meet within
    tolerance.

    Args:
        segment: Segment to cut
        cuts: (parameter, point) pairs where the segment is intersected
        subpath_index: Index of the segment's subpath
        first_fragment_id: Id of the first fragment produced
        config: Tolerances (defaults if None)

    Returns:
        Fragments in parameter order
    """
    config = config or GeometryConfig()
    ordered = _ordered_cuts(segment, cuts, config.point_tolerance)

    fragments: list[Fragment] = []
    for (t0, p0), (t1, p1) in zip(ordered, ordered[1:]):
        if _collapsed(segment, t0, p0, t1, p1, config.point_tolerance):
            continue
        fragment_id = first_fragment_id + len(fragments)
        if isinstance(segment, CubicBezier):
            piece = sub_curve(segment, t0, t1)
            fragments.append(
                Fragment(
                    id=fragment_id,
                    parent_segment_id=segment.id,
                    subpath_index=subpath_index,
                    kind=SegmentKind.CUBIC,
                    start=p0,
                    end=p1,
                    control1=piece.control1,
                    control2=piece.control2,
                    t_start=t0,
                    t_end=t1,
                )
            )
        else:
            fragments.append(
                Fragment(
                    id=fragment_id,
                    parent_segment_id=segment.id,
                    subpath_index=subpath_index,
                    kind=SegmentKind.LINE,
                    start=p0,
                    end=p1,
                    t_start=t0,
                    t_end=t1,
                )
            )
    return fragments


def split_path(
    subpaths: Sequence[Subpath],
    intersections: Sequence[PathIntersection],
    config: GeometryConfig | None = None,
) -> list[Fragment]:
    """Cut all segments of a path at their intersections.

    If a subpath's fragments do not end where they began (the subpath was
    not closed beforehand), a closing line fragment is added so that every
    subpath still forms a loop.

    Args:
        subpaths: Subpaths of the path, normally already closed
        intersections: Intersections between their segments
        config: Tolerances (defaults if None)

    Returns:
        Fragment arena; each fragment's id is its index in the list
    """
    config = config or GeometryConfig()
    cuts = collect_cuts(intersections)

    fragments: list[Fragment] = []
    for subpath in subpaths:
        subpath_fragments: list[Fragment] = []
        for segment in subpath.segments:
            subpath_fragments.extend(
                split_segment(
                    segment,
                    cuts.get(segment.id, []),
                    subpath.index,
                    len(fragments) + len(subpath_fragments),
                    config,
                )
            )
        if not subpath_fragments:
            continue

        first, last = subpath_fragments[0], subpath_fragments[-1]
        if last.end.distance_to(first.start) > config.point_tolerance:
            subpath_fragments.append(
                Fragment(
                    id=len(fragments) + len(subpath_fragments),
                    parent_segment_id=subpath.segments[-1].id,
                    subpath_index=subpath.index,
                    kind=SegmentKind.LINE,
                    start=last.end,
                    end=first.start,
                )
            )
        fragments.extend(subpath_fragments)
    return fragments
