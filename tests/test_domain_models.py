"""Unit tests for domain models.

Tests cover:
- Point vector arithmetic and serialization
- BoundingBox construction, overlap and containment
- PathCommand validation and formatting
- Fragment, Region and ClassifiedPath accessors
- PathOutcome serialization
"""

import pytest

from sketchify.domain import (
    BoundingBox,
    ClassifiedPath,
    CommandType,
    CubicBezier,
    FillRule,
    Fragment,
    Intersection,
    Line,
    PathCommand,
    PathIntersection,
    PathOutcome,
    Point,
    Region,
    SegmentKind,
    Subpath,
)


class TestPoint:
    """Tests for Point."""

    def test_arithmetic(self):
        """Points add, subtract and scale like vectors."""
        a = Point(1.0, 2.0)
        b = Point(3.0, 5.0)
        assert a + b == Point(4.0, 7.0)
        assert b - a == Point(2.0, 3.0)
        assert a.scaled(2.0) == Point(2.0, 4.0)

    def test_dot_and_cross(self):
        """Dot and cross products of unit vectors."""
        x = Point(1.0, 0.0)
        y = Point(0.0, 1.0)
        assert x.dot(y) == 0.0
        assert x.cross(y) == 1.0
        assert y.cross(x) == -1.0

    def test_length_and_distance(self):
        """3-4-5 triangle."""
        assert Point(3.0, 4.0).length() == 5.0
        assert Point(1.0, 1.0).distance_to(Point(4.0, 5.0)) == 5.0

    def test_lerp(self):
        """Interpolation at the ends and midpoint."""
        a = Point(0.0, 0.0)
        b = Point(10.0, 20.0)
        assert a.lerp(b, 0.0) == a
        assert a.lerp(b, 1.0) == b
        assert a.lerp(b, 0.5) == Point(5.0, 10.0)

    def test_hashable(self):
        """Frozen points can be used in sets."""
        assert len({Point(1.0, 1.0), Point(1.0, 1.0), Point(2.0, 1.0)}) == 2

    def test_serialization(self):
        """to_dict and from_dict are inverses."""
        point = Point(1.5, -2.5)
        assert point.to_dict() == {"x": 1.5, "y": -2.5}
        assert Point.from_dict(point.to_dict()) == point
        assert point.to_tuple() == (1.5, -2.5)


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_from_points(self):
        """Box spans all points."""
        box = BoundingBox.from_points([Point(1.0, 5.0), Point(-2.0, 3.0), Point(4.0, -1.0)])
        assert box.to_tuple() == (-2.0, -1.0, 4.0, 5.0)
        assert box.width == 6.0
        assert box.height == 6.0
        assert box.area == 36.0
        assert box.center == Point(1.0, 2.0)

    def test_from_no_points_raises(self):
        """An empty point list has no bounds."""
        with pytest.raises(ValueError):
            BoundingBox.from_points([])

    def test_overlaps(self):
        """Overlap, touching and separation."""
        box = BoundingBox(0.0, 0.0, 10.0, 10.0)
        assert box.overlaps(BoundingBox(5.0, 5.0, 15.0, 15.0))
        assert box.overlaps(BoundingBox(10.0, 0.0, 20.0, 10.0))
        assert not box.overlaps(BoundingBox(11.0, 0.0, 20.0, 10.0))
        assert box.overlaps(BoundingBox(11.0, 0.0, 20.0, 10.0), tolerance=1.0)

    def test_contains(self):
        """Containment of boxes and points."""
        box = BoundingBox(0.0, 0.0, 10.0, 10.0)
        assert box.contains(BoundingBox(2.0, 2.0, 8.0, 8.0))
        assert box.contains(box)
        assert not box.contains(BoundingBox(2.0, 2.0, 12.0, 8.0))
        assert box.contains_point(Point(10.0, 5.0))
        assert not box.contains_point(Point(10.5, 5.0))
        assert box.contains_point(Point(10.5, 5.0), tolerance=1.0)

    def test_union(self):
        """Union covers both boxes."""
        union = BoundingBox(0.0, 0.0, 1.0, 1.0).union(BoundingBox(2.0, -1.0, 3.0, 0.5))
        assert union.to_tuple() == (0.0, -1.0, 3.0, 1.0)


class TestSegments:
    """Tests for segment types."""

    def test_line_points_and_kind(self):
        """Lines expose both endpoints."""
        line = Line(Point(0.0, 0.0), Point(1.0, 1.0), 3)
        assert line.points == (Point(0.0, 0.0), Point(1.0, 1.0))
        assert line.kind is SegmentKind.LINE
        assert line.to_dict()["id"] == 3

    def test_cubic_points(self):
        """Cubics expose all four control points in order."""
        curve = CubicBezier(Point(0.0, 0.0), Point(1.0, 2.0), Point(3.0, 2.0), Point(4.0, 0.0))
        assert curve.points[1] == Point(1.0, 2.0)
        assert curve.kind is SegmentKind.CUBIC
        assert curve.to_dict()["kind"] == "cubic"

    def test_subpath_endpoints(self):
        """Subpath start and end come from its first and last segments."""
        subpath = Subpath(
            index=0,
            segments=(
                Line(Point(0.0, 0.0), Point(1.0, 0.0), 0),
                Line(Point(1.0, 0.0), Point(1.0, 1.0), 1),
            ),
        )
        assert subpath.start == Point(0.0, 0.0)
        assert subpath.end == Point(1.0, 1.0)
        assert not subpath.closed

    def test_intersection_swapped(self):
        """Swapping exchanges the parameters."""
        hit = Intersection(Point(1.0, 1.0), 0.25, 0.75)
        swapped = hit.swapped()
        assert swapped.t_first == 0.75
        assert swapped.t_second == 0.25
        assert swapped.point == hit.point

    def test_path_intersection_parameter_for(self):
        """Parameters are looked up by segment id."""
        record = PathIntersection(2, 5, Intersection(Point(0.0, 0.0), 0.1, 0.9))
        assert record.parameter_for(2) == 0.1
        assert record.parameter_for(5) == 0.9
        with pytest.raises(KeyError):
            record.parameter_for(7)


class TestPathCommand:
    """Tests for PathCommand."""

    def test_param_counts(self):
        """Parameter counts follow SVG."""
        assert CommandType.MOVE.param_count == 2
        assert CommandType.CUBIC.param_count == 6
        assert CommandType.ARC.param_count == 7
        assert CommandType.CLOSE.param_count == 0

    def test_wrong_param_count_raises(self):
        """A command with the wrong number of parameters is rejected."""
        with pytest.raises(ValueError, match="takes 2 parameters"):
            PathCommand(CommandType.LINE, (1.0,))

    def test_str(self):
        """Commands print in SVG form."""
        assert str(PathCommand(CommandType.LINE, (5.0, 0.0), relative=True)) == "l 5 0"
        assert str(PathCommand(CommandType.CLOSE)) == "Z"
        assert PathCommand(CommandType.CLOSE, relative=True).letter == "z"

    def test_serialization(self):
        """to_dict and from_dict are inverses."""
        command = PathCommand(CommandType.QUADRATIC, (1.0, 2.0, 3.0, 4.0), relative=True)
        assert PathCommand.from_dict(command.to_dict()) == command


def _square_fragments() -> list[Fragment]:
    corners = [Point(0.0, 0.0), Point(10.0, 0.0), Point(10.0, 10.0), Point(0.0, 10.0)]
    return [
        Fragment(
            id=i,
            parent_segment_id=i,
            subpath_index=0,
            kind=SegmentKind.LINE,
            start=corners[i],
            end=corners[(i + 1) % 4],
        )
        for i in range(4)
    ]


class TestFragment:
    """Tests for Fragment."""

    def test_line_fragment_as_segment(self):
        """Line fragments become lines carrying the parent's id."""
        fragment = Fragment(
            id=4,
            parent_segment_id=1,
            subpath_index=0,
            kind=SegmentKind.LINE,
            start=Point(0.0, 0.0),
            end=Point(1.0, 0.0),
        )
        segment = fragment.as_segment()
        assert isinstance(segment, Line)
        assert segment.id == 1
        assert not fragment.is_curve
        assert "control1" not in fragment.to_dict()

    def test_cubic_fragment_as_segment(self):
        """Cubic fragments keep their control points."""
        fragment = Fragment(
            id=0,
            parent_segment_id=2,
            subpath_index=0,
            kind=SegmentKind.CUBIC,
            start=Point(0.0, 0.0),
            end=Point(3.0, 0.0),
            control1=Point(1.0, 1.0),
            control2=Point(2.0, 1.0),
            t_start=0.25,
            t_end=0.5,
        )
        segment = fragment.as_segment()
        assert isinstance(segment, CubicBezier)
        assert segment.control2 == Point(2.0, 1.0)
        assert fragment.is_curve
        data = fragment.to_dict()
        assert data["control1"] == {"x": 1.0, "y": 1.0}
        assert data["t_start"] == 0.25


class TestClassifiedPath:
    """Tests for ClassifiedPath accessors."""

    def _classified(self) -> ClassifiedPath:
        box = BoundingBox(0.0, 0.0, 10.0, 10.0)
        filled = Region(id=0, fragment_ids=(0, 1, 2, 3), bounding_box=box, winding_number=1)
        hole = Region(
            id=1,
            fragment_ids=(2,),
            bounding_box=box,
            is_hole=True,
            depth=1,
            parent_region_id=0,
        )
        return ClassifiedPath(
            fill_rule=FillRule.NONZERO,
            fragments=_square_fragments(),
            regions=[filled, hole],
        )

    def test_get_region(self):
        """Regions are looked up by id."""
        classified = self._classified()
        assert classified.get_region(1).is_hole
        with pytest.raises(KeyError):
            classified.get_region(9)

    def test_filled_and_holes(self):
        """Filled regions and holes are split by is_hole."""
        classified = self._classified()
        assert [region.id for region in classified.filled_regions()] == [0]
        assert [region.id for region in classified.holes()] == [1]
        assert [region.id for region in classified.holes_of(0)] == [1]
        assert classified.holes_of(1) == []

    def test_fragments_of(self):
        """Fragments come back in loop order."""
        classified = self._classified()
        fragments = classified.fragments_of(classified.get_region(0))
        assert [fragment.id for fragment in fragments] == [0, 1, 2, 3]

    def test_to_dict(self):
        """Serialized form lists fragments, regions and orphans."""
        data = self._classified().to_dict()
        assert data["fill_rule"] == "nonzero"
        assert len(data["fragments"]) == 4
        assert data["regions"][1]["parent_region_id"] == 0
        assert data["orphans"] == []


class TestPathOutcome:
    """Tests for PathOutcome."""

    def test_failed_outcome(self):
        """Failed outcomes carry the error."""
        outcome = PathOutcome(name="bad", error="boom", error_type="MalformedPathError")
        assert not outcome.succeeded
        data = outcome.to_dict()
        assert data["error"] == "boom"
        assert data["error_type"] == "MalformedPathError"
        assert "regions" not in data

    def test_successful_outcome(self):
        """Successful outcomes embed the classified path."""
        outcome = PathOutcome(name="ok", classified=ClassifiedPath(fill_rule=FillRule.EVENODD))
        assert outcome.succeeded
        data = outcome.to_dict()
        assert data["fill_rule"] == "evenodd"
        assert "error" not in data
