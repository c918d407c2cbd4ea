"""Fragments, regions and the classified result of a path.

These types describe the planar arrangement of a path once its segments have
been cut at every intersection:
- Fragment: A sub-piece of one segment between two consecutive cut points
- Connection: A fragment reachable from another's end, with its turning angle
- Region: A closed loop of fragments with its fill classification
- ClassifiedPath: Everything the downstream sketch generator consumes
"""

from dataclasses import dataclass, field
from typing import Any

from sketchify.domain.geometry import BoundingBox, Point
from sketchify.domain.path import FillRule
from sketchify.domain.segment import CubicBezier, Line, Segment, SegmentKind, Subpath


@dataclass(frozen=True, slots=True)
class Fragment:
    """A piece of a segment between two consecutive split parameters.

    Attributes:
        id: Index of the fragment in its path's fragment arena
        parent_segment_id: Id of the segment this piece was cut from
        subpath_index: Index of the subpath the parent segment belongs to
        kind: Line or cubic
        start: Start point, snapped to the cut point
        end: End point, snapped to the cut point
        control1: First control point (cubic fragments only)
        control2: Second control point (cubic fragments only)
        t_start: Parameter on the parent segment where the fragment starts
        t_end: Parameter on the parent segment where the fragment ends
    """

    id: int
    parent_segment_id: int
    subpath_index: int
    kind: SegmentKind
    start: Point
    end: Point
    control1: Point | None = None
    control2: Point | None = None
    t_start: float = 0.0
    t_end: float = 1.0

    @property
    def is_curve(self) -> bool:
        return self.kind is SegmentKind.CUBIC

    def as_segment(self) -> Segment:
        """Fragment geometry as a plain segment carrying the parent's id."""
        if self.kind is SegmentKind.CUBIC:
            assert self.control1 is not None and self.control2 is not None
            return CubicBezier(
                self.start, self.control1, self.control2, self.end, self.parent_segment_id
            )
        return Line(self.start, self.end, self.parent_segment_id)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "parent_segment_id": self.parent_segment_id,
            "subpath_index": self.subpath_index,
            "kind": self.kind.value,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
            "t_start": self.t_start,
            "t_end": self.t_end,
        }
        if self.control1 is not None and self.control2 is not None:
            data["control1"] = self.control1.to_dict()
            data["control2"] = self.control2.to_dict()
        return data


@dataclass(frozen=True, slots=True)
class Connection:
    """A fragment that starts where another one ends.

    Attributes:
        fragment_id: Id of the connected fragment
        angle: Signed turning angle in radians from the incoming tangent to
            the connected fragment's outgoing tangent (negative turns right)
    """

    fragment_id: int
    angle: float


@dataclass(frozen=True, slots=True)
class Region:
    """A closed loop of fragments.

    Built without classification by the region builder; the classifier
    produces completed copies with ``dataclasses.replace``.

    Attributes:
        id: Index of the region within its path
        fragment_ids: Fragments of the loop, in walk order
        bounding_box: Exact bounds of the loop
        test_point: Point strictly inside the region used for classification
        winding_number: Winding number of the original path at test_point
        depth: Number of other regions enclosing this one
        is_hole: True if the region is not filled under the fill rule
        parent_region_id: Innermost enclosing filled region (holes only)
    """

    id: int
    fragment_ids: tuple[int, ...]
    bounding_box: BoundingBox
    test_point: Point | None = None
    winding_number: int = 0
    depth: int = 0
    is_hole: bool = False
    parent_region_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fragment_ids": list(self.fragment_ids),
            "bounding_box": self.bounding_box.to_dict(),
            "test_point": self.test_point.to_dict() if self.test_point else None,
            "winding_number": self.winding_number,
            "depth": self.depth,
            "is_hole": self.is_hole,
            "parent_region_id": self.parent_region_id,
        }


@dataclass
class ClassifiedPath:
    """Fully resolved path, ready for sketch generation.

    Attributes:
        fill_rule: Fill rule the classification used
        subpaths: Closed subpaths the regions were resolved from
        fragments: Fragment arena, indexed by fragment id
        regions: Output regions; each filled region is followed by its holes
        orphans: Holes without an enclosing filled region (not emitted)
        intersection_count: Non-trivial segment intersections found
    """

    fill_rule: FillRule
    subpaths: list[Subpath] = field(default_factory=list)
    fragments: list[Fragment] = field(default_factory=list)
    regions: list[Region] = field(default_factory=list)
    orphans: list[Region] = field(default_factory=list)
    intersection_count: int = 0

    def get_region(self, region_id: int) -> Region:
        """Look up an output region by id.

        Raises:
            KeyError: If no output region has this id
        """
        for region in self.regions:
            if region.id == region_id:
                return region
        raise KeyError(region_id)

    def fragments_of(self, region: Region) -> list[Fragment]:
        """Fragments of a region in loop order."""
        return [self.fragments[fragment_id] for fragment_id in region.fragment_ids]

    def filled_regions(self) -> list[Region]:
        return [region for region in self.regions if not region.is_hole]

    def holes(self) -> list[Region]:
        return [region for region in self.regions if region.is_hole]

    def holes_of(self, region_id: int) -> list[Region]:
        """Holes whose parent is the given filled region."""
        return [
            region
            for region in self.regions
            if region.is_hole and region.parent_region_id == region_id
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "fill_rule": self.fill_rule.value,
            "intersection_count": self.intersection_count,
            "fragments": [fragment.to_dict() for fragment in self.fragments],
            "regions": [region.to_dict() for region in self.regions],
            "orphans": [region.to_dict() for region in self.orphans],
        }
