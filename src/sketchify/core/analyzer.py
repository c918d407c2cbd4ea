"""Region classification by winding number.

This module decides, for every region of a path:
- Its nesting: which other regions enclose it, and how deeply
- A test point strictly inside it (and outside every region nested in it)
- The winding number of the original path at that point
- Whether it is filled or a hole under the path's fill rule
- The parent filled region of each hole

Winding numbers are always computed against the original, unfragmented
closed subpaths, never against the region's own loop.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

import structlog

from sketchify.config import GeometryConfig
from sketchify.core.geometry import axis_crossings, is_point_on_segment, point_at, winding_number
from sketchify.core.regions import FragmentGraph
from sketchify.domain import FillRule, Point, Region, Segment, Subpath

logger = structlog.get_logger(__name__)

_SCANLINE_LEVELS = 5


@dataclass
class RegionNode:
    """A node in the region nesting tree.

    Attributes:
        region_id: Id of the region
        parent: Id of the smallest enclosing region (None if top-level)
        children: Ids of regions whose immediate parent this is
        depth: Number of regions enclosing this one
    """

    region_id: int
    parent: int | None
    children: list[int]
    depth: int


@dataclass
class RegionHierarchy:
    """Classified regions of one path.

    Attributes:
        regions: Output regions; each filled region is followed by its holes
        orphans: Holes with no enclosing filled region (not in ``regions``)
        nesting_tree: Nesting of all regions, orphans included
    """

    regions: list[Region]
    orphans: list[Region]
    nesting_tree: dict[int, RegionNode]

    def has_holes(self) -> bool:
        return any(region.is_hole for region in self.regions)


def _scanline_fractions() -> Iterator[float]:
    """Heights to scan, coarse to fine: 1/2, 1/4, 3/4, 1/8, 3/8, ..."""
    for level in range(1, _SCANLINE_LEVELS + 1):
        denominator = 2 ** level
        for numerator in range(1, denominator, 2):
            yield numerator / denominator


class RegionAnalyzer:
    """Classifies the regions of a path as filled or holes.

    The analyzer is stateless apart from its configuration and can be
    reused across paths.
    """

    def __init__(self, fill_rule: FillRule = FillRule.NONZERO, config: GeometryConfig | None = None) -> None:
        self.fill_rule = fill_rule
        self.config = config or GeometryConfig()
        # Test points keep at least this distance from every boundary
        self._clearance = max(self.config.merge_tolerance, self.config.point_tolerance)

    def analyze(
        self,
        regions: Sequence[Region],
        graph: FragmentGraph,
        subpaths: Sequence[Subpath],
    ) -> RegionHierarchy:
        """Classify regions.

        Process:
        1. Build the nesting tree of all regions
        2. Find a test point inside each region's own face
        3. Compute the path's winding number there and apply the fill rule
        4. Assign each hole its innermost enclosing filled region
        5. Order the output and set orphan holes aside

        Args:
            regions: Unclassified regions from the region builder
            graph: Fragment graph the regions were walked on
            subpaths: Closed subpaths of the original path

        Returns:
            RegionHierarchy with classified regions and orphans
        """
        if not regions:
            return RegionHierarchy(regions=[], orphans=[], nesting_tree={})

        by_id = {region.id: region for region in regions}
        segments = [segment for subpath in subpaths for segment in subpath.segments]
        containers = {
            region.id: [
                other.id for other in regions if other.id != region.id and self._contains(other, region, graph)
            ]
            for region in regions
        }
        nesting_tree = self._build_nesting_tree(by_id, containers)

        classified: dict[int, Region] = {}
        for region in regions:
            nested = [by_id[node.region_id] for node in nesting_tree.values() if region.id in containers[node.region_id]]
            test_point = self._find_test_point(region, nested, graph)
            winding = winding_number(test_point, segments)
            depth = nesting_tree[region.id].depth
            if self.fill_rule is FillRule.EVENODD:
                is_hole = depth % 2 == 1
            else:
                is_hole = winding == 0
            classified[region.id] = replace(
                region,
                test_point=test_point,
                winding_number=winding,
                depth=depth,
                is_hole=is_hole,
            )

        for region_id, region in classified.items():
            if not region.is_hole:
                continue
            filled_containers = [cid for cid in containers[region_id] if not classified[cid].is_hole]
            if filled_containers:
                parent = min(filled_containers, key=lambda cid: classified[cid].bounding_box.area)
                classified[region_id] = replace(region, parent_region_id=parent)

        ordered: list[Region] = []
        orphans: list[Region] = []
        for region in classified.values():
            if region.is_hole:
                if region.parent_region_id is None:
                    orphans.append(region)
                continue
            ordered.append(region)
            ordered.extend(
                hole
                for hole in classified.values()
                if hole.is_hole and hole.parent_region_id == region.id
            )

        return RegionHierarchy(regions=ordered, orphans=orphans, nesting_tree=nesting_tree)

    def _loop_segments(self, region: Region, graph: FragmentGraph) -> list[Segment]:
        return [graph.fragments[fid].as_segment() for fid in region.fragment_ids]

    def _contains(self, outer: Region, inner: Region, graph: FragmentGraph) -> bool:
        """Check whether one region's loop encloses another's.

        Loops never cross, so one point of the inner loop that is not on
        the outer loop decides containment for the whole inner loop.
        """
        if not outer.bounding_box.contains(inner.bounding_box, self.config.point_tolerance):
            return False

        outer_segments = self._loop_segments(outer, graph)
        for sample in self._sample_points(inner, graph):
            if any(is_point_on_segment(sample, segment, self._clearance) for segment in outer_segments):
                continue
            return winding_number(sample, outer_segments) != 0
        return False

    def _sample_points(self, region: Region, graph: FragmentGraph) -> Iterator[Point]:
        for fid in region.fragment_ids:
            segment = graph.fragments[fid].as_segment()
            for t in (0.5, 0.25, 0.75):
                yield point_at(segment, t)

    def _is_interior(self, point: Point, region: Region, nested: Sequence[Region], graph: FragmentGraph) -> bool:
        """Check that a point lies in a region's own face, clear of the path.

        The point must stay off every fragment of the path, including those
        of other or discarded loops, since the winding number is undefined
        on the path itself.
        """
        for fragment in graph.fragments:
            if is_point_on_segment(point, fragment.as_segment(), self._clearance):
                return False
        if winding_number(point, self._loop_segments(region, graph)) == 0:
            return False
        return all(winding_number(point, self._loop_segments(child, graph)) == 0 for child in nested)

    def _find_test_point(self, region: Region, nested: Sequence[Region], graph: FragmentGraph) -> Point:
        """Find a point strictly inside a region and outside its nested regions.

        Tries the bounding-box centroid first, then scans horizontal lines
        across the box and tries the midpoints of the gaps between crossings
        of the path, widest gap first.
        """
        box = region.bounding_box
        centroid = box.center
        if self._is_interior(centroid, region, nested, graph):
            return centroid

        boundary = [fragment.as_segment() for fragment in graph.fragments]

        for fraction in _scanline_fractions():
            y = box.min_y + box.height * fraction
            xs = sorted(
                crossing.position
                for segment in boundary
                for crossing in axis_crossings(segment, 1, y, half_open=False)
            )
            gaps = sorted(
                zip(xs, xs[1:]),
                key=lambda gap: gap[1] - gap[0],
                reverse=True,
            )
            for left, right in gaps:
                if right - left <= 2.0 * self._clearance:
                    break
                candidate = Point((left + right) / 2.0, y)
                if self._is_interior(candidate, region, nested, graph):
                    return candidate

        logger.warning(
            "No interior test point found, using bounding box centre",
            region=region.id,
            fragments=len(region.fragment_ids),
        )
        return centroid

    def _build_nesting_tree(
        self,
        regions: dict[int, Region],
        containers: dict[int, list[int]],
    ) -> dict[int, RegionNode]:
        """Build the nesting tree from each region's set of containers.

        The immediate parent is the smallest enclosing region; the depth is
        the number of enclosing regions.
        """
        nesting_tree: dict[int, RegionNode] = {}
        for region_id, enclosing in containers.items():
            parent = (
                min(enclosing, key=lambda rid: regions[rid].bounding_box.area)
                if enclosing
                else None
            )
            nesting_tree[region_id] = RegionNode(
                region_id=region_id,
                parent=parent,
                children=[],
                depth=len(enclosing),
            )

        for region_id, node in nesting_tree.items():
            if node.parent is not None:
                nesting_tree[node.parent].children.append(region_id)

        return nesting_tree
