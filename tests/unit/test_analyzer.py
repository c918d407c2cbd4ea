"""Unit tests for region classification.

Tests cover:
- Nesting tree construction from region containment
- Test points inside each region's own face, off every fragment of the path
- Winding numbers and the nonzero and even-odd fill rules
- Parent assignment and output ordering
- Orphan holes
"""

from sketchify.core.analyzer import RegionAnalyzer, RegionHierarchy
from sketchify.core.geometry import winding_number
from sketchify.core.intersections import find_path_intersections
from sketchify.core.normalizer import normalize_path
from sketchify.core.regions import FragmentGraph, build_regions
from sketchify.core.splitter import close_subpaths, split_path
from sketchify.domain import FillRule
from sketchify.io import parse_path_data

SQUARE = "M0,0 L100,0 L100,100 L0,100 Z"
SAME_WAY_INNER = "M25,25 L75,25 L75,75 L25,75 Z"
OPPOSITE_INNER = "M25,25 L25,75 L75,75 L75,25 Z"


def analyze(path_data: str, fill_rule: FillRule = FillRule.NONZERO, use_subpaths: bool = True) -> RegionHierarchy:
    subpaths = close_subpaths(normalize_path(parse_path_data(path_data)))
    fragments = split_path(subpaths, find_path_intersections(subpaths))
    graph = FragmentGraph.build(fragments)
    regions = build_regions(graph)
    return RegionAnalyzer(fill_rule).analyze(regions, graph, subpaths if use_subpaths else [])


class TestNesting:
    """Tests for the nesting tree."""

    def test_single_region(self):
        """A lone region is a root at depth zero."""
        hierarchy = analyze(SQUARE)
        node = hierarchy.nesting_tree[0]
        assert node.parent is None
        assert node.depth == 0
        assert node.children == []

    def test_nested_squares(self):
        """The inner square is a child of the outer one."""
        hierarchy = analyze(f"{SQUARE} {SAME_WAY_INNER}")
        assert hierarchy.nesting_tree[0].children == [1]
        assert hierarchy.nesting_tree[1].parent == 0
        assert hierarchy.nesting_tree[1].depth == 1

    def test_three_levels(self):
        """Depth counts every enclosing region."""
        hierarchy = analyze(f"{SQUARE} {OPPOSITE_INNER} M40,40 L60,40 L60,60 L40,60 Z")
        assert [hierarchy.nesting_tree[i].depth for i in range(3)] == [0, 1, 2]
        assert hierarchy.nesting_tree[2].parent == 1

    def test_side_by_side(self):
        """Disjoint regions do not nest."""
        hierarchy = analyze("M0,0 L10,0 L10,10 L0,10 Z M20,0 L30,0 L30,10 L20,10 Z")
        assert all(node.depth == 0 for node in hierarchy.nesting_tree.values())


class TestClassification:
    """Tests for fill rules, test points and parents."""

    def test_square_filled(self):
        """A counter-clockwise square winds once and is filled."""
        hierarchy = analyze(SQUARE)
        (region,) = hierarchy.regions
        assert region.winding_number == 1
        assert not region.is_hole
        assert region.parent_region_id is None
        assert region.test_point is not None
        assert not hierarchy.has_holes()

    def test_opposite_inner_is_hole_under_nonzero(self):
        """A reversed inner loop cancels the winding."""
        hierarchy = analyze(f"{SQUARE} {OPPOSITE_INNER}")
        outer, hole = hierarchy.regions
        assert hole.is_hole
        assert hole.winding_number == 0
        assert hole.parent_region_id == outer.id
        assert not outer.is_hole
        assert hierarchy.has_holes()

    def test_same_way_inner_filled_under_nonzero(self):
        """A same-direction inner loop winds twice and stays filled."""
        hierarchy = analyze(f"{SQUARE} {SAME_WAY_INNER}")
        assert [region.winding_number for region in hierarchy.regions] == [1, 2]
        assert not any(region.is_hole for region in hierarchy.regions)

    def test_same_way_inner_is_hole_under_evenodd(self):
        """Even-odd ignores direction: odd depth is a hole."""
        hierarchy = analyze(f"{SQUARE} {SAME_WAY_INNER}", FillRule.EVENODD)
        outer, hole = hierarchy.regions
        assert hole.is_hole
        assert hole.depth == 1
        assert hole.parent_region_id == outer.id

    def test_evenodd_alternates(self):
        """Three nested squares: filled, hole, filled."""
        hierarchy = analyze(
            f"{SQUARE} {SAME_WAY_INNER} M40,40 L60,40 L60,60 L40,60 Z",
            FillRule.EVENODD,
        )
        by_id = {region.id: region for region in hierarchy.regions}
        assert [by_id[i].is_hole for i in range(3)] == [False, True, False]
        assert by_id[1].parent_region_id == 0

    def test_test_point_avoids_nested_region(self):
        """The outer region's test point lies outside the inner square."""
        hierarchy = analyze(f"{SQUARE} {OPPOSITE_INNER}")
        outer = hierarchy.regions[0]
        point = outer.test_point
        assert point is not None
        assert 0.0 < point.x < 100.0 and 0.0 < point.y < 100.0
        assert not (25.0 <= point.x <= 75.0 and 25.0 <= point.y <= 75.0)

    def test_test_point_avoids_discarded_edges(self):
        """Test points stay off edges that belong to no region."""
        hierarchy = analyze("M0,0 L10,0 L10,10 L0,10 Z M10,2 L20,2 L20,8 L10,8 Z")
        (region,) = hierarchy.regions
        point = region.test_point
        assert point is not None
        assert abs(point.x - 10.0) > 1e-3
        assert region.winding_number == 1
        assert not region.is_hole

    def test_winding_matches_test_point(self):
        """Recorded winding is the path's winding at the test point."""
        subpaths = close_subpaths(normalize_path(parse_path_data(f"{SQUARE} {SAME_WAY_INNER}")))
        segments = [segment for subpath in subpaths for segment in subpath.segments]
        for region in analyze(f"{SQUARE} {SAME_WAY_INNER}").regions:
            assert region.test_point is not None
            assert winding_number(region.test_point, segments) == region.winding_number

    def test_holes_follow_their_parent(self):
        """Output lists each filled region followed by its holes."""
        path = (
            "M0,0 L100,0 L100,100 L0,100 Z M10,10 L10,40 L40,40 L40,10 Z "
            "M200,0 L300,0 L300,100 L200,100 Z M210,10 L210,40 L240,40 L240,10 Z"
        )
        hierarchy = analyze(path)
        kinds = [(region.is_hole, region.parent_region_id) for region in hierarchy.regions]
        first, second = hierarchy.regions[0].id, hierarchy.regions[2].id
        assert kinds == [(False, None), (True, first), (False, None), (True, second)]


class TestOrphans:
    """Tests for holes without a filled container."""

    def test_unenclosed_holes_are_orphans(self):
        """Zero-winding regions with no filled container are set aside."""
        hierarchy = analyze(SQUARE, use_subpaths=False)
        assert hierarchy.regions == []
        assert len(hierarchy.orphans) == 1
        assert hierarchy.orphans[0].is_hole

    def test_empty_input(self):
        """No regions classify to nothing."""
        hierarchy = RegionAnalyzer().analyze([], FragmentGraph([], {}, {}), [])
        assert hierarchy.regions == []
        assert hierarchy.orphans == []
        assert hierarchy.nesting_tree == {}
