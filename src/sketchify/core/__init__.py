"""Core processing algorithms for sketchify.

This module contains the geometric pipeline:

- Path normalization (relative/smooth/quadratic commands to lines and cubics)
- Segment intersection (closed-form for lines, Bezier clipping for curves)
- Splitting segments into fragments at intersection points
- Region tracing over the fragment graph
- Region classification (winding, nesting depth, holes)

All functions are pure; PathProcessor is the only stateful piece and owns
logging and statistics.

Key functions:
- normalize_path: Convert commands to subpaths of lines and cubics
- find_path_intersections: Find all crossings between path segments
- split_path: Cut segments into fragments
- build_regions: Trace closed regions over the fragment graph
- winding_number: Winding of the path around a point

Key classes:
- FragmentGraph: Junction connectivity between fragments
- RegionAnalyzer: Classifies traced regions as filled or holes
- PathProcessor: Runs the full pipeline for one path or a batch
"""

from sketchify.core.analyzer import RegionAnalyzer, RegionHierarchy, RegionNode
from sketchify.core.geometry import (
    axis_crossings,
    is_point_on_segment,
    point_at,
    segment_bounds,
    tangent_at,
    winding_number,
)
from sketchify.core.intersections import (
    cubic_self_intersections,
    find_path_intersections,
    intersect_segments,
    merge_intersections,
)
from sketchify.core.normalizer import normalize_path
from sketchify.core.processor import (
    PathProcessor,
    process_path_data,
    process_path_input,
)
from sketchify.core.regions import FragmentGraph, PointIndex, build_regions
from sketchify.core.roots import solve_cubic, solve_quadratic
from sketchify.core.splitter import close_subpaths, split_path

__all__ = [
    # Graph classes
    "FragmentGraph",
    # Processor classes
    "PathProcessor",
    "PointIndex",
    # Analyzer classes
    "RegionAnalyzer",
    "RegionHierarchy",
    "RegionNode",
    # Geometry functions
    "axis_crossings",
    "build_regions",
    "close_subpaths",
    "cubic_self_intersections",
    "find_path_intersections",
    "intersect_segments",
    "is_point_on_segment",
    "merge_intersections",
    "normalize_path",
    "point_at",
    "process_path_data",
    "process_path_input",
    "segment_bounds",
    "solve_cubic",
    "solve_quadratic",
    "split_path",
    "tangent_at",
    "winding_number",
]
