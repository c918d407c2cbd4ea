"""Domain models for sketchify.

This module contains the value types shared by every stage of the path
pipeline. All models are designed to be:

- Immutable where possible (using frozen dataclasses)
- Serializable to plain dictionaries for JSON export
- Independent of any rendering or markup library

Key classes:
- Point, BoundingBox, FatLine: Geometric primitives
- Line, CubicBezier, Subpath: Canonical segments after normalization
- Intersection, PathIntersection: Crossings between segments
- PathCommand, FillRule: Raw path input
- Fragment, Region, ClassifiedPath: Resolved planar arrangement
"""

from sketchify.domain.geometry import BoundingBox, FatLine, Point
from sketchify.domain.path import (
    CommandType,
    FillRule,
    PathCommand,
    PathInput,
    PathOutcome,
)
from sketchify.domain.region import ClassifiedPath, Connection, Fragment, Region
from sketchify.domain.segment import (
    CubicBezier,
    Intersection,
    Line,
    PathIntersection,
    Segment,
    SegmentKind,
    Subpath,
)

__all__: list[str] = [
    # Enums
    "CommandType",
    "FillRule",
    "SegmentKind",
    # Geometry
    "BoundingBox",
    "FatLine",
    "Point",
    # Segments
    "CubicBezier",
    "Intersection",
    "Line",
    "PathIntersection",
    "Segment",
    "Subpath",
    # Path input/output
    "PathCommand",
    "PathInput",
    "PathOutcome",
    # Arrangement
    "ClassifiedPath",
    "Connection",
    "Fragment",
    "Region",
]
