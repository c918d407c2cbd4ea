"""Fragment graph and region building.

Rebuilds closed loops from the fragments of a path. Fragments are joined
end-to-start where their endpoints coincide; at every vertex the candidate
successors are sorted by the signed turning angle between tangents.

At a junction (a vertex where more than one fragment starts) the walk
leaves the fragment's own subpath and takes another strand first. This
splits every crossing into two non-crossing corners, so the loops found
never cross each other: they nest or sit side by side, and the path's
winding number is constant inside each loop minus the loops nested in it.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from sketchify.config import GeometryConfig
from sketchify.core.geometry import (
    sample_loop,
    segment_bounds,
    signed_angle,
    signed_area,
    tangent_at,
)
from sketchify.domain import BoundingBox, Connection, Fragment, Point, Region

logger = structlog.get_logger(__name__)


class PointIndex:
    """Spatial hash of points, quantized to the matching tolerance.

    A point within tolerance of a query always falls in the query's cell or
    one of its eight neighbours.
    """

    def __init__(self, tolerance: float) -> None:
        self._tolerance = tolerance
        self._cell = max(tolerance, 1e-12)
        self._cells: dict[tuple[int, int], list[tuple[Point, int]]] = {}

    def _key(self, point: Point) -> tuple[int, int]:
        return (math.floor(point.x / self._cell), math.floor(point.y / self._cell))

    def add(self, point: Point, item: int) -> None:
        self._cells.setdefault(self._key(point), []).append((point, item))

    def query(self, point: Point) -> list[int]:
        """Items whose point lies within tolerance, in insertion order."""
        kx, ky = self._key(point)
        matches: list[int] = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for candidate, item in self._cells.get((kx + dx, ky + dy), []):
                    if candidate.distance_to(point) <= self._tolerance:
                        matches.append(item)
        return sorted(matches)


@dataclass
class FragmentGraph:
    """Fragments of one path and how they connect.

    Attributes:
        fragments: Fragment arena, indexed by id
        connections: For each fragment, the fragments starting at its end,
            sorted by signed turning angle (rightmost turn first)
        continuations: For each fragment, the next fragment of its own
            subpath
    """

    fragments: list[Fragment]
    connections: dict[int, tuple[Connection, ...]]
    continuations: dict[int, int]

    @classmethod
    def build(cls, fragments: Sequence[Fragment], config: GeometryConfig | None = None) -> "FragmentGraph":
        """Index fragment starts and compute angle-sorted connections."""
        config = config or GeometryConfig()
        index = PointIndex(config.point_tolerance)
        for fragment in fragments:
            index.add(fragment.start, fragment.id)

        continuations: dict[int, int] = {}
        subpath_first: dict[int, int] = {}
        for fragment in fragments:
            subpath_first.setdefault(fragment.subpath_index, fragment.id)
        for position, fragment in enumerate(fragments):
            following = fragments[position + 1] if position + 1 < len(fragments) else None
            if following is not None and following.subpath_index == fragment.subpath_index:
                continuations[fragment.id] = following.id
            else:
                continuations[fragment.id] = subpath_first[fragment.subpath_index]

        connections: dict[int, tuple[Connection, ...]] = {}
        for fragment in fragments:
            incoming = tangent_at(fragment.as_segment(), 1.0)
            candidates = [
                Connection(
                    fragment_id=candidate_id,
                    angle=signed_angle(incoming, tangent_at(fragments[candidate_id].as_segment(), 0.0)),
                )
                for candidate_id in index.query(fragment.end)
            ]
            candidates.sort(key=lambda connection: (connection.angle, connection.fragment_id))
            connections[fragment.id] = tuple(candidates)

        return cls(list(fragments), connections, continuations)

    def successors(self, fragment_id: int) -> list[int]:
        """Candidate next fragments in walk order.

        At a junction the fragment's own continuation comes last.
        """
        candidates = [connection.fragment_id for connection in self.connections[fragment_id]]
        if len(candidates) <= 1:
            return candidates
        continuation = self.continuations.get(fragment_id)
        others = [candidate for candidate in candidates if candidate != continuation]
        if continuation in candidates:
            others.append(continuation)
        return others

    def next_fragment(self, fragment_id: int, seed: int, visited: set[int]) -> int | None:
        """First candidate that closes the loop or has not been walked yet."""
        for candidate in self.successors(fragment_id):
            if candidate == seed or candidate not in visited:
                return candidate
        return None

    def bounds_of(self, fragment_ids: Sequence[int]) -> BoundingBox:
        """Exact bounds of a set of fragments."""
        boxes = [segment_bounds(self.fragments[fid].as_segment()) for fid in fragment_ids]
        result = boxes[0]
        for box in boxes[1:]:
            result = result.union(box)
        return result


def _is_degenerate(graph: FragmentGraph, loop: Sequence[int], bounds: BoundingBox, config: GeometryConfig) -> bool:
    """Loops that enclose no area are degenerate.

    Straight loops of one or two fragments are degenerate outright. Any
    other loop must enclose area; a polyline that runs back over itself
    does not.
    """
    fragments = [graph.fragments[fid] for fid in loop]
    if len(loop) < 3 and not any(fragment.is_curve for fragment in fragments):
        return True
    area = signed_area(sample_loop(fragment.as_segment() for fragment in fragments))
    return abs(area) <= config.point_tolerance * max(bounds.width, bounds.height, 1.0)


def build_regions(graph: FragmentGraph, config: GeometryConfig | None = None) -> list[Region]:
    """Walk the fragment graph into closed loops.

    Each fragment not yet part of a loop seeds a walk that follows the first
    unwalked candidate at every vertex until it returns to the seed. Walks
    that dead-end, and degenerate loops, are discarded.

    Args:
        graph: Connected fragments of one path
        config: Tolerances (defaults if None)

    Returns:
        Unclassified regions, numbered in discovery order
    """
    config = config or GeometryConfig()
    visited: set[int] = set()
    regions: list[Region] = []

    for seed in range(len(graph.fragments)):
        if seed in visited:
            continue
        loop = [seed]
        visited.add(seed)
        current = seed
        closed = False
        while True:
            following = graph.next_fragment(current, seed, visited)
            if following is None:
                break
            if following == seed:
                closed = True
                break
            loop.append(following)
            visited.add(following)
            current = following

        if not closed:
            logger.debug("Open fragment chain discarded", fragments=loop)
            continue
        bounds = graph.bounds_of(loop)
        if _is_degenerate(graph, loop, bounds, config):
            logger.debug("Degenerate loop discarded", fragments=loop)
            continue
        regions.append(Region(id=len(regions), fragment_ids=tuple(loop), bounding_box=bounds))

    return regions
