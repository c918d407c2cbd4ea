"""Path processing orchestration.

This module runs the full pipeline for one path, or for a batch of paths:

1. Normalize commands into line and cubic segments per subpath
2. Close every subpath (renderers fill open subpaths as if closed)
3. Find all segment intersections
4. Split segments into fragments at the intersections
5. Walk the fragment graph into closed regions
6. Classify regions as filled or holes and assign parents

Key components:
- process_path_input: Processes one queued path, capturing failures
- PathProcessor: Main orchestrator with logging and statistics
"""

import time
import traceback
from collections.abc import Iterable, Sequence

from sketchify.config import SketchifySettings, get_default_settings
from sketchify.core.analyzer import RegionAnalyzer
from sketchify.core.intersections import find_path_intersections
from sketchify.core.normalizer import Transform, normalize_path
from sketchify.core.regions import FragmentGraph, build_regions
from sketchify.core.splitter import close_subpaths, split_path
from sketchify.domain import ClassifiedPath, FillRule, PathCommand, PathInput, PathOutcome
from sketchify.exceptions import NumericDegeneracyError
from sketchify.io import parse_path_data
from sketchify.utils import ProcessingLogger, ProcessingStats, configure_logging


class PathProcessor:
    """Orchestrates path-to-region conversion.

    Example:
        processor = PathProcessor(SketchifySettings())
        classified = processor.process(parse_path_data("M0,0 L10,0 L10,10 Z"))
        for region in classified.regions:
            print(region.id, region.is_hole)
    """

    def __init__(self, config: SketchifySettings | None = None, quiet: bool = False) -> None:
        """Initialize path processor with configuration.

        Args:
            config: Sketchify settings (defaults if None)
            quiet: Suppress console logging except errors
        """
        self.config = config or get_default_settings()
        self.logger = configure_logging(
            log_file=self.config.logging.log_file,
            console_level=self.config.logging.log_level,
            file_level=self.config.logging.file_log_level,
            quiet=quiet,
        )
        self.processing_logger = ProcessingLogger(self.logger)

    @property
    def stats(self) -> ProcessingStats:
        return self.processing_logger.stats

    def process(
        self,
        commands: Sequence[PathCommand],
        fill_rule: FillRule | None = None,
        transform: Transform | None = None,
        name: str = "path",
    ) -> ClassifiedPath:
        """Convert one path into classified regions.

        Args:
            commands: Raw path commands
            fill_rule: Fill rule (settings default if None)
            transform: Optional point mapping applied to all geometry
            name: Path name used in log events

        Returns:
            ClassifiedPath with ordered regions, fragments and orphans

        Raises:
            UnsupportedGeometryError: If the path contains an arc
            MalformedPathError: If the path has nothing to draw
            NumericDegeneracyError: If all geometry collapsed to nothing
        """
        start_time = time.perf_counter()
        fill_rule = fill_rule or self.config.processing.default_fill_rule
        geometry = self.config.geometry
        log = self.processing_logger

        log.log_path_start(name, len(commands))

        subpaths = close_subpaths(normalize_path(commands, transform), geometry.point_tolerance)
        log.log_stage(
            name,
            "normalize",
            subpaths=len(subpaths),
            segments=sum(len(subpath.segments) for subpath in subpaths),
        )

        intersections = find_path_intersections(subpaths, geometry)
        log.log_stage(name, "intersect", intersections=len(intersections))

        fragments = split_path(subpaths, intersections, geometry)
        if not fragments:
            raise NumericDegeneracyError("path produced no fragments")
        log.log_stage(name, "split", fragments=len(fragments))

        graph = FragmentGraph.build(fragments, geometry)
        regions = build_regions(graph, geometry)
        log.log_stage(name, "regions", regions=len(regions))

        hierarchy = RegionAnalyzer(fill_rule, geometry).analyze(regions, graph, subpaths)
        for orphan in hierarchy.orphans:
            log.log_orphan_hole(name, orphan.id, orphan.winding_number)

        classified = ClassifiedPath(
            fill_rule=fill_rule,
            subpaths=subpaths,
            fragments=fragments,
            regions=hierarchy.regions,
            orphans=hierarchy.orphans,
            intersection_count=len(intersections),
        )

        log.log_path_complete(
            name,
            regions=len(classified.regions),
            holes=len(classified.holes()),
            intersections=len(intersections),
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )
        return classified

    def process_batch(self, inputs: Iterable[PathInput]) -> list[PathOutcome]:
        """Convert many paths, isolating failures per path.

        A failed path is recorded with its error and the batch moves on,
        unless ``processing.fail_fast`` is set.

        Args:
            inputs: Paths to convert

        Returns:
            One outcome per processed path, in input order
        """
        stats = self.processing_logger.stats
        stats.start_time = time.time()
        outcomes: list[PathOutcome] = []

        for path_input in inputs:
            outcome = process_path_input(self, path_input)
            outcomes.append(outcome)
            if not outcome.succeeded and self.config.processing.fail_fast:
                break

        stats.end_time = time.time()
        return outcomes


def process_path_input(processor: PathProcessor, path_input: PathInput) -> PathOutcome:
    """Process a single queued path, capturing any failure.

    Args:
        processor: Processor to run the pipeline with
        path_input: Named path and its fill rule

    Returns:
        PathOutcome holding either the classified path or the error
    """
    start_time = time.perf_counter()
    try:
        commands = path_input.commands or tuple(parse_path_data(path_input.path_data or ""))
        classified = processor.process(
            commands,
            fill_rule=path_input.fill_rule,
            name=path_input.name,
        )
    except Exception as e:
        processor.processing_logger.log_path_error(path_input.name, e, traceback.format_exc())
        return PathOutcome(
            name=path_input.name,
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=(time.perf_counter() - start_time) * 1000,
        )

    return PathOutcome(
        name=path_input.name,
        classified=classified,
        duration_ms=(time.perf_counter() - start_time) * 1000,
    )


def process_path_data(
    path_data: str,
    fill_rule: FillRule = FillRule.NONZERO,
    settings: SketchifySettings | None = None,
) -> ClassifiedPath:
    """Parse SVG path data and convert it in one call."""
    return PathProcessor(settings).process(parse_path_data(path_data), fill_rule)
