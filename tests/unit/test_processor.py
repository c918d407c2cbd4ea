"""Tests for path processing orchestration.

Tests cover:
- Single-path processing through every pipeline stage
- Geometry transforms
- Batch processing with per-path failure isolation and fail-fast
- Processing statistics and log file output
"""

import pytest

from sketchify.config import LoggingConfig, ProcessingConfig, SketchifySettings
from sketchify.core.processor import PathProcessor, process_path_data, process_path_input
from sketchify.domain import CommandType, FillRule, PathCommand, PathInput, Point
from sketchify.exceptions import MalformedPathError, UnsupportedGeometryError
from sketchify.io import parse_path_data

SQUARE = "M0,0 L10,0 L10,10 L0,10 Z"
SQUARE_WITH_HOLE = "M0,0 L100,0 L100,100 L0,100 Z M25,25 L25,75 L75,75 L75,25 Z"


@pytest.fixture
def processor() -> PathProcessor:
    """Create a processor with default settings."""
    return PathProcessor(SketchifySettings(), quiet=True)


@pytest.fixture
def batch() -> list[PathInput]:
    """Create a batch with one failing path in the middle."""
    return [
        PathInput(name="square", path_data=SQUARE),
        PathInput(name="arc", path_data="M0,0 A5,5 0 0 1 10,10 Z"),
        PathInput(name="ring", path_data=SQUARE_WITH_HOLE),
    ]


class TestPathProcessor:
    """Tests for PathProcessor.process."""

    def test_square(self, processor):
        """A square becomes one filled region of four line fragments."""
        classified = processor.process(parse_path_data(SQUARE))
        assert len(classified.regions) == 1
        assert len(classified.fragments) == 4
        assert classified.intersection_count == 0
        region = classified.regions[0]
        assert not region.is_hole
        assert region.winding_number == 1
        assert len(classified.fragments_of(region)) == 4

    def test_fill_rule_defaults_to_settings(self):
        """Without an explicit rule the configured default is used."""
        settings = SketchifySettings(processing=ProcessingConfig(default_fill_rule=FillRule.EVENODD))
        classified = PathProcessor(settings, quiet=True).process(parse_path_data(SQUARE))
        assert classified.fill_rule is FillRule.EVENODD

    def test_hole(self, processor):
        """A reversed inner square is a hole of the outer one."""
        classified = processor.process(parse_path_data(SQUARE_WITH_HOLE), FillRule.NONZERO)
        assert len(classified.filled_regions()) == 1
        (hole,) = classified.holes()
        assert hole.parent_region_id == classified.filled_regions()[0].id

    def test_open_path_closed(self, processor):
        """An open path is filled as if closed."""
        classified = processor.process(parse_path_data("M0,0 L10,0 L10,10"))
        assert len(classified.regions) == 1
        assert len(classified.fragments) == 3

    def test_flat_path_has_no_regions(self, processor):
        """A path enclosing no area yields no regions and no error."""
        classified = processor.process(parse_path_data("M0,0 L10,0"))
        assert classified.regions == []

    def test_scaling_transform(self, processor):
        """A transform is applied before any geometry is resolved."""
        classified = processor.process(
            parse_path_data(SQUARE),
            transform=lambda point: Point(point.x * 2.0, point.y * 2.0),
        )
        box = classified.regions[0].bounding_box
        assert box.max_x == pytest.approx(20.0)
        assert box.max_y == pytest.approx(20.0)

    def test_mirroring_transform(self, processor):
        """Mirroring reverses the winding sign but not the fill."""
        classified = processor.process(
            parse_path_data(SQUARE),
            transform=lambda point: Point(point.x, -point.y),
        )
        region = classified.regions[0]
        assert region.winding_number == -1
        assert not region.is_hole

    def test_arc_raises(self, processor):
        """Arcs in raw commands are rejected."""
        commands = [
            PathCommand(CommandType.MOVE, (0.0, 0.0)),
            PathCommand(CommandType.ARC, (5.0, 5.0, 0.0, 0.0, 1.0, 10.0, 10.0)),
        ]
        with pytest.raises(UnsupportedGeometryError):
            processor.process(commands)

    def test_empty_raises(self, processor):
        """A path with nothing to draw is malformed."""
        with pytest.raises(MalformedPathError):
            processor.process([])


class TestProcessPathInput:
    """Tests for process_path_input."""

    def test_success(self, processor):
        """Path data is parsed and processed."""
        outcome = process_path_input(processor, PathInput(name="square", path_data=SQUARE))
        assert outcome.succeeded
        assert outcome.classified is not None
        assert outcome.error is None
        assert outcome.duration_ms >= 0.0

    def test_commands_take_precedence(self, processor):
        """Given commands are processed instead of path data."""
        path_input = PathInput(
            name="square",
            commands=tuple(parse_path_data(SQUARE)),
            path_data="not path data",
        )
        outcome = process_path_input(processor, path_input)
        assert outcome.succeeded

    def test_parse_failure_captured(self, processor):
        """A parse error becomes a failed outcome."""
        outcome = process_path_input(processor, PathInput(name="bad", path_data="M0,0 L10"))
        assert not outcome.succeeded
        assert outcome.classified is None
        assert outcome.error_type == "MalformedPathError"

    def test_fill_rule_passed_through(self, processor):
        """The input's fill rule is used."""
        path_input = PathInput(name="ring", path_data=SQUARE_WITH_HOLE, fill_rule=FillRule.EVENODD)
        outcome = process_path_input(processor, path_input)
        assert outcome.classified is not None
        assert outcome.classified.fill_rule is FillRule.EVENODD


class TestProcessBatch:
    """Tests for PathProcessor.process_batch."""

    def test_failure_isolated(self, processor, batch):
        """One failing path does not stop the others."""
        outcomes = processor.process_batch(batch)
        assert [outcome.name for outcome in outcomes] == ["square", "arc", "ring"]
        assert [outcome.succeeded for outcome in outcomes] == [True, False, True]
        assert outcomes[1].error_type == "UnsupportedGeometryError"

    def test_fail_fast(self, batch):
        """With fail_fast the batch stops at the first failure."""
        settings = SketchifySettings(processing=ProcessingConfig(fail_fast=True))
        outcomes = PathProcessor(settings, quiet=True).process_batch(batch)
        assert [outcome.name for outcome in outcomes] == ["square", "arc"]

    def test_stats(self, processor, batch):
        """Statistics count processed paths, errors, regions and holes."""
        processor.process_batch(batch)
        stats = processor.stats
        assert stats.processed_count == 2
        assert stats.error_count == 1
        assert stats.region_count == 3
        assert stats.hole_count == 1
        assert stats.errors[0][0] == "arc"
        assert len(stats.path_times_ms) == 2
        assert stats.avg_path_time_ms is not None
        assert stats.duration_seconds >= 0.0

    def test_empty_batch(self, processor):
        """An empty batch yields no outcomes."""
        assert processor.process_batch([]) == []


class TestProcessPathData:
    """Tests for the one-call helper."""

    def test_square(self):
        """Path data converts straight to a classified path."""
        classified = process_path_data(SQUARE)
        assert len(classified.regions) == 1

    def test_evenodd(self):
        """The fill rule argument is honoured."""
        classified = process_path_data(
            "M0,0 L100,0 L100,100 L0,100 Z M25,25 L75,25 L75,75 L25,75 Z",
            FillRule.EVENODD,
        )
        assert len(classified.holes()) == 1


class TestLogging:
    """Tests for log file output."""

    def test_log_file_written(self, tmp_path):
        """Completed paths are logged to the configured file."""
        log_file = tmp_path / "sketchify.log"
        settings = SketchifySettings(logging=LoggingConfig(log_file=log_file))
        processor = PathProcessor(settings, quiet=True)
        processor.process_batch([PathInput(name="square", path_data=SQUARE)])
        content = log_file.read_text(encoding="utf-8")
        assert "Path processed" in content
        assert "square" in content

    def test_errors_logged(self, tmp_path):
        """Failed paths are logged with their error type."""
        log_file = tmp_path / "sketchify.log"
        settings = SketchifySettings(logging=LoggingConfig(log_file=log_file))
        PathProcessor(settings, quiet=True).process_batch([PathInput(name="bad", path_data="M0,0 A1,1 0 0 1 2,2")])
        content = log_file.read_text(encoding="utf-8")
        assert "Path processing failed" in content
        assert "UnsupportedGeometryError" in content
