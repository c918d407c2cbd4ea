"""Configuration settings for Sketchify."""

from pathlib import Path

from pydantic import BaseModel, Field

from sketchify.domain import FillRule


class GeometryConfig(BaseModel):
    """Tolerances and budgets for the geometric pipeline.

    Tolerances are absolute, in path units. The defaults suit coordinates in
    the usual SVG range (roughly 1e-2 to 1e4).
    """

    point_tolerance: float = Field(
        default=1e-6,
        gt=0.0,
        le=1.0,
        description="Distance below which two points are considered coincident",
    )
    parameter_tolerance: float = Field(
        default=1e-6,
        gt=0.0,
        le=0.01,
        description="Parameter distance below which two split positions are merged",
    )
    clip_tolerance: float = Field(
        default=1e-9,
        gt=0.0,
        le=1e-3,
        description="Parameter width at which Bezier clipping reports an intersection",
    )
    merge_tolerance: float = Field(
        default=1e-5,
        gt=0.0,
        le=0.1,
        description="Point and parameter tolerance for merging duplicate curve intersections",
    )
    max_clip_depth: int = Field(
        default=32,
        ge=4,
        le=64,
        description="Maximum bisection depth for curve/curve clipping",
    )
    max_clip_iterations: int = Field(
        default=24,
        ge=4,
        le=200,
        description="Maximum clipping iterations before a subproblem is bisected",
    )
    max_clip_tasks: int = Field(
        default=4096,
        ge=16,
        le=1_000_000,
        description="Total clipping subproblems allowed per curve pair",
    )


class ProcessingConfig(BaseModel):
    """Configuration for path processing."""

    default_fill_rule: FillRule = Field(
        default=FillRule.NONZERO,
        description="Fill rule used when an input does not name one",
    )
    fail_fast: bool = Field(
        default=False,
        description="Stop a batch at the first failed path",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class SketchifySettings(BaseModel):
    """Main application settings."""

    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> SketchifySettings:
    """Get default application settings."""
    return SketchifySettings()
