"""Logging utilities for Sketchify."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class ProcessingStats:
    """Statistics from processing run."""

    processed_count: int = 0
    error_count: int = 0
    region_count: int = 0
    hole_count: int = 0
    orphan_count: int = 0
    intersection_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    path_times_ms: list[float] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate processing duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def avg_path_time_ms(self) -> float | None:
        """Average per-path processing time."""
        if not self.path_times_ms:
            return None
        return sum(self.path_times_ms) / len(self.path_times_ms)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Replace handlers from a previous configure call
    for handler in list(root_logger.handlers):
        if getattr(handler, "_sketchify", False):
            root_logger.removeHandler(handler)
            handler.close()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        file_handler._sketchify = True  # type: ignore[attr-defined]
        root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.ERROR if quiet else getattr(logging, console_level.upper()))
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler._sketchify = True  # type: ignore[attr-defined]
    root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("sketchify")
    logger.debug(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class ProcessingLogger:
    """Logger for tracking processing progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = ProcessingStats()

    def log_path_start(self, path_name: str, command_count: int) -> None:
        """Log start of path processing."""
        self._logger.debug("Processing path", path=path_name, commands=command_count)

    def log_stage(self, path_name: str, stage: str, **counts: int) -> None:
        """Log completion of one pipeline stage."""
        self._logger.debug("Stage complete", path=path_name, stage=stage, **counts)

    def log_path_complete(
        self,
        path_name: str,
        regions: int,
        holes: int,
        intersections: int,
        duration_ms: float,
    ) -> None:
        """Log successful path processing."""
        self._logger.info(
            "Path processed",
            path=path_name,
            regions=regions,
            holes=holes,
            intersections=intersections,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.processed_count += 1
        self._stats.region_count += regions
        self._stats.hole_count += holes
        self._stats.intersection_count += intersections
        self._stats.path_times_ms.append(duration_ms)

    def log_path_error(
        self,
        path_name: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log path processing error."""
        self._logger.error(
            "Path processing failed",
            path=path_name,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.error_count += 1
        self._stats.errors.append((path_name, str(error)))

    def log_orphan_hole(self, path_name: str, region_id: int, winding: int) -> None:
        """Log a hole that has no enclosing filled region."""
        self._logger.warning(
            "Orphan hole excluded",
            path=path_name,
            region=region_id,
            winding=winding,
        )
        self._stats.orphan_count += 1

    @property
    def stats(self) -> ProcessingStats:
        """Get current processing statistics."""
        return self._stats
