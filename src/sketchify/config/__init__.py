"""Configuration management for sketchify.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances and clipping budgets
- ProcessingConfig: Path processing settings
- LoggingConfig: Logging settings
- SketchifySettings: Main application settings
"""

from sketchify.config.settings import (
    GeometryConfig,
    LoggingConfig,
    ProcessingConfig,
    SketchifySettings,
    get_default_settings,
)

__all__ = [
    "GeometryConfig",
    "LoggingConfig",
    "ProcessingConfig",
    "SketchifySettings",
    "get_default_settings",
]
