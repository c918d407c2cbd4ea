"""JSON writer for classified paths.

This module provides the RegionWriter class, which serializes batch
outcomes (classified regions with their fragment geometry, or the error
that stopped a path) for a downstream sketch generator.
"""

import json
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from sketchify import __version__
from sketchify.domain import PathOutcome


def outcomes_to_document(outcomes: Sequence[PathOutcome]) -> dict[str, Any]:
    """Build the JSON document for a batch of outcomes.

    Args:
        outcomes: Processed paths, successful or not

    Returns:
        Dictionary with generator metadata and one entry per path
    """
    return {
        "generator": f"sketchify {__version__}",
        "created": datetime.now().isoformat(timespec="seconds"),
        "paths": [outcome.to_dict() for outcome in outcomes],
    }


class RegionWriter:
    """Writes classified paths to a JSON file.

    Example:
        writer = RegionWriter(Path("regions.json"))
        writer.write(outcomes)
    """

    def __init__(self, output_path: Path, indent: int | None = 2) -> None:
        """Initialize the writer.

        Args:
            output_path: Destination file
            indent: JSON indentation (None for compact output)
        """
        self._output_path = output_path
        self._indent = indent

    @property
    def output_path(self) -> Path:
        return self._output_path

    def write(self, outcomes: Sequence[PathOutcome]) -> Path:
        """Serialize outcomes and write them to disk.

        Creates missing parent directories.

        Returns:
            Path of the written file
        """
        self._output_path.parent.mkdir(parents=True, exist_ok=True)
        document = outcomes_to_document(outcomes)
        self._output_path.write_text(
            json.dumps(document, indent=self._indent) + "\n",
            encoding="utf-8",
        )
        return self._output_path
