"""Path file reader.

This module provides the PathFileReader class for loading batches of paths
from disk. Two formats are understood:

- JSON (``.json``): a list of ``{"name": ..., "d": ..., "fill_rule": ...}``
  objects, or an object with such a list under ``"paths"``
- Text (anything else): one path per line; blank lines and lines starting
  with ``#`` are ignored. A line may be ``name<TAB>fill_rule<TAB>d`` or
  ``name<TAB>d``, or just the path data.
"""

import json
from pathlib import Path
from typing import Any

from sketchify.domain import FillRule, PathInput
from sketchify.exceptions import ConfigurationError


def parse_fill_rule(value: str) -> FillRule:
    """Convert a fill rule name to FillRule.

    Raises:
        ConfigurationError: If the name is not a known fill rule
    """
    try:
        return FillRule(value.strip().lower())
    except ValueError:
        valid = ", ".join(rule.value for rule in FillRule)
        raise ConfigurationError(f"Invalid fill rule '{value}' (valid: {valid})") from None


class PathFileReader:
    """Loads named paths from a JSON or text file.

    Path data is not parsed here; each PathInput carries its raw data and is
    parsed when processed.

    Example:
        reader = PathFileReader(Path("icons.json"))
        for path_input in reader.read():
            print(path_input.name)
    """

    def __init__(self, path: Path, default_fill_rule: FillRule = FillRule.NONZERO) -> None:
        """Initialize the reader.

        Args:
            path: Path to the input file
            default_fill_rule: Fill rule for entries that do not name one
        """
        self._path = path
        self._default_fill_rule = default_fill_rule
        self._inputs: list[PathInput] | None = None

    @property
    def format(self) -> str:
        """Return 'json' or 'text' depending on the file extension."""
        return "json" if self._path.suffix.lower() == ".json" else "text"

    def load(self) -> None:
        """Read and decode the file.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: If the file content is not a valid path list
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Path file not found: {self._path}")

        content = self._path.read_text(encoding="utf-8")
        if self.format == "json":
            self._inputs = self._read_json(content)
        else:
            self._inputs = self._read_text(content)

    def read(self) -> list[PathInput]:
        """Load the file and return its paths."""
        self.load()
        return self.inputs

    @property
    def inputs(self) -> list[PathInput]:
        """Loaded paths.

        Raises:
            RuntimeError: If the file has not been loaded yet
        """
        if self._inputs is None:
            raise RuntimeError("Paths not loaded. Call load() first.")
        return self._inputs

    def _entry_to_input(self, entry: Any, index: int) -> PathInput:
        if isinstance(entry, str):
            entry = {"d": entry}
        if not isinstance(entry, dict) or not isinstance(entry.get("d"), str):
            raise ConfigurationError(f"Entry {index + 1} in {self._path} has no path data 'd'")

        fill_rule = self._default_fill_rule
        if entry.get("fill_rule") is not None:
            fill_rule = parse_fill_rule(str(entry["fill_rule"]))
        return PathInput(
            name=str(entry.get("name") or f"path-{index + 1}"),
            fill_rule=fill_rule,
            path_data=entry["d"],
        )

    def _read_json(self, content: str) -> list[PathInput]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {self._path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("paths")
        if not isinstance(data, list):
            raise ConfigurationError(f"Expected a list of paths in {self._path}")
        return [self._entry_to_input(entry, index) for index, entry in enumerate(data)]

    def _read_text(self, content: str) -> list[PathInput]:
        inputs: list[PathInput] = []
        for line in content.splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            fields = stripped.split("\t")
            entry: dict[str, str] = {"d": fields[-1]}
            if len(fields) >= 2:
                entry["name"] = fields[0]
            if len(fields) >= 3:
                entry["fill_rule"] = fields[1]
            inputs.append(self._entry_to_input(entry, len(inputs)))
        return inputs
