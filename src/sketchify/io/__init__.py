"""Path I/O layer for sketchify.

This module handles the text formats around the geometric core.

Key responsibilities:
- Parse SVG path data into path commands
- Read batches of named paths from JSON or text files
- Write classified regions as JSON

Key classes:
- PathFileReader: Load named paths from disk
- RegionWriter: Save classified paths
"""

from sketchify.io.path_data import parse_path_data, tokenize_path_data
from sketchify.io.reader import PathFileReader, parse_fill_rule
from sketchify.io.writer import RegionWriter, outcomes_to_document

__all__ = [
    "PathFileReader",
    "RegionWriter",
    "outcomes_to_document",
    "parse_fill_rule",
    "parse_path_data",
    "tokenize_path_data",
]
