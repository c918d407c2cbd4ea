"""Tests for SVG path data parsing.

Tests cover:
- Tokenizing numbers, commands and separators
- Implicit command repetition and move-to continuation
- Relative commands and close
- Arc rejection and malformed data
"""

import pytest

from sketchify.domain import CommandType, PathCommand
from sketchify.exceptions import MalformedPathError, UnsupportedGeometryError
from sketchify.io import parse_path_data, tokenize_path_data


class TestTokenizer:
    """Tests for tokenize_path_data."""

    def test_separators(self):
        """Commas and whitespace both separate numbers."""
        assert tokenize_path_data("M 1,2\n3\t4") == ["M", 1.0, 2.0, 3.0, 4.0]

    def test_packed_numbers(self):
        """Signs and second decimal points start a new number."""
        assert tokenize_path_data("M0-5.5.5") == ["M", 0.0, -5.5, 0.5]

    def test_exponents(self):
        """Scientific notation is a single number."""
        assert tokenize_path_data("L1e2,-2.5E-1") == ["L", 100.0, -0.25]

    def test_commands_without_separators(self):
        """Command letters split numbers."""
        assert tokenize_path_data("M1 2L3 4z") == ["M", 1.0, 2.0, "L", 3.0, 4.0, "z"]

    def test_invalid_character(self):
        """Anything else is malformed."""
        with pytest.raises(MalformedPathError, match="offset 5"):
            tokenize_path_data("M1 2 X")


class TestParsePathData:
    """Tests for parse_path_data."""

    def test_empty(self):
        """Blank data has no commands."""
        assert parse_path_data("   ") == []

    def test_basic(self):
        """Commands carry their type, parameters and case."""
        commands = parse_path_data("M0,0 l10,0 Z")
        assert commands == [
            PathCommand(CommandType.MOVE, (0.0, 0.0)),
            PathCommand(CommandType.LINE, (10.0, 0.0), relative=True),
            PathCommand(CommandType.CLOSE),
        ]

    def test_implicit_repeat(self):
        """Extra parameter groups repeat the command."""
        commands = parse_path_data("L1 2 3 4")
        assert [command.params for command in commands] == [(1.0, 2.0), (3.0, 4.0)]
        assert all(command.type is CommandType.LINE for command in commands)

    def test_move_continuation(self):
        """Pairs after a move are lines of the same case."""
        commands = parse_path_data("m10 10 5 0z")
        assert [str(command) for command in commands] == ["m 10 10", "l 5 0", "z"]

    def test_all_drawing_commands(self):
        """Every non-arc command is recognized."""
        commands = parse_path_data("M0 0 H5 V5 C1 1 2 2 3 3 S4 4 5 5 Q1 1 2 2 T3 3 Z")
        assert [command.type for command in commands] == [
            CommandType.MOVE,
            CommandType.HORIZONTAL,
            CommandType.VERTICAL,
            CommandType.CUBIC,
            CommandType.CUBIC_SMOOTH,
            CommandType.QUADRATIC,
            CommandType.QUADRATIC_SMOOTH,
            CommandType.CLOSE,
        ]

    def test_arc_rejected(self):
        """Arcs raise with the offending command."""
        with pytest.raises(UnsupportedGeometryError) as exc_info:
            parse_path_data("M0,0 A5,5 0 0 1 10,10")
        assert exc_info.value.command == "A 5 5 0 0 1 10 10"
        assert "arcs are not supported" in str(exc_info.value)

    def test_missing_command(self):
        """Data must start with a command letter."""
        with pytest.raises(MalformedPathError, match="expected a command letter"):
            parse_path_data("10 10")

    def test_incomplete_group(self):
        """A short parameter group is malformed."""
        with pytest.raises(MalformedPathError, match="2 parameters"):
            parse_path_data("M0,0 L10")

    def test_close_followed_by_numbers(self):
        """Close takes no parameters."""
        with pytest.raises(MalformedPathError):
            parse_path_data("M0,0 L1,1 Z 5")
