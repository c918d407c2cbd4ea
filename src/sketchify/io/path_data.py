"""SVG path data parsing.

Turns the text of an SVG ``d`` attribute into raw path commands:

- Commands may repeat implicitly (``L 1 2 3 4`` is two lines)
- Extra coordinate pairs after a move are lines (``M 0 0 10 0``)
- Numbers may run together where unambiguous (``M0-5.5.5``)
- Commas and whitespace are interchangeable separators

Arc commands are rejected as soon as they are seen.
"""

import re

from sketchify.domain import CommandType, PathCommand
from sketchify.exceptions import MalformedPathError, UnsupportedGeometryError

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<command>[MmLlHhVvCcSsQqTtAaZz])
    | (?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)
    | (?P<separator>[\s,]+)
    | (?P<invalid>.)
    """,
    re.VERBOSE,
)


def tokenize_path_data(path_data: str) -> list[str | float]:
    """Split path data into command letters and numbers.

    Raises:
        MalformedPathError: On any character that is not part of a
            command, a number or a separator
    """
    tokens: list[str | float] = []
    for match in _TOKEN_PATTERN.finditer(path_data):
        if match.lastgroup == "command":
            tokens.append(match.group())
        elif match.lastgroup == "number":
            tokens.append(float(match.group()))
        elif match.lastgroup == "invalid":
            raise MalformedPathError(
                f"unexpected character {match.group()!r} at offset {match.start()}"
            )
    return tokens


def parse_path_data(path_data: str) -> list[PathCommand]:
    """Parse SVG path data into commands.

    Args:
        path_data: Contents of a ``d`` attribute

    Returns:
        Commands in path order; empty for blank input

    Raises:
        MalformedPathError: If the data does not start with a command, or a
            command has an incomplete parameter group
        UnsupportedGeometryError: If the data contains an arc command

    Examples:
        >>> [str(c) for c in parse_path_data("m10 10 5 0z")]
        ['m 10 10', 'l 5 0', 'z']
    """
    tokens = tokenize_path_data(path_data)
    commands: list[PathCommand] = []
    position = 0

    while position < len(tokens):
        letter = tokens[position]
        if not isinstance(letter, str):
            raise MalformedPathError("expected a command letter", f"{letter:g}")
        position += 1

        command_type = CommandType(letter.upper())
        relative = letter.islower()
        if command_type is CommandType.ARC:
            arguments = []
            for token in tokens[position:position + command_type.param_count]:
                if isinstance(token, str):
                    break
                arguments.append(f"{token:g}")
            raise UnsupportedGeometryError(" ".join([letter, *arguments]))
        if command_type is CommandType.CLOSE:
            commands.append(PathCommand(CommandType.CLOSE, (), relative))
            continue

        count = command_type.param_count
        first_group = True
        while first_group or (position < len(tokens) and not isinstance(tokens[position], str)):
            group = tokens[position:position + count]
            if len(group) < count or any(isinstance(token, str) for token in group):
                raise MalformedPathError(
                    f"command expects {count} parameters per group",
                    letter,
                )
            commands.append(PathCommand(command_type, tuple(float(value) for value in group), relative))
            position += count
            first_group = False
            if command_type is CommandType.MOVE:
                command_type = CommandType.LINE

    return commands
