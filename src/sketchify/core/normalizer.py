"""Segment normalization.

Turns raw path commands into canonical segments grouped by subpath. The
conversion is a pure fold: ``step`` takes the pen state and one command and
returns the next pen state plus at most one emitted segment. It resolves
relative coordinates, horizontal and vertical shorthands, smooth-curve
control reflection and quadratic degree elevation, so downstream stages
only ever see lines and cubic curves.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace

import structlog

from sketchify.core.bezier import BezierDegeneracy, check_bezier_degeneracy, convert_quadratic_to_cubic
from sketchify.domain import CommandType, CubicBezier, Line, PathCommand, Point, Segment, Subpath
from sketchify.exceptions import MalformedPathError, UnsupportedGeometryError

logger = structlog.get_logger(__name__)

Transform = Callable[[Point], Point]

_ORIGIN = Point(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class PenState:
    """Pen state threaded through the fold.

    Attributes:
        current: Current point
        subpath_start: Start of the current subpath (target of a close)
        cubic_control: Second control of the previous command, if it was a
            cubic curve (reflected by smooth cubics)
        quad_control: Control of the previous command, if it was a quadratic
            curve (reflected by smooth quadratics)
        next_id: Id for the next emitted segment
        started: True once a move command has been seen
    """

    current: Point = _ORIGIN
    subpath_start: Point = _ORIGIN
    cubic_control: Point | None = None
    quad_control: Point | None = None
    next_id: int = 0
    started: bool = False


def _reflect(control: Point | None, about: Point, command: PathCommand) -> Point:
    if control is None:
        logger.debug("Smooth command without preceding curve", command=str(command))
        return about
    return about.scaled(2.0) - control


def _resolve(state: PenState, command: PathCommand, x: float, y: float) -> Point:
    if command.relative:
        return Point(state.current.x + x, state.current.y + y)
    return Point(x, y)


def _emit_line(state: PenState, end: Point) -> tuple[PenState, Segment | None]:
    moved = replace(state, current=end, cubic_control=None, quad_control=None)
    if end == state.current:
        return moved, None
    return replace(moved, next_id=state.next_id + 1), Line(state.current, end, state.next_id)


def _emit_cubic(
    state: PenState,
    curve: CubicBezier,
    cubic_control: Point | None = None,
    quad_control: Point | None = None,
) -> tuple[PenState, Segment | None]:
    moved = replace(
        state,
        current=curve.end,
        cubic_control=cubic_control,
        quad_control=quad_control,
    )
    if check_bezier_degeneracy(curve) is BezierDegeneracy.POINT:
        return moved, None
    return replace(moved, next_id=state.next_id + 1), replace(curve, id=state.next_id)


def step(state: PenState, command: PathCommand) -> tuple[PenState, Segment | None]:
    """Apply one command to the pen.

    Args:
        state: Pen state before the command
        command: Command to apply

    Returns:
        Tuple of (new state, emitted segment or None). Moves, zero-length
        segments and closes of an already closed subpath emit nothing.

    Raises:
        UnsupportedGeometryError: For arc commands
        MalformedPathError: For a drawing command before any move
    """
    kind = command.type
    params = command.params

    if kind is CommandType.ARC:
        raise UnsupportedGeometryError(str(command))

    if kind is CommandType.MOVE:
        # The first move of a path is absolute even when written relative
        if state.started:
            target = _resolve(state, command, *params)
        else:
            target = Point(*params)
        return (
            PenState(current=target, subpath_start=target, next_id=state.next_id, started=True),
            None,
        )

    if not state.started:
        raise MalformedPathError("path data must begin with a move command", str(command))

    current = state.current
    if kind is CommandType.CLOSE:
        new_state, segment = _emit_line(state, state.subpath_start)
        return replace(new_state, current=state.subpath_start), segment

    if kind is CommandType.LINE:
        return _emit_line(state, _resolve(state, command, *params))

    if kind is CommandType.HORIZONTAL:
        x = current.x + params[0] if command.relative else params[0]
        return _emit_line(state, Point(x, current.y))

    if kind is CommandType.VERTICAL:
        y = current.y + params[0] if command.relative else params[0]
        return _emit_line(state, Point(current.x, y))

    if kind is CommandType.CUBIC:
        control1 = _resolve(state, command, params[0], params[1])
        control2 = _resolve(state, command, params[2], params[3])
        end = _resolve(state, command, params[4], params[5])
        return _emit_cubic(state, CubicBezier(current, control1, control2, end), cubic_control=control2)

    if kind is CommandType.CUBIC_SMOOTH:
        control1 = _reflect(state.cubic_control, current, command)
        control2 = _resolve(state, command, params[0], params[1])
        end = _resolve(state, command, params[2], params[3])
        return _emit_cubic(state, CubicBezier(current, control1, control2, end), cubic_control=control2)

    if kind is CommandType.QUADRATIC:
        control = _resolve(state, command, params[0], params[1])
        end = _resolve(state, command, params[2], params[3])
        return _emit_cubic(state, convert_quadratic_to_cubic(current, control, end), quad_control=control)

    if kind is CommandType.QUADRATIC_SMOOTH:
        control = _reflect(state.quad_control, current, command)
        end = _resolve(state, command, params[0], params[1])
        return _emit_cubic(state, convert_quadratic_to_cubic(current, control, end), quad_control=control)

    raise MalformedPathError(f"unknown command type {kind!r}", str(command))


def _transform_segment(segment: Segment, transform: Transform) -> Segment:
    if isinstance(segment, Line):
        return Line(transform(segment.start), transform(segment.end), segment.id)
    return CubicBezier(
        transform(segment.start),
        transform(segment.control1),
        transform(segment.control2),
        transform(segment.end),
        segment.id,
    )


def normalize_path(commands: Iterable[PathCommand], transform: Transform | None = None) -> list[Subpath]:
    """Convert raw commands into canonical subpaths.

    Subpaths that end up with no segments (a lone move, or only zero-length
    pieces) are dropped. The optional transform is applied to every point of
    every emitted segment; it is treated as an opaque point mapping.

    Args:
        commands: Raw path commands
        transform: Optional point mapping applied after normalization

    Returns:
        Non-empty subpaths in path order, re-indexed from zero

    Raises:
        UnsupportedGeometryError: If the path contains an arc
        MalformedPathError: If the path has no drawable subpath or draws
            before its first move
    """
    state = PenState()
    groups: list[tuple[list[Segment], bool]] = []

    for command in commands:
        state, segment = step(state, command)
        if command.type is CommandType.MOVE:
            groups.append(([], False))
            continue
        if groups[-1][1]:
            if command.type is CommandType.CLOSE:
                continue
            # Drawing after a close starts a new subpath at the same start point
            groups.append(([], False))
        segments, _ = groups[-1]
        if segment is not None:
            segments.append(segment if transform is None else _transform_segment(segment, transform))
        if command.type is CommandType.CLOSE:
            groups[-1] = (segments, True)

    subpaths = [
        Subpath(index=index, segments=tuple(segments), closed=closed)
        for index, (segments, closed) in enumerate(group for group in groups if group[0])
    ]
    if not subpaths:
        raise MalformedPathError("path has no drawable subpaths")
    return subpaths
