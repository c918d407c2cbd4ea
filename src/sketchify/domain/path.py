"""Path commands, fill rules and per-path inputs and outcomes."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sketchify.domain.region import ClassifiedPath


class FillRule(str, Enum):
    """Rule deciding which regions of a path are filled."""

    NONZERO = "nonzero"
    EVENODD = "evenodd"


class CommandType(str, Enum):
    """SVG path command, keyed by its absolute letter."""

    MOVE = "M"
    LINE = "L"
    HORIZONTAL = "H"
    VERTICAL = "V"
    CUBIC = "C"
    CUBIC_SMOOTH = "S"
    QUADRATIC = "Q"
    QUADRATIC_SMOOTH = "T"
    ARC = "A"
    CLOSE = "Z"

    @property
    def param_count(self) -> int:
        """Number of numeric parameters one instance of the command takes."""
        return _PARAM_COUNTS[self]


_PARAM_COUNTS: dict[CommandType, int] = {
    CommandType.MOVE: 2,
    CommandType.LINE: 2,
    CommandType.HORIZONTAL: 1,
    CommandType.VERTICAL: 1,
    CommandType.CUBIC: 6,
    CommandType.CUBIC_SMOOTH: 4,
    CommandType.QUADRATIC: 4,
    CommandType.QUADRATIC_SMOOTH: 2,
    CommandType.ARC: 7,
    CommandType.CLOSE: 0,
}


@dataclass(frozen=True, slots=True)
class PathCommand:
    """One raw path command.

    Attributes:
        type: Command type
        params: Numeric parameters, in SVG order
        relative: True for the lower-case (relative) form
    """

    type: CommandType
    params: tuple[float, ...] = ()
    relative: bool = False

    def __post_init__(self) -> None:
        if len(self.params) != self.type.param_count:
            raise ValueError(
                f"Command {self.type.value} takes {self.type.param_count} parameters, "
                f"got {len(self.params)}"
            )

    @property
    def letter(self) -> str:
        return self.type.value.lower() if self.relative else self.type.value

    def __str__(self) -> str:
        if not self.params:
            return self.letter
        return f"{self.letter} " + " ".join(f"{value:g}" for value in self.params)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "relative": self.relative, "params": list(self.params)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PathCommand":
        return cls(
            type=CommandType(data["type"]),
            params=tuple(float(value) for value in data.get("params", ())),
            relative=bool(data.get("relative", False)),
        )


@dataclass(frozen=True, slots=True)
class PathInput:
    """A named path queued for processing.

    Either ``commands`` or ``path_data`` is given; path data is parsed when
    the path is processed, so a parse failure only affects this path.

    Attributes:
        name: Identifier used in logs and reports
        commands: Raw path commands
        fill_rule: Fill rule the path is rendered with
        path_data: SVG path data to parse when no commands are given
    """

    name: str
    commands: tuple[PathCommand, ...] = ()
    fill_rule: FillRule = FillRule.NONZERO
    path_data: str | None = None


@dataclass
class PathOutcome:
    """Result of processing one path in a batch.

    Exactly one of ``classified`` and ``error`` is set.
    """

    name: str
    classified: "ClassifiedPath | None" = None
    error: str | None = None
    error_type: str | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 3)}
        if self.classified is not None:
            data.update(self.classified.to_dict())
        if self.error is not None:
            data["error"] = self.error
            data["error_type"] = self.error_type
        return data
