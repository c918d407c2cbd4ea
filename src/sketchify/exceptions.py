"""Exception hierarchy for Sketchify."""


class SketchifyError(Exception):
    """Base exception for all Sketchify errors."""

    pass


class PathError(SketchifyError):
    """Errors related to path commands or path data."""

    pass


class UnsupportedGeometryError(PathError):
    """Path contains geometry the pipeline cannot represent (elliptical arcs)."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Unsupported geometry in path: '{command}' (arcs are not supported)")


class MalformedPathError(PathError):
    """Path data is structurally invalid."""

    def __init__(self, reason: str, command: str | None = None) -> None:
        self.reason = reason
        self.command = command
        if command is None:
            super().__init__(f"Malformed path: {reason}")
        else:
            super().__init__(f"Malformed path at '{command}': {reason}")


class GeometryError(SketchifyError):
    """Errors in geometric calculations."""

    pass


class NumericDegeneracyError(GeometryError):
    """Degenerate geometry left nothing to process."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Degenerate geometry: {reason}")


class ConfigurationError(SketchifyError):
    """Invalid settings or input format."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
