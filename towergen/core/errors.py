"""
Generation errors.

Only InvalidPhysicsConstants is fatal. The others are raised by inner helpers
and caught at the public operation that triggered them, where they are logged
and turned into a clamp or a no-op.
"""


class GenerationError(Exception):
    """Base class for terrain generation failures."""


class InvalidPhysicsConstants(GenerationError, ValueError):
    """Movement constants cannot produce a trustworthy reachability model."""


class UnreachableGapAttempt(GenerationError):
    """A candidate gap falls outside the jump envelope."""

    def __init__(self, dx: float, dy: float, limit_dx: float, limit_dy: float):
        self.dx = dx
        self.dy = dy
        self.limit_dx = limit_dx
        self.limit_dy = limit_dy
        super().__init__(
            f"gap dx={dx:.1f} dy={dy:.1f} exceeds limits dx<={limit_dx:.1f} |dy|<={limit_dy:.1f}"
        )


class PatternNotFound(GenerationError, LookupError):
    """Requested pattern index is missing from the library."""

    def __init__(self, index, size: int):
        self.index = index
        self.size = size
        super().__init__(f"pattern {index!r} not in library of {size}")


class SpawnerUnavailable(GenerationError):
    """A collaborator required by an operation was never wired in."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} is not available")
