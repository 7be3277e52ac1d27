class PuzzleError(Exception):
    """Base class for recoverable puzzle engine failures."""


class InvalidMove(PuzzleError, ValueError):
    """A swap between cells that are out of bounds or not 4-directionally adjacent."""


class InvalidState(InvalidMove):
    """An operation requested while the session phase does not allow it."""


class InvalidConfiguration(PuzzleError, ValueError):
    """Settings that cannot satisfy the match-length invariant."""


class ReshuffleExhausted(PuzzleError, RuntimeError):
    def __init__(self, attempts: int, message: str | None = None):
        super().__init__(message or f"No solvable match-free arrangement after {attempts} attempts")
        self.attempts = attempts
