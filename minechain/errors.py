"""Exceptions raised by the minechain engine."""


class MinechainError(Exception):
    """Base class for engine errors."""


class InvariantViolation(MinechainError, RuntimeError):
    """The chain forest lost every consistent placement (root deletion)."""


class EngineNotInitialized(MinechainError, RuntimeError):
    """A reveal or request reached the engine before the game was initialised."""


class EngineFailure(MinechainError, RuntimeError):
    """The engine worker stopped because of an unhandled error."""
