from __future__ import annotations


class DrillError(Exception):
    """Base class for user-facing, recoverable drill errors."""


class ValidationError(DrillError, ValueError):
    """Malformed or out-of-range command argument. No state was changed."""


class StateConflictError(DrillError, RuntimeError):
    """Operation not allowed in the current trial state. No state was changed."""


class AlreadyRunningError(StateConflictError):
    pass


class NotRunningError(StateConflictError):
    pass
