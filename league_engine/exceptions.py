"""Exceptions raised by the league engine."""


class LeagueEngineError(Exception):
    """Base class for all engine errors."""


class InvalidConfigurationError(LeagueEngineError, ValueError):
    """League or scoring configuration rejected before any computation."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class InvalidTransitionError(LeagueEngineError):
    """
    A domain rule forbids the requested state change.

    Raised for reusing a locked pick, deciding a bracket node twice,
    eliminating a team that is already out and similar. The value the
    operation was called with is left unchanged.
    """
