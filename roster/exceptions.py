"""Custom exceptions for the roster engine."""


class RosterError(Exception):
    """Base exception class for the roster engine."""
    pass


class RosterValidationError(RosterError, ValueError):
    """Raised when a mutation is rejected; the store is left unchanged."""
    pass


class SuggestionServiceError(RosterError):
    """Raised when the suggestion service is unreachable or returns a bad payload."""
    pass
