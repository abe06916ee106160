class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""


class EventStoreError(DomainError):
    """Raised when the event store cannot be read or written.

    Recoverable: callers keep their previous snapshot and may re-trigger.
    """
