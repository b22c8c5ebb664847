class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced request, record or configuration does not exist."""


class ConflictError(DomainError):
    """Raised when an action would duplicate or contradict existing state."""


class StorageUnavailableError(Exception):
    """Raised when the database stays unreachable for the whole retry budget."""
