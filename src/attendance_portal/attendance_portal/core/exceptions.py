class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid (malformed date, inverted range, ...)."""


class NotFoundError(DomainError):
    """Raised when the referenced student does not exist or is inactive."""


class TransientStoreError(DomainError):
    """Raised when the raw attendance source or summary store is unreachable."""


class OperationTimeoutError(DomainError):
    """Raised when a per-student batch operation exceeds its time budget."""
