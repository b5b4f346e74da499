class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when the employee or the target record does not exist."""


class ConflictError(DomainError):
    """Raised when a concurrent modification breaks a storage constraint."""


class StorageError(DomainError):
    """Raised on transient storage failures. Callers may retry."""


class AuditWriteError(DomainError):
    """Raised when an audit entry cannot be written. Never fatal."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a caller lacks permission for an action."""
