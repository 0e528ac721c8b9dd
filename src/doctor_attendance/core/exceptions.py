class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class NotFoundError(DomainError):
    """Raised when the requested entity does not exist."""


class ConflictError(DomainError):
    """Raised when an entity with the same identity already exists."""


class DuplicateAttendanceError(DomainError):
    """Raised by repositories when the (user, type, day) slot is already taken."""
