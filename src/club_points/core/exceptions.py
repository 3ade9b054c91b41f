class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when a required field is missing or a value is not accepted."""


class NotFoundError(DomainError):
    """Raised when a referenced event, member or participant does not exist."""


class DuplicateKeyError(DomainError):
    """Raised when a CNI is already used by another member."""


class AlreadyEnrolledError(DuplicateKeyError):
    """Raised when a member already has a participant entry in the event."""


class FormatError(DomainError):
    """Raised when an import file or backup document cannot be read."""


class UnauthorizedError(DomainError):
    """Raised when a mutating call carries no valid admin credentials."""
