class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when an employee, shift, assignment or record does not exist."""

    status_code = 404


class ConflictError(DomainError):
    """Raised on overlapping assignments, duplicate check-ins and unique-key violations."""

    def __init__(self, message: str, *, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class UpstreamError(DomainError):
    """Raised when an external collaborator (geocoder, face oracle) fails."""

    status_code = 502


class PersistenceError(DomainError):
    """Raised when the record store fails. Never retried."""

    status_code = 500


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
