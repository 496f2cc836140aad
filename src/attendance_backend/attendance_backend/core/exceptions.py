class DomainError(Exception):
    """Base exception for business rule violations.

    ``status_code`` is the HTTP status class the error maps to at the boundary.
    ``detail`` carries optional debugging data that is only ever put in the
    envelope's ``data`` field, never in ``message``.
    """

    status_code = 500

    def __init__(self, message: str, *, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    status_code = 400


class InvalidTimeFormatError(ValidationError):
    pass


class InvalidDateError(ValidationError):
    pass


class InvalidReferenceError(ValidationError):
    """A referenced user, shift or role does not exist."""


class UnauthorizedError(DomainError):
    """Raised when credentials or the bearer token are missing or invalid."""

    status_code = 401


class InvalidTokenError(UnauthorizedError):
    pass


class ExpiredTokenError(UnauthorizedError):
    pass


class ForbiddenError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NoScheduleTodayError(ForbiddenError):
    pass


class NotFoundError(DomainError):
    status_code = 404


class NoOpenSessionError(NotFoundError):
    pass


class ConflictError(DomainError):
    """Uniqueness violation or an illegal state transition."""

    status_code = 409


class AlreadyCheckedInError(ConflictError):
    pass


class AlreadyCheckedOutError(ConflictError):
    pass


class ReferentialConflictError(DomainError):
    """Delete blocked by dependent rows."""

    status_code = 409


class StillAssignedError(ReferentialConflictError):
    pass


class ServiceUnavailableError(DomainError):
    """No database connection became free within the connect timeout."""

    status_code = 503
