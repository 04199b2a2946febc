"""
Service-layer exceptions.

Services raise these and never build HTTP responses themselves; the handlers
registered in ``reqtrace.main`` turn each one into ``{"message": ...}`` with
the status code carried by the class.

    raise NotFoundError("Requirement not found")
    raise ValidationError("No changes detected")
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(AppError):
    """The id does not resolve to a row."""

    status_code = 404


class ForbiddenError(AppError):
    """The principal lacks the relationship to the project the operation needs."""

    status_code = 403


class ValidationError(AppError):
    """Well-formed input that breaks a business rule (blank title, no-op update, bad link)."""

    status_code = 400


class ConflictError(AppError):
    """Another writer changed the row between our read and our conditional write."""

    status_code = 409
