"""Exceptions raised by the grading services."""


class GradebookError(Exception):
    """Base exception for gradebook errors."""
    status_code = 500

    def __init__(self, message: str = ""):
        self.message = message or self.__class__.__doc__
        super().__init__(self.message)


class ValidationError(GradebookError):
    """Request failed validation."""
    status_code = 400


class NotFoundError(GradebookError):
    """Raised when a referenced record does not exist."""
    status_code = 404

    def __init__(self, resource: str, message: str = ""):
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class AuthorizationError(GradebookError):
    """Not authorized to perform this action."""
    status_code = 403


class ExternalServiceError(GradebookError):
    """The completion service failed or returned an unusable response."""
    status_code = 502
