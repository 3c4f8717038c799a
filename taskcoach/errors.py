"""Domain error taxonomy.

Every error carries the HTTP status it maps to at the request boundary; the
errors blueprint turns them into a JSON ``{"message": ...}`` body.
"""


class AppError(Exception):
    """Base class for errors that are safe to report to the client."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Not authenticated"


class InvalidCredentials(AppError):
    status_code = 401
    default_message = "Invalid username or password"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class DuplicateUsername(AppError):
    status_code = 409
    default_message = "Username already exists"


class AnnotationUnavailable(AppError):
    """The external annotation service failed.

    The public message is always the generic one; ``detail`` and
    ``original_error`` are for logging only.
    """

    status_code = 500
    default_message = "Task annotation is currently unavailable"

    def __init__(self, detail: str = "", original_error: Exception | None = None):
        super().__init__()
        self.detail = detail
        self.original_error = original_error

    def __str__(self) -> str:
        return self.detail or self.message
