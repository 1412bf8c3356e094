"""Typed application errors. Each carries the HTTP status the API layer renders."""


class AppError(Exception):
    """Base class for errors surfaced to API callers as {statusCode, message}."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidCredentialsError(AppError):
    """Login failed. The message never says whether the account exists."""

    status_code = 401

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class InvalidTokenError(AppError):
    """Token missing, malformed, expired, badly signed, or of the wrong kind."""

    status_code = 401

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class SessionInvalidError(AppError):
    """Token subject no longer exists or is inactive."""

    status_code = 401

    def __init__(self, message: str = "User not found or inactive") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class BadRequestError(AppError):
    status_code = 400


class AlreadyApprovedError(BadRequestError):
    """Service request approval attempted on an already approved request."""

    def __init__(self, message: str = "Service request already approved") -> None:
        super().__init__(message)
