"""Auth and user-management errors raised by the service layer.

Each error carries the HTTP status it maps to; app.main registers one handler
that renders them as {"detail": message}. These are caller-input errors and are
never retried.
"""

from fastapi import status


class AuthError(Exception):
    """Base class for errors surfaced directly to the API caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConflictError(AuthError):
    """Raised when a unique value (email) is already registered."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(AuthError):
    """Raised when the referenced user does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class UnauthorizedError(AuthError):
    """Raised on a wrong password or a refresh token that does not match the stored hash."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AuthError):
    """Raised when there is no active session to refresh, or the caller lacks the role."""

    status_code = status.HTTP_403_FORBIDDEN
