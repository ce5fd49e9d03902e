"""Identity and access errors."""

from logging import getLogger

from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from blogcore.configs import NO_ACTIVE_SESSION
from blogcore.errors.base import BaseAppError, create_exception_handler
from blogcore.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))


class AuthError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class InvalidCredentialsError(AuthError):
    """Raised when login credentials do not match any user."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials. Please try again.", HTTP_401_UNAUTHORIZED)


class PreconditionError(AuthError):
    """
    Raised when an owner-scoped mutation runs without an active identity.

    This is a caller-side contract violation, not a data condition, so it is
    the one repository failure that is raised instead of returned.
    """

    def __init__(self, detail: str = NO_ACTIVE_SESSION) -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED)


class PermissionDeniedError(AuthError):
    """Raised when the active user lacks the required role."""

    def __init__(self, detail: str = "Admin privileges required") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


class PasswordHashingError(BaseAppError):
    """Raised when the password hasher backend fails."""

    def __init__(self, detail: str = "Password hashing failed") -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


auth_exception_handler = create_exception_handler(logger)
