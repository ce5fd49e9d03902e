from collections.abc import Awaitable, Callable
from logging import ERROR, WARNING, Logger
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blogcore.utils.helpers import host

INTERNAL_ERROR = "Internal Server Error"


class BaseAppError(Exception):
    """
    Base exception class for application errors.

    ``detail`` is the human-readable reason shown to callers, ``status_code``
    the HTTP status a route answers with when the error escapes to it.
    """

    def __init__(
        self,
        detail: str = INTERNAL_ERROR,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail

    def extra(self) -> dict[str, Any]:
        """Additional response fields; subclasses add structured detail here."""
        return {}


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Client errors are logged as warnings and server errors as errors. The
    response body is ``{"detail": ...}`` plus whatever ``extra()`` adds.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        if isinstance(exc, BaseAppError):
            status_code, detail, extra = exc.status_code, exc.detail, exc.extra()
        else:
            status_code, detail, extra = HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, {}

        level = WARNING if status_code < HTTP_500_INTERNAL_SERVER_ERROR else ERROR
        logger.log(level, f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        return ORJSONResponse(content={"detail": detail, **extra}, status_code=status_code)

    return handler
