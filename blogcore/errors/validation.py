"""Validation failures: missing document fields and malformed request bodies."""

from collections.abc import Iterable
from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT

from blogcore.errors.base import BaseAppError, create_exception_handler
from blogcore.utils.helpers import file_logger, host

logger = file_logger(getLogger(__name__))

# Location prefixes FastAPI puts in front of the field path.
_LOCATION_ROOTS = frozenset({"body", "query", "path", "header", "cookie"})


class ValidationError(BaseAppError):
    """Raised when a document is saved without one of its required fields."""

    def __init__(
        self,
        detail: str = "Validation Error",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_422_UNPROCESSABLE_CONTENT)
        self.errors = errors or []

    def extra(self) -> dict[str, Any]:
        return {"errors": self.errors} if self.errors else {}


def describe_errors(errors: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Flatten pydantic error entries into ``{field, message, type, context?}``.

    The request location (``body``, ``query``...) is dropped from the field
    path and exception values inside ``ctx`` are stringified so the result
    serializes cleanly.
    """
    described = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in _LOCATION_ROOTS:
            loc = loc[1:]

        entry: dict[str, Any] = {
            "field": ".".join(loc),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        if ctx := error.get("ctx"):
            entry["context"] = {
                key: str(value) if isinstance(value, Exception) else value
                for key, value in ctx.items()
            }
        described.append(entry)
    return described


app_validation_exception_handler = create_exception_handler(logger)


async def validation_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Answer a malformed request body with 422 and a per-field breakdown."""
    errors = describe_errors(cast(RequestValidationError, exc).errors())
    fields = ", ".join(entry["field"] or "<root>" for entry in errors)
    logger.warning(
        f"Rejected request from ip: {host(request)} at endpoint {request.url.path}; fields: {fields}",
    )

    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": "Validation failed", "errors": errors},
    )
