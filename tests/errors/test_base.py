# tests/errors/test_base.py
"""Tests for blogcore/errors module."""

from logging import ERROR, WARNING
from unittest.mock import MagicMock

import orjson
import pytest

from blogcore.errors import (
    BaseAppError,
    DuplicateEntryError,
    InvalidCredentialsError,
    PasswordHashingError,
    PermissionDeniedError,
    PreconditionError,
    RecordNotFoundError,
    SnapshotError,
    ValidationError,
    create_exception_handler,
)
from blogcore.errors.validation import describe_errors


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_str_representation(self) -> None:
        assert str(BaseAppError(detail="Test error")) == "Test error"

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (PreconditionError(), 401),
            (InvalidCredentialsError(), 401),
            (PermissionDeniedError(), 403),
            (RecordNotFoundError(), 404),
            (DuplicateEntryError(), 409),
            (ValidationError(), 422),
            (SnapshotError(), 400),
            (PasswordHashingError(), 500),
        ],
    )
    def test_status_codes(self, error: BaseAppError, status_code: int) -> None:
        assert error.status_code == status_code

    def test_precondition_default_detail(self) -> None:
        assert PreconditionError().detail == "No active session"


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.mark.asyncio
    async def test_handler_with_app_error(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)

        request = MagicMock()
        request.client.host = "192.168.1.1"
        request.url.path = "/blogs"

        response = await handler(request, RecordNotFoundError(detail="Blog not found"))

        assert response.status_code == 404
        assert orjson.loads(response.body) == {"detail": "Blog not found"}
        logger.log.assert_called_once_with(
            WARNING,
            "Blog not found for ip: 192.168.1.1 for endpoint /blogs",
        )

    @pytest.mark.asyncio
    async def test_handler_carries_validation_errors(self) -> None:
        handler = create_exception_handler(MagicMock())
        request = MagicMock()
        request.client.host = "127.0.0.1"
        request.url.path = "/blogs"
        errors = [{"field": "title", "message": "Field required"}]

        response = await handler(request, ValidationError(detail="Title is required", errors=errors))

        assert response.status_code == 422
        assert orjson.loads(response.body) == {"detail": "Title is required", "errors": errors}

    @pytest.mark.asyncio
    async def test_handler_with_generic_exception(self) -> None:
        logger = MagicMock()
        handler = create_exception_handler(logger)
        request = MagicMock()
        request.client.host = "127.0.0.1"
        request.url.path = "/api/error"

        response = await handler(request, ValueError("Something went wrong"))

        assert response.status_code == 500
        assert orjson.loads(response.body) == {"detail": "Internal Server Error"}
        assert logger.log.call_args.args[0] == ERROR


class TestDescribeErrors:
    """Tests for request validation error flattening."""

    def test_location_prefix_dropped(self) -> None:
        described = describe_errors(
            [{"loc": ("body", "author", "name"), "msg": "Field required", "type": "missing"}],
        )
        assert described == [
            {"field": "author.name", "message": "Field required", "type": "missing"},
        ]

    def test_exception_context_stringified(self) -> None:
        described = describe_errors(
            [
                {
                    "loc": ("body", "email"),
                    "msg": "value is not a valid email address",
                    "type": "value_error",
                    "ctx": {"reason": ValueError("missing @")},
                },
            ],
        )
        assert described[0]["context"] == {"reason": "missing @"}
