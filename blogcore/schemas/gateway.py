"""Public feed response body."""

from typing import Any

from pydantic import BaseModel, SerializerFunctionWrapHandler, model_serializer

from blogcore.schemas.blog import BlogResponse


class FeedResponse(BaseModel):
    """
    Result of a public feed request.

    Exactly one of ``data`` (on success) or ``error`` (on failure) is
    present in the serialized body.
    """

    success: bool
    data: list[BlogResponse] | None = None
    error: str | None = None

    @classmethod
    def ok(cls, blogs: list[BlogResponse]) -> "FeedResponse":
        return cls(success=True, data=blogs)

    @classmethod
    def fail(cls, error: str) -> "FeedResponse":
        return cls(success=False, error=error)

    @model_serializer(mode="wrap")
    def drop_empty_side(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        body = handler(self)
        body.pop("error" if self.success else "data", None)
        return body
