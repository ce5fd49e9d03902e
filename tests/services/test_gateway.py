# tests/services/test_gateway.py
"""Tests for blogcore/services/gateway.py module."""

import pytest

from blogcore.schemas import BlogCreate
from blogcore.services import ServiceContainer


class TestApiGateway:
    """Tests for the key-gated feed."""

    @pytest.mark.asyncio
    async def test_missing_key(self, services: ServiceContainer) -> None:
        for key in (None, ""):
            feed = await services.gateway.handle(key)
            assert feed.success is False
            assert feed.error == "API key is required"
            assert feed.model_dump() == {"success": False, "error": "API key is required"}

    @pytest.mark.asyncio
    async def test_unknown_key(self, services: ServiceContainer) -> None:
        await services.identity.signup("ada", "ada@example.com", "secret")

        feed = await services.gateway.handle("not-a-key")

        assert feed.success is False
        assert feed.error == "Invalid API key"

    @pytest.mark.asyncio
    async def test_feed_spans_owners_and_counts_requests(self, services: ServiceContainer) -> None:
        ada = await services.identity.signup("ada", "ada@example.com", "secret")
        grace = await services.identity.signup("grace", "grace@example.com", "hopper")
        await services.blogs.create(
            ada.id,
            BlogCreate(title="Ada published", author_name="ada", status="published"),
        )
        await services.blogs.create(ada.id, BlogCreate(title="Ada draft", author_name="ada"))
        await services.blogs.create(
            grace.id,
            BlogCreate(title="Grace published", author_name="grace", status="published"),
        )
        assert ada.api_key is not None

        feed = await services.gateway.handle(ada.api_key)
        await services.gateway.handle(ada.api_key)

        assert feed.success is True
        assert feed.data is not None
        assert {blog.title for blog in feed.data} == {"Ada published", "Grace published"}
        assert "error" not in feed.model_dump()
        holder = await services.identity.find_by_api_key(ada.api_key)
        assert holder is not None
        assert holder.request_count == 2

    @pytest.mark.asyncio
    async def test_rejected_request_is_not_counted(self, services: ServiceContainer) -> None:
        ada = await services.identity.signup("ada", "ada@example.com", "secret")

        await services.gateway.handle("wrong")

        stored = await services.identity.users.get_by_id(ada.id)
        assert stored is not None
        assert stored.request_count == 0
