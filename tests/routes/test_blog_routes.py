# tests/routes/test_blog_routes.py
"""Tests for the /blogs endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

ADA = {"username": "ada", "email": "ada@example.com", "password": "secret"}
GRACE = {"username": "grace", "email": "grace@example.com", "password": "hopper"}

NEW_BLOG = {
    "title": "Hello World",
    "author_name": "ada",
    "tags": ["intro", "intro"],
    "content": [
        {"type": "header", "data": {"text": "Welcome", "level": 2}},
        {"type": "paragraph", "data": {"text": "<b>bold</b> claim"}},
        {"type": "video", "data": {"src": "clip.mp4"}},
    ],
}


@pytest.fixture
async def ada_client(client: AsyncClient) -> AsyncClient:
    await client.post("/auth/signup", json=ADA)
    return client


class TestBlogCrud:
    """Owner-scoped CRUD."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, ada_client: AsyncClient) -> None:
        response = await ada_client.post("/blogs", json=NEW_BLOG)

        assert response.status_code == 201
        blog = response.json()
        assert blog["slug"] == "hello-world"
        assert blog["tags"] == ["intro"]
        assert blog["status"] == "draft"
        assert blog["createdAt"] == blog["updatedAt"]
        assert blog["content"][2] == {"type": "video", "data": {"src": "clip.mp4"}}

        fetched = await ada_client.get(f"/blogs/{blog['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Hello World"

    @pytest.mark.asyncio
    async def test_create_missing_author(self, ada_client: AsyncClient) -> None:
        response = await ada_client.post("/blogs", json={"title": "No author"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Author name is required"
        assert response.json()["errors"] == [{"field": "author_name", "message": "Field required"}]

    @pytest.mark.asyncio
    async def test_create_requires_session(self, client: AsyncClient) -> None:
        response = await client.post("/blogs", json=NEW_BLOG)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_update_and_delete(self, ada_client: AsyncClient) -> None:
        blog_id = (await ada_client.post("/blogs", json=NEW_BLOG)).json()["id"]

        response = await ada_client.patch(f"/blogs/{blog_id}", json={"status": "published"})
        assert response.status_code == 200
        assert response.json()["status"] == "published"
        assert response.json()["title"] == "Hello World"

        assert (await ada_client.delete(f"/blogs/{blog_id}")).status_code == 204
        assert (await ada_client.get(f"/blogs/{blog_id}")).status_code == 404
        assert (await ada_client.delete(f"/blogs/{blog_id}")).status_code == 404

    @pytest.mark.asyncio
    async def test_update_blank_title(self, ada_client: AsyncClient) -> None:
        blog_id = (await ada_client.post("/blogs", json=NEW_BLOG)).json()["id"]

        response = await ada_client.patch(f"/blogs/{blog_id}", json={"title": "   "})

        assert response.status_code == 422
        assert response.json()["detail"] == "Title is required"

    @pytest.mark.asyncio
    async def test_unknown_blog(self, ada_client: AsyncClient) -> None:
        response = await ada_client.get(f"/blogs/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == "Blog not found"

    @pytest.mark.asyncio
    async def test_other_owner_sees_404(self, ada_client: AsyncClient) -> None:
        blog_id = (await ada_client.post("/blogs", json=NEW_BLOG)).json()["id"]
        await ada_client.post("/auth/signup", json=GRACE)

        assert (await ada_client.get(f"/blogs/{blog_id}")).status_code == 404
        assert (await ada_client.patch(f"/blogs/{blog_id}", json={"title": "x"})).status_code == 404
        assert (await ada_client.delete(f"/blogs/{blog_id}")).status_code == 404
        assert (await ada_client.get("/blogs")).json() == []


class TestDashboardAndRender:
    """Stats and rendering."""

    @pytest.mark.asyncio
    async def test_stats(self, ada_client: AsyncClient) -> None:
        for index in range(3):
            await ada_client.post(
                "/blogs",
                json={**NEW_BLOG, "title": f"Post {index}", "status": "published" if index else "draft"},
            )

        response = await ada_client.get("/blogs/stats")

        assert response.status_code == 200
        stats = response.json()
        assert stats["total"] == 3
        assert stats["published"] == 2
        assert stats["drafts"] == 1
        assert len(stats["latest"]) == 3

    @pytest.mark.asyncio
    async def test_render(self, ada_client: AsyncClient) -> None:
        blog_id = (await ada_client.post("/blogs", json=NEW_BLOG)).json()["id"]

        response = await ada_client.get(f"/blogs/{blog_id}/render")

        assert response.status_code == 200
        rendered = response.json()
        assert [node["tag"] for node in rendered["nodes"]] == ["h2", "p", "p"]
        assert rendered["nodes"][2]["text"] == "[Unsupported block type: video]"
        assert "&lt;b&gt;bold&lt;/b&gt;" in rendered["html"]
        assert "<h2>Welcome</h2>" in rendered["html"]
