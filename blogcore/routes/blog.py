"""
Blog Routes.

CRUD endpoints for the active user's blogs, the dashboard counters and a
rendered view of a blog body.

Summary
-------
Endpoints include:
  - List own blogs
  - Create blog
  - Dashboard stats
  - Get blog by id
  - Update blog
  - Delete blog
  - Render blog body

Every endpoint is scoped to the active user: another owner's blog answers
404, exactly like a missing one.
"""

from uuid import UUID

from fastapi import APIRouter, HTTPException
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from blogcore.dependencies import ActiveUserDep, BlogRepoDep
from blogcore.schemas import BlogCreate, BlogResponse, BlogStats, BlogUpdate
from blogcore.services import RenderedBlog, render_document

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

BLOG_NOT_FOUND = "Blog not found"

BLOG_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "owner_id": "123e4567-e89b-12d3-a456-426614174111",
    "author_name": "admin",
    "slug": "hello-world",
    "title": "Hello World",
    "tags": ["intro"],
    "content": [{"type": "paragraph", "data": {"text": "First post"}}],
    "status": "draft",
    "createdAt": "2025-01-01T00:00:00Z",
    "updatedAt": "2025-01-01T00:00:00Z",
}


def not_found() -> HTTPException:
    return HTTPException(status_code=HTTP_404_NOT_FOUND, detail=BLOG_NOT_FOUND)


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=list[BlogResponse],
    summary="List own blogs",
    operation_id="blogs_list",
)
async def list_blogs(user: ActiveUserDep, repo: BlogRepoDep) -> list[BlogResponse]:
    """
    List every blog owned by the active user.

    Returns
    -------
    list[BlogResponse]
        The user's blogs, in no particular order.
    """
    return [BlogResponse.model_validate(blog) for blog in await repo.list_by_owner(user.id)]


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a new blog",
    description="Create a blog owned by the active user. The slug is derived from the title when omitted.",
    responses={
        201: {"content": {"application/json": {"example": BLOG_EXAMPLE}}},
        422: {
            "description": "Missing required field",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Title is required",
                        "errors": [{"field": "title", "message": "Field required"}],
                    },
                },
            },
        },
    },
    operation_id="blogs_create",
)
async def create_blog(blog: BlogCreate, user: ActiveUserDep, repo: BlogRepoDep) -> BlogResponse:
    """
    Create a new blog.

    Parameters
    ----------
    blog : BlogCreate
        Blog fields; ``title``, ``slug`` (or a title to derive it from) and
        ``author_name`` are required.
    user : UserDB
        Active user, who becomes the owner.
    repo : BlogRepository
        Blog repository.

    Returns
    -------
    BlogResponse
        The stored blog.
    """
    return BlogResponse.model_validate(await repo.create(user.id, blog))


@router.get(
    "/stats",
    response_class=ORJSONResponse,
    response_model=BlogStats,
    summary="Dashboard stats",
    description="Counts of the active user's blogs and the five most recently updated.",
    operation_id="blogs_stats",
)
async def blog_stats(user: ActiveUserDep, repo: BlogRepoDep) -> BlogStats:
    total, published, latest = await repo.stats(user.id)
    return BlogStats(
        total=total,
        published=published,
        drafts=total - published,
        latest=[BlogResponse.model_validate(blog) for blog in latest],
    )


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    summary="Get blog by id",
    responses={404: {"content": {"application/json": {"example": {"detail": BLOG_NOT_FOUND}}}}},
    operation_id="blogs_get",
)
async def get_blog(blog_id: UUID, user: ActiveUserDep, repo: BlogRepoDep) -> BlogResponse:
    blog = await repo.get(blog_id, user.id)
    if blog is None:
        raise not_found()
    return BlogResponse.model_validate(blog)


@router.patch(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    summary="Update blog",
    description="Apply a partial update. Only the fields present in the body change.",
    responses={404: {"content": {"application/json": {"example": {"detail": BLOG_NOT_FOUND}}}}},
    operation_id="blogs_update",
)
async def update_blog(
    blog_id: UUID,
    patch: BlogUpdate,
    user: ActiveUserDep,
    repo: BlogRepoDep,
) -> BlogResponse:
    blog = await repo.update(blog_id, user.id, patch)
    if blog is None:
        raise not_found()
    return BlogResponse.model_validate(blog)


@router.delete(
    "/{blog_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Delete blog",
    responses={404: {"content": {"application/json": {"example": {"detail": BLOG_NOT_FOUND}}}}},
    operation_id="blogs_delete",
)
async def delete_blog(blog_id: UUID, user: ActiveUserDep, repo: BlogRepoDep) -> Response:
    if not await repo.delete(blog_id, user.id):
        raise not_found()
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get(
    "/{blog_id}/render",
    response_class=ORJSONResponse,
    response_model=RenderedBlog,
    summary="Render blog body",
    description="Render the blog's content blocks to render nodes and HTML.",
    operation_id="blogs_render",
)
async def render_blog(blog_id: UUID, user: ActiveUserDep, repo: BlogRepoDep) -> RenderedBlog:
    blog = await repo.get(blog_id, user.id)
    if blog is None:
        raise not_found()
    return render_document(blog.content)
