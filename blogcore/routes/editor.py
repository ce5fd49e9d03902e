"""
Editor routes.

An editor session is opened for a new or existing blog, receives field
edits, and is saved explicitly. While it edits an existing blog, autosave
writes the draft in the background.
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT, HTTP_404_NOT_FOUND

from blogcore.dependencies import ActiveUserDep, EditorsDep, EditorSessionDep
from blogcore.schemas import BlogUpdate, EditorOpenRequest, EditorSaveRequest, EditorState, SaveResult

router = APIRouter(prefix="/editor", tags=["✏️ Editor"])


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=EditorState,
    status_code=HTTP_201_CREATED,
    summary="Open an editor",
    description="Open an editor for one of your blogs, or omit `blog_id` to start a new one.",
    responses={404: {"content": {"application/json": {"example": {"detail": "Blog not found"}}}}},
    operation_id="editor_open",
)
async def open_editor(
    payload: EditorOpenRequest,
    user: ActiveUserDep,
    editors: EditorsDep,
) -> EditorState:
    session = await editors.open(user, payload.blog_id)
    if session is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Blog not found")
    return session.state()


@router.get(
    "/{session_id}",
    response_class=ORJSONResponse,
    response_model=EditorState,
    summary="Get editor state",
    operation_id="editor_get",
)
async def get_editor(session: EditorSessionDep) -> EditorState:
    return session.state()


@router.patch(
    "/{session_id}",
    response_class=ORJSONResponse,
    response_model=EditorState,
    summary="Edit the draft",
    description="Merge field edits into the draft and mark it dirty. The autosave timer is not reset.",
    operation_id="editor_edit",
)
async def edit_draft(changes: BlogUpdate, session: EditorSessionDep) -> EditorState:
    session.edit(changes)
    return session.state()


@router.post(
    "/{session_id}/save",
    response_class=ORJSONResponse,
    response_model=SaveResult,
    summary="Save the draft",
    description=(
        "Save explicitly, optionally switching status. A refused save answers 200 "
        "with `success: false` and the reason in `error`."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"success": False, "blog": None, "error": "Title is required"},
                },
            },
        },
    },
    operation_id="editor_save",
)
async def save_draft(payload: EditorSaveRequest, session: EditorSessionDep) -> SaveResult:
    """
    Run the save command.

    Parameters
    ----------
    payload : EditorSaveRequest
        Optional status to save with.
    session : EditorSession
        The editor being saved.

    Returns
    -------
    SaveResult
        The stored blog, or why the save was refused.
    """
    return await session.save(payload.status)


@router.delete(
    "/{session_id}",
    status_code=HTTP_204_NO_CONTENT,
    summary="Close the editor",
    description="Close the session and stop its autosave timer. Unsaved create-mode edits are discarded.",
    operation_id="editor_close",
)
async def close_editor(session: EditorSessionDep, editors: EditorsDep) -> Response:
    await editors.close(session.session_id, session.owner_id)
    return Response(status_code=HTTP_204_NO_CONTENT)
