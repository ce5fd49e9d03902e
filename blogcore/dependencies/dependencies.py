"""Application dependencies: the service container and the active identity."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request
from starlette.status import HTTP_404_NOT_FOUND, HTTP_503_SERVICE_UNAVAILABLE

from blogcore.models import UserDB
from blogcore.repositories import BlogRepository
from blogcore.services import EditorRegistry, EditorSession, IdentityStore, ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    """
    Return the container built during startup.

    Raises
    ------
    HTTPException
        503 when the application has not finished starting.
    """
    services: ServiceContainer | None = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Service starting")
    return services


ServicesDep = Annotated[ServiceContainer, Depends(get_services)]


def get_identity(services: ServicesDep) -> IdentityStore:
    return services.identity


def get_blog_repository(services: ServicesDep) -> BlogRepository:
    return services.blogs


def get_editor_registry(services: ServicesDep) -> EditorRegistry:
    return services.editors


IdentityDep = Annotated[IdentityStore, Depends(get_identity)]
BlogRepoDep = Annotated[BlogRepository, Depends(get_blog_repository)]
EditorsDep = Annotated[EditorRegistry, Depends(get_editor_registry)]


async def get_active_user(identity: IdentityDep) -> UserDB:
    """
    Resolve the active session's user.

    Raises
    ------
    PreconditionError
        When no session is open (401).
    """
    return await identity.require_active_user()


async def get_admin_user(identity: IdentityDep) -> UserDB:
    """
    Resolve the active user and require the admin role.

    Raises
    ------
    PreconditionError
        When no session is open (401).
    PermissionDeniedError
        When the user is not an admin (403).
    """
    return await identity.require_admin()


ActiveUserDep = Annotated[UserDB, Depends(get_active_user)]
AdminUserDep = Annotated[UserDB, Depends(get_admin_user)]


def get_editor_session(
    session_id: UUID,
    editors: EditorsDep,
    user: ActiveUserDep,
) -> EditorSession:
    """Look up one of the active user's open editors, 404 otherwise."""
    session = editors.get(session_id, user.id)
    if session is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Editor session not found")
    return session


EditorSessionDep = Annotated[EditorSession, Depends(get_editor_session)]
