"""
Admin routes.

User management and snapshot export/import. Every endpoint requires an
active session whose user has the ``admin`` role.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Body
from fastapi.responses import ORJSONResponse

from blogcore.dependencies import AdminUserDep, IdentityDep, ServicesDep
from blogcore.schemas import ApiKeyResponse, ImportReport, UserProfileUpdate, UserPublic

router = APIRouter(prefix="/admin", tags=["🛡️ Admin"])


@router.get(
    "/users",
    response_class=ORJSONResponse,
    response_model=list[UserPublic],
    summary="List users",
    operation_id="admin_users_list",
)
async def list_users(admin: AdminUserDep, identity: IdentityDep) -> list[UserPublic]:
    return [UserPublic.model_validate(user) for user in await identity.list_users()]


@router.post(
    "/users/{user_id}/api-key",
    response_class=ORJSONResponse,
    response_model=ApiKeyResponse,
    summary="Regenerate a user's API key",
    operation_id="admin_users_api_key",
)
async def regenerate_api_key(
    user_id: UUID,
    admin: AdminUserDep,
    identity: IdentityDep,
) -> ApiKeyResponse:
    return ApiKeyResponse(api_key=await identity.generate_api_key(user_id))


@router.post(
    "/users/{user_id}/toggle-role",
    response_class=ORJSONResponse,
    response_model=UserPublic,
    summary="Toggle admin role",
    operation_id="admin_users_toggle_role",
)
async def toggle_role(user_id: UUID, admin: AdminUserDep, identity: IdentityDep) -> UserPublic:
    return UserPublic.model_validate(await identity.toggle_role(user_id))


@router.patch(
    "/users/{user_id}",
    response_class=ORJSONResponse,
    response_model=UserPublic,
    summary="Edit a user's username and email",
    responses={
        409: {"content": {"application/json": {"example": {"detail": "Email already exists"}}}},
        422: {
            "content": {
                "application/json": {"example": {"detail": "Username and email are required"}},
            },
        },
    },
    operation_id="admin_users_update",
)
async def update_user(
    user_id: UUID,
    payload: UserProfileUpdate,
    admin: AdminUserDep,
    identity: IdentityDep,
) -> UserPublic:
    user = await identity.update_profile(user_id, payload.username, payload.email)
    return UserPublic.model_validate(user)


@router.get(
    "/snapshot/export",
    response_class=ORJSONResponse,
    summary="Export a snapshot",
    description="Dump users, blogs, the session and the autosave preference as one document.",
    operation_id="admin_snapshot_export",
)
async def export_snapshot(admin: AdminUserDep, services: ServicesDep) -> ORJSONResponse:
    return ORJSONResponse(await services.snapshots.export())


@router.post(
    "/snapshot/import",
    response_class=ORJSONResponse,
    response_model=ImportReport,
    summary="Import a snapshot",
    description=(
        "Restore a snapshot, including the legacy browser-storage layout. Invalid or "
        "conflicting records are quarantined and listed in the report."
    ),
    responses={
        400: {
            "content": {
                "application/json": {"example": {"detail": "Snapshot must be a JSON object"}},
            },
        },
    },
    operation_id="admin_snapshot_import",
)
async def import_snapshot(
    payload: Annotated[Any, Body()],
    admin: AdminUserDep,
    services: ServicesDep,
) -> ImportReport:
    report = await services.snapshots.import_(payload)
    if report.autosave_restored:
        await services.load_autosave_config()
    return report
