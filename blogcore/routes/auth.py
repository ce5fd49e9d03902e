"""
Authentication routes.

Signup, login and logout operate on the single active session held by the
Identity Store; there are no tokens. ``/auth/api-key`` issues a feed key for
the active user.
"""

from fastapi import APIRouter
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from blogcore.dependencies import ActiveUserDep, EditorsDep, IdentityDep
from blogcore.errors import InvalidCredentialsError
from blogcore.schemas import ApiKeyResponse, LoginRequest, SignupRequest, UserPublic

router = APIRouter(prefix="/auth", tags=["🔐 Auth"])


@router.post(
    "/signup",
    response_class=ORJSONResponse,
    response_model=UserPublic,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account and open a session for it. The first account becomes an admin.",
    responses={
        409: {
            "description": "Email already registered",
            "content": {
                "application/json": {
                    "example": {"detail": "Email 'ada@example.com' already exists"},
                },
            },
        },
    },
    operation_id="auth_signup",
)
async def signup(payload: SignupRequest, identity: IdentityDep) -> UserPublic:
    """
    Register a user and log them in.

    Parameters
    ----------
    payload : SignupRequest
        Username, email and password.
    identity : IdentityStore
        Identity Store.

    Returns
    -------
    UserPublic
        The new user, without credentials.
    """
    user = await identity.signup(
        payload.username,
        str(payload.email),
        payload.password.get_secret_value(),
    )
    return UserPublic.model_validate(user)


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=UserPublic,
    summary="Log in",
    responses={
        401: {
            "description": "Invalid credentials",
            "content": {
                "application/json": {
                    "example": {"detail": "Invalid credentials. Please try again."},
                },
            },
        },
    },
    operation_id="auth_login",
)
async def login(payload: LoginRequest, identity: IdentityDep) -> UserPublic:
    user = await identity.login(str(payload.email), payload.password.get_secret_value())
    if user is None:
        raise InvalidCredentialsError
    return UserPublic.model_validate(user)


@router.post(
    "/logout",
    status_code=HTTP_204_NO_CONTENT,
    summary="Log out",
    description="Close the session and every editor it opened.",
    operation_id="auth_logout",
)
async def logout(identity: IdentityDep, editors: EditorsDep) -> Response:
    user = await identity.active_user()
    if user is not None:
        await editors.close_owner(user.id)
    await identity.logout()
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.get(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserPublic,
    summary="Get the active user",
    operation_id="auth_me",
)
async def me(user: ActiveUserDep) -> UserPublic:
    return UserPublic.model_validate(user)


@router.post(
    "/api-key",
    response_class=ORJSONResponse,
    response_model=ApiKeyResponse,
    summary="Generate an API key",
    description="Issue a new feed API key for the active user, replacing any previous one.",
    operation_id="auth_generate_api_key",
)
async def generate_api_key(user: ActiveUserDep, identity: IdentityDep) -> ApiKeyResponse:
    return ApiKeyResponse(api_key=await identity.generate_api_key(user.id))
