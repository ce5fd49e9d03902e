"""User schemas: signup/login payloads and the public user view."""

from typing import Literal
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, SecretStr

type UserRole = Literal["admin", "user"]


class SignupRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    email: EmailStr
    password: SecretStr = Field(min_length=1)


class LoginRequest(BaseModel):
    email: EmailStr
    password: SecretStr


class UserProfileUpdate(BaseModel):
    """Admin edit of a user's identity fields; both are required."""

    username: str
    email: str


class UserPublic(BaseModel):
    """A user without credentials, as held by the session."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    username: str
    email: str
    avatar: str | None = None
    role: UserRole = "user"
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("api_key", "apiKey"),
        serialization_alias="apiKey",
    )
    request_count: int = Field(
        default=0,
        validation_alias=AliasChoices("request_count", "requestCount"),
        serialization_alias="requestCount",
    )


class ApiKeyResponse(BaseModel):
    api_key: str = Field(serialization_alias="apiKey")
