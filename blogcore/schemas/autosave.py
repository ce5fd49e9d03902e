"""Autosave preference and editor session views."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from blogcore.schemas.blog import BlogResponse, BlogStatus

type AutosaveStateName = Literal["idle", "armed", "saving"]


class AutosaveConfig(BaseModel):
    """Autosave preference; any positive interval is accepted."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    enabled: bool = True
    interval_seconds: int = Field(default=30, gt=0)


class AutosaveConfigResponse(AutosaveConfig):
    presets: list[int]


class EditorOpenRequest(BaseModel):
    """Open an editor; omit ``blog_id`` to start a new document."""

    blog_id: UUID | None = None


class EditorState(BaseModel):
    session_id: UUID
    blog_id: UUID | None
    mode: Literal["create", "edit"]
    dirty: bool
    autosave_state: AutosaveStateName
    autosave: AutosaveConfig
    last_saved_at: datetime | None
    draft: dict


class SaveResult(BaseModel):
    """Outcome of an explicit save command; the caller decides how to notify."""

    success: bool
    blog: BlogResponse | None = None
    error: str | None = None


class EditorSaveRequest(BaseModel):
    """Explicit save; ``status`` switches between draft and published."""

    status: BlogStatus | None = None
