from blogcore.schemas.autosave import (
    AutosaveConfig,
    AutosaveConfigResponse,
    EditorOpenRequest,
    EditorSaveRequest,
    EditorState,
    SaveResult,
)
from blogcore.schemas.blog import (
    BlogCreate,
    BlogResponse,
    BlogStats,
    BlogUpdate,
)
from blogcore.schemas.content import (
    ContentBlock,
    HeaderBlock,
    ImageBlock,
    ListBlock,
    ParagraphBlock,
    QuoteBlock,
    UnknownBlock,
    dump_content,
    parse_block,
    parse_content,
)
from blogcore.schemas.gateway import FeedResponse
from blogcore.schemas.health import HealthCheckResponse
from blogcore.schemas.snapshot import ImportReport, QuarantinedRecord
from blogcore.schemas.user import (
    ApiKeyResponse,
    LoginRequest,
    SignupRequest,
    UserProfileUpdate,
    UserPublic,
)

__all__ = [
    "ApiKeyResponse",
    "AutosaveConfig",
    "AutosaveConfigResponse",
    "BlogCreate",
    "BlogResponse",
    "BlogStats",
    "BlogUpdate",
    "ContentBlock",
    "EditorOpenRequest",
    "EditorSaveRequest",
    "EditorState",
    "FeedResponse",
    "HeaderBlock",
    "HealthCheckResponse",
    "ImageBlock",
    "ImportReport",
    "ListBlock",
    "LoginRequest",
    "ParagraphBlock",
    "QuarantinedRecord",
    "QuoteBlock",
    "SaveResult",
    "SignupRequest",
    "UnknownBlock",
    "UserProfileUpdate",
    "UserPublic",
    "dump_content",
    "parse_block",
    "parse_content",
]
