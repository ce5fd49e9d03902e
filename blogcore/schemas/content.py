"""
Content block model.

A blog body is an ordered sequence of tagged blocks using the editor wire
shape ``{"type": <tag>, "data": {...}}``. The known tags form a closed union;
anything else, and any known tag whose payload cannot be coerced, becomes an
``UnknownBlock`` that keeps the original payload untouched.

Parsing never raises: whether a block is usable is decided by the renderer.
"""

from collections.abc import Iterable
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

KNOWN_BLOCK_TYPES = frozenset({"header", "paragraph", "list", "image", "quote"})

MIN_HEADER_LEVEL = 1
MAX_HEADER_LEVEL = 4


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


class HeaderData(BaseModel):
    level: int = 2
    text: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def clamp_level(cls, value: Any) -> Any:
        if value is None:
            return 2
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return min(max(value, MIN_HEADER_LEVEL), MAX_HEADER_LEVEL)
        return value

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _as_text(value)


class ParagraphData(BaseModel):
    text: str = ""

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _as_text(value)


class ListData(BaseModel):
    style: Literal["ordered", "unordered"] = "unordered"
    items: list[str] = Field(default_factory=list)

    @field_validator("style", mode="before")
    @classmethod
    def default_style(cls, value: Any) -> Any:
        return "unordered" if value is None else value

    @field_validator("items", mode="before")
    @classmethod
    def flatten_items(cls, value: Any) -> Any:
        """Nested-list editors emit ``{"content": ..., "items": [...]}`` objects."""
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [
            _as_text(item.get("content")) if isinstance(item, dict) else _as_text(item)
            for item in value
        ]


class ImageData(BaseModel):
    url: str = ""
    caption: str | None = None

    @model_validator(mode="before")
    @classmethod
    def lift_file_url(cls, data: Any) -> Any:
        """Image tools nest the address under ``file.url``."""
        if isinstance(data, dict) and not data.get("url"):
            file_info = data.get("file")
            if isinstance(file_info, dict) and file_info.get("url"):
                return {**data, "url": file_info["url"]}
        return data


class QuoteData(BaseModel):
    text: str = ""
    caption: str | None = None

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return _as_text(value)


class _KnownBlock(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def default_data(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("data") is None:
            return {**data, "data": {}}
        return data


class HeaderBlock(_KnownBlock):
    type: Literal["header"] = "header"
    data: HeaderData


class ParagraphBlock(_KnownBlock):
    type: Literal["paragraph"] = "paragraph"
    data: ParagraphData


class ListBlock(_KnownBlock):
    type: Literal["list"] = "list"
    data: ListData


class ImageBlock(_KnownBlock):
    type: Literal["image"] = "image"
    data: ImageData


class QuoteBlock(_KnownBlock):
    type: Literal["quote"] = "quote"
    data: QuoteData


class UnknownBlock(BaseModel):
    """Catch-all block; serializes back to exactly what was received."""

    type: str
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def wrap_payload(cls, data: Any) -> Any:
        if isinstance(data, dict) and not _is_wrapped(data):
            return {"type": block_tag_name(data), "raw": data}
        return data

    @model_serializer
    def serialize(self) -> dict[str, Any]:
        if "type" in self.raw:
            return self.raw
        return {"type": self.type, **self.raw}


def _is_wrapped(data: dict[str, Any]) -> bool:
    # A block may carry its own "raw" field; only our own envelope counts.
    raw = data.get("raw")
    return (
        set(data) <= {"type", "raw"}
        and isinstance(raw, dict)
        and raw.get("type") == data.get("type")
    )


def block_tag_name(value: Any) -> str:
    """Return the tag carried by a raw block, or ``"unknown"``."""
    tag = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return tag if isinstance(tag, str) and tag else "unknown"


def _discriminate(value: Any) -> str:
    if isinstance(value, UnknownBlock):
        return "unknown"
    tag = block_tag_name(value)
    return tag if tag in KNOWN_BLOCK_TYPES else "unknown"


ContentBlock = Annotated[
    Annotated[HeaderBlock, Tag("header")]
    | Annotated[ParagraphBlock, Tag("paragraph")]
    | Annotated[ListBlock, Tag("list")]
    | Annotated[ImageBlock, Tag("image")]
    | Annotated[QuoteBlock, Tag("quote")]
    | Annotated[UnknownBlock, Tag("unknown")],
    Discriminator(_discriminate),
]

_block_adapter: TypeAdapter[ContentBlock] = TypeAdapter(ContentBlock)


def parse_block(raw: Any) -> ContentBlock:
    """
    Parse one raw block without ever raising.

    Args:
        raw: Block as received (dict) or an already parsed block

    Returns:
        ContentBlock: Typed block, ``UnknownBlock`` when the tag is unknown
        or the payload does not fit the tag's schema
    """
    if isinstance(raw, BaseModel):
        return raw  # type: ignore[return-value]
    if not isinstance(raw, dict):
        return UnknownBlock.model_validate({"type": "unknown", "data": raw})
    try:
        return _block_adapter.validate_python(raw)
    except PydanticValidationError:
        return UnknownBlock.model_validate(raw)


def parse_content(value: Any) -> list[ContentBlock]:
    """
    Parse a document body into typed blocks.

    Accepts a list of blocks, an editor document ``{"blocks": [...]}``, or
    ``None`` for an empty body.
    """
    if value is None:
        return []
    if isinstance(value, dict):
        value = value.get("blocks") or []
    if not isinstance(value, Iterable) or isinstance(value, (str, bytes)):
        return []
    return [parse_block(item) for item in value]


def dump_content(blocks: Iterable[ContentBlock]) -> list[dict[str, Any]]:
    """Serialize blocks to their JSON wire shape."""
    return [block.model_dump(mode="json") for block in blocks]
