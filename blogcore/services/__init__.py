from blogcore.services.autosave import AutosaveScheduler
from blogcore.services.container import ServiceContainer, build_services
from blogcore.services.editor import EditorRegistry, EditorSession
from blogcore.services.gateway import ApiGateway
from blogcore.services.identity import IdentityStore
from blogcore.services.renderer import (
    RenderedBlog,
    RenderNode,
    render_block,
    render_blocks,
    render_document,
    render_html,
)
from blogcore.services.snapshot import SnapshotService

__all__ = [
    "ApiGateway",
    "AutosaveScheduler",
    "EditorRegistry",
    "EditorSession",
    "IdentityStore",
    "RenderNode",
    "RenderedBlog",
    "ServiceContainer",
    "SnapshotService",
    "build_services",
    "render_block",
    "render_blocks",
    "render_document",
    "render_html",
]
