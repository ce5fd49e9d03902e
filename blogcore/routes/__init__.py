from blogcore.routes.admin import router as admin_router
from blogcore.routes.auth import router as auth_router
from blogcore.routes.blog import router as blog_router
from blogcore.routes.editor import router as editor_router
from blogcore.routes.gateway import router as gateway_router
from blogcore.routes.settings import router as settings_router

__all__ = [
    "admin_router",
    "auth_router",
    "blog_router",
    "editor_router",
    "gateway_router",
    "settings_router",
]
