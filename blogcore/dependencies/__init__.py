from blogcore.dependencies.dependencies import (
    ActiveUserDep,
    AdminUserDep,
    BlogRepoDep,
    EditorsDep,
    EditorSessionDep,
    IdentityDep,
    ServicesDep,
    get_active_user,
    get_admin_user,
    get_services,
)

__all__ = [
    "ActiveUserDep",
    "AdminUserDep",
    "BlogRepoDep",
    "EditorSessionDep",
    "EditorsDep",
    "IdentityDep",
    "ServicesDep",
    "get_active_user",
    "get_admin_user",
    "get_services",
]
