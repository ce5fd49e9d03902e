from blogcore.managers.password_manager import (
    PasswordHasher,
    get_password_hasher,
    hash_password,
    verify_and_update_password,
    verify_password,
)

__all__ = [
    "PasswordHasher",
    "get_password_hasher",
    "hash_password",
    "verify_and_update_password",
    "verify_password",
]
