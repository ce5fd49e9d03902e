from blogcore.errors.auth import (
    AuthError,
    InvalidCredentialsError,
    PasswordHashingError,
    PermissionDeniedError,
    PreconditionError,
    auth_exception_handler,
)
from blogcore.errors.base import BaseAppError, create_exception_handler
from blogcore.errors.database import (
    DatabaseError,
    DuplicateEntryError,
    RecordNotFoundError,
    database_exception_handler,
)
from blogcore.errors.snapshot import SnapshotError, snapshot_exception_handler
from blogcore.errors.validation import (
    ValidationError,
    app_validation_exception_handler,
    validation_exception_handler,
)

__all__ = [
    "AuthError",
    "BaseAppError",
    "DatabaseError",
    "DuplicateEntryError",
    "InvalidCredentialsError",
    "PasswordHashingError",
    "PermissionDeniedError",
    "PreconditionError",
    "RecordNotFoundError",
    "SnapshotError",
    "ValidationError",
    "app_validation_exception_handler",
    "auth_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "snapshot_exception_handler",
    "validation_exception_handler",
]
