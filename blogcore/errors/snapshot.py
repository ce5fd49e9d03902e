from logging import getLogger

from starlette.status import HTTP_400_BAD_REQUEST

from blogcore.errors.base import BaseAppError, create_exception_handler
from blogcore.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))


class SnapshotError(BaseAppError):
    """Raised when a snapshot payload cannot be read at all."""

    def __init__(self, detail: str = "Unreadable snapshot") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


snapshot_exception_handler = create_exception_handler(logger)
