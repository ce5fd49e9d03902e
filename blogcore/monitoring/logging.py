"""
Structured logging for Blog Core.

Everything goes through structlog. Development gets a coloured console
renderer and every other environment gets one JSON object per line. Event
values are scrubbed before rendering: password fields, feed keys (header or
``apiKey`` query parameter), session cookies and e-mail addresses never reach
a handler.

>>> from blogcore.monitoring import get_logger
>>> get_logger(__name__).info("Autosave armed", session_id="s-1")
"""

from logging import INFO, Filter, Handler, LogRecord, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path as SyncPath
from re import IGNORECASE, Pattern
from re import compile as re_compile
from typing import Any

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import (
    bind_contextvars,
    clear_contextvars,
    get_contextvars,
    merge_contextvars,
)
from structlog.dev import ConsoleRenderer, RichTracebackFormatter
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.processors import json as struct_json
from structlog.stdlib import (
    BoundLogger,
    ExtraAdder,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from blogcore.configs.settings import settings
from blogcore.utils.helpers import today_str

REDACTED = "[REDACTED]"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 5

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "proxy-authorization"})
SENSITIVE_KEYS = frozenset({"password", "password_hash", "passwordhash", "api_key", "apikey"})

# Key pattern first: a key value may itself look like an address.
PII_PATTERNS: tuple[tuple[Pattern[str], str], ...] = (
    (re_compile(r"(api_?key=)[^&\s]+", IGNORECASE), rf"\1{REDACTED}"),
    (re_compile(r"[\w.%+-]+@[\w.-]+\.[A-Za-z]{2,}"), "[REDACTED_EMAIL]"),
)

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape line breaks so one event stays on one line.

    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def sanitize_headers(headers: dict[str, Any]) -> dict[str, Any]:
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def redact_pii(message: str) -> str:
    """
    Blank out feed keys and e-mail addresses.

    >>> redact_pii("GET /api?apiKey=123e4567 from user@example.com")
    'GET /api?apiKey=[REDACTED] from [REDACTED_EMAIL]'
    """
    for pattern, replacement in PII_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """structlog processor scrubbing secrets out of every event value."""
    for key, value in event_dict.items():
        lowered = key.lower()
        if lowered in SENSITIVE_KEYS:
            event_dict[key] = REDACTED
        elif lowered == "headers" and isinstance(value, dict):
            event_dict[key] = sanitize_headers(value)
        elif isinstance(value, str):
            event_dict[key] = redact_pii(sanitize_log_message(value))
    return event_dict


# Applied to records coming from plain stdlib loggers (uvicorn, sqlalchemy).
FOREIGN_PRE_CHAIN: list[Processor] = [merge_contextvars, add_log_level]


def _renderer(*, colors: bool) -> Processor:
    if settings.ENVIRONMENT == "development":
        return ConsoleRenderer(
            colors=colors,
            pad_level=False,
            exception_formatter=RichTracebackFormatter(),
        )
    return JSONRenderer(serializer=struct_json.dumps)


def _formatter(*, colors: bool) -> ProcessorFormatter:
    return ProcessorFormatter(
        processors=[
            ExtraAdder(),
            ProcessorFormatter.remove_processors_meta,
            add_timestamp,
            sanitize_event_dict,
            _renderer(colors=colors),
        ],
        foreign_pre_chain=FOREIGN_PRE_CHAIN,
    )


def _file_handler() -> Handler | None:
    if not settings.LOG_TO_FILE:
        return None
    log_file = SyncPath(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS)
    handler.setLevel(INFO)
    handler.setFormatter(_formatter(colors=False))
    return handler


def configure_logging() -> None:
    """Route structlog and stdlib logging through the scrubbing formatter."""
    # Reloads re-run this; stale handlers would double every line.
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    console = StreamHandler()
    console.setFormatter(_formatter(colors=True))
    console.addFilter(RequestIdFilter())
    root.addHandler(console)

    if (file_handler := _file_handler()) is not None:
        root.addHandler(file_handler)


def get_logger(name: str) -> BoundLogger:
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()


class RequestIdFilter(Filter):
    """Copy the bound request id onto stdlib records for %-style formats."""

    def filter(self, record: LogRecord) -> bool:
        record.request_id = get_contextvars().get("request_id", "N/A")
        return True
