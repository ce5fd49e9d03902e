from collections.abc import MutableMapping
from datetime import UTC, datetime
from logging import INFO, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from re import sub
from time import perf_counter
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from pythonjsonlogger.json import JsonFormatter
from starlette.routing import BaseRoute, Match, Route

from blogcore.configs import settings


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""
    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    for route in routes:
        if type(route) is APIRoute and route.matches(scope)[0] == Match.FULL:
            return route.summary
        if type(route) is Route and route.matches(scope)[0] == Match.FULL:
            return route.name
    return None


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(tz=UTC)


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def time_taken(start_time: float) -> str:
    minutes, seconds = divmod(perf_counter() - start_time, 60)
    return f"{int(minutes)}m {int(seconds)}s"


def slugify(text: str) -> str:
    """
    Derive a URL slug from free text.

    Lowercases, strips everything that is not alphanumeric, whitespace or a
    dash, then turns whitespace runs into single dashes.

    Args:
        text: Source text, usually a blog title

    Returns:
        str: Slug, possibly empty when the text has no usable characters

    Example:
        >>> slugify("Hello World!")
        'hello-world'
    """
    slug = text.lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")


def file_logger(logger: Logger) -> Logger:
    """
    Attach the rotating JSON file handler to a logger.

    Does nothing when ``LOG_TO_FILE`` is disabled or the logger already
    carries a file handler.

    Args:
        logger: Logger to extend

    Returns:
        Logger: The same logger, for chaining at module level
    """
    if not settings.LOG_TO_FILE:
        return logger
    if any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers):
        return logger

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setLevel(INFO)
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger
