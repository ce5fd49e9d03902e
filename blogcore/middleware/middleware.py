"""
Middleware components for Blog Core.

Security headers, request logging and CORS, plus the lifespan handler that
builds the service container on startup and tears down editor timers and
database connections on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import basicConfig, getLogger
from time import perf_counter
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from blogcore.configs import settings
from blogcore.db import async_session_maker, close_db, init_db
from blogcore.monitoring import bind_request_id, clear_context, configure_logging, redact_pii
from blogcore.services import build_services
from blogcore.utils.helpers import file_logger, get_summary, host, time_taken

# --- Logging Configuration ---
basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = getLogger("rich")
file_logger(logger)
for handler in logger.handlers:
    handler.setFormatter(JsonFormatter())

install()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Manage application startup and shutdown events with service initialization."""
    start_time = perf_counter()
    logger.info(f"Starting {app.title}...")

    try:
        if settings.ENVIRONMENT != "development":
            configure_logging()
        await init_db()

        services = build_services(async_session_maker)
        app.state.services = services

        if settings.BOOTSTRAP_DEFAULT_ADMIN:
            await services.identity.bootstrap()
        config = await services.load_autosave_config()
        logger.info(
            f"Autosave {'enabled' if config.enabled else 'disabled'}, "
            f"every {config.interval_seconds}s",
        )

        logger.info(f"Services initialized in {time_taken(start_time)}")
        logger.info("  - Published feed: GET /api?apiKey=<key>")
        logger.info("  - Editor sessions: POST /editor")
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        await app.state.services.editors.close_all()
        await close_db()
        logger.info("Services cleaned up successfully")
    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Configure CORS middleware for the application."""
    allowed_origins: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
    ]

    if frontend_url := settings.PRODUCTION_FRONTEND_URL:
        allowed_origins.append(frontend_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing information."""
        start_time = perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        bind_request_id(request_id)

        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        # The feed key travels in the query string
        logger.info(redact_pii(f"Request: {route_info} {request.url.query}, from ip: {host(request)}"))

        try:
            response = await call_next(request)
        finally:
            clear_context()
        duration = perf_counter() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {duration:.2f}s",
        )
        response.headers["X-Request-ID"] = request_id
        return response


# Sent on every response, including error pages.
SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response
