# blogcore/main.py

"""Blog Core - owner-scoped blog storage, autosave and a key-gated public feed."""

from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from blogcore.dependencies import ServicesDep
from blogcore.errors import (
    AuthError,
    DatabaseError,
    PasswordHashingError,
    SnapshotError,
    ValidationError,
    app_validation_exception_handler,
    auth_exception_handler,
    database_exception_handler,
    snapshot_exception_handler,
    validation_exception_handler,
)
from blogcore.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from blogcore.routes import (
    admin_router,
    auth_router,
    blog_router,
    editor_router,
    gateway_router,
    settings_router,
)
from blogcore.schemas import HealthCheckResponse
from blogcore.utils.helpers import file_logger, today_str

app = FastAPI(
    title="Blog Core",
    description="Owner-scoped blog storage with autosave and a key-gated public feed",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)

routes = [
    auth_router,
    blog_router,
    editor_router,
    settings_router,
    admin_router,
    gateway_router,
]

_ = [app.include_router(router) for router in routes]

errors = [
    (AuthError, auth_exception_handler),
    (PasswordHashingError, auth_exception_handler),
    (DatabaseError, database_exception_handler),
    (ValidationError, app_validation_exception_handler),
    (SnapshotError, snapshot_exception_handler),
    (RequestValidationError, validation_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

logger = file_logger(getLogger(__name__))


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "version": "1.0.0",
                        "status": "ok",
                        "timestamp": "2025-01-01 00:00:00",
                        "database": "connected",
                        "open_editors": 0,
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
async def health_check(request: Request, services: ServicesDep) -> HealthCheckResponse:
    """
    Health check endpoint.

    Parameters
    ----------
    request : Request
        Current request context.
    services : ServiceContainer
        Application services.

    Returns
    -------
    HealthCheckResponse
        Version, database reachability and the number of open editors.
    """
    try:
        async with services.session_maker() as session:
            await session.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "unavailable"

    return HealthCheckResponse(
        version=app.version,
        status="ok" if database == "connected" else "degraded",
        timestamp=today_str(),
        database=database,
        open_editors=len(services.editors),
    )
