"""FastAPI application factory for the FieldFlowPM API.

``create_app`` wires the long-lived collaborators (entity store, session
registry, auth service, authorization gate) onto ``app.state``, installs
request logging, metrics and the error mapping, and includes every router.

Error mapping:
- ``FieldFlowError`` subclasses -> their ``status_code`` with
  ``{"message": ..., "errors": [...]}``
- request body/query validation -> 400 with per-field errors
- unknown route -> 404 ``{"message": "Route not found"}``
- anything else -> 500, logged with traceback; the exception text is only
  echoed outside production
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta
from typing import Any
from uuid import uuid4

import pydantic
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from fieldflow import __version__
from fieldflow.auth.gate import AuthorizationGate
from fieldflow.auth.service import AuthService
from fieldflow.auth.sessions import MemorySessionRegistry, RedisSessionRegistry, SessionRegistry
from fieldflow.config import AppConfig, get_config
from fieldflow.core.errors import FieldFlowError, ValidationError
from fieldflow.core.logging import configure_logging
from fieldflow.storage.base import Storage
from fieldflow.storage.memory import MemStorage
from fieldflow.storage.seed import seed_demo_data
from fieldflow.web.routes import (
    auth,
    change_orders,
    company,
    contacts,
    costs,
    daily_logs,
    documents,
    health,
    notifications,
    projects,
    tasks,
    users,
)

logger = structlog.get_logger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


# Request Logging Middleware
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, expose_errors: bool = False):
        super().__init__(app)
        self.expose_errors = expose_errors

    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()

        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("request_failed", error=str(exc))
            content: dict[str, Any] = {"message": "Internal server error"}
            if self.expose_errors:
                content["error"] = str(exc)
            response = JSONResponse(status_code=500, content=content)

        logger.info("request_completed", status_code=response.status_code)
        response.headers["X-Request-ID"] = request_id
        return response


def _error_body(message: str, errors: list[dict[str, str]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return body


def _field_errors(errors: Iterable[dict[str, Any]]) -> list[dict[str, str]]:
    """Flatten pydantic error dicts into ``{field, message}`` pairs."""
    flattened = []
    for error in errors:
        parts = [str(p) for p in error.get("loc", ()) if p not in _LOCATION_PREFIXES]
        flattened.append(
            {"field": ".".join(parts) or "body", "message": error.get("msg", "Invalid value")}
        )
    return flattened


# Exception Handlers
async def fieldflow_error_handler(request: Request, exc: FieldFlowError):
    errors = exc.details if isinstance(exc, ValidationError) else None
    if exc.status_code >= 500:
        logger.error("internal_error", error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, errors))


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content=_error_body(ValidationError.default_message, _field_errors(exc.errors())),
    )


async def model_validation_handler(request: Request, exc: pydantic.ValidationError):
    # Raised when a merged update no longer forms a valid record
    return JSONResponse(
        status_code=400,
        content=_error_body(ValidationError.default_message, _field_errors(exc.errors())),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": message},
        headers=getattr(exc, "headers", None),
    )


def build_session_registry(config: AppConfig) -> SessionRegistry:
    """Create the session registry selected by ``SESSION_BACKEND``."""
    ttl = timedelta(hours=config.session.ttl_hours)
    if config.session.backend == "redis":
        logger.info("session_backend", backend="redis")
        return RedisSessionRegistry.from_url(config.session.redis_url, ttl=ttl)
    return MemorySessionRegistry(ttl=ttl)


def create_app(
    config: AppConfig | None = None,
    storage: Storage | None = None,
    sessions: SessionRegistry | None = None,
) -> FastAPI:
    """Build the FieldFlowPM API.

    Args:
        config: Application configuration (defaults to the env singleton)
        storage: Entity store; a fresh in-memory store (seeded when
            ``SEED_DEMO_DATA`` is on) when omitted
        sessions: Session registry; built from config when omitted

    Returns:
        FastAPI: Configured application
    """
    config = config or get_config()
    configure_logging(config.log_level, json_logs=config.log_format == "json")

    if storage is None:
        storage = MemStorage()
        if config.seed.enabled:
            seed_demo_data(storage, config.seed, bcrypt_rounds=config.security.bcrypt_rounds)
    if sessions is None:
        sessions = build_session_registry(config)

    app = FastAPI(
        title="FieldFlowPM API",
        description="Construction project management: projects, costs, schedules and field records",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.config = config
    app.state.storage = storage
    app.state.sessions = sessions
    app.state.auth = AuthService(storage, sessions, bcrypt_rounds=config.security.bcrypt_rounds)
    app.state.gate = AuthorizationGate()

    # Prometheus Metrics
    if config.enable_metrics:
        Instrumentator().instrument(app).expose(app, include_in_schema=False)

    # Added last so it wraps everything else
    app.add_middleware(RequestLoggingMiddleware, expose_errors=not config.is_production)

    app.add_exception_handler(FieldFlowError, fieldflow_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(pydantic.ValidationError, model_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Include Routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(projects.router)
    app.include_router(tasks.router)
    app.include_router(costs.router)
    app.include_router(change_orders.router)
    app.include_router(daily_logs.router)
    app.include_router(documents.router)
    app.include_router(contacts.router)
    app.include_router(notifications.router)
    app.include_router(users.router)
    app.include_router(company.router)

    logger.info("app_created", environment=config.environment, metrics=config.enable_metrics)
    return app
