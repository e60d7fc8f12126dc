"""Shared dependencies for FieldFlowPM web routes.

Long-lived collaborators (config, entity store, session registry, auth
service, authorization gate) are built once by ``create_app`` and kept on
``app.state``. These helpers hand them to route handlers through FastAPI's
``Depends()`` so tests can build an app around their own instances.

Usage:
    from fastapi import Depends
    from fieldflow.web.dependencies import get_current_user, get_storage

    @router.get("/api/things")
    async def list_things(
        user: PublicUser = Depends(get_current_user),
        storage: Storage = Depends(get_storage),
    ):
        ...
"""

from __future__ import annotations

from fastapi import Depends, Request

from fieldflow.auth.gate import AuthorizationGate
from fieldflow.auth.service import AuthService
from fieldflow.auth.sessions import SessionRegistry
from fieldflow.config import AppConfig
from fieldflow.core.errors import NotFoundError
from fieldflow.models import Project, PublicUser
from fieldflow.storage.base import Storage


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_sessions(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def get_gate(request: Request) -> AuthorizationGate:
    return request.app.state.gate


def get_session_token(request: Request) -> str | None:
    """Read the session token from the configured cookie."""
    return request.cookies.get(request.app.state.config.session.cookie_name)


def get_current_user(
    token: str | None = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
) -> PublicUser:
    """Dependency to require authentication on routes.

    Raises:
        AuthenticationError: No cookie, or the session is expired or revoked
    """
    return auth.require_user(token)


def load_project(storage: Storage, project_id: int) -> Project:
    """Fetch a project or raise NotFoundError."""
    project = storage.get_project(project_id)
    if project is None:
        raise NotFoundError.for_resource("Project")
    return project


def get_project(project_id: int, storage: Storage = Depends(get_storage)) -> Project:
    """Resolve the ``{project_id}`` path parameter to a project.

    Raises:
        NotFoundError: No such project
    """
    return load_project(storage, project_id)
