"""FieldFlowPM API route modules.

Each module exports a ``router`` (APIRouter) covering one functional area;
``fieldflow.web.app.create_app`` includes them all. Shared collaborators
come from ``fieldflow.web.dependencies`` and request bodies from
``fieldflow.web.models``.

Usage:
    from fieldflow.web.routes import projects
    app.include_router(projects.router)
"""

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

__all__ = [
    "auth",
    "change_orders",
    "company",
    "contacts",
    "costs",
    "daily_logs",
    "documents",
    "health",
    "notifications",
    "projects",
    "tasks",
    "users",
]
