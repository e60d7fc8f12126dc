"""Daily log routes.

Routes:
- GET  /api/projects/{id}/daily-logs - Site diary of a project
- POST /api/projects/{id}/daily-logs - Add an entry
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.models import DailyLog, DailyLogCreate, Project, PublicUser
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import get_current_user, get_gate, get_project, get_storage
from fieldflow.web.models import DailyLogCreateRequest

router = APIRouter(prefix="/api/projects/{project_id}/daily-logs", tags=["daily-logs"])


@router.get("", response_model=list[DailyLog])
async def list_daily_logs(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.READ, ResourceDescriptor.of_project(project, ResourceKind.DAILY_LOG))
    return storage.get_daily_logs_by_project(project.id)


@router.post("", response_model=DailyLog, status_code=status.HTTP_201_CREATED)
async def create_daily_log(
    body: DailyLogCreateRequest,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.CREATE, ResourceDescriptor.of_project(project, ResourceKind.DAILY_LOG))
    data = body.model_dump()
    data["date"] = body.date or date.today()
    return storage.create_daily_log(
        DailyLogCreate(project_id=project.id, created_by=user.id, **data)
    )
