"""Project schedule (task) routes.

Routes:
- GET    /api/projects/{id}/tasks - Tasks of a project
- POST   /api/projects/{id}/tasks - Add a task
- PUT    /api/tasks/{id}          - Update a task
- DELETE /api/tasks/{id}          - Remove a task
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.core.errors import NotFoundError, ValidationError
from fieldflow.models import (
    Project,
    ProjectTask,
    ProjectTaskCreate,
    ProjectTaskUpdate,
    PublicUser,
)
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import (
    get_current_user,
    get_gate,
    get_project,
    get_storage,
    load_project,
)
from fieldflow.web.models import TaskCreateRequest

router = APIRouter(prefix="/api", tags=["schedule"])


def _check_assignee(storage: Storage, user_id: int | None) -> None:
    if user_id is not None and storage.get_user(user_id) is None:
        raise ValidationError.for_field("assignedTo", "Assignee not found")


def _load_task(
    storage: Storage, gate: AuthorizationGate, user: PublicUser, task_id: int, action: Action
) -> ProjectTask:
    task = storage.get_project_task(task_id)
    if task is None:
        raise NotFoundError.for_resource("Task")
    project = load_project(storage, task.project_id)
    gate.enforce(user, action, ResourceDescriptor.of_project(project, ResourceKind.TASK))
    return task


@router.get("/projects/{project_id}/tasks", response_model=list[ProjectTask])
async def list_tasks(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.READ, ResourceDescriptor.of_project(project, ResourceKind.TASK))
    return storage.get_tasks_by_project(project.id)


@router.post(
    "/projects/{project_id}/tasks",
    response_model=ProjectTask,
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    body: TaskCreateRequest,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.CREATE, ResourceDescriptor.of_project(project, ResourceKind.TASK))
    _check_assignee(storage, body.assigned_to)
    return storage.create_project_task(ProjectTaskCreate(project_id=project.id, **body.model_dump()))


@router.put("/tasks/{task_id}", response_model=ProjectTask)
async def update_task(
    task_id: int,
    changes: ProjectTaskUpdate,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    task = _load_task(storage, gate, user, task_id, Action.UPDATE)
    _check_assignee(storage, changes.assigned_to)
    return storage.update_project_task(task.id, changes)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: int,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    task = _load_task(storage, gate, user, task_id, Action.DELETE)
    storage.delete_project_task(task.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
