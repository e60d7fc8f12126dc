"""Project routes.

Routes:
- GET    /api/projects      - Projects visible to the caller
- GET    /api/projects/{id} - One project
- POST   /api/projects      - Create (admin, employee)
- PUT    /api/projects/{id} - Update (admin, employee of the owning company)
- DELETE /api/projects/{id} - Delete (admin)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.core.audit_logger import log_action
from fieldflow.core.errors import ValidationError
from fieldflow.models import Project, ProjectCreate, ProjectUpdate, PublicUser, Role
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import get_current_user, get_gate, get_project, get_storage
from fieldflow.web.models import ProjectCreateRequest

router = APIRouter(prefix="/api/projects", tags=["projects"])


def _check_client(storage: Storage, client_id: int) -> None:
    client = storage.get_user(client_id)
    if client is None or client.role is not Role.CLIENT:
        raise ValidationError.for_field("clientId", "Client not found")


@router.get("", response_model=list[Project])
async def list_projects(
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    """List projects for the caller.

    Clients see projects they are the client of; staff see their company's
    projects; an admin without a company sees every project.
    """
    if user.role is Role.CLIENT:
        candidates = storage.get_projects_by_client(user.id)
    elif user.company_id is not None:
        candidates = storage.get_projects_by_company(user.company_id)
    elif user.role is Role.ADMIN:
        candidates = storage.list_projects()
    else:
        candidates = []
    return gate.filter_visible(user, ResourceKind.PROJECT, candidates, ResourceDescriptor.of_project)


@router.get("/{project_id}", response_model=Project)
async def get_project_detail(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.READ, ResourceDescriptor.of_project(project))
    return project


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreateRequest,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    company_id = body.company_id if body.company_id is not None else user.company_id
    gate.enforce(
        user,
        Action.CREATE,
        ResourceDescriptor(ResourceKind.PROJECT, company_id=company_id, client_id=body.client_id),
    )
    if company_id is None or storage.get_company(company_id) is None:
        raise ValidationError.for_field("companyId", "Company not found")
    _check_client(storage, body.client_id)

    data = body.model_dump(exclude={"company_id"})
    return storage.create_project(ProjectCreate(company_id=company_id, **data))


@router.put("/{project_id}", response_model=Project)
async def update_project(
    changes: ProjectUpdate,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.UPDATE, ResourceDescriptor.of_project(project))
    if changes.client_id is not None:
        _check_client(storage, changes.client_id)
    return storage.update_project(project.id, changes)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    request: Request,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    # Child records are left in place; there is no cascade.
    gate.enforce(user, Action.DELETE, ResourceDescriptor.of_project(project))
    storage.delete_project(project.id)
    log_action(
        request,
        "PROJECT_DELETE",
        user.username,
        user_id=user.id,
        resource_type="project",
        resource_id=project.id,
        details={"name": project.name},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
