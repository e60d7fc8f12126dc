"""Cost tracking routes.

Routes:
- GET    /api/projects/{id}/costs         - Cost categories of a project
- POST   /api/projects/{id}/costs         - Add a cost category
- GET    /api/projects/{id}/costs/summary - Budget / actual / variance totals
- PUT    /api/costs/{id}                  - Update a cost category
- DELETE /api/costs/{id}                  - Remove a cost category
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.core.errors import NotFoundError
from fieldflow.models import (
    CostCategory,
    CostCategoryCreate,
    CostCategoryUpdate,
    Project,
    PublicUser,
)
from fieldflow.services.costs import CostSummary, summarize_costs
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import (
    get_current_user,
    get_gate,
    get_project,
    get_storage,
    load_project,
)
from fieldflow.web.models import CostCategoryCreateRequest

router = APIRouter(prefix="/api", tags=["costs"])


def _load_cost(
    storage: Storage, gate: AuthorizationGate, user: PublicUser, cost_id: int, action: Action
) -> CostCategory:
    cost = storage.get_cost_category(cost_id)
    if cost is None:
        raise NotFoundError.for_resource("Cost category")
    project = load_project(storage, cost.project_id)
    gate.enforce(user, action, ResourceDescriptor.of_project(project, ResourceKind.COST))
    return cost


@router.get("/projects/{project_id}/costs", response_model=list[CostCategory])
async def list_costs(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.READ, ResourceDescriptor.of_project(project, ResourceKind.COST))
    return storage.get_cost_categories_by_project(project.id)


@router.get("/projects/{project_id}/costs/summary", response_model=CostSummary)
async def cost_summary(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.READ, ResourceDescriptor.of_project(project, ResourceKind.COST))
    return summarize_costs(storage, project.id)


@router.post(
    "/projects/{project_id}/costs",
    response_model=CostCategory,
    status_code=status.HTTP_201_CREATED,
)
async def create_cost(
    body: CostCategoryCreateRequest,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.CREATE, ResourceDescriptor.of_project(project, ResourceKind.COST))
    return storage.create_cost_category(
        CostCategoryCreate(project_id=project.id, **body.model_dump())
    )


@router.put("/costs/{cost_id}", response_model=CostCategory)
async def update_cost(
    cost_id: int,
    changes: CostCategoryUpdate,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    cost = _load_cost(storage, gate, user, cost_id, Action.UPDATE)
    return storage.update_cost_category(cost.id, changes)


@router.delete("/costs/{cost_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cost(
    cost_id: int,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    cost = _load_cost(storage, gate, user, cost_id, Action.DELETE)
    storage.delete_cost_category(cost.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
