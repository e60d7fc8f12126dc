"""Change order routes.

Routes:
- GET  /api/projects/{id}/change-orders - Change orders of a project
- POST /api/projects/{id}/change-orders - Raise a change order (staff)
- PUT  /api/change-orders/{id}/approve  - Approve a pending change order
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.core.audit_logger import log_action
from fieldflow.core.errors import NotFoundError
from fieldflow.models import ChangeOrder, Project, PublicUser
from fieldflow.services.change_orders import approve_change_order, create_change_order
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import (
    get_current_user,
    get_gate,
    get_project,
    get_storage,
    load_project,
)
from fieldflow.web.models import ChangeOrderCreateRequest

router = APIRouter(prefix="/api", tags=["change-orders"])


@router.get("/projects/{project_id}/change-orders", response_model=list[ChangeOrder])
async def list_change_orders(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(
        user, Action.READ, ResourceDescriptor.of_project(project, ResourceKind.CHANGE_ORDER)
    )
    return storage.get_change_orders_by_project(project.id)


@router.post(
    "/projects/{project_id}/change-orders",
    response_model=ChangeOrder,
    status_code=status.HTTP_201_CREATED,
)
async def raise_change_order(
    request: Request,
    body: ChangeOrderCreateRequest,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    """Create a pending change order and notify the project's client."""
    gate.enforce(
        user, Action.CREATE, ResourceDescriptor.of_project(project, ResourceKind.CHANGE_ORDER)
    )
    order = create_change_order(
        storage,
        project,
        title=body.title,
        description=body.description,
        amount=body.amount,
        created_by=user.id,
    )
    log_action(
        request,
        "CHANGE_ORDER_CREATE",
        user.username,
        user_id=user.id,
        resource_type="change_order",
        resource_id=order.id,
        details={"project_id": project.id, "amount": str(order.amount)},
    )
    return order


@router.put("/change-orders/{order_id}/approve", response_model=ChangeOrder)
async def approve(
    request: Request,
    order_id: int,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    """Approve a pending change order.

    The project's client and staff of the owning company may approve.
    Approving anything but a pending order is a 400 on ``status``.
    """
    order = storage.get_change_order(order_id)
    if order is None:
        raise NotFoundError.for_resource("Change order")
    project = load_project(storage, order.project_id)
    gate.enforce(
        user, Action.APPROVE, ResourceDescriptor.of_project(project, ResourceKind.CHANGE_ORDER)
    )
    approved = approve_change_order(storage, order_id, approver_id=user.id)
    log_action(
        request,
        "CHANGE_ORDER_APPROVE",
        user.username,
        user_id=user.id,
        resource_type="change_order",
        resource_id=order_id,
    )
    return approved
