"""Change order workflow.

New change orders always start ``pending`` and the project's client is
notified that an approval is waiting. Approval is one-way and records who
approved and when.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal

import structlog

from fieldflow.core.errors import NotFoundError, ValidationError
from fieldflow.models import (
    ChangeOrder,
    ChangeOrderCreate,
    ChangeOrderStatus,
    ChangeOrderUpdate,
    NotificationCreate,
    NotificationType,
    Project,
)
from fieldflow.storage.base import Storage

logger = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_change_order(
    storage: Storage,
    project: Project,
    *,
    title: str,
    description: str,
    amount: Decimal,
    created_by: int,
) -> ChangeOrder:
    """Record a pending change order and notify the project's client.

    Args:
        storage: Entity store
        project: Parent project (already authorized by the caller)
        title: Short title, e.g. "CO-002: Upgraded fixtures"
        description: Scope of the change
        amount: Price of the change
        created_by: Id of the user raising it

    Returns:
        ChangeOrder: The stored change order
    """
    order = storage.create_change_order(
        ChangeOrderCreate(
            project_id=project.id,
            title=title,
            description=description,
            amount=amount,
            status=ChangeOrderStatus.PENDING,
            created_by=created_by,
        )
    )
    storage.create_notification(
        NotificationCreate(
            user_id=project.client_id,
            title="Change order awaiting approval",
            message=f"{order.title} on {project.name} needs your approval.",
            type=NotificationType.APPROVAL_NEEDED,
            related_id=order.id,
            related_type="change_order",
        )
    )
    logger.info(
        "change_order_created",
        change_order_id=order.id,
        project_id=project.id,
        amount=str(order.amount),
    )
    return order


def approve_change_order(
    storage: Storage,
    order_id: int,
    approver_id: int,
    now: Callable[[], datetime] = _utcnow,
) -> ChangeOrder:
    """Move a change order from pending to approved.

    Raises:
        NotFoundError: No such change order.
        ValidationError: The change order is not pending.
    """
    order = storage.get_change_order(order_id)
    if order is None:
        raise NotFoundError.for_resource("Change order")
    if order.status is not ChangeOrderStatus.PENDING:
        raise ValidationError.for_field(
            "status", f"Change order is {order.status.value}, only pending orders can be approved"
        )

    approved = storage.update_change_order(
        order_id,
        ChangeOrderUpdate(
            status=ChangeOrderStatus.APPROVED,
            approved_by=approver_id,
            approved_at=now(),
        ),
    )
    if approved is None:
        # Deleted between the read and the write
        raise NotFoundError.for_resource("Change order")
    logger.info("change_order_approved", change_order_id=order_id, approved_by=approver_id)
    return approved
