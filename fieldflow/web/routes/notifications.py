"""Notification inbox routes (always the caller's own).

Routes:
- GET /api/notifications           - All, newest first
- GET /api/notifications/unread    - Unread only, newest first
- PUT /api/notifications/{id}/read - Mark one read
- PUT /api/notifications/read-all  - Mark every unread one read
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor
from fieldflow.core.errors import NotFoundError
from fieldflow.models import Notification, PublicUser
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import get_current_user, get_gate, get_storage
from fieldflow.web.models import MessageResponse, ReadAllResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[Notification])
async def list_notifications(
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return list(reversed(storage.get_notifications_by_user(user.id)))


@router.get("/unread", response_model=list[Notification])
async def list_unread(
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return list(reversed(storage.get_unread_notifications_by_user(user.id)))


@router.put("/read-all", response_model=ReadAllResponse)
async def mark_all_read(
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
):
    return ReadAllResponse(updated=storage.mark_all_notifications_as_read(user.id))


@router.put("/{notification_id}/read", response_model=MessageResponse)
async def mark_read(
    notification_id: int,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    notification = storage.get_notification(notification_id)
    if notification is None:
        raise NotFoundError.for_resource("Notification")
    gate.enforce(user, Action.UPDATE, ResourceDescriptor.of_notification(notification))
    storage.mark_notification_as_read(notification_id)
    return MessageResponse(message="Notification marked as read")
