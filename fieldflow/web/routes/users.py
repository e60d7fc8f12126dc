"""User management routes.

Routes:
- GET  /api/users      - Users of the caller's company
- POST /api/users      - Create an account (admin)
- PUT  /api/users/{id} - Update an account (admin, or self for profile fields)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.auth.service import AuthService
from fieldflow.core.audit_logger import log_action
from fieldflow.core.errors import AuthorizationError, NotFoundError, ValidationError
from fieldflow.models import PublicUser, Role, UserUpdate
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import get_auth_service, get_current_user, get_gate, get_storage
from fieldflow.web.models import ADMIN_ONLY_USER_FIELDS, UserCreateRequest, UserUpdateRequest

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[PublicUser])
async def list_users(
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    if user.company_id is None:
        return [user]
    members = [PublicUser.from_user(u) for u in storage.get_users_by_company(user.company_id)]
    return gate.filter_visible(user, ResourceKind.USER, members, ResourceDescriptor.of_user)


@router.post("", response_model=PublicUser, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: Request,
    body: UserCreateRequest,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    auth: AuthService = Depends(get_auth_service),
    gate: AuthorizationGate = Depends(get_gate),
):
    company_id = body.company_id if body.company_id is not None else user.company_id
    if body.role is Role.CLIENT and body.company_id is None:
        # Clients are not company staff
        company_id = None
    gate.enforce(user, Action.CREATE, ResourceDescriptor(ResourceKind.USER, company_id=company_id))
    if company_id is not None and storage.get_company(company_id) is None:
        raise ValidationError.for_field("companyId", "Company not found")

    created = auth.create_user(
        username=body.username,
        email=body.email,
        password=body.password,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        company_id=company_id,
        phone=body.phone,
        is_active=body.is_active,
    )
    log_action(
        request,
        "USER_CREATE",
        user.username,
        user_id=user.id,
        resource_type="user",
        resource_id=created.id,
        details={"username": created.username, "role": created.role.value},
    )
    return created


@router.put("/{user_id}", response_model=PublicUser)
async def update_user(
    request: Request,
    user_id: int,
    body: UserUpdateRequest,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    auth: AuthService = Depends(get_auth_service),
    gate: AuthorizationGate = Depends(get_gate),
):
    target = storage.get_user(user_id)
    if target is None:
        raise NotFoundError.for_resource("User")
    gate.enforce(user, Action.UPDATE, ResourceDescriptor.of_user(target))

    fields = body.model_dump(exclude_unset=True)
    password = fields.pop("password", None)
    if user.role is not Role.ADMIN and ADMIN_ONLY_USER_FIELDS & fields.keys():
        raise AuthorizationError("Insufficient permissions")

    updated = auth.update_user(user_id, UserUpdate.model_validate(fields), password=password)
    if updated is None:
        raise NotFoundError.for_resource("User")
    log_action(
        request,
        "USER_UPDATE",
        user.username,
        user_id=user.id,
        resource_type="user",
        resource_id=user_id,
        details={"fields": sorted(fields) + (["password"] if password else [])},
    )
    return updated
