"""Company profile route."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor
from fieldflow.core.errors import NotFoundError
from fieldflow.models import Company, PublicUser
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import get_current_user, get_gate, get_storage

router = APIRouter(prefix="/api/company", tags=["company"])


@router.get("", response_model=Company)
async def get_company(
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    """The caller's own company."""
    company = storage.get_company(user.company_id) if user.company_id is not None else None
    if company is None:
        raise NotFoundError.for_resource("Company")
    gate.enforce(user, Action.READ, ResourceDescriptor.of_company(company))
    return company
