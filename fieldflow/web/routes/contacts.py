"""Contact book routes (company scoped).

Routes:
- GET    /api/contacts[?type=] - Contacts of the caller's company
- POST   /api/contacts         - Add a contact
- PUT    /api/contacts/{id}    - Update a contact
- DELETE /api/contacts/{id}    - Remove a contact
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.core.errors import NotFoundError, ValidationError
from fieldflow.models import Contact, ContactCreate, ContactType, ContactUpdate, PublicUser
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import get_current_user, get_gate, get_storage
from fieldflow.web.models import ContactCreateRequest

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


def _load_contact(
    storage: Storage, gate: AuthorizationGate, user: PublicUser, contact_id: int, action: Action
) -> Contact:
    contact = storage.get_contact(contact_id)
    if contact is None:
        raise NotFoundError.for_resource("Contact")
    gate.enforce(user, action, ResourceDescriptor.of_contact(contact))
    return contact


@router.get("", response_model=list[Contact])
async def list_contacts(
    contact_type: ContactType | None = Query(default=None, alias="type"),
    company_id: int | None = Query(default=None, alias="companyId"),
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    """List the contacts of the caller's company, optionally by type.

    ``companyId`` lets an admin without a company pick one.
    """
    scope_id = user.company_id if user.company_id is not None else company_id
    gate.enforce(user, Action.READ, ResourceDescriptor(ResourceKind.CONTACT, company_id=scope_id))
    if scope_id is None:
        return []
    if contact_type is not None:
        return storage.get_contacts_by_type(scope_id, contact_type)
    return storage.get_contacts_by_company(scope_id)


@router.post("", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: ContactCreateRequest,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    company_id = body.company_id if body.company_id is not None else user.company_id
    gate.enforce(user, Action.CREATE, ResourceDescriptor(ResourceKind.CONTACT, company_id=company_id))
    if company_id is None or storage.get_company(company_id) is None:
        raise ValidationError.for_field("companyId", "Company not found")
    data = body.model_dump(exclude={"company_id"})
    return storage.create_contact(ContactCreate(company_id=company_id, **data))


@router.put("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: int,
    changes: ContactUpdate,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    contact = _load_contact(storage, gate, user, contact_id, Action.UPDATE)
    return storage.update_contact(contact.id, changes)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: int,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    contact = _load_contact(storage, gate, user, contact_id, Action.DELETE)
    storage.delete_contact(contact.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
