"""Document metadata routes.

File bytes are uploaded elsewhere; these routes record where a file lives
and what it is.

Routes:
- GET    /api/projects/{id}/documents - Documents of a project
- POST   /api/projects/{id}/documents - Register a document
- DELETE /api/documents/{id}          - Remove a document record
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from fieldflow.auth.gate import Action, AuthorizationGate, ResourceDescriptor, ResourceKind
from fieldflow.core.errors import NotFoundError
from fieldflow.models import Document, DocumentCreate, Project, PublicUser
from fieldflow.storage.base import Storage
from fieldflow.web.dependencies import (
    get_current_user,
    get_gate,
    get_project,
    get_storage,
    load_project,
)
from fieldflow.web.models import DocumentCreateRequest

router = APIRouter(prefix="/api", tags=["documents"])


@router.get("/projects/{project_id}/documents", response_model=list[Document])
async def list_documents(
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.READ, ResourceDescriptor.of_project(project, ResourceKind.DOCUMENT))
    return storage.get_documents_by_project(project.id)


@router.post(
    "/projects/{project_id}/documents",
    response_model=Document,
    status_code=status.HTTP_201_CREATED,
)
async def create_document(
    body: DocumentCreateRequest,
    user: PublicUser = Depends(get_current_user),
    project: Project = Depends(get_project),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    gate.enforce(user, Action.CREATE, ResourceDescriptor.of_project(project, ResourceKind.DOCUMENT))
    return storage.create_document(
        DocumentCreate(project_id=project.id, uploaded_by=user.id, **body.model_dump())
    )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: int,
    user: PublicUser = Depends(get_current_user),
    storage: Storage = Depends(get_storage),
    gate: AuthorizationGate = Depends(get_gate),
):
    document = storage.get_document(document_id)
    if document is None:
        raise NotFoundError.for_resource("Document")
    project = load_project(storage, document.project_id)
    gate.enforce(user, Action.DELETE, ResourceDescriptor.of_project(project, ResourceKind.DOCUMENT))
    storage.delete_document(document.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
