"""Documents API router. Ownership-scoped CRUD through the intercepted data client."""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response

from gc_app.api.dependencies import get_audit_logger, get_data_client, require_session
from gc_app.domain.schemas.documents import (
    DocumentCreateRequest,
    DocumentResponse,
    DocumentUpdateRequest,
)
from gc_app.governance.audit_logger import AuditLogger
from gc_app.infrastructure.database.client import DataClient
from gc_app.infrastructure.database.exceptions import RecordNotFoundError
from gc_app.security.exceptions import AuthorizationError
from gc_app.security.rbac import Permission, has_permission
from gc_app.security.session import Session

router = APIRouter()

ENTITY = "Document"


def _owns(session: Session, document: dict) -> bool:
    return document.get("owner_id") == session.user.id


def _may(session: Session, document: dict, own: Permission, any_: Permission) -> bool:
    return has_permission(session, any_) or (has_permission(session, own) and _owns(session, document))


async def _deny(audit: AuditLogger, request: Request, entity_id: str, reason: str) -> None:
    await audit.log_access_denied(ENTITY, entity_id, reason=f"{request.method} {reason}")
    raise AuthorizationError(reason)


async def _get_or_404(client: DataClient, document_id: str) -> dict:
    document = await client.model(ENTITY).find_unique({"id": document_id})
    if document is None:
        raise RecordNotFoundError(f"{ENTITY} {document_id} not found")
    return document


@router.get("/", response_model=List[DocumentResponse])
async def list_documents(
    request: Request,
    session: Annotated[Session, Depends(require_session)],
    client: Annotated[DataClient, Depends(get_data_client)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
    skip: Annotated[int, Query(ge=0)] = 0,
    take: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """read:all lists every live document; read:own only the caller's."""
    if has_permission(session, Permission.READ_ALL):
        where: Optional[dict] = None
    elif has_permission(session, Permission.READ_OWN):
        where = {"owner_id": session.user.id}
    else:
        await _deny(audit, request, "list", "read permission required")
    return await client.model(ENTITY).find_many(
        where=where, order_by={"created_at": "desc"}, skip=skip, take=take
    )


@router.post("/", response_model=DocumentResponse, status_code=201)
async def create_document(
    request: Request,
    body: DocumentCreateRequest,
    session: Annotated[Session, Depends(require_session)],
    client: Annotated[DataClient, Depends(get_data_client)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
):
    if not (
        has_permission(session, Permission.WRITE_OWN) or has_permission(session, Permission.WRITE_ALL)
    ):
        await _deny(audit, request, "new", "write permission required")
    data = {**body.model_dump(mode="json"), "owner_id": session.user.id}
    return await client.model(ENTITY).create(data)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    request: Request,
    document_id: str,
    session: Annotated[Session, Depends(require_session)],
    client: Annotated[DataClient, Depends(get_data_client)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
):
    document = await _get_or_404(client, document_id)
    if not _may(session, document, Permission.READ_OWN, Permission.READ_ALL):
        await _deny(audit, request, document_id, "read permission required")
    return document


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update_document(
    request: Request,
    document_id: str,
    body: DocumentUpdateRequest,
    session: Annotated[Session, Depends(require_session)],
    client: Annotated[DataClient, Depends(get_data_client)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
):
    document = await _get_or_404(client, document_id)
    if not _may(session, document, Permission.WRITE_OWN, Permission.WRITE_ALL):
        await _deny(audit, request, document_id, "write permission required")
    changes = body.model_dump(mode="json", exclude_unset=True)
    if not changes:
        return document
    return await client.model(ENTITY).update({"id": document_id}, changes)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    request: Request,
    document_id: str,
    session: Annotated[Session, Depends(require_session)],
    client: Annotated[DataClient, Depends(get_data_client)],
    audit: Annotated[AuditLogger, Depends(get_audit_logger)],
):
    """Soft delete; the row stays for the audit trail and can be restored."""
    document = await _get_or_404(client, document_id)
    if not _may(session, document, Permission.DELETE_OWN, Permission.DELETE_ALL):
        await _deny(audit, request, document_id, "delete permission required")
    await client.model(ENTITY).delete({"id": document_id})
    return Response(status_code=204)
