"""Document service: upload, reads, guarded update/remove and status requests.

Owners (role USER) go through the permission guard; admins act directly.
Functions mutate and flush the session. Committing is left to the router so
every HTTP call is exactly one transaction.
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from ..audit.service import log_audit_event
from ..auth.roles import UserRole, is_admin
from ..domain.documents import (
    DocumentAction,
    DocumentStatus,
    PermissionDecision,
    check_remove_permission,
    check_update_permission,
    evaluate_action,
)
from ..errors import BadRequestError, NotFoundError
from ..models.document import Document
from ..models.user import User
from ..observability.logging_config import get_logger
from ..observability.metrics import document_mutations_total
from .storage import FileStoragePort, discard_on_failure

logger = get_logger(__name__)


def get_document(db: Session, document_id: int) -> Document:
    """Load a document with its owner.

    Raises:
        NotFoundError: If no document has this ID
    """
    document = (
        db.query(Document)
        .options(joinedload(Document.user))
        .filter(Document.id == document_id)
        .first()
    )
    if not document:
        raise NotFoundError("Document not found")
    return document


def list_documents(db: Session) -> List[Document]:
    """All documents, newest first"""
    return (
        db.query(Document)
        .options(joinedload(Document.user))
        .order_by(Document.created_at.desc(), Document.id.desc())
        .all()
    )


def list_user_documents(db: Session, user_id: int) -> List[Document]:
    """Documents owned by user_id, newest first"""
    return (
        db.query(Document)
        .options(joinedload(Document.user))
        .filter(Document.user_id == user_id)
        .order_by(Document.created_at.desc(), Document.id.desc())
        .all()
    )


def upload_document(
    db: Session,
    actor: User,
    storage: FileStoragePort,
    content: bytes,
    filename: str,
    name_doc: Optional[str],
) -> Document:
    """Store an uploaded file and create its document.

    Admins start with both standing permissions granted, users with none.

    Raises:
        BadRequestError: If name_doc is blank or the file is rejected by storage
    """
    if not name_doc or not name_doc.strip():
        raise BadRequestError("Document name is required")

    stored = storage.store_file(content, filename)
    granted = is_admin(actor.role)

    with discard_on_failure(storage, stored.url):
        document = Document(
            name_doc=name_doc,
            url_doc=stored.url,
            status=DocumentStatus.UPLOADED,
            is_replace_permission=granted,
            is_remove_permission=granted,
            user_id=actor.id,
            created_by=actor.username,
            updated_by=actor.username,
        )
        db.add(document)
        db.flush()

        log_audit_event(
            db=db,
            action="DOCUMENT_UPLOADED",
            actor_id=actor.id,
            entity_type="document",
            entity_id=document.id,
            metadata={"name_doc": document.name_doc, "url_doc": document.url_doc},
        )
    document_mutations_total.labels(action="upload", role=UserRole(actor.role).value).inc()

    logger.info(
        f"Document uploaded: id={document.id}, owner={actor.id}",
        extra={"document_id": document.id, "user_id": actor.id},
    )
    return document


def check_document_permission(
    db: Session,
    document_id: int,
    actor: User,
    action: DocumentAction,
) -> PermissionDecision:
    """Advisory check for the read-only permission endpoints. Never mutates.

    Raises:
        NotFoundError: If the document does not exist
        ForbiddenError: If the actor does not own the document
    """
    document = get_document(db, document_id)
    if DocumentAction(action) == DocumentAction.UPDATE:
        return check_update_permission(document, actor.id, actor.role)
    return check_remove_permission(document, actor.id, actor.role)


def update_document(
    db: Session,
    document_id: int,
    actor: User,
    storage: FileStoragePort,
    name_doc: Optional[str] = None,
    content: Optional[bytes] = None,
    filename: Optional[str] = None,
) -> Document:
    """Rename a document and/or replace its file.

    The guard runs before anything is stored, and a stored replacement is
    deleted again if recording it fails. When a file is supplied without a
    name, the document takes the uploaded file's name. Removing the file
    being replaced is left to the caller, once the change is committed.

    Raises:
        NotFoundError: If the document does not exist
        ForbiddenError: If the actor is not the owner or lacks the replace grant
        BadRequestError: If the document status does not allow updates
    """
    document = get_document(db, document_id)
    evaluate_action(document, actor.id, actor.role, DocumentAction.UPDATE).enforce()

    changes = {}
    if name_doc:
        changes["name_doc"] = name_doc

    if filename:
        stored = storage.store_file(content or b"", filename)
        changes["url_doc"] = stored.url
        if not name_doc:
            changes["name_doc"] = stored.default_name

    with discard_on_failure(storage, changes.get("url_doc")):
        for field, value in changes.items():
            setattr(document, field, value)
        document.updated_by = actor.username
        db.flush()

        log_audit_event(
            db=db,
            action="DOCUMENT_UPDATED",
            actor_id=actor.id,
            entity_type="document",
            entity_id=document.id,
            metadata={"changed_fields": sorted(changes), "status": DocumentStatus(document.status).value},
        )
    document_mutations_total.labels(action="update", role=UserRole(actor.role).value).inc()

    logger.info(
        f"Document updated: id={document.id}, fields={sorted(changes)}",
        extra={"document_id": document.id, "user_id": actor.id},
    )
    return document


def remove_document(db: Session, document_id: int, actor: User) -> None:
    """Delete a document. Its permission requests are deleted with it.

    Raises:
        NotFoundError: If the document does not exist
        ForbiddenError: If the actor is not the owner or lacks the remove grant
        BadRequestError: If a removal review is still pending
    """
    document = get_document(db, document_id)
    evaluate_action(document, actor.id, actor.role, DocumentAction.REMOVE).enforce()

    log_audit_event(
        db=db,
        action="DOCUMENT_REMOVED",
        actor_id=actor.id,
        entity_type="document",
        entity_id=document.id,
        metadata={"name_doc": document.name_doc, "status": DocumentStatus(document.status).value},
    )

    db.delete(document)
    db.flush()
    document_mutations_total.labels(action="remove", role=UserRole(actor.role).value).inc()

    logger.info(
        f"Document removed: id={document_id}",
        extra={"document_id": document_id, "user_id": actor.id},
    )


def request_permission(
    db: Session,
    document_id: int,
    new_status: DocumentStatus,
    actor: User,
) -> Document:
    """Write a caller-chosen status onto a document.

    This is the first half of the two-step permission flow: the owner moves
    the document to pending_replace / pending_remove, then files a
    permission request. The prior status is not checked; use the
    permission request submit operation for the atomic variant.

    Raises:
        NotFoundError: If the document does not exist
    """
    document = get_document(db, document_id)
    old_status = DocumentStatus(document.status)
    new_status = DocumentStatus(new_status)

    document.status = new_status
    document.updated_by = actor.username
    db.flush()

    log_audit_event(
        db=db,
        action="DOCUMENT_STATUS_CHANGED",
        actor_id=actor.id,
        entity_type="document",
        entity_id=document.id,
        metadata={"old_status": old_status.value, "new_status": new_status.value},
    )
    document_mutations_total.labels(
        action="request_permission", role=UserRole(actor.role).value
    ).inc()

    logger.info(
        f"Document status changed: id={document.id}, {old_status.value} -> {new_status.value}",
        extra={"document_id": document.id, "user_id": actor.id, "status": new_status.value},
    )
    return document
