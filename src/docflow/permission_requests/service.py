"""Permission request service.

An owner files a request once the document sits in the matching pending
status; the assigned admin approves or rejects it. A review updates the
request and its document in the caller's transaction, so both rows commit
together or not at all.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from ..audit.service import log_audit_event
from ..auth.roles import UserRole, is_admin
from ..domain.documents.document_status import DocumentStatus
from ..domain.permission_requests import (
    GRANT_FIELD_FOR_REQUEST,
    PENDING_STATUS_FOR_REQUEST,
    PermissionStatus,
    RequestType,
    resolve_document_status,
    validate_transition,
)
from ..errors import BadRequestError, ForbiddenError, NotFoundError
from ..models.document import Document
from ..models.permission_request import PermissionRequest
from ..models.user import User
from ..observability.logging_config import get_logger
from ..observability.metrics import (
    document_mutations_total,
    permission_requests_created_total,
    permission_reviews_total,
)

logger = get_logger(__name__)

_DUPLICATE_REVIEW_MESSAGE = "There is already a request under review for this document"


def _with_relations(query):
    return query.options(
        joinedload(PermissionRequest.document),
        joinedload(PermissionRequest.user),
        joinedload(PermissionRequest.admin),
    )


def get_permission_request(db: Session, request_id: int) -> PermissionRequest:
    """Load a permission request with its document, requester and admin.

    Raises:
        NotFoundError: If no request has this ID
    """
    permission_request = _with_relations(db.query(PermissionRequest)).filter(
        PermissionRequest.id == request_id
    ).first()
    if not permission_request:
        raise NotFoundError("Permission request not found")
    return permission_request


def list_assigned_requests(db: Session, admin: User) -> List[PermissionRequest]:
    """Requests assigned to an admin for review, newest first.

    Raises:
        ForbiddenError: If the caller is not an admin
    """
    if not is_admin(admin.role):
        raise ForbiddenError("Only admins can list permission requests")

    return (
        _with_relations(db.query(PermissionRequest))
        .filter(PermissionRequest.admin_id == admin.id)
        .order_by(PermissionRequest.created_at.desc(), PermissionRequest.id.desc())
        .all()
    )


def list_my_requests(db: Session, user: User) -> List[PermissionRequest]:
    """Requests filed by the user, newest first"""
    return (
        _with_relations(db.query(PermissionRequest))
        .filter(PermissionRequest.user_id == user.id)
        .order_by(PermissionRequest.created_at.desc(), PermissionRequest.id.desc())
        .all()
    )


def _load_reviewer(db: Session, admin_id: int) -> User:
    admin = db.query(User).filter(User.id == admin_id).first()
    if not admin:
        raise NotFoundError("Admin not found")
    if not is_admin(admin.role):
        raise BadRequestError("The selected user is not an admin")
    return admin


def _has_open_review(db: Session, document_id: int) -> bool:
    return db.query(PermissionRequest.id).filter(
        PermissionRequest.document_id == document_id,
        PermissionRequest.status_permission == PermissionStatus.ONREVIEW,
    ).first() is not None


def create_permission_request(
    db: Session,
    requester: User,
    document_id: int,
    admin_id: int,
    request_type: RequestType,
    message: Optional[str] = None,
) -> PermissionRequest:
    """File a permission request for a document already in its pending status.

    Validation order:
    1. Requester is a USER (admins act directly)
    2. Document exists and belongs to the requester
    3. Document status is pending_replace / pending_remove for the request type
    4. Reviewer exists and is an admin
    5. No other request for the document is under review

    Raises:
        NotFoundError: If the document or the admin does not exist
        ForbiddenError: If the requester does not own the document
        BadRequestError: If any state or role check fails
    """
    if is_admin(requester.role):
        raise BadRequestError("Admins do not need to request permission")

    request_type = RequestType(request_type)

    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise NotFoundError("Document not found")

    if document.user_id != requester.id:
        raise ForbiddenError("You are not allowed to create a request for this document")

    expected_status = PENDING_STATUS_FOR_REQUEST[request_type]
    if DocumentStatus(document.status) != expected_status:
        raise BadRequestError(
            f"Document status must be {expected_status.value} to create this request"
        )

    admin = _load_reviewer(db, admin_id)

    if _has_open_review(db, document.id):
        raise BadRequestError(_DUPLICATE_REVIEW_MESSAGE)

    permission_request = PermissionRequest(
        document_id=document.id,
        user_id=requester.id,
        admin_id=admin.id,
        request_type=request_type,
        status_permission=PermissionStatus.ONREVIEW,
        message=message,
    )
    db.add(permission_request)
    try:
        db.flush()
    except IntegrityError:
        # A concurrent create won the partial unique index
        db.rollback()
        raise BadRequestError(_DUPLICATE_REVIEW_MESSAGE)

    log_audit_event(
        db=db,
        action="PERMISSION_REQUEST_CREATED",
        actor_id=requester.id,
        entity_type="permission_request",
        entity_id=permission_request.id,
        metadata={
            "document_id": document.id,
            "admin_id": admin.id,
            "request_type": request_type.value,
        },
    )
    permission_requests_created_total.labels(request_type=request_type.value).inc()

    logger.info(
        f"Permission request created: id={permission_request.id}, "
        f"document={document.id}, type={request_type.value}, admin={admin.id}",
        extra={
            "permission_request_id": permission_request.id,
            "document_id": document.id,
            "user_id": requester.id,
        },
    )
    return permission_request


def submit_permission_request(
    db: Session,
    requester: User,
    document_id: int,
    admin_id: int,
    request_type: RequestType,
    message: Optional[str] = None,
) -> PermissionRequest:
    """Move the document to its pending status and file the request at once.

    Unlike the two-step flow, the status write is only kept if the request is
    created, so a document never sits in pending_* without a request.

    Raises:
        Same errors as create_permission_request
    """
    if is_admin(requester.role):
        raise BadRequestError("Admins do not need to request permission")

    request_type = RequestType(request_type)

    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise NotFoundError("Document not found")

    if document.user_id != requester.id:
        raise ForbiddenError("You are not allowed to create a request for this document")

    if _has_open_review(db, document.id):
        raise BadRequestError(_DUPLICATE_REVIEW_MESSAGE)

    _load_reviewer(db, admin_id)

    old_status = DocumentStatus(document.status)
    pending_status = PENDING_STATUS_FOR_REQUEST[request_type]
    document.status = pending_status
    document.updated_by = requester.username
    db.flush()

    log_audit_event(
        db=db,
        action="DOCUMENT_STATUS_CHANGED",
        actor_id=requester.id,
        entity_type="document",
        entity_id=document.id,
        metadata={"old_status": old_status.value, "new_status": pending_status.value},
    )
    document_mutations_total.labels(
        action="request_permission", role=UserRole(requester.role).value
    ).inc()

    return create_permission_request(
        db,
        requester=requester,
        document_id=document.id,
        admin_id=admin_id,
        request_type=request_type,
        message=message,
    )


def review_permission_request(
    db: Session,
    request_id: int,
    reviewer: User,
    decision: str,
    admin_note: Optional[str] = None,
) -> PermissionRequest:
    """Approve or reject a permission request.

    The request row is locked for the duration of the transaction where the
    database supports it. On approval the matching standing permission is
    granted on the document; the other one is left untouched.

    Raises:
        ForbiddenError: If the reviewer is not an admin or not the assigned admin
        NotFoundError: If the request does not exist
        BadRequestError: If the request was already reviewed or the decision is invalid
    """
    if not is_admin(reviewer.role):
        raise ForbiddenError("Only admins can review permission requests")

    permission_request = (
        db.query(PermissionRequest)
        .filter(PermissionRequest.id == request_id)
        .with_for_update()
        .first()
    )
    if not permission_request:
        raise NotFoundError("Permission request not found")

    if permission_request.admin_id != reviewer.id:
        raise ForbiddenError("You are not allowed to review this request")

    decision = validate_transition(permission_request.status_permission, decision)
    request_type = RequestType(permission_request.request_type)
    document = permission_request.document
    old_document_status = DocumentStatus(document.status)
    new_document_status = resolve_document_status(decision, request_type)

    permission_request.status_permission = decision
    permission_request.admin_note = admin_note
    permission_request.reviewed_at = datetime.now(timezone.utc)

    document.status = new_document_status
    document.updated_by = reviewer.username
    if decision == PermissionStatus.APPROVED:
        setattr(document, GRANT_FIELD_FOR_REQUEST[request_type], True)

    db.flush()

    log_audit_event(
        db=db,
        action="PERMISSION_REQUEST_REVIEWED",
        actor_id=reviewer.id,
        entity_type="permission_request",
        entity_id=permission_request.id,
        metadata={
            "decision": decision.value,
            "request_type": request_type.value,
            "document_id": document.id,
            "old_document_status": old_document_status.value,
            "new_document_status": new_document_status.value,
        },
    )
    permission_reviews_total.labels(
        request_type=request_type.value, decision=decision.value
    ).inc()

    logger.info(
        f"Permission request {decision.value}: id={permission_request.id}, "
        f"document={document.id} {old_document_status.value} -> {new_document_status.value}",
        extra={
            "permission_request_id": permission_request.id,
            "document_id": document.id,
            "user_id": reviewer.id,
            "status": decision.value,
        },
    )
    return permission_request


def review_message(permission_request: PermissionRequest) -> str:
    """Human readable summary of a decided request"""
    verb = "replace" if RequestType(permission_request.request_type) == RequestType.REPLACE else "remove"
    if PermissionStatus(permission_request.status_permission) == PermissionStatus.APPROVED:
        return (
            f"Request approved. {permission_request.user.name} can now {verb} the document."
        )
    return (
        f"Request rejected. Document stays in status "
        f"{DocumentStatus(permission_request.document.status).value}."
    )
