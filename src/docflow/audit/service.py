"""Audit logging service for document workflow events.

This service provides a centralized interface for creating immutable audit
log entries. Entries are added to the caller's session, so they commit or
roll back together with the mutation they describe.

Audit Events:
- DOCUMENT_UPLOADED, DOCUMENT_UPDATED, DOCUMENT_REMOVED
- DOCUMENT_STATUS_CHANGED
- PERMISSION_REQUEST_CREATED, PERMISSION_REQUEST_REVIEWED
"""

from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..models.audit_log import AuditLog


def log_audit_event(
    db: Session,
    action: str,
    actor_id: Optional[int] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create an audit log entry.

    All parameters are stored as-is. This function does not validate action
    names or entity types.

    Args:
        db: Database session
        action: Event action (e.g., "DOCUMENT_UPLOADED")
        actor_id: User who performed the action
        entity_type: Type of entity affected ("document", "permission_request")
        entity_id: ID of affected entity
        metadata: Additional context as JSON (e.g., {"old_status": "uploaded"})

    Returns:
        AuditLog: The created audit log entry

    Example:
        log_audit_event(
            db=db,
            action="DOCUMENT_REMOVED",
            actor_id=current_user.id,
            entity_type="document",
            entity_id=document.id,
            metadata={"name_doc": document.name_doc},
        )
    """
    audit_entry = AuditLog(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
    )

    db.add(audit_entry)
    db.flush()  # Get ID without committing transaction

    return audit_entry
