"""Permission request domain module - review lifecycle and its effect on documents"""

from .status import (
    RequestType,
    PermissionStatus,
    ALLOWED_TRANSITIONS,
    PENDING_STATUS_FOR_REQUEST,
    REVIEW_OUTCOMES,
    GRANT_FIELD_FOR_REQUEST,
    parse_decision,
    validate_transition,
    resolve_document_status,
)

__all__ = [
    "RequestType",
    "PermissionStatus",
    "ALLOWED_TRANSITIONS",
    "PENDING_STATUS_FOR_REQUEST",
    "REVIEW_OUTCOMES",
    "GRANT_FIELD_FOR_REQUEST",
    "parse_decision",
    "validate_transition",
    "resolve_document_status",
]
