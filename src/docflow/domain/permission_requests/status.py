"""Permission request state machine.

State Flow:
    ONREVIEW → APPROVED | REJECTED

Terminal States: APPROVED, REJECTED

A review decision also moves the reviewed document to a status determined
by (decision, request type), see REVIEW_OUTCOMES.
"""

from enum import Enum
from typing import Dict, List, Tuple

from ...errors import BadRequestError
from ..documents.document_status import DocumentStatus


class RequestType(str, Enum):
    """What the owner wants to do with the document"""
    REPLACE = "REPLACE"
    REMOVE = "REMOVE"


class PermissionStatus(str, Enum):
    """Permission request status enumeration"""
    ONREVIEW = "ONREVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


ALLOWED_TRANSITIONS: Dict[PermissionStatus, List[PermissionStatus]] = {
    PermissionStatus.ONREVIEW: [PermissionStatus.APPROVED, PermissionStatus.REJECTED],
    PermissionStatus.APPROVED: [],  # Terminal state
    PermissionStatus.REJECTED: [],  # Terminal state
}

# Document status a request of each type requires at creation time
PENDING_STATUS_FOR_REQUEST: Dict[RequestType, DocumentStatus] = {
    RequestType.REPLACE: DocumentStatus.PENDING_REPLACE,
    RequestType.REMOVE: DocumentStatus.PENDING_REMOVE,
}

# Document status after review
REVIEW_OUTCOMES: Dict[Tuple[PermissionStatus, RequestType], DocumentStatus] = {
    (PermissionStatus.APPROVED, RequestType.REPLACE): DocumentStatus.APPROVED_REPLACE,
    (PermissionStatus.APPROVED, RequestType.REMOVE): DocumentStatus.APPROVED_REMOVE,
    (PermissionStatus.REJECTED, RequestType.REPLACE): DocumentStatus.REJECTED_REPLACE,
    (PermissionStatus.REJECTED, RequestType.REMOVE): DocumentStatus.REJECTED_REMOVE,
}

# Standing permission flag set on the document when a request is approved
GRANT_FIELD_FOR_REQUEST: Dict[RequestType, str] = {
    RequestType.REPLACE: "is_replace_permission",
    RequestType.REMOVE: "is_remove_permission",
}


def parse_decision(value) -> PermissionStatus:
    """Coerce a raw review decision into a PermissionStatus.

    Raises:
        BadRequestError: If value is not APPROVED or REJECTED
    """
    try:
        decision = PermissionStatus(value)
    except ValueError:
        decision = None

    if decision not in ALLOWED_TRANSITIONS[PermissionStatus.ONREVIEW]:
        raise BadRequestError("Decision must be either APPROVED or REJECTED")
    return decision


def validate_transition(current_status: PermissionStatus, decision) -> PermissionStatus:
    """Validate that a permission request may be decided as `decision`.

    The request must still be under review; the decision is checked only
    after that, so a second review always reports the earlier outcome.

    Args:
        current_status: Current request status
        decision: Raw review decision from the reviewer

    Returns:
        PermissionStatus: The parsed decision

    Raises:
        BadRequestError: If the request was already reviewed or the
            decision is not APPROVED or REJECTED
    """
    current_status = PermissionStatus(current_status)
    if current_status != PermissionStatus.ONREVIEW:
        raise BadRequestError(
            f"Request has already been reviewed with status: {current_status.value}"
        )

    return parse_decision(decision)


def resolve_document_status(decision: PermissionStatus, request_type: RequestType) -> DocumentStatus:
    """Document status that follows a review decision.

    Example:
        >>> resolve_document_status(PermissionStatus.APPROVED, RequestType.REMOVE)
        <DocumentStatus.APPROVED_REMOVE: 'approved_remove'>
    """
    try:
        return REVIEW_OUTCOMES[(PermissionStatus(decision), RequestType(request_type))]
    except KeyError:
        raise BadRequestError("Decision must be either APPROVED or REJECTED")
