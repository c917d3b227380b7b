"""Document permission guard.

Decides whether an actor may update or remove a document right now. The
same evaluation backs the read-only check endpoints (which report the
decision) and the mutations themselves (which enforce it).
"""

from dataclasses import dataclass
from typing import Optional, Type

from ...auth.roles import UserRole
from ...errors import DocumentWorkflowError, ForbiddenError, BadRequestError
from .document_status import (
    ActionRule,
    DocumentAction,
    DocumentStatus,
    GRANT_FIELD_FOR_ACTION,
    get_action_rule,
)


_VERBS = {
    DocumentAction.UPDATE: "update",
    DocumentAction.REMOVE: "remove",
}

_AWAITING_REVIEW = frozenset({DocumentStatus.PENDING_REPLACE, DocumentStatus.PENDING_REMOVE})


@dataclass(frozen=True)
class PermissionDecision:
    """Result of evaluating an owner action.

    Attributes:
        allowed: Whether the action may proceed immediately
        message: Human readable explanation for the actor
        denial: Error kind raised when the decision is enforced
    """
    allowed: bool
    message: str
    denial: Optional[Type[DocumentWorkflowError]] = None

    def enforce(self) -> None:
        """Raise the denial error if the action is not allowed."""
        if not self.allowed:
            raise (self.denial or ForbiddenError)(self.message)


def ensure_owner(document, actor_id: int, action: DocumentAction) -> None:
    """Raise ForbiddenError unless actor_id owns the document.

    Ownership is checked before the admin bypass, so admins are also
    limited to their own documents.
    """
    if document.user_id != actor_id:
        raise ForbiddenError(
            f"You are not allowed to {_VERBS[DocumentAction(action)]} this document"
        )


def evaluate_action(document, actor_id: int, actor_role: UserRole, action: DocumentAction) -> PermissionDecision:
    """Evaluate whether the actor may perform the action on the document.

    Args:
        document: Document row (needs user_id, status and the permission flags)
        actor_id: ID of the acting principal
        actor_role: Role of the acting principal
        action: UPDATE or REMOVE

    Returns:
        PermissionDecision describing the outcome

    Raises:
        ForbiddenError: If the actor does not own the document
    """
    action = DocumentAction(action)
    ensure_owner(document, actor_id, action)

    verb = _VERBS[action]
    status = DocumentStatus(document.status)
    rule = get_action_rule(status, actor_role, action)

    if rule == ActionRule.ALLOW:
        return PermissionDecision(
            allowed=True,
            message=f"You can {verb} this document directly",
        )

    if rule == ActionRule.BLOCKED_BY_STATUS:
        if action == DocumentAction.REMOVE:
            message = (
                f"Document removal is already pending (status {status.value}). "
                "Please wait for an admin to review it."
            )
        elif status in _AWAITING_REVIEW:
            message = (
                f"Cannot {verb} a document with status {status.value}. "
                "Please wait for an admin to review it."
            )
        else:
            message = (
                f"Cannot {verb} a document with status {status.value}. "
                "Request replace permission from an admin to change it again."
            )
        return PermissionDecision(allowed=False, message=message, denial=BadRequestError)

    if not getattr(document, GRANT_FIELD_FOR_ACTION[action]):
        return PermissionDecision(
            allowed=False,
            message=(
                f"You do not have permission to {verb} this document. "
                "Request permission from an admin first."
            ),
            denial=ForbiddenError,
        )

    return PermissionDecision(allowed=True, message=f"You can {verb} this document")


def check_update_permission(document, actor_id: int, actor_role: UserRole) -> PermissionDecision:
    """Evaluate an update (rename and/or file replacement) attempt"""
    return evaluate_action(document, actor_id, actor_role, DocumentAction.UPDATE)


def check_remove_permission(document, actor_id: int, actor_role: UserRole) -> PermissionDecision:
    """Evaluate a removal attempt"""
    return evaluate_action(document, actor_id, actor_role, DocumentAction.REMOVE)
