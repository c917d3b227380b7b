"""DocumentStatus state machine and owner action rules

A document is uploaded, may be put on hold pending a replace or remove
review, and then carries the outcome of the latest review.

State flow:
    uploaded → pending_replace → approved_replace | rejected_replace
    uploaded → pending_remove  → approved_remove  | rejected_remove

Whether an actor may update or remove a document right now is looked up in
ACTION_RULES, keyed by (current status, actor role, action).
"""

from enum import Enum
from typing import Dict, Tuple

from ...auth.roles import UserRole


class DocumentStatus(str, Enum):
    """Document lifecycle status enum"""
    UPLOADED = "uploaded"                  # Initial state after upload
    PENDING_REPLACE = "pending_replace"    # Owner asked to replace, awaiting review
    PENDING_REMOVE = "pending_remove"      # Owner asked to remove, awaiting review
    APPROVED_REPLACE = "approved_replace"  # Replace request approved
    APPROVED_REMOVE = "approved_remove"    # Remove request approved
    REJECTED_REPLACE = "rejected_replace"  # Replace request rejected
    REJECTED_REMOVE = "rejected_remove"    # Remove request rejected


class DocumentAction(str, Enum):
    """Owner-facing mutations guarded by ACTION_RULES"""
    UPDATE = "update"
    REMOVE = "remove"


class ActionRule(str, Enum):
    """Outcome of an ACTION_RULES lookup.

    ALLOW: proceed without further checks
    REQUIRES_GRANT: proceed only if the standing permission for the action is set
    BLOCKED_BY_STATUS: the current status forbids the action outright
    """
    ALLOW = "allow"
    REQUIRES_GRANT = "requires_grant"
    BLOCKED_BY_STATUS = "blocked_by_status"


# Standing permission flag consulted for REQUIRES_GRANT
GRANT_FIELD_FOR_ACTION: Dict[DocumentAction, str] = {
    DocumentAction.UPDATE: "is_replace_permission",
    DocumentAction.REMOVE: "is_remove_permission",
}

# Owner rules, one entry per status and action
_OWNER_RULES: Dict[DocumentAction, Dict[DocumentStatus, ActionRule]] = {
    DocumentAction.UPDATE: {
        DocumentStatus.UPLOADED: ActionRule.REQUIRES_GRANT,
        DocumentStatus.PENDING_REPLACE: ActionRule.BLOCKED_BY_STATUS,
        DocumentStatus.PENDING_REMOVE: ActionRule.BLOCKED_BY_STATUS,
        DocumentStatus.APPROVED_REPLACE: ActionRule.REQUIRES_GRANT,
        DocumentStatus.APPROVED_REMOVE: ActionRule.BLOCKED_BY_STATUS,
        DocumentStatus.REJECTED_REPLACE: ActionRule.BLOCKED_BY_STATUS,
        DocumentStatus.REJECTED_REMOVE: ActionRule.BLOCKED_BY_STATUS,
    },
    DocumentAction.REMOVE: {
        DocumentStatus.UPLOADED: ActionRule.REQUIRES_GRANT,
        DocumentStatus.PENDING_REPLACE: ActionRule.REQUIRES_GRANT,
        DocumentStatus.PENDING_REMOVE: ActionRule.BLOCKED_BY_STATUS,
        DocumentStatus.APPROVED_REPLACE: ActionRule.REQUIRES_GRANT,
        DocumentStatus.APPROVED_REMOVE: ActionRule.REQUIRES_GRANT,
        DocumentStatus.REJECTED_REPLACE: ActionRule.REQUIRES_GRANT,
        DocumentStatus.REJECTED_REMOVE: ActionRule.REQUIRES_GRANT,
    },
}


def _build_action_rules() -> Dict[Tuple[DocumentStatus, UserRole, DocumentAction], ActionRule]:
    rules = {}
    for action in DocumentAction:
        owner_rules = _OWNER_RULES[action]
        missing = set(DocumentStatus) - set(owner_rules)
        if missing:
            raise RuntimeError(
                f"No {action.value} rule for statuses: {sorted(s.value for s in missing)}"
            )
        for status in DocumentStatus:
            rules[(status, UserRole.USER, action)] = owner_rules[status]
            rules[(status, UserRole.ADMIN, action)] = ActionRule.ALLOW
    return rules


ACTION_RULES: Dict[Tuple[DocumentStatus, UserRole, DocumentAction], ActionRule] = _build_action_rules()


def get_action_rule(
    status: DocumentStatus,
    role: UserRole,
    action: DocumentAction
) -> ActionRule:
    """Look up the rule for an actor attempting an action on a document.

    Args:
        status: Current document status
        role: Role of the acting principal
        action: UPDATE or REMOVE

    Returns:
        ActionRule for the combination

    Example:
        >>> get_action_rule(DocumentStatus.PENDING_REPLACE, UserRole.USER, DocumentAction.UPDATE)
        <ActionRule.BLOCKED_BY_STATUS: 'blocked_by_status'>
        >>> get_action_rule(DocumentStatus.PENDING_REPLACE, UserRole.ADMIN, DocumentAction.UPDATE)
        <ActionRule.ALLOW: 'allow'>
    """
    return ACTION_RULES[(DocumentStatus(status), UserRole(role), DocumentAction(action))]
