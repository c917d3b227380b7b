"""Documents domain module - status lifecycle and owner permission guard"""

from .document_status import (
    DocumentStatus,
    DocumentAction,
    ActionRule,
    ACTION_RULES,
    GRANT_FIELD_FOR_ACTION,
    get_action_rule,
)
from .permission_guard import (
    PermissionDecision,
    ensure_owner,
    evaluate_action,
    check_update_permission,
    check_remove_permission,
)

__all__ = [
    "DocumentStatus",
    "DocumentAction",
    "ActionRule",
    "ACTION_RULES",
    "GRANT_FIELD_FOR_ACTION",
    "get_action_rule",
    "PermissionDecision",
    "ensure_owner",
    "evaluate_action",
    "check_update_permission",
    "check_remove_permission",
]
