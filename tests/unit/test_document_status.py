"""Unit tests for the DocumentStatus action rules

Every (status, role, action) combination must have exactly one rule, and
the owner rules must match the documented workflow.
"""

import pytest

from docflow.auth.roles import UserRole
from docflow.domain.documents import (
    ACTION_RULES,
    ActionRule,
    DocumentAction,
    DocumentStatus,
    get_action_rule,
)


class TestDocumentStatusEnum:
    """DocumentStatus values are what the database stores"""

    def test_document_status_enum_values(self):
        assert DocumentStatus.UPLOADED.value == "uploaded"
        assert DocumentStatus.PENDING_REPLACE.value == "pending_replace"
        assert DocumentStatus.PENDING_REMOVE.value == "pending_remove"
        assert DocumentStatus.APPROVED_REPLACE.value == "approved_replace"
        assert DocumentStatus.APPROVED_REMOVE.value == "approved_remove"
        assert DocumentStatus.REJECTED_REPLACE.value == "rejected_replace"
        assert DocumentStatus.REJECTED_REMOVE.value == "rejected_remove"

    def test_unknown_status_is_rejected(self):
        with pytest.raises(ValueError):
            DocumentStatus("archived")


class TestActionRulesTable:
    """ACTION_RULES covers the full status x role x action space"""

    def test_table_is_exhaustive(self):
        expected = {
            (status, role, action)
            for status in DocumentStatus
            for role in UserRole
            for action in DocumentAction
        }
        assert set(ACTION_RULES) == expected

    @pytest.mark.parametrize("status", list(DocumentStatus))
    @pytest.mark.parametrize("action", list(DocumentAction))
    def test_admin_is_always_allowed(self, status, action):
        assert get_action_rule(status, UserRole.ADMIN, action) == ActionRule.ALLOW

    def test_owner_never_gets_unconditional_allow(self):
        owner_rules = {
            rule for (status, role, action), rule in ACTION_RULES.items()
            if role == UserRole.USER
        }
        assert ActionRule.ALLOW not in owner_rules


class TestOwnerUpdateRules:
    """Owner updates need the replace grant and an update-eligible status"""

    @pytest.mark.parametrize("status", [DocumentStatus.UPLOADED, DocumentStatus.APPROVED_REPLACE])
    def test_eligible_statuses_require_grant(self, status):
        assert get_action_rule(status, UserRole.USER, DocumentAction.UPDATE) == ActionRule.REQUIRES_GRANT

    @pytest.mark.parametrize("status", [
        DocumentStatus.PENDING_REPLACE,
        DocumentStatus.PENDING_REMOVE,
        DocumentStatus.APPROVED_REMOVE,
        DocumentStatus.REJECTED_REPLACE,
        DocumentStatus.REJECTED_REMOVE,
    ])
    def test_other_statuses_block_update(self, status):
        assert get_action_rule(status, UserRole.USER, DocumentAction.UPDATE) == ActionRule.BLOCKED_BY_STATUS


class TestOwnerRemoveRules:
    """Owner removal is only blocked while a removal review is pending"""

    def test_pending_remove_blocks_removal(self):
        rule = get_action_rule(DocumentStatus.PENDING_REMOVE, UserRole.USER, DocumentAction.REMOVE)
        assert rule == ActionRule.BLOCKED_BY_STATUS

    @pytest.mark.parametrize("status", [
        s for s in DocumentStatus if s != DocumentStatus.PENDING_REMOVE
    ])
    def test_other_statuses_require_grant(self, status):
        assert get_action_rule(status, UserRole.USER, DocumentAction.REMOVE) == ActionRule.REQUIRES_GRANT

    def test_lookup_accepts_raw_values(self):
        """Rules can be looked up with the strings stored on rows and tokens"""
        rule = get_action_rule("pending_remove", "USER", "remove")
        assert rule == ActionRule.BLOCKED_BY_STATUS
