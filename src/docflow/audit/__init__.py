"""Audit trail for document workflow events"""

from .service import log_audit_event

__all__ = ["log_audit_event"]
