"""SQLAlchemy Models for DocFlow"""

from .base import Base
from .user import User
from .document import Document
from .permission_request import PermissionRequest
from .audit_log import AuditLog

__all__ = [
    "Base",
    "User",
    "Document",
    "PermissionRequest",
    "AuditLog",
]
