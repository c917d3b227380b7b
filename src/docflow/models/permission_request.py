"""PermissionRequest SQLAlchemy model"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, text

from ..domain.permission_requests.status import PermissionStatus, RequestType
from .base import Base, value_enum


# Only one request per document may be under review at a time
ONREVIEW_PREDICATE = text("status_permission = 'ONREVIEW'")


class PermissionRequest(Base):
    """Permission request model: an owner's ask to replace or remove a document.

    Created ONREVIEW by the document owner, decided exactly once by the
    assigned admin. The partial unique index keeps concurrent creates from
    producing two open reviews for the same document.
    """
    __tablename__ = "permission_requests"
    __table_args__ = (
        Index("ix_permission_requests_admin_id", "admin_id"),
        Index("ix_permission_requests_user_id", "user_id"),
        Index(
            "uq_permission_requests_document_onreview",
            "document_id",
            unique=True,
            postgresql_where=ONREVIEW_PREDICATE,
            sqlite_where=ONREVIEW_PREDICATE,
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    admin_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    request_type = Column(value_enum(RequestType, "requesttype"), nullable=False)
    status_permission = Column(
        value_enum(PermissionStatus, "permissionstatus"),
        nullable=False,
        default=PermissionStatus.ONREVIEW,
        server_default=PermissionStatus.ONREVIEW.value,
    )
    message = Column(Text, nullable=True)
    admin_note = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    document = relationship("Document", back_populates="permission_requests")
    user = relationship("User", foreign_keys=[user_id])
    admin = relationship("User", foreign_keys=[admin_id])
