"""Document SQLAlchemy model

Document represents an uploaded file owned by one user, its current
lifecycle status and the owner's standing replace/remove permissions.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, Text, false
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..domain.documents.document_status import DocumentStatus
from .base import Base, value_enum


class Document(Base):
    """Document model representing uploaded files.

    status and the two permission flags only change through the document
    services and the permission request review. user_id never changes
    after creation.
    """
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_user_id", "user_id"),
        Index("ix_documents_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_doc = Column(Text, nullable=False)
    url_doc = Column(Text, nullable=False)
    status = Column(
        value_enum(DocumentStatus, "documentstatus"),
        nullable=False,
        default=DocumentStatus.UPLOADED,
        server_default=DocumentStatus.UPLOADED.value,
    )
    is_replace_permission = Column(Boolean, nullable=False, default=False, server_default=false())
    is_remove_permission = Column(Boolean, nullable=False, default=False, server_default=false())
    user_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_by = Column(Text, nullable=False)
    updated_by = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    user = relationship("User", back_populates="documents")
    permission_requests = relationship(
        "PermissionRequest",
        back_populates="document",
        cascade="all, delete-orphan",
    )
