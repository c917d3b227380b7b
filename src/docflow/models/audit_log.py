"""AuditLog SQLAlchemy model"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .base import Base, PortableJSONB


class AuditLog(Base):
    """AuditLog model for the document workflow trail.

    Records every document mutation and permission request decision.
    Entries are append-only and should never be updated or deleted.
    entity_id carries no foreign key so entries outlive removed documents.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_entity", "entity_type", "entity_id"),
        Index("ix_audit_log_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Integer, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    actor = relationship("User")
