"""User SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ..auth.roles import UserRole
from .base import Base, value_enum


class User(Base):
    """User model representing authenticated principals.

    Users are provisioned outside this service. A USER owns documents and
    files permission requests; an ADMIN reviews the requests assigned to them.
    """
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("username", name="uq_users_username"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    role = Column(value_enum(UserRole, "userrole"), nullable=False, default=UserRole.USER)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    documents = relationship("Document", back_populates="user")
