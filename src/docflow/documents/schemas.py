"""Pydantic schemas for Documents API"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..auth.roles import UserRole
from ..domain.documents.document_status import DocumentStatus


class UserSummary(BaseModel):
    """Owner details embedded in document responses"""
    id: int
    username: str
    name: str
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class DocumentResponse(BaseModel):
    """Response schema for a document"""
    id: int
    name_doc: str
    url_doc: str
    status: DocumentStatus
    is_replace_permission: bool
    is_remove_permission: bool
    user_id: int
    created_by: str
    updated_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    user: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class PermissionCheckResponse(BaseModel):
    """Advisory answer to "may I update/remove this document now?" """
    allowed: bool
    message: str


class UpdateStatusRequest(BaseModel):
    """Schema for PATCH /documents/{id}/request-permission"""
    status: DocumentStatus = Field(
        ...,
        description="Pending status to move the document to (pending_replace or pending_remove)",
    )

    model_config = ConfigDict(extra='forbid')
