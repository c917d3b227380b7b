"""Pydantic schemas for Permission Requests API"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.documents.document_status import DocumentStatus
from ..domain.permission_requests.status import PermissionStatus, RequestType


# ============================================================================
# Request Schemas
# ============================================================================

class PermissionRequestCreate(BaseModel):
    """Schema for POST /permission-requests (document already pending)"""
    document_id: int
    admin_id: int = Field(..., description="Admin who will review the request")
    request_type: RequestType
    message: Optional[str] = Field(None, description="Optional note for the reviewer")

    model_config = ConfigDict(extra='forbid')


class PermissionRequestSubmit(PermissionRequestCreate):
    """Schema for POST /permission-requests/submit.

    Same fields as PermissionRequestCreate; the document is moved to the
    matching pending status in the same transaction.
    """


class PermissionRequestReview(BaseModel):
    """Schema for PATCH /permission-requests/{id}.

    status_permission is checked by the service so that anything other than
    APPROVED or REJECTED is reported as a bad request, not a validation error.
    """
    status_permission: str = Field(..., description="APPROVED or REJECTED")
    admin_note: Optional[str] = None

    model_config = ConfigDict(extra='forbid')


# ============================================================================
# Response Schemas
# ============================================================================

class UserBrief(BaseModel):
    id: int
    name: str
    username: str

    model_config = ConfigDict(from_attributes=True)


class DocumentBrief(BaseModel):
    id: int
    name_doc: str
    url_doc: str
    status: DocumentStatus

    model_config = ConfigDict(from_attributes=True)


class PermissionRequestResponse(BaseModel):
    """Response schema for a permission request"""
    id: int
    document_id: int
    user_id: int
    admin_id: int
    request_type: RequestType
    status_permission: PermissionStatus
    message: Optional[str] = None
    admin_note: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    document: Optional[DocumentBrief] = None
    user: Optional[UserBrief] = None
    admin: Optional[UserBrief] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewResultResponse(BaseModel):
    """Outcome of a review: the decided request and the document's new status"""
    message: str
    request: PermissionRequestResponse
    document_new_status: DocumentStatus
