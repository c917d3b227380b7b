"""Permission Requests API endpoints

Owners file requests to replace or remove their documents; the assigned
admin reviews them. Every endpoint is one transaction committed here.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth.dependencies import CurrentUser
from ..database import get_db
from .schemas import (
    PermissionRequestCreate,
    PermissionRequestResponse,
    PermissionRequestReview,
    PermissionRequestSubmit,
    ReviewResultResponse,
)
from .service import (
    create_permission_request,
    get_permission_request,
    list_assigned_requests,
    list_my_requests,
    review_message,
    review_permission_request,
    submit_permission_request,
)

router = APIRouter(prefix="/permission-requests", tags=["Permission Requests"])


@router.post("", response_model=PermissionRequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    body: PermissionRequestCreate,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """File a request for a document already moved to its pending status.

    Example:
        curl -X POST http://localhost:8000/api/v1/permission-requests \\
             -H "Authorization: Bearer $TOKEN" \\
             -H "Content-Type: application/json" \\
             -d '{"document_id": 1, "admin_id": 2, "request_type": "REPLACE"}'
    """
    permission_request = create_permission_request(
        db,
        requester=current_user,
        document_id=body.document_id,
        admin_id=body.admin_id,
        request_type=body.request_type,
        message=body.message,
    )
    db.commit()

    return PermissionRequestResponse.model_validate(
        get_permission_request(db, permission_request.id)
    )


@router.post("/submit", response_model=PermissionRequestResponse, status_code=status.HTTP_201_CREATED)
def submit_request(
    body: PermissionRequestSubmit,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Move the document to its pending status and file the request in one step."""
    permission_request = submit_permission_request(
        db,
        requester=current_user,
        document_id=body.document_id,
        admin_id=body.admin_id,
        request_type=body.request_type,
        message=body.message,
    )
    db.commit()

    return PermissionRequestResponse.model_validate(
        get_permission_request(db, permission_request.id)
    )


@router.get("", response_model=List[PermissionRequestResponse])
def get_assigned_requests(current_user: CurrentUser, db: Session = Depends(get_db)):
    """List requests assigned to the calling admin (ADMIN only)."""
    return [
        PermissionRequestResponse.model_validate(r)
        for r in list_assigned_requests(db, current_user)
    ]


@router.get("/my-requests", response_model=List[PermissionRequestResponse])
def get_my_requests(current_user: CurrentUser, db: Session = Depends(get_db)):
    """List requests filed by the caller."""
    return [
        PermissionRequestResponse.model_validate(r)
        for r in list_my_requests(db, current_user)
    ]


@router.get("/{request_id}", response_model=PermissionRequestResponse)
def get_request(request_id: int, current_user: CurrentUser, db: Session = Depends(get_db)):
    return PermissionRequestResponse.model_validate(get_permission_request(db, request_id))


@router.patch("/{request_id}", response_model=ReviewResultResponse)
def review_request(
    request_id: int,
    body: PermissionRequestReview,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Approve or reject a request (assigned ADMIN only).

    The request and its document are updated in a single transaction.
    """
    review_permission_request(
        db,
        request_id=request_id,
        reviewer=current_user,
        decision=body.status_permission,
        admin_note=body.admin_note,
    )
    db.commit()

    permission_request = get_permission_request(db, request_id)
    return ReviewResultResponse(
        message=review_message(permission_request),
        request=PermissionRequestResponse.model_validate(permission_request),
        document_new_status=permission_request.document.status,
    )
