"""Documents API endpoints

Upload, read, update and remove documents, plus the advisory permission
checks and the status write that opens the two-step permission flow.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from ..auth.dependencies import CurrentUser
from ..database import get_db
from ..domain.documents import DocumentAction
from .schemas import DocumentResponse, PermissionCheckResponse, UpdateStatusRequest
from .service import (
    check_document_permission,
    get_document,
    list_documents,
    list_user_documents,
    remove_document,
    request_permission,
    update_document,
    upload_document,
)
from .storage import FileStoragePort, discard_on_failure, get_storage

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post("/upload", response_model=DocumentResponse, status_code=status.HTTP_201_CREATED)
async def upload(
    current_user: CurrentUser,
    file: UploadFile = File(...),
    name_doc: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage: FileStoragePort = Depends(get_storage),
):
    """Upload a file and create a document owned by the caller.

    Example:
        curl -X POST http://localhost:8000/api/v1/documents/upload \\
             -H "Authorization: Bearer $TOKEN" \\
             -F "file=@contract.pdf" \\
             -F "name_doc=Contract 2024"
    """
    content = await file.read()
    document = upload_document(
        db,
        actor=current_user,
        storage=storage,
        content=content,
        filename=file.filename or "",
        name_doc=name_doc,
    )
    with discard_on_failure(storage, document.url_doc):
        db.commit()
    db.refresh(document)

    return DocumentResponse.model_validate(document)


@router.get("", response_model=List[DocumentResponse])
def get_documents(current_user: CurrentUser, db: Session = Depends(get_db)):
    """List all documents, newest first."""
    return [DocumentResponse.model_validate(d) for d in list_documents(db)]


@router.get("/my-documents", response_model=List[DocumentResponse])
def get_my_documents(current_user: CurrentUser, db: Session = Depends(get_db)):
    """List documents owned by the caller, newest first."""
    return [
        DocumentResponse.model_validate(d)
        for d in list_user_documents(db, current_user.id)
    ]


@router.get("/{document_id}/check-update-permission", response_model=PermissionCheckResponse)
def check_update(document_id: int, current_user: CurrentUser, db: Session = Depends(get_db)):
    """Report whether the caller may update the document right now."""
    decision = check_document_permission(db, document_id, current_user, DocumentAction.UPDATE)
    return PermissionCheckResponse(allowed=decision.allowed, message=decision.message)


@router.get("/{document_id}/check-remove-permission", response_model=PermissionCheckResponse)
def check_remove(document_id: int, current_user: CurrentUser, db: Session = Depends(get_db)):
    """Report whether the caller may remove the document right now."""
    decision = check_document_permission(db, document_id, current_user, DocumentAction.REMOVE)
    return PermissionCheckResponse(allowed=decision.allowed, message=decision.message)


@router.get("/{document_id}", response_model=DocumentResponse)
def get_one(document_id: int, current_user: CurrentUser, db: Session = Depends(get_db)):
    return DocumentResponse.model_validate(get_document(db, document_id))


@router.patch("/{document_id}", response_model=DocumentResponse)
async def update(
    document_id: int,
    current_user: CurrentUser,
    file: Optional[UploadFile] = File(None),
    name_doc: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    storage: FileStoragePort = Depends(get_storage),
):
    """Rename a document and/or replace its file.

    Admins update their documents directly. Owners need the replace
    permission and an update-eligible status. A replaced file is deleted
    once the new one is committed.
    """
    content = await file.read() if file is not None else None
    previous_url = get_document(db, document_id).url_doc
    document = update_document(
        db,
        document_id=document_id,
        actor=current_user,
        storage=storage,
        name_doc=name_doc,
        content=content,
        filename=file.filename if file is not None else None,
    )
    replaced = document.url_doc != previous_url
    with discard_on_failure(storage, document.url_doc if replaced else None):
        db.commit()
    if replaced:
        storage.delete_file(previous_url)
    db.refresh(document)

    return DocumentResponse.model_validate(document)


@router.patch("/{document_id}/request-permission", response_model=DocumentResponse)
def set_pending_status(
    document_id: int,
    body: UpdateStatusRequest,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
):
    """Move a document to a pending status before filing a permission request."""
    document = request_permission(db, document_id, body.status, current_user)
    db.commit()
    db.refresh(document)

    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove(
    document_id: int,
    current_user: CurrentUser,
    db: Session = Depends(get_db),
    storage: FileStoragePort = Depends(get_storage),
):
    """Delete a document together with its permission requests and file."""
    url_doc = get_document(db, document_id).url_doc
    remove_document(db, document_id, current_user)
    db.commit()
    storage.delete_file(url_doc)
