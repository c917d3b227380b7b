"""End-to-end permission workflow tests

Walks documents through the owner request / admin review cycle over HTTP,
using the two-step flow (status write, then request) unless noted.
"""

import io

import pytest
from sqlalchemy.orm import Session

from docflow.auth.roles import UserRole
from docflow.domain.documents import DocumentStatus
from docflow.models import Document, PermissionRequest

DOCUMENTS = "/api/v1/documents"
REQUESTS = "/api/v1/permission-requests"


@pytest.fixture
def owner(make_user):
    return make_user("u_owner", id=5)


@pytest.fixture
def admin(make_user):
    return make_user("reviewer", role=UserRole.ADMIN, id=9)


@pytest.fixture
def owner_api(client_for, owner):
    return client_for(owner)


@pytest.fixture
def admin_api(client_for, admin):
    return client_for(admin)


@pytest.fixture
def document(make_document, owner):
    return make_document(owner, id=1)


def open_request(owner_api, document_id, admin_id, request_type):
    pending = "pending_replace" if request_type == "REPLACE" else "pending_remove"
    response = owner_api.patch(f"{DOCUMENTS}/{document_id}/request-permission", json={"status": pending})
    assert response.status_code == 200
    assert response.json()["status"] == pending

    response = owner_api.post(REQUESTS, json={
        "document_id": document_id,
        "admin_id": admin_id,
        "request_type": request_type,
    })
    assert response.status_code == 201
    assert response.json()["status_permission"] == "ONREVIEW"
    return response.json()["id"]


class TestRemoveScenario:

    def test_approved_removal(self, owner_api, admin_api, document, db_session: Session):
        request_id = open_request(owner_api, 1, 9, "REMOVE")

        response = admin_api.patch(f"{REQUESTS}/{request_id}", json={"status_permission": "APPROVED"})
        assert response.status_code == 200
        assert response.json()["document_new_status"] == "approved_remove"
        assert response.json()["request"]["reviewed_at"] is not None

        db_session.refresh(document)
        assert document.status == DocumentStatus.APPROVED_REMOVE
        assert document.is_remove_permission is True

        response = owner_api.delete(f"{DOCUMENTS}/1")
        assert response.status_code == 204
        assert db_session.get(Document, 1) is None

    def test_rejected_removal(self, owner_api, admin_api, document, db_session: Session):
        request_id = open_request(owner_api, 1, 9, "REMOVE")

        response = admin_api.patch(f"{REQUESTS}/{request_id}", json={"status_permission": "REJECTED"})
        assert response.status_code == 200
        assert response.json()["document_new_status"] == "rejected_remove"

        db_session.refresh(document)
        assert document.status == DocumentStatus.REJECTED_REMOVE
        assert document.is_remove_permission is False

        response = owner_api.delete(f"{DOCUMENTS}/1")
        assert response.status_code == 403


class TestReplaceScenario:

    def test_update_succeeds_after_replace_approval(self, owner_api, admin_api, document):
        response = owner_api.patch(f"{DOCUMENTS}/1", data={"name_doc": "v2"})
        assert response.status_code == 403

        request_id = open_request(owner_api, 1, 9, "REPLACE")
        admin_api.patch(f"{REQUESTS}/{request_id}", json={"status_permission": "APPROVED"})

        response = owner_api.patch(
            f"{DOCUMENTS}/1",
            files={"file": ("v2.pdf", io.BytesIO(b"%PDF-1.4\nv2\n"), "application/pdf")},
        )
        assert response.status_code == 200
        assert response.json()["name_doc"] == "v2.pdf"
        assert response.json()["status"] == "approved_replace"

    def test_owner_update_blocked_while_pending(self, owner_api, make_document, owner):
        granted = make_document(owner, is_replace_permission=True)
        owner_api.patch(f"{DOCUMENTS}/{granted.id}/request-permission", json={"status": "pending_replace"})

        response = owner_api.patch(f"{DOCUMENTS}/{granted.id}", data={"name_doc": "x"})

        assert response.status_code == 400
        assert "pending_replace" in response.json()["message"]


class TestSingleOpenReview:

    @pytest.mark.parametrize("second_type", ["REMOVE", "REPLACE"])
    def test_second_request_is_refused(self, owner_api, admin, make_user, document, second_type, db_session):
        other_admin = make_user("other_reviewer", role=UserRole.ADMIN)
        open_request(owner_api, 1, admin.id, "REMOVE")

        response = owner_api.post(REQUESTS, json={
            "document_id": 1,
            "admin_id": other_admin.id,
            "request_type": second_type,
        })

        assert response.status_code == 400
        assert db_session.query(PermissionRequest).count() == 1


class TestDoubleReview:

    def test_second_review_is_refused(self, owner_api, admin_api, document, db_session):
        request_id = open_request(owner_api, 1, 9, "REPLACE")
        admin_api.patch(f"{REQUESTS}/{request_id}", json={"status_permission": "APPROVED"})

        response = admin_api.patch(f"{REQUESTS}/{request_id}", json={"status_permission": "REJECTED"})

        assert response.status_code == 400
        assert "already been reviewed with status: APPROVED" in response.json()["message"]
        db_session.refresh(document)
        assert document.status == DocumentStatus.APPROVED_REPLACE
        assert document.is_replace_permission is True
