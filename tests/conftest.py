"""Pytest fixtures for DocFlow tests.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database (fresh schema per test)
- Test users with USER and ADMIN roles
- Document factory for putting documents into any lifecycle status
- Authenticated test clients with JWT tokens

Usage:
    def test_owner_lists_documents(owner_client, make_document, owner_user):
        make_document(owner_user)
        response = owner_client.get("/api/v1/documents/my-documents")
        assert response.status_code == 200
"""

import os
import tempfile

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="docflow-test-"))

from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from docflow.auth.jwt import create_access_token
from docflow.auth.roles import UserRole
from docflow.database import build_engine, get_db as database_get_db
from docflow.documents.storage import LocalFileStorage, get_storage
from docflow.domain.documents import DocumentStatus
from docflow.models import Base, Document, User


# One shared connection so every session sees the same in-memory database
test_engine = build_engine("sqlite://", poolclass=StaticPool)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

PUBLIC_BASE_URL = "http://testserver"


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory for users. Pass id= to pin the primary key."""

    def _make_user(username: str, role: UserRole = UserRole.USER, **kwargs) -> User:
        user = User(
            username=username,
            name=kwargs.pop("name", username.replace("_", " ").title()),
            role=role,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def owner_user(make_user) -> User:
    """USER who owns the documents under test."""
    return make_user("owner_user")


@pytest.fixture
def other_user(make_user) -> User:
    """USER who owns nothing."""
    return make_user("other_user")


@pytest.fixture
def admin_user(make_user) -> User:
    """ADMIN that permission requests are assigned to."""
    return make_user("admin_user", role=UserRole.ADMIN)


@pytest.fixture
def make_document(db_session: Session) -> Callable[..., Document]:
    """Factory for documents in any status, bypassing the API."""

    def _make_document(
        owner: User,
        status: DocumentStatus = DocumentStatus.UPLOADED,
        is_replace_permission: bool = False,
        is_remove_permission: bool = False,
        **kwargs,
    ) -> Document:
        document = Document(
            name_doc=kwargs.pop("name_doc", "Quarterly Report"),
            url_doc=kwargs.pop("url_doc", f"{PUBLIC_BASE_URL}/uploads/1700000000000-report.pdf"),
            status=status,
            is_replace_permission=is_replace_permission,
            is_remove_permission=is_remove_permission,
            user_id=owner.id,
            created_by=owner.username,
            updated_by=owner.username,
            **kwargs,
        )
        db_session.add(document)
        db_session.commit()
        db_session.refresh(document)
        return document

    return _make_document


@pytest.fixture
def storage(tmp_path) -> LocalFileStorage:
    """Local file storage writing into the test's temporary directory."""
    return LocalFileStorage(
        upload_dir=str(tmp_path / "uploads"),
        public_base_url=PUBLIC_BASE_URL,
        max_size_bytes=1024,
    )


@pytest.fixture
def app(db_session: Session, storage: LocalFileStorage):
    """FastAPI app wired to the test session and storage."""
    from docflow.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            # Discard whatever a failed request left behind
            db_session.rollback()

    app.dependency_overrides[database_get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    """Unauthenticated test client."""
    return TestClient(app)


@pytest.fixture
def client_for(app) -> Callable[[User], TestClient]:
    """Factory for test clients authenticated as a given user."""

    def _client_for(user: User) -> TestClient:
        token = create_access_token(
            user_id=user.id,
            username=user.username,
            role=user.role,
        )
        test_client = TestClient(app)
        test_client.headers.update({"Authorization": f"Bearer {token}"})
        return test_client

    return _client_for


@pytest.fixture
def owner_client(client_for, owner_user: User) -> TestClient:
    return client_for(owner_user)


@pytest.fixture
def other_client(client_for, other_user: User) -> TestClient:
    return client_for(other_user)


@pytest.fixture
def admin_client(client_for, admin_user: User) -> TestClient:
    return client_for(admin_user)
