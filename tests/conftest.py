"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client with local resume storage in a temp dir
- An authenticated admin and its bearer header
"""

import json
import os
import tempfile

# Settings are read at import time; point the app at SQLite before importing it
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="talentdesk-uploads-"))
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from talentdesk.core.database import Base, get_db
from talentdesk.core.security import get_password_hash
from talentdesk.core.storage import LocalStorage, get_storage
from talentdesk.models.admin_user import AdminUser
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "Secure@123"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test and drop it afterwards.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(tmp_path):
    """Local resume storage rooted in a per-test directory."""
    return LocalStorage(str(tmp_path / "uploads"))


@pytest.fixture
def client(db_session, storage):
    """
    FastAPI test client with overridden database and storage dependencies.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_account(db_session):
    """An admin stored directly in the database."""
    admin = AdminUser(
        full_name="Ada Admin",
        email="ada@example.com",
        hashed_password=get_password_hash(ADMIN_PASSWORD),
        role="admin",
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def auth_headers(client, admin_account):
    """Bearer header obtained through the real login endpoint."""
    response = client.post("/login", json={"email": admin_account.email, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def sample_job_data():
    """Sample job posting with a basic form and a two-step application form"""
    return {
        "title": "Backend Engineer",
        "slug": "backend-engineer",
        "details": {"department": "Engineering", "location": "Remote", "type": "Full-time"},
        "description": {"summary": "Build and run our hiring APIs.", "requirements": ["Python", "PostgreSQL"]},
        "basicFormSchema": [
            {"label": "Full Name", "name": "full_name", "type": "text", "required": True},
            {"label": "Email", "name": "email", "type": "email", "required": True},
            {"label": "Phone", "name": "phone", "type": "tel", "required": False},
        ],
        "applicationFormSchema": {
            "steps": [
                {"title": "Experience", "fields": [{"label": "Years of experience", "name": "years", "type": "number"}]},
                {"title": "Motivation", "fields": [{"label": "Why us?", "name": "why", "type": "textarea"}]},
            ]
        },
    }


@pytest.fixture
def created_job(client, auth_headers, sample_job_data):
    """A posting created through the API; returns the response's job object."""
    response = client.post("/add-job", json=sample_job_data, headers=auth_headers)
    assert response.status_code == 201
    return response.json()["job"]


@pytest.fixture
def basic_answers():
    return [
        {"label": "Full Name", "name": "full_name", "value": "Jo Applicant"},
        {"label": "Email", "name": "email", "value": "jo@example.com"},
        {"label": "Phone", "name": "phone", "value": "+1 555 0100"},
    ]


@pytest.fixture
def submit_application(client, basic_answers):
    """
    Helper that posts a multipart application. Keyword arguments override
    the form fields; pass resume=None to omit the file.
    """
    def _submit(job_id, basic=None, application=None, resume=("resume.pdf", PDF_BYTES, "application/pdf")):
        data = {
            "job_id": str(job_id),
            "basicFormData": json.dumps(basic if basic is not None else basic_answers),
            "applicationFormData": json.dumps(application if application is not None else {"years": 4}),
        }
        files = {"resume": resume} if resume is not None else None
        return client.post("/applicants", data=data, files=files)

    return _submit
