"""Pytest configuration and fixtures."""

import io
from datetime import timedelta

import pytest
from pypdf import PdfWriter

from printdesk import create_app
from printdesk.models import JobStatus, db, utcnow
from printdesk.store import job_store, user_store

OPERATOR_USERNAME = "operator"
OPERATOR_PASSWORD = "correct horse battery staple"


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def app(upload_dir):
    """Create an application with an in-memory database and a temporary upload folder."""
    app = create_app("testing", {"UPLOAD_FOLDER": upload_dir})
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def app_ctx(app):
    """Push an application context for tests that call services directly."""
    with app.app_context():
        yield


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def operator(app):
    """Create an operator account and return its id."""
    with app.app_context():
        user = user_store.create(OPERATOR_USERNAME, OPERATOR_PASSWORD)
        return user.id


@pytest.fixture
def logged_in_client(app, operator):
    """A test client with an operator session."""
    client = app.test_client()
    response = client.post(
        "/api/admin/login",
        json={"username": OPERATOR_USERNAME, "password": OPERATOR_PASSWORD},
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def pdf_bytes():
    """A small valid PDF with two pages."""
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


@pytest.fixture
def make_job(upload_dir):
    """Factory creating a job row with a file on disk.
    
    Must be called inside an application context.
    """
    counter = {"n": 0}
    
    def _make_job(
        status: JobStatus = JobStatus.PENDING,
        age: timedelta = timedelta(0),
        content: bytes = b"%PDF-1.4 test",
        file_type: str = "application/pdf",
        original_filename: str = "document.pdf",
    ):
        counter["n"] += 1
        stored_name = f"stored-{counter['n']}.pdf"
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / stored_name).write_bytes(content)
        job = job_store.create(
            display_name=f"Customer {counter['n']}",
            file_path=stored_name,
            original_filename=original_filename,
            file_type=file_type,
            file_size=len(content),
        )
        job.status = status
        job.created_at = utcnow() - age
        db.session.commit()
        return job
    
    return _make_job
