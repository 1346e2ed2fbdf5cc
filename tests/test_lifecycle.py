"""Tests for job lifecycle operations."""

from datetime import timedelta

import pytest

from printdesk.errors import (
    InvalidTransitionError,
    JobNotFoundError,
    StoredFileMissingError,
    UnauthorizedError,
    ValidationError,
)
from printdesk.models import JobStatus, PrintJob
from printdesk.services import lifecycle
from printdesk.store import job_store, user_store


@pytest.fixture
def operator_user(app_ctx):
    return user_store.create("desk", "pw")


@pytest.mark.usefixtures("app_ctx")
class TestGetJob:
    """Tests for get_job."""

    def test_fresh_job_is_pending(self, make_job):
        job = make_job()

        assert lifecycle.get_job(job.id).status == JobStatus.PENDING

    def test_unknown_job(self):
        with pytest.raises(JobNotFoundError):
            lifecycle.get_job(404)


@pytest.mark.usefixtures("app_ctx")
class TestListJobs:
    """Tests for list_jobs."""

    def test_requires_operator(self):
        with pytest.raises(UnauthorizedError):
            lifecycle.list_jobs(None)

    def test_pending_first_then_newest(self, make_job, operator_user):
        completed = make_job(status=JobStatus.COMPLETED, age=timedelta(minutes=3))
        pending = make_job(status=JobStatus.PENDING, age=timedelta(minutes=2))
        printing = make_job(status=JobStatus.PRINTING, age=timedelta(minutes=1))

        jobs = lifecycle.list_jobs(operator_user)

        assert [j.id for j in jobs] == [pending.id, printing.id, completed.id]


@pytest.mark.usefixtures("app_ctx")
class TestUpdateStatus:
    """Tests for update_status."""

    def test_forward_transitions(self, make_job, operator_user):
        job = make_job()

        lifecycle.update_status(operator_user, job.id, "PRINTING")
        assert lifecycle.get_job(job.id).status == JobStatus.PRINTING

        lifecycle.update_status(operator_user, job.id, "COMPLETED")
        assert lifecycle.get_job(job.id).status == JobStatus.COMPLETED

    def test_same_status_is_noop(self, make_job, operator_user):
        job = make_job(status=JobStatus.PRINTING)

        result = lifecycle.update_status(operator_user, job.id, "PRINTING")

        assert result.status == JobStatus.PRINTING

    @pytest.mark.parametrize(
        "current, requested",
        [
            (JobStatus.PENDING, "COMPLETED"),
            (JobStatus.PRINTING, "PENDING"),
            (JobStatus.COMPLETED, "PRINTING"),
            (JobStatus.PENDING, "EXPIRED"),
            (JobStatus.EXPIRED, "PRINTING"),
        ],
    )
    def test_illegal_transitions_rejected(self, make_job, operator_user, current, requested):
        job = make_job(status=current)

        with pytest.raises(InvalidTransitionError):
            lifecycle.update_status(operator_user, job.id, requested)

        assert lifecycle.get_job(job.id).status == current

    @pytest.mark.parametrize("status", ["DONE", "printing", "", None, 3])
    def test_unknown_status_value(self, make_job, operator_user, status):
        job = make_job()

        with pytest.raises(ValidationError):
            lifecycle.update_status(operator_user, job.id, status)

    def test_unknown_job_mutates_nothing(self, make_job, operator_user):
        job = make_job()

        with pytest.raises(JobNotFoundError):
            lifecycle.update_status(operator_user, job.id + 100, "PRINTING")

        assert [j.status for j in PrintJob.query.all()] == [JobStatus.PENDING]

    def test_requires_operator(self, make_job):
        job = make_job()

        with pytest.raises(UnauthorizedError):
            lifecycle.update_status(None, job.id, "PRINTING")

        assert lifecycle.get_job(job.id).status == JobStatus.PENDING


@pytest.mark.usefixtures("app_ctx")
class TestPrepareDownload:
    """Tests for prepare_download."""

    def test_default_is_attachment(self, make_job, operator_user, upload_dir):
        job = make_job(original_filename="report.pdf")

        target = lifecycle.prepare_download(operator_user, job.id)

        assert target.as_attachment is True
        assert target.filename == "report.pdf"
        assert target.mimetype == "application/pdf"
        assert target.path == (upload_dir / job.file_path).resolve()

    @pytest.mark.parametrize("file_type", ["application/pdf", "image/png", "image/jpeg", "text/plain"])
    def test_inline_for_viewable_types(self, make_job, operator_user, file_type):
        job = make_job(file_type=file_type)

        target = lifecycle.prepare_download(operator_user, job.id, inline=True)

        assert target.as_attachment is False
        assert target.mimetype == file_type

    @pytest.mark.parametrize("file_type", ["text/html", "text/xml", "text/javascript"])
    def test_inline_text_is_served_as_plain_text(self, make_job, operator_user, file_type):
        job = make_job(file_type=file_type)

        target = lifecycle.prepare_download(operator_user, job.id, inline=True)

        assert target.as_attachment is False
        assert target.mimetype == "text/plain"

    def test_inline_svg_is_downloaded(self, make_job, operator_user):
        job = make_job(file_type="image/svg+xml", original_filename="logo.svg")

        target = lifecycle.prepare_download(operator_user, job.id, inline=True)

        assert target.as_attachment is True
        assert target.mimetype == "image/svg+xml"

    def test_inline_falls_back_to_attachment_for_office_documents(self, make_job, operator_user):
        job = make_job(
            file_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            original_filename="letter.docx",
        )

        target = lifecycle.prepare_download(operator_user, job.id, inline=True)

        assert target.as_attachment is True
        assert target.filename == "letter.docx"

    def test_unknown_job(self, operator_user):
        with pytest.raises(JobNotFoundError):
            lifecycle.prepare_download(operator_user, 12345)

    def test_missing_file(self, make_job, operator_user, upload_dir):
        job = make_job()
        (upload_dir / job.file_path).unlink()

        with pytest.raises(StoredFileMissingError):
            lifecycle.prepare_download(operator_user, job.id)

    def test_swept_job(self, make_job, operator_user):
        job = make_job(status=JobStatus.COMPLETED)
        job_store.mark_file_deleted(job.id)

        with pytest.raises(StoredFileMissingError):
            lifecycle.prepare_download(operator_user, job.id)

    def test_requires_operator(self, make_job):
        job = make_job()

        with pytest.raises(UnauthorizedError):
            lifecycle.prepare_download(None, job.id)
