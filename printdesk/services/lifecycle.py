"""Job queue operations for submitters and operators."""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..auth import require_operator
from ..errors import (
    InvalidTransitionError,
    JobNotFoundError,
    StoredFileMissingError,
    ValidationError,
)
from ..models import JobStatus, PrintJob, User
from ..storage import resolve_stored_path
from ..store import job_store

logger = logging.getLogger(__name__)


@dataclass
class DownloadTarget:
    """A stored file ready to be sent back to an operator."""
    
    path: Path
    mimetype: str
    filename: str
    as_attachment: bool


# Types served inline under their own MIME type. SVG is excluded since it can carry script.
INLINE_MIMETYPES = {
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/gif",
    "image/webp",
    "image/bmp",
}


def inline_mimetype(mimetype: str) -> str | None:
    """The type to preview an upload as, or None if it must be downloaded.
    
    Any text upload is previewed as plain text so declared HTML never renders.
    """
    if mimetype in INLINE_MIMETYPES:
        return mimetype
    if mimetype.startswith("text/"):
        return "text/plain"
    return None


def list_jobs(operator: User | None) -> list[PrintJob]:
    """The operator queue: pending jobs first, then everything else newest first."""
    require_operator(operator)
    return job_store.list_for_queue()


def get_job(job_id: int) -> PrintJob:
    """Look up a job for the public confirmation page."""
    job = job_store.get(job_id)
    if job is None:
        raise JobNotFoundError(job_id)
    return job


def update_status(operator: User | None, job_id: int, status: str) -> PrintJob:
    """Move a job forward through PENDING -> PRINTING -> COMPLETED.
    
    Requesting the job's current status is a no-op.
    
    Raises:
        UnauthorizedError: If no operator is given.
        ValidationError: If status is not a known value.
        JobNotFoundError: If the job does not exist.
        InvalidTransitionError: If the job cannot move to that status.
    """
    operator = require_operator(operator)
    
    new_status = JobStatus.from_value(status) if isinstance(status, str) else None
    if new_status is None:
        raise ValidationError(f"Unknown status: {status!r}", field="status")
    
    job = job_store.get(job_id)
    if job is None:
        raise JobNotFoundError(job_id)
    
    if job.status == new_status:
        return job
    
    if not job.can_transition_to(new_status):
        logger.warning(
            f"Rejected transition for job {job_id}: "
            f"{job.status.value} -> {new_status.value} by {operator.username}"
        )
        raise InvalidTransitionError(
            f"Cannot change status from {job.status.value} to {new_status.value}",
            field="status",
        )
    
    previous = job.status
    job = job_store.update_status(job_id, new_status)
    logger.info(
        f"Job {job_id} status {previous.value} -> {new_status.value} by {operator.username}"
    )
    return job


def prepare_download(operator: User | None, job_id: int, inline: bool = False) -> DownloadTarget:
    """Resolve a job's stored file for download or inline preview.
    
    Inline is only honoured for types a browser can display; everything else
    is sent as an attachment under the original file name.
    
    Raises:
        UnauthorizedError: If no operator is given.
        JobNotFoundError: If the job does not exist.
        StoredFileMissingError: If the job's file is no longer on disk.
    """
    require_operator(operator)
    
    job = job_store.get(job_id)
    if job is None:
        logger.warning(f"Download requested for unknown job {job_id}")
        raise JobNotFoundError(job_id)
    
    if job.file_deleted_at is not None:
        logger.warning(f"Download requested for job {job_id} after its file was swept")
        raise StoredFileMissingError(job_id)
    
    path = resolve_stored_path(job.file_path)
    if path is None or not path.is_file():
        logger.warning(
            f"Stored file {job.file_path} for job {job_id} is missing "
            f"(status {job.status.value})"
        )
        raise StoredFileMissingError(job_id)
    
    preview_type = inline_mimetype(job.file_type) if inline else None
    return DownloadTarget(
        path=path,
        mimetype=preview_type or job.file_type,
        filename=job.original_filename,
        as_attachment=preview_type is None,
    )
