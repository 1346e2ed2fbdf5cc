"""Upload intake: validate a submission and create one job per file."""

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from flask import current_app
from werkzeug.datastructures import FileStorage

from ..errors import FileTooLargeError, ValidationError
from ..models import PrintJob
from ..storage import (
    GENERIC_MIMETYPE,
    count_pdf_pages,
    delete_stored_file,
    measure_stream,
    resolve_stored_path,
    save_upload,
    sniff_mimetype,
)
from ..store import job_store

logger = logging.getLogger(__name__)

MAX_DISPLAY_NAME_LENGTH = 255
MAX_PAGE_RANGE_LENGTH = 100
TRUTHY_VALUES = {"true", "1", "on", "yes"}


@dataclass
class SubmissionOptions:
    """Print options shared by every file in one submission."""
    
    display_name: str
    copies: int = 1
    is_color: bool = False
    page_range: str | None = None


def parse_submission(form: Mapping[str, str]) -> SubmissionOptions:
    """Validate the form fields of an upload.
    
    Args:
        form: Submitted fields (displayName, copies, isColor, pageRange).
        
    Returns:
        The parsed SubmissionOptions.
        
    Raises:
        ValidationError: If a field is missing or malformed.
    """
    display_name = (form.get("displayName") or "").strip()
    if not display_name:
        raise ValidationError("Display name is required", field="displayName")
    if len(display_name) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationError("Display name is too long", field="displayName")
    
    raw_copies = (form.get("copies") or "").strip() or "1"
    try:
        copies = int(raw_copies)
    except ValueError:
        raise ValidationError("Copies must be a whole number", field="copies") from None
    max_copies = current_app.config["MAX_COPIES"]
    if copies < 1 or copies > max_copies:
        raise ValidationError(f"Copies must be between 1 and {max_copies}", field="copies")
    
    is_color = (form.get("isColor") or "").strip().lower() in TRUTHY_VALUES
    
    page_range = (form.get("pageRange") or "").strip() or None
    if page_range is not None and len(page_range) > MAX_PAGE_RANGE_LENGTH:
        raise ValidationError("Page range is too long", field="pageRange")
    
    return SubmissionOptions(
        display_name=display_name,
        copies=copies,
        is_color=is_color,
        page_range=page_range,
    )


def _check_files(files: list[FileStorage]) -> None:
    """Reject the whole submission before anything is written."""
    max_size = current_app.config["MAX_FILE_SIZE"]
    enforce_types = current_app.config["ENFORCE_ALLOWED_TYPES"]
    allowed = current_app.config["ALLOWED_MIMETYPES"]
    
    for file in files:
        size = measure_stream(file.stream)
        if size > max_size:
            raise FileTooLargeError(
                f"{file.filename} exceeds the {max_size / (1024 * 1024):g}MB limit",
                field="files",
            )
        if file.mimetype not in allowed:
            if enforce_types:
                raise ValidationError(
                    f"{file.filename} is not a supported document type", field="files"
                )
            logger.info(f"Accepting non-document upload {file.filename!r} ({file.mimetype})")


def _client_filename(file: FileStorage) -> str:
    """The uploaded file name without any client-side directory part."""
    name = file.filename.replace("\\", "/").rsplit("/", 1)[-1]
    return name[:MAX_DISPLAY_NAME_LENGTH] or "upload"


def _store_file(file: FileStorage, options: SubmissionOptions) -> PrintJob:
    original_filename = _client_filename(file)
    stored_name, size = save_upload(file.stream, original_filename)
    try:
        path = resolve_stored_path(stored_name)
        file_type = file.mimetype
        if not file_type or file_type == GENERIC_MIMETYPE:
            file_type = sniff_mimetype(path)
        page_count = count_pdf_pages(path) if file_type == "application/pdf" else None
        
        job = job_store.create(
            display_name=options.display_name,
            file_path=stored_name,
            original_filename=original_filename,
            file_type=file_type,
            file_size=size,
            is_color=options.is_color,
            copies=options.copies,
            page_range=options.page_range,
            page_count=page_count,
        )
    except Exception:
        delete_stored_file(stored_name)
        raise
    
    logger.info(f"Created job {job.id} for {original_filename!r} as {stored_name} ({size} bytes)")
    return job


def submit_job_files(files: Iterable[FileStorage], form: Mapping[str, str]) -> list[PrintJob]:
    """Persist every uploaded file and create one PENDING job for each.
    
    Files are stored one at a time; if a later file fails, the jobs already
    created for earlier files remain.
    
    Args:
        files: Uploaded files from the request.
        form: Submitted form fields shared by all files.
        
    Returns:
        The created jobs, in upload order.
        
    Raises:
        ValidationError: If no files were sent or the form is invalid.
        FileTooLargeError: If any file exceeds MAX_FILE_SIZE.
    """
    uploads = [f for f in files if f is not None and f.filename]
    if not uploads:
        raise ValidationError("No files uploaded", field="files")
    
    options = parse_submission(form)
    _check_files(uploads)
    
    return [_store_file(file, options) for file in uploads]
