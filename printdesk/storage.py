"""On-disk storage for uploaded documents."""

import logging
import os
from pathlib import Path
from typing import BinaryIO

import shortuuid
from flask import current_app
from pypdf import PdfReader

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
GENERIC_MIMETYPE = "application/octet-stream"


def upload_folder() -> Path:
    return Path(current_app.config["UPLOAD_FOLDER"])


def generate_stored_name(original_name: str) -> str:
    """Build a collision-resistant file name, keeping only the original extension."""
    suffix = Path(original_name).suffix.lower()
    if not suffix[1:].isalnum() or len(suffix) > 10:
        suffix = ""
    return f"{shortuuid.uuid()}{suffix}"


def measure_stream(stream: BinaryIO) -> int:
    """Return the remaining size of a seekable stream without consuming it."""
    start = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell() - start
    stream.seek(start)
    return size


def save_upload(stream: BinaryIO, original_name: str) -> tuple[str, int]:
    """Copy an upload stream into the upload folder.
    
    Args:
        stream: Readable binary stream of the uploaded file.
        original_name: Client-supplied file name, used only for its extension.
        
    Returns:
        Tuple of (stored name, bytes written).
    """
    stored_name = generate_stored_name(original_name)
    target_path = upload_folder() / stored_name
    size = 0
    
    try:
        with target_path.open("xb") as target:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                target.write(chunk)
    except Exception:
        target_path.unlink(missing_ok=True)
        raise
    
    return stored_name, size


def resolve_stored_path(stored_name: str) -> Path | None:
    """Resolve a stored name to its path, or None if it escapes the upload folder."""
    folder = upload_folder().resolve()
    path = (folder / stored_name).resolve()
    if path.parent != folder:
        logger.warning(f"Rejected stored path outside upload folder: {stored_name!r}")
        return None
    return path


def delete_stored_file(stored_name: str) -> bool:
    """Delete a stored file.
    
    Returns:
        True if a file was removed, False if there was nothing to delete.
    """
    path = resolve_stored_path(stored_name)
    if path is None or not path.is_file():
        return False
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def sniff_mimetype(file_path: Path) -> str:
    """Detect a file's MIME type from its content using libmagic."""
    try:
        import magic
        return magic.from_file(str(file_path), mime=True) or GENERIC_MIMETYPE
    except Exception as e:
        logger.warning(f"Failed to detect MIME type of {file_path.name}: {e}")
        return GENERIC_MIMETYPE


def count_pdf_pages(file_path: Path) -> int | None:
    """Extract page count from a PDF file.
    
    Args:
        file_path: Path to the PDF file.
        
    Returns:
        Number of pages in the PDF, or None if extraction fails.
    """
    try:
        reader = PdfReader(str(file_path))
        return len(reader.pages)
    except Exception as e:
        logger.warning(f"Failed to extract page count from PDF: {e}")
        return None
